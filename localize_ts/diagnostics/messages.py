"""Catalog of the compiler diagnostics this layer can report.

Codes and wording follow the TypeScript compiler so that messages read the
same whether the compiler or this layer produced them.
"""

from dataclasses import dataclass

from localize_ts.diagnostics.model import DiagnosticCategory


@dataclass(frozen=True)
class DiagnosticMessage:
    """A message template with ``{0}``-style placeholders."""

    code: int
    category: DiagnosticCategory
    message: str

    def format(self, *args: object) -> str:
        return self.message.format(*args)


def _error(code: int, message: str) -> DiagnosticMessage:
    return DiagnosticMessage(code, DiagnosticCategory.Error, message)


Unexpected_token = _error(1012, "Unexpected token.")
_0_expected = _error(1005, "'{0}' expected.")
File_specification_cannot_end_in_a_recursive_directory_wildcard_0 = _error(
    5010, "File specification cannot end in a recursive directory wildcard ('**'): '{0}'."
)
Failed_to_parse_file_0_Colon_1 = _error(5014, "Failed to parse file '{0}': {1}.")
Unknown_compiler_option_0 = _error(5023, "Unknown compiler option '{0}'.")
Compiler_option_0_requires_a_value_of_type_1 = _error(
    5024, "Compiler option '{0}' requires a value of type {1}."
)
Unknown_compiler_option_0_Did_you_mean_1 = _error(
    5025, "Unknown compiler option '{0}'. Did you mean '{1}'?"
)
File_specification_cannot_contain_a_parent_directory_0_after_a_recursive_wildcard = _error(
    5065,
    "File specification cannot contain a parent directory ('..') that appears after a "
    "recursive directory wildcard ('**'): '{0}'.",
)
Cannot_read_file_0 = _error(5083, "Cannot read file '{0}'.")
The_root_value_of_a_0_file_must_be_an_object = _error(
    5092, "The root value of a '{0}' file must be an object."
)
Argument_for_0_option_must_be_Colon_1 = _error(6046, "Argument for '{0}' option must be: {1}.")
File_0_not_found = _error(6053, "File '{0}' not found.")
Circularity_detected_while_resolving_configuration_Colon_0 = _error(
    18000, "Circularity detected while resolving configuration: {0}"
)
The_files_list_in_config_file_0_is_empty = _error(
    18002, "The 'files' list in config file '{0}' is empty."
)
No_inputs_were_found_in_config_file_0 = _error(
    18003,
    "No inputs were found in config file '{0}'. Specified 'include' paths were '{1}' and "
    "'exclude' paths were '{2}'.",
)
Compiler_option_0_cannot_be_given_an_empty_string = _error(
    18051, "Compiler option '{0}' cannot be given an empty string."
)
