"""Source files, syntax nodes and synthesized template literals."""

from .source_file import (
    ScriptKind,
    SourceFile,
    create_source_file,
    get_script_kind_from_file_name,
)
from .template_literal import (
    TemplateLiteral,
    escape_string_to_embed_in_template_literal,
    parse_string_as_template_literal,
)

__all__ = [
    "ScriptKind",
    "SourceFile",
    "create_source_file",
    "get_script_kind_from_file_name",
    "TemplateLiteral",
    "escape_string_to_embed_in_template_literal",
    "parse_string_as_template_literal",
]
