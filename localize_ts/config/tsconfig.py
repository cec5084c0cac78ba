"""tsconfig.json reading and resolution.

``read_config_file`` turns a config path into a JSON object (comments and
trailing commas allowed). ``parse_json_config_file_content`` then resolves that
object against its directory: inherited configs, compiler option validation,
and the ``files``/``include``/``exclude`` specs. Problems are collected as
diagnostics, never raised, so a caller can report all of them at once.
"""

import difflib
import json
import logging
import posixpath
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Set, Tuple

import json5
from pydantic import ValidationError

from localize_ts.config.schema import (
    PATH_LIST_OPTIONS,
    PATH_OPTIONS,
    CompilerOptions,
    TsConfigFile,
)
from localize_ts.diagnostics import messages
from localize_ts.diagnostics.model import Diagnostic, create_compiler_diagnostic
from localize_ts.utils.path_utils import (
    get_directory_path,
    get_normalized_absolute_path,
    is_rooted,
    normalize_path,
    normalize_slashes,
)

logger = logging.getLogger("localize_ts.config.tsconfig")

DEFAULT_INCLUDE_SPEC = "**/*"
CONFIG_DIR_TEMPLATE = "${configDir}"

_INVALID_TRAILING_RECURSION = re.compile(r"(^|/)\*\*/?$")
_INVALID_DOTDOT_AFTER_RECURSIVE_WILDCARD = re.compile(r"(^|/)\*\*/(.*/)?\.\.($|/)")

# Each group is ordered from highest to lowest priority
_TS_EXTENSION_GROUPS: Tuple[Tuple[str, ...], ...] = (
    (".ts", ".tsx", ".d.ts"),
    (".cts", ".d.cts"),
    (".mts", ".d.mts"),
)
_TS_AND_JS_EXTENSION_GROUPS: Tuple[Tuple[str, ...], ...] = (
    (".ts", ".tsx", ".d.ts", ".js", ".jsx"),
    (".cts", ".d.cts", ".cjs"),
    (".mts", ".d.mts", ".mjs"),
)

_TYPE_LABELS = {
    "bool_type": "boolean",
    "string_type": "string",
    "int_type": "number",
    "int_parsing": "number",
    "float_type": "number",
    "list_type": "Array",
    "dict_type": "object",
}
_TOP_LEVEL_TYPE_LABELS = {"extends": "string or Array"}

_PATH_ALIASES = {CompilerOptions.model_fields[name].alias for name in PATH_OPTIONS}
_PATH_LIST_ALIASES = {CompilerOptions.model_fields[name].alias for name in PATH_LIST_OPTIONS}


class ParseConfigHost(Protocol):
    """File-system operations needed to resolve a config."""

    use_case_sensitive_file_names: bool

    def read_file(self, path: str) -> Optional[str]: ...

    def file_exists(self, path: str) -> bool: ...

    def read_directory(
        self,
        path: str,
        extensions: Sequence[str],
        excludes: Optional[Sequence[str]] = None,
        includes: Optional[Sequence[str]] = None,
        depth: Optional[int] = None,
    ) -> List[str]: ...


@dataclass(frozen=True)
class ConfigFileReadResult:
    """Parsed config object, or the diagnostic explaining why there is none."""

    config: Optional[Dict[str, Any]]
    error: Optional[Diagnostic] = None


@dataclass(frozen=True)
class ParsedCommandLine:
    """Resolved root files and options of a project.

    Attributes:
        file_names: Absolute root file names, explicit ``files`` first.
        options: Effective compiler options.
        errors: Every problem found while resolving, in discovery order.
        raw: The config object as given.
    """

    file_names: Tuple[str, ...]
    options: CompilerOptions
    errors: Tuple[Diagnostic, ...]
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class _ConfigLayer:
    """One config file's contribution before inheritance is applied."""

    files: Optional[List[str]] = None
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None
    options: Dict[str, Any] = field(default_factory=dict)

    def overlay(self, other: "_ConfigLayer") -> "_ConfigLayer":
        """Return a layer where ``other`` wins wherever it sets something."""
        return _ConfigLayer(
            files=other.files if other.files is not None else self.files,
            include=other.include if other.include is not None else self.include,
            exclude=other.exclude if other.exclude is not None else self.exclude,
            options={**self.options, **other.options},
        )

    def rebased(self, directory: str) -> "_ConfigLayer":
        """Anchor relative specs at ``directory`` so they survive inheritance."""

        def rebase(specs: Optional[List[str]]) -> Optional[List[str]]:
            if specs is None:
                return None
            return [
                spec
                if spec.startswith(CONFIG_DIR_TEMPLATE) or is_rooted(spec)
                else get_normalized_absolute_path(spec, directory)
                for spec in specs
            ]

        return _ConfigLayer(
            files=rebase(self.files),
            include=rebase(self.include),
            exclude=rebase(self.exclude),
            options=dict(self.options),
        )


def parse_config_file_text_to_json(file_name: str, text: str) -> ConfigFileReadResult:
    """Parse tsconfig text, tolerating comments and trailing commas."""
    text = text.lstrip("\ufeff")
    if not text.strip():
        return ConfigFileReadResult(config={})
    try:
        config = json5.loads(text)
    except ValueError as e:
        return ConfigFileReadResult(
            config=None,
            error=create_compiler_diagnostic(
                messages.Failed_to_parse_file_0_Colon_1, file_name, str(e).rstrip(".")
            ),
        )
    if not isinstance(config, dict):
        return ConfigFileReadResult(
            config=None,
            error=create_compiler_diagnostic(
                messages.The_root_value_of_a_0_file_must_be_an_object,
                posixpath.basename(normalize_slashes(file_name)),
            ),
        )
    return ConfigFileReadResult(config=config)


def read_config_file(
    file_name: str, read_file: Callable[[str], Optional[str]]
) -> ConfigFileReadResult:
    """Read a config file from disk and parse it.

    Args:
        file_name: Path of the config file.
        read_file: Returns file text, or None when the file cannot be read.
    """
    text = read_file(file_name)
    if text is None:
        return ConfigFileReadResult(
            config=None,
            error=create_compiler_diagnostic(messages.Cannot_read_file_0, file_name),
        )
    logger.debug("Read config file %s (%d chars)", file_name, len(text))
    return parse_config_file_text_to_json(file_name, text)


def get_supported_extensions(options: CompilerOptions) -> Tuple[Tuple[str, ...], ...]:
    """Extension groups eligible for wildcard matching."""
    if options.allow_js:
        return _TS_AND_JS_EXTENSION_GROUPS
    return _TS_EXTENSION_GROUPS


def _validation_diagnostics(
    exc: ValidationError,
    type_labels: Dict[str, str],
    suggestions: Sequence[str],
    errors: List[Diagnostic],
) -> Set[str]:
    """Convert pydantic errors to diagnostics, one per offending key.

    Returns:
        The top-level keys that failed validation.
    """
    failed: Set[str] = set()
    for error in exc.errors():
        loc = error.get("loc") or ("",)
        key = str(loc[0])
        if key in failed:
            continue
        failed.add(key)
        kind = error["type"]
        if kind == "extra_forbidden":
            close = difflib.get_close_matches(key, suggestions, n=1)
            if close:
                errors.append(
                    create_compiler_diagnostic(
                        messages.Unknown_compiler_option_0_Did_you_mean_1, key, close[0]
                    )
                )
            else:
                errors.append(create_compiler_diagnostic(messages.Unknown_compiler_option_0, key))
        elif kind == "literal_error":
            allowed = ", ".join(f"'{v}'" for v in CompilerOptions.allowed_values(key))
            errors.append(
                create_compiler_diagnostic(
                    messages.Argument_for_0_option_must_be_Colon_1, f"--{key}", allowed
                )
            )
        else:
            label = type_labels.get(key) or _TYPE_LABELS.get(kind) or kind.replace("_", " ")
            errors.append(
                create_compiler_diagnostic(
                    messages.Compiler_option_0_requires_a_value_of_type_1, key, label
                )
            )
    return failed


def _validate_top_level(config: Dict[str, Any], errors: List[Diagnostic]) -> Dict[str, Any]:
    try:
        parsed = TsConfigFile.model_validate(config)
    except ValidationError as exc:
        failed = _validation_diagnostics(exc, _TOP_LEVEL_TYPE_LABELS, (), errors)
        parsed = TsConfigFile.model_validate({k: v for k, v in config.items() if k not in failed})
    return parsed.model_dump(by_alias=True, exclude_unset=True)


def _resolve_path_option(value: Any, base_path: str) -> Any:
    if not isinstance(value, str) or value.startswith(CONFIG_DIR_TEMPLATE):
        return value
    return get_normalized_absolute_path(value, base_path)


def convert_compiler_options(
    raw: Dict[str, Any], base_path: str, errors: List[Diagnostic]
) -> Dict[str, Any]:
    """Validate one config's ``compilerOptions`` block.

    Invalid entries are reported and dropped. Path options are resolved
    against ``base_path``, the directory of the config declaring them.

    Returns:
        Valid option values keyed by their tsconfig spelling.
    """
    try:
        options = CompilerOptions.model_validate(raw)
    except ValidationError as exc:
        failed = _validation_diagnostics(exc, {}, CompilerOptions.option_names(), errors)
        options = CompilerOptions.model_validate({k: v for k, v in raw.items() if k not in failed})

    values = options.model_dump(by_alias=True, exclude_unset=True)
    for alias in _PATH_ALIASES.intersection(values):
        values[alias] = _resolve_path_option(values[alias], base_path)
    for alias in _PATH_LIST_ALIASES.intersection(values):
        values[alias] = [_resolve_path_option(v, base_path) for v in values[alias]]
    return values


def _resolve_node_module_config(spec: str, host: ParseConfigHost, base_path: str) -> Optional[str]:
    """Look a bare ``extends`` spec up in enclosing node_modules directories."""
    directory = normalize_path(base_path)
    while True:
        package_root = directory.rstrip("/") + "/node_modules/" + spec
        candidates = [package_root, package_root + ".json"]
        package_json = host.read_file(package_root + "/package.json")
        if package_json is not None:
            try:
                declared = json.loads(package_json).get("tsconfig")
            except (ValueError, AttributeError) as e:
                logger.debug("Ignoring unreadable %s/package.json: %s", package_root, e)
                declared = None
            if isinstance(declared, str):
                candidates.append(normalize_path(package_root + "/" + declared))
        candidates.append(package_root + "/tsconfig.json")
        for candidate in candidates:
            if host.file_exists(candidate):
                return candidate
        parent = get_directory_path(directory)
        if parent == directory:
            return None
        directory = parent


def get_extends_config_path(
    extended_config: str, host: ParseConfigHost, base_path: str, errors: List[Diagnostic]
) -> Optional[str]:
    """Locate the file an ``extends`` entry refers to."""
    extended_config = normalize_slashes(extended_config)
    if (
        is_rooted(extended_config)
        or extended_config.startswith("./")
        or extended_config.startswith("../")
    ):
        path = get_normalized_absolute_path(extended_config, base_path)
        if not host.file_exists(path) and not path.endswith(".json"):
            path = path + ".json"
            if not host.file_exists(path):
                errors.append(create_compiler_diagnostic(messages.File_0_not_found, extended_config))
                return None
        return path

    if extended_config:
        resolved = _resolve_node_module_config(extended_config, host, base_path)
        if resolved is not None:
            return resolved
        errors.append(create_compiler_diagnostic(messages.File_0_not_found, extended_config))
    else:
        errors.append(
            create_compiler_diagnostic(
                messages.Compiler_option_0_cannot_be_given_an_empty_string, "extends"
            )
        )
    return None


def _get_extended_config(
    path: str,
    host: ParseConfigHost,
    resolution_stack: List[str],
    errors: List[Diagnostic],
) -> Optional[_ConfigLayer]:
    key_mapper = _key_mapper(host)
    if key_mapper(path) in (key_mapper(p) for p in resolution_stack):
        errors.append(
            create_compiler_diagnostic(
                messages.Circularity_detected_while_resolving_configuration_Colon_0,
                " -> ".join(resolution_stack + [path]),
            )
        )
        return None
    result = read_config_file(path, host.read_file)
    if result.error is not None or result.config is None:
        errors.append(
            result.error or create_compiler_diagnostic(messages.Cannot_read_file_0, path)
        )
        return None
    directory = get_directory_path(path)
    logger.debug("Applying extended config %s", path)
    layer = _parse_layer(result.config, host, directory, resolution_stack + [path], errors)
    return layer.rebased(directory)


def _parse_layer(
    config: Dict[str, Any],
    host: ParseConfigHost,
    base_path: str,
    resolution_stack: List[str],
    errors: List[Diagnostic],
) -> _ConfigLayer:
    """Resolve one config and everything it extends into a single layer."""
    top = _validate_top_level(config, errors)
    own = _ConfigLayer(
        files=top.get("files"),
        include=top.get("include"),
        exclude=top.get("exclude"),
        options=convert_compiler_options(top.get("compilerOptions") or {}, base_path, errors),
    )

    extends = top.get("extends")
    if extends is None:
        return own
    inherited = _ConfigLayer()
    for spec in [extends] if isinstance(extends, str) else extends:
        path = get_extends_config_path(spec, host, base_path, errors)
        if path is None:
            continue
        base = _get_extended_config(path, host, resolution_stack, errors)
        if base is not None:
            inherited = inherited.overlay(base)
    return inherited.overlay(own)


def _validate_specs(
    specs: Sequence[str], errors: List[Diagnostic], disallow_trailing_recursion: bool
) -> List[str]:
    valid = []
    for spec in specs:
        if disallow_trailing_recursion and _INVALID_TRAILING_RECURSION.search(spec):
            errors.append(
                create_compiler_diagnostic(
                    messages.File_specification_cannot_end_in_a_recursive_directory_wildcard_0,
                    spec,
                )
            )
        elif _INVALID_DOTDOT_AFTER_RECURSIVE_WILDCARD.search(spec):
            errors.append(
                create_compiler_diagnostic(
                    messages.File_specification_cannot_contain_a_parent_directory_0_after_a_recursive_wildcard,
                    spec,
                )
            )
        else:
            valid.append(spec)
    return valid


def _substitute_config_dir(value: Any, config_dir: str) -> Any:
    if isinstance(value, str) and value.startswith(CONFIG_DIR_TEMPLATE):
        return normalize_path(config_dir + "/" + value[len(CONFIG_DIR_TEMPLATE) :].lstrip("/"))
    if isinstance(value, list):
        return [_substitute_config_dir(v, config_dir) for v in value]
    return value


def _key_mapper(host: ParseConfigHost) -> Callable[[str], str]:
    if host.use_case_sensitive_file_names:
        return lambda name: name
    return str.lower


def _split_extension(file_name: str, groups: Sequence[Sequence[str]]) -> Optional[Tuple[Sequence[str], str]]:
    lowered = file_name.lower()
    for group in groups:
        for extension in sorted(group, key=len, reverse=True):
            if lowered.endswith(extension):
                return group, extension
    return None


def get_file_names_from_config_specs(
    files: Optional[Sequence[str]],
    include: Optional[Sequence[str]],
    exclude: Optional[Sequence[str]],
    base_path: str,
    options: CompilerOptions,
    host: ParseConfigHost,
) -> List[str]:
    """Expand validated specs into the ordered list of root file names.

    Literal ``files`` come first and are kept even if they do not exist.
    Wildcard matches skip a file when the same base name was already taken
    with a higher priority extension, and evict lower priority ones.
    """
    key_mapper = _key_mapper(host)
    groups = get_supported_extensions(options)
    literal: Dict[str, str] = {}
    wildcard: Dict[str, str] = {}

    for file_name in files or ():
        path = get_normalized_absolute_path(file_name, base_path)
        literal[key_mapper(path)] = path

    if include:
        extensions = [ext for group in groups for ext in group]
        for path in host.read_directory(base_path, extensions, exclude, include, None):
            split = _split_extension(path, groups)
            if split is None:
                continue
            group, extension = split
            stem = path[: -len(extension)]
            index = list(group).index(extension)
            if any(
                key_mapper(stem + higher) in literal or key_mapper(stem + higher) in wildcard
                for higher in group[:index]
            ):
                continue
            for lower in group[index + 1 :]:
                wildcard.pop(key_mapper(stem + lower), None)
            key = key_mapper(path)
            if key not in literal and key not in wildcard:
                wildcard[key] = path

    return list(literal.values()) + list(wildcard.values())


def parse_json_config_file_content(
    json_config: Dict[str, Any],
    host: ParseConfigHost,
    base_path: str,
    existing_options: Optional[CompilerOptions] = None,
    config_file_name: Optional[str] = None,
) -> ParsedCommandLine:
    """Resolve a parsed tsconfig object into root files and options.

    Args:
        json_config: The object read from the config file.
        host: File-system access for extended configs and wildcard matching.
        base_path: Directory relative specs and paths are resolved against.
        existing_options: Options the config's own options override.
        config_file_name: Path of the config, used in messages and to detect
            circular ``extends`` chains.

    Returns:
        ParsedCommandLine: Never raises for configuration problems; they are
        listed in ``errors``.
    """
    base_path = normalize_path(base_path)
    errors: List[Diagnostic] = []
    resolution_stack = [normalize_path(config_file_name)] if config_file_name else []
    layer = _parse_layer(json_config, host, base_path, resolution_stack, errors)

    merged_options: Dict[str, Any] = {}
    if existing_options is not None:
        merged_options.update(existing_options.model_dump(by_alias=True, exclude_unset=True))
    for alias, value in layer.options.items():
        merged_options[alias] = _substitute_config_dir(value, base_path)
    options = CompilerOptions.model_validate(merged_options)
    if config_file_name:
        options = options.model_copy(update={"config_file_path": normalize_path(config_file_name)})

    display_name = config_file_name or "tsconfig.json"
    files = _substitute_config_dir(layer.files, base_path)
    include = _substitute_config_dir(layer.include, base_path)
    exclude = _substitute_config_dir(layer.exclude, base_path)

    if files is not None and len(files) == 0 and include is None:
        errors.append(
            create_compiler_diagnostic(messages.The_files_list_in_config_file_0_is_empty, display_name)
        )
    if files is None and include is None:
        include = [DEFAULT_INCLUDE_SPEC]
    if exclude is None:
        exclude = [d for d in (options.out_dir, options.declaration_dir) if d]

    include = _validate_specs(include, errors, True) if include is not None else None
    exclude = _validate_specs(exclude, errors, False)

    file_names = get_file_names_from_config_specs(files, include, exclude, base_path, options, host)
    if not file_names and files is None:
        errors.append(
            create_compiler_diagnostic(
                messages.No_inputs_were_found_in_config_file_0,
                display_name,
                json.dumps(include or [], separators=(",", ":")),
                json.dumps(exclude, separators=(",", ":")),
            )
        )

    logger.info(
        "Resolved %s: %d root file(s), %d error(s)",
        display_name,
        len(file_names),
        len(errors),
    )
    return ParsedCommandLine(
        file_names=tuple(file_names),
        options=options,
        errors=tuple(errors),
        raw=json_config,
    )


__all__ = [
    "ConfigFileReadResult",
    "ParsedCommandLine",
    "ParseConfigHost",
    "read_config_file",
    "parse_config_file_text_to_json",
    "parse_json_config_file_content",
    "convert_compiler_options",
    "get_extends_config_path",
    "get_file_names_from_config_specs",
    "get_supported_extensions",
]
