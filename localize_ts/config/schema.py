"""Configuration schema definitions using Pydantic for validation.

``CompilerOptions`` models the ``compilerOptions`` block of a tsconfig file and
``TsConfigFile`` its top level. Attribute names are snake_case; the camelCase
spelling used in tsconfig files is the alias, and only aliases are accepted on
input. Validation is strict so that ``"true"`` is not silently taken for a
boolean, matching the compiler's own option parsing.
"""

from typing import Any, Dict, FrozenSet, List, Literal, Optional, Tuple, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ScriptTarget = Literal[
    "es3",
    "es5",
    "es6",
    "es2015",
    "es2016",
    "es2017",
    "es2018",
    "es2019",
    "es2020",
    "es2021",
    "es2022",
    "es2023",
    "es2024",
    "esnext",
]
ModuleKind = Literal[
    "none",
    "commonjs",
    "amd",
    "umd",
    "system",
    "es6",
    "es2015",
    "es2020",
    "es2022",
    "esnext",
    "node16",
    "node18",
    "node20",
    "nodenext",
    "preserve",
]
ModuleResolutionKind = Literal["classic", "node", "node10", "node16", "nodenext", "bundler"]
JsxEmit = Literal["preserve", "react", "react-native", "react-jsx", "react-jsxdev"]
NewLineKind = Literal["crlf", "lf"]
ModuleDetectionKind = Literal["auto", "legacy", "force"]
ImportsNotUsedAsValues = Literal["remove", "preserve", "error"]

_ENUM_OPTIONS = (
    "target",
    "module",
    "module_resolution",
    "jsx",
    "new_line",
    "module_detection",
    "imports_not_used_as_values",
)

# Options whose values are paths relative to the declaring config file
PATH_OPTIONS: FrozenSet[str] = frozenset(
    {
        "base_url",
        "declaration_dir",
        "generate_cpu_profile",
        "generate_trace",
        "map_root",
        "out",
        "out_dir",
        "out_file",
        "root_dir",
        "ts_build_info_file",
    }
)
PATH_LIST_OPTIONS: FrozenSet[str] = frozenset({"root_dirs", "type_roots"})


class CompilerOptions(BaseModel):
    """Effective compiler options of a compilation unit.

    Every option the compiler accepts in a tsconfig file is declared here, so
    anything else is reported as unknown. Every field defaults to None,
    meaning "not set"; the compiler's own defaults apply downstream. Path
    options hold absolute, normalized paths once produced by the config loader.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="forbid",
        strict=True,
        frozen=True,
    )

    # Projects
    incremental: Optional[bool] = None
    composite: Optional[bool] = None
    ts_build_info_file: Optional[str] = None
    disable_source_of_project_reference_redirect: Optional[bool] = None
    disable_solution_searching: Optional[bool] = None
    disable_referenced_project_load: Optional[bool] = None

    # Language and environment
    target: Optional[ScriptTarget] = None
    lib: Optional[List[str]] = None
    jsx: Optional[JsxEmit] = None
    jsx_factory: Optional[str] = None
    jsx_fragment_factory: Optional[str] = None
    jsx_import_source: Optional[str] = None
    react_namespace: Optional[str] = None
    no_lib: Optional[bool] = None
    experimental_decorators: Optional[bool] = None
    emit_decorator_metadata: Optional[bool] = None
    use_define_for_class_fields: Optional[bool] = None
    module_detection: Optional[ModuleDetectionKind] = None
    lib_replacement: Optional[bool] = None

    # Modules
    module: Optional[ModuleKind] = None
    module_resolution: Optional[ModuleResolutionKind] = None
    base_url: Optional[str] = None
    paths: Optional[Dict[str, List[str]]] = None
    root_dir: Optional[str] = None
    root_dirs: Optional[List[str]] = None
    type_roots: Optional[List[str]] = None
    types: Optional[List[str]] = None
    module_suffixes: Optional[List[str]] = None
    custom_conditions: Optional[List[str]] = None
    resolve_json_module: Optional[bool] = None
    resolve_package_json_exports: Optional[bool] = None
    resolve_package_json_imports: Optional[bool] = None
    allow_arbitrary_extensions: Optional[bool] = None
    allow_importing_ts_extensions: Optional[bool] = None
    rewrite_relative_import_extensions: Optional[bool] = None
    allow_umd_global_access: Optional[bool] = None
    no_resolve: Optional[bool] = None
    no_unchecked_side_effect_imports: Optional[bool] = None

    # JavaScript support
    allow_js: Optional[bool] = None
    check_js: Optional[bool] = None
    max_node_module_js_depth: Optional[int] = None

    # Emit
    declaration: Optional[bool] = None
    declaration_map: Optional[bool] = None
    declaration_dir: Optional[str] = None
    emit_declaration_only: Optional[bool] = None
    source_map: Optional[bool] = None
    inline_source_map: Optional[bool] = None
    inline_sources: Optional[bool] = None
    source_root: Optional[str] = None
    map_root: Optional[str] = None
    out_dir: Optional[str] = None
    out_file: Optional[str] = None
    remove_comments: Optional[bool] = None
    no_emit: Optional[bool] = None
    no_emit_on_error: Optional[bool] = None
    no_emit_helpers: Optional[bool] = None
    import_helpers: Optional[bool] = None
    downlevel_iteration: Optional[bool] = None
    preserve_const_enums: Optional[bool] = None
    strip_internal: Optional[bool] = None
    emit_bom: Optional[bool] = Field(default=None, alias="emitBOM")
    new_line: Optional[NewLineKind] = None
    imports_not_used_as_values: Optional[ImportsNotUsedAsValues] = None
    preserve_value_imports: Optional[bool] = None

    # Interop constraints
    isolated_modules: Optional[bool] = None
    isolated_declarations: Optional[bool] = None
    verbatim_module_syntax: Optional[bool] = None
    erasable_syntax_only: Optional[bool] = None
    allow_synthetic_default_imports: Optional[bool] = None
    es_module_interop: Optional[bool] = None
    preserve_symlinks: Optional[bool] = None
    force_consistent_casing_in_file_names: Optional[bool] = None

    # Type checking
    strict: Optional[bool] = None
    no_implicit_any: Optional[bool] = None
    strict_null_checks: Optional[bool] = None
    strict_function_types: Optional[bool] = None
    strict_bind_call_apply: Optional[bool] = None
    strict_builtin_iterator_return: Optional[bool] = None
    strict_property_initialization: Optional[bool] = None
    no_implicit_this: Optional[bool] = None
    use_unknown_in_catch_variables: Optional[bool] = None
    always_strict: Optional[bool] = None
    no_unused_locals: Optional[bool] = None
    no_unused_parameters: Optional[bool] = None
    exact_optional_property_types: Optional[bool] = None
    no_implicit_returns: Optional[bool] = None
    no_fallthrough_cases_in_switch: Optional[bool] = None
    no_unchecked_indexed_access: Optional[bool] = None
    no_implicit_override: Optional[bool] = None
    no_property_access_from_index_signature: Optional[bool] = None
    allow_unused_labels: Optional[bool] = None
    allow_unreachable_code: Optional[bool] = None
    no_check: Optional[bool] = None

    # Completeness
    skip_lib_check: Optional[bool] = None
    skip_default_lib_check: Optional[bool] = None

    # Backwards compatibility
    charset: Optional[str] = None
    ignore_deprecations: Optional[str] = None
    keyof_strings_only: Optional[bool] = None
    no_implicit_use_strict: Optional[bool] = None
    no_strict_generic_checks: Optional[bool] = None
    out: Optional[str] = None
    suppress_excess_property_errors: Optional[bool] = None
    suppress_implicit_any_index_errors: Optional[bool] = None

    # Output formatting and compiler diagnostics
    locale: Optional[str] = None
    pretty: Optional[bool] = None
    no_error_truncation: Optional[bool] = None
    preserve_watch_output: Optional[bool] = None
    diagnostics: Optional[bool] = None
    extended_diagnostics: Optional[bool] = None
    explain_files: Optional[bool] = None
    list_files: Optional[bool] = None
    list_emitted_files: Optional[bool] = None
    trace_resolution: Optional[bool] = None
    generate_cpu_profile: Optional[str] = None
    generate_trace: Optional[str] = None
    assume_changes_only_affect_direct_dependencies: Optional[bool] = None

    # Editor support
    disable_size_limit: Optional[bool] = None
    plugins: Optional[List[Dict[str, Any]]] = None

    # Set by the loader, never read from tsconfig
    config_file_path: Optional[str] = Field(default=None, exclude=True)

    @field_validator(*_ENUM_OPTIONS, mode="before")
    @classmethod
    def lowercase_enum_values(cls, v: Any) -> Any:
        """Enum-valued options are case-insensitive in tsconfig files."""
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator("lib", mode="before")
    @classmethod
    def lowercase_lib_entries(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [item.lower() if isinstance(item, str) else item for item in v]
        return v

    @classmethod
    def option_names(cls) -> List[str]:
        """tsconfig spellings of every accepted option."""
        return [
            field.alias or name
            for name, field in cls.model_fields.items()
            if name != "config_file_path"
        ]

    @classmethod
    def field_name_for(cls, option_name: str) -> Optional[str]:
        for name, field in cls.model_fields.items():
            if field.alias == option_name:
                return name
        return None

    @classmethod
    def allowed_values(cls, option_name: str) -> Tuple[str, ...]:
        """Literal choices of an enum option, in declaration order."""
        name = cls.field_name_for(option_name)
        if name is None:
            return ()
        return tuple(_literal_values(cls.model_fields[name].annotation))

    def to_dict(self) -> Dict[str, Any]:
        """Set options only, keyed by their tsconfig spelling."""
        return self.model_dump(by_alias=True, exclude_none=True)


def _literal_values(annotation: Any) -> List[str]:
    values: List[str] = []
    for arg in get_args(annotation):
        if isinstance(arg, str):
            values.append(arg)
        else:
            values.extend(_literal_values(arg))
    return values


class TsConfigFile(BaseModel):
    """Top level of a tsconfig file.

    Unknown top-level keys (``references``, ``watchOptions``, ...) are kept
    but not interpreted.
    """

    model_config = ConfigDict(alias_generator=to_camel, extra="allow", strict=True)

    extends: Optional[Union[str, List[str]]] = None
    files: Optional[List[str]] = None
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None
    compiler_options: Optional[Dict[str, Any]] = None


__all__ = [
    "CompilerOptions",
    "TsConfigFile",
    "ScriptTarget",
    "ModuleKind",
    "ModuleResolutionKind",
    "JsxEmit",
    "NewLineKind",
    "ModuleDetectionKind",
    "ImportsNotUsedAsValues",
    "PATH_OPTIONS",
    "PATH_LIST_OPTIONS",
]
