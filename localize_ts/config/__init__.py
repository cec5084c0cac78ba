"""tsconfig loading, compiler option schema and file spec matching."""

from .schema import CompilerOptions, TsConfigFile
from .tsconfig import (
    ConfigFileReadResult,
    ParsedCommandLine,
    parse_json_config_file_content,
    read_config_file,
)

__all__ = [
    "CompilerOptions",
    "TsConfigFile",
    "ConfigFileReadResult",
    "ParsedCommandLine",
    "parse_json_config_file_content",
    "read_config_file",
]
