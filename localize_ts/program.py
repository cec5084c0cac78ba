"""Compilation units built from tsconfig files.

``program_from_tsconfig`` is the entry point the generator calls once at
startup: it reads the config, resolves it, and parses every root file. All
configuration problems surface as a single ``KnownError``.
"""

import json
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from localize_ts.config.schema import CompilerOptions
from localize_ts.config.tsconfig import parse_json_config_file_content, read_config_file
from localize_ts.diagnostics import messages
from localize_ts.diagnostics.model import Diagnostic, create_compiler_diagnostic
from localize_ts.errors import KnownError
from localize_ts.syntax.source_file import SourceFile, create_source_file
from localize_ts.system import System, sys_host
from localize_ts.utils.path_utils import (
    get_directory_path,
    get_normalized_absolute_path,
)

logger = logging.getLogger("localize_ts.program")


class Program:
    """A project's root files and effective options, parsed and ready to walk.

    A program is immutable once constructed. Root files that could not be
    read have no ``SourceFile``; they are reported by
    ``get_global_diagnostics``.
    """

    def __init__(
        self,
        root_names: Sequence[str],
        options: CompilerOptions,
        host: Optional[System] = None,
    ) -> None:
        host = host or sys_host
        self._root_names: Tuple[str, ...] = tuple(root_names)
        self._options = options
        self._current_directory = host.get_current_directory()

        source_files: Dict[str, SourceFile] = {}
        missing: List[Diagnostic] = []
        for name in self._root_names:
            path = get_normalized_absolute_path(name, self._current_directory)
            if path in source_files:
                continue
            text = host.read_file(path)
            if text is None:
                missing.append(create_compiler_diagnostic(messages.File_0_not_found, path))
                continue
            source_files[path] = create_source_file(path, text)
        self._source_files = source_files
        self._global_diagnostics: Tuple[Diagnostic, ...] = tuple(missing)

    def __repr__(self) -> str:
        return f"Program({len(self._source_files)} file(s))"

    def get_root_file_names(self) -> Tuple[str, ...]:
        return self._root_names

    def get_compiler_options(self) -> CompilerOptions:
        return self._options

    def get_current_directory(self) -> str:
        return self._current_directory

    def get_source_files(self) -> Tuple[SourceFile, ...]:
        return tuple(self._source_files.values())

    def get_source_file(self, file_name: str) -> Optional[SourceFile]:
        """Look a file up by name, relative names resolved like root names."""
        return self._source_files.get(
            get_normalized_absolute_path(file_name, self._current_directory)
        )

    def get_global_diagnostics(self) -> Tuple[Diagnostic, ...]:
        return self._global_diagnostics

    def get_syntactic_diagnostics(
        self, source_file: Optional[SourceFile] = None
    ) -> Tuple[Diagnostic, ...]:
        """Parse errors of one file, or of every file in root order."""
        if source_file is not None:
            return source_file.parse_diagnostics
        return tuple(d for f in self._source_files.values() for d in f.parse_diagnostics)


def create_program(
    root_names: Sequence[str], options: CompilerOptions, host: Optional[System] = None
) -> Program:
    """Build a program from resolved root file names and options."""
    program = Program(root_names, options, host)
    logger.info(
        "Created program with %d source file(s), %d missing",
        len(program.get_source_files()),
        len(program.get_global_diagnostics()),
    )
    return program


def program_from_tsconfig(ts_config_path: str, host: Optional[System] = None) -> Program:
    """Set up a program given a tsconfig.json file path.

    Args:
        ts_config_path: Config path; relative paths are resolved against the
            current working directory.
        host: File-system host, the process file system by default.

    Raises:
        KnownError: If the config cannot be read or parsed, or resolving it
            reports errors. The message holds every error serialized as JSON,
            one per line.
    """
    host = host or sys_host
    config_path = get_normalized_absolute_path(ts_config_path, host.get_current_directory())
    logger.info("Loading %s", config_path)

    result = read_config_file(config_path, host.read_file)
    if result.error is not None or result.config is None:
        error = result.error or create_compiler_diagnostic(
            messages.Cannot_read_file_0, config_path
        )
        raise KnownError(json.dumps(error.to_dict()))

    parsed = parse_json_config_file_content(
        result.config,
        host,
        get_directory_path(config_path),
        config_file_name=config_path,
    )
    if parsed.errors:
        raise KnownError("\n".join(json.dumps(error.to_dict()) for error in parsed.errors))

    return create_program(parsed.file_names, parsed.options, host)


__all__ = ["Program", "create_program", "program_from_tsconfig"]
