"""File-system host used by configuration loading and program construction.

Mirrors the small slice of the compiler's ``sys`` object this layer needs:
reading text files, probing for files and directories, and listing directory
entries for wildcard matching.
"""

import logging
import os
from typing import List, Optional, Sequence, Tuple

from localize_ts.config.matcher import match_files
from localize_ts.utils.path_utils import current_directory, normalize_slashes

logger = logging.getLogger("localize_ts.system")


class System:
    """Blocking file-system access with forward-slash path conventions."""

    new_line = "\n"

    def __init__(self, use_case_sensitive_file_names: Optional[bool] = None) -> None:
        if use_case_sensitive_file_names is None:
            use_case_sensitive_file_names = os.path.normcase("A") == "A"
        self.use_case_sensitive_file_names = use_case_sensitive_file_names

    def read_file(self, path: str) -> Optional[str]:
        """Read a UTF-8 text file, stripping a byte order mark.

        Returns:
            The file text, or None if the file cannot be read.
        """
        try:
            with open(path, "r", encoding="utf-8-sig") as f:
                return f.read()
        except UnicodeDecodeError:
            logger.debug("File %s is not valid UTF-8, reading as latin-1", path)
            with open(path, "r", encoding="latin-1") as f:
                return f.read()
        except OSError as e:
            logger.debug("Cannot read %s: %s", path, e)
            return None

    def file_exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def get_current_directory(self) -> str:
        return current_directory()

    def realpath(self, path: str) -> str:
        return normalize_slashes(os.path.realpath(path))

    def get_accessible_file_system_entries(self, path: str) -> Tuple[List[str], List[str]]:
        """List the files and directories directly under ``path``.

        Symlinks are followed. Unreadable directories yield no entries.

        Returns:
            Tuple of (file names, directory names), each sorted.
        """
        files: List[str] = []
        directories: List[str] = []
        try:
            with os.scandir(path or ".") as it:
                for entry in it:
                    try:
                        if entry.is_file():
                            files.append(entry.name)
                        elif entry.is_dir():
                            directories.append(entry.name)
                    except OSError as e:
                        logger.debug("Skipping %s: %s", entry.path, e)
        except OSError as e:
            logger.debug("Cannot list %s: %s", path, e)
        return sorted(files), sorted(directories)

    def read_directory(
        self,
        path: str,
        extensions: Sequence[str],
        excludes: Optional[Sequence[str]] = None,
        includes: Optional[Sequence[str]] = None,
        depth: Optional[int] = None,
    ) -> List[str]:
        """Return files under ``path`` matching include/exclude wildcard specs."""
        return match_files(
            path,
            extensions,
            excludes,
            includes,
            self.use_case_sensitive_file_names,
            self.get_current_directory(),
            depth,
            self.get_accessible_file_system_entries,
            self.realpath,
        )


sys_host = System()

__all__ = ["System", "sys_host"]
