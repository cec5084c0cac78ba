"""Path normalization utilities in the compiler's forward-slash convention."""

import os
import posixpath
from pathlib import Path
from typing import Callable, Union

PathLike = Union[str, Path]


def normalize_slashes(path: PathLike) -> str:
    """Replace backslashes with forward slashes."""
    return str(path).replace("\\", "/")


def is_rooted(path: PathLike) -> bool:
    """Return True for absolute POSIX paths and drive-rooted Windows paths."""
    text = normalize_slashes(path)
    return text.startswith("/") or (len(text) >= 3 and text[1] == ":" and text[2] == "/")


def normalize_path(path: PathLike) -> str:
    """Collapse ``.``/``..`` segments and duplicate separators.

    Examples:
        >>> normalize_path("/proj/src/../a.ts")
        '/proj/a.ts'
    """
    text = normalize_slashes(path)
    if not text:
        return text
    normalized = posixpath.normpath(text)
    # posixpath keeps a leading "//" verbatim
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def get_normalized_absolute_path(path: PathLike, current_directory: PathLike) -> str:
    """Resolve ``path`` against ``current_directory`` unless already rooted."""
    text = normalize_slashes(path)
    if not is_rooted(text):
        text = posixpath.join(normalize_slashes(current_directory), text)
    return normalize_path(text)


def get_directory_path(path: PathLike) -> str:
    """Return the directory part of a normalized path."""
    return posixpath.dirname(normalize_path(path))


def convert_to_relative_path(
    path: PathLike,
    base_path: PathLike,
    get_canonical_file_name: Callable[[str], str],
) -> str:
    """Express a rooted path relative to ``base_path``.

    Unrooted paths are returned untouched. Canonical names are used only to
    compare segments; the returned text keeps the original spelling.
    """
    text = normalize_slashes(path)
    if not is_rooted(text):
        return text
    base = normalize_path(base_path)
    target = normalize_path(text)

    base_parts = [p for p in base.split("/") if p]
    target_parts = [p for p in target.split("/") if p]
    common = 0
    for base_part, target_part in zip(base_parts, target_parts):
        if get_canonical_file_name(base_part) != get_canonical_file_name(target_part):
            break
        common += 1
    if common == 0 and base_parts and target_parts and ":" in target_parts[0]:
        # Different drive roots: nothing to relativize against
        return target
    up = [".."] * (len(base_parts) - common)
    return "/".join(up + target_parts[common:])


def current_directory() -> str:
    """Return the process working directory with forward slashes."""
    return normalize_slashes(os.getcwd())


__all__ = [
    "normalize_slashes",
    "is_rooted",
    "normalize_path",
    "get_normalized_absolute_path",
    "get_directory_path",
    "convert_to_relative_path",
    "current_directory",
]
