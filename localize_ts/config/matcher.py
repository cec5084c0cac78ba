"""Wildcard matching for tsconfig ``include``/``exclude`` specs.

Specs are compiled into regular expressions over absolute, forward-slash
paths, then directories are walked from the smallest set of base paths that
covers every include spec. Results are grouped by the include spec that first
matched them, which keeps output order stable across platforms.
"""

import logging
import re
from typing import Callable, Dict, List, Optional, Pattern, Sequence, Set, Tuple

from localize_ts.utils.path_utils import (
    get_directory_path,
    get_normalized_absolute_path,
    is_rooted,
    normalize_path,
)

logger = logging.getLogger("localize_ts.config.matcher")

FileSystemEntries = Callable[[str], Tuple[List[str], List[str]]]

# Directories that implicit wildcards never descend into
_COMMON_PACKAGE_FOLDERS = ("node_modules", "bower_components", "jspm_packages")
_IMPLICIT_EXCLUDE = "(?!(" + "|".join(_COMMON_PACKAGE_FOLDERS) + ")(/|$))"

_RESERVED_CHARACTER = re.compile(r"[^\w\s/]", re.ASCII)
_WILDCARD_CHARACTERS = ("*", "?")


class _Matcher:
    """Regex fragments for one usage (files, directories or exclude)."""

    def __init__(self, single_asterisk: str, double_asterisk: str) -> None:
        self.single_asterisk = single_asterisk
        self.double_asterisk = double_asterisk

    def replace_wildcard(self, match: "re.Match[str]") -> str:
        char = match.group(0)
        if char == "*":
            return self.single_asterisk
        if char == "?":
            return "[^/]"
        return re.escape(char)


_MATCHERS: Dict[str, _Matcher] = {
    # "*" in a file name never swallows the ".min.js" suffix
    "files": _Matcher(
        r"([^./]|(\.(?!min\.js$))?)*",
        "(/" + _IMPLICIT_EXCLUDE + "[^/.][^/]*)*?",
    ),
    "directories": _Matcher(
        "[^/]*",
        "(/" + _IMPLICIT_EXCLUDE + "[^/.][^/]*)*?",
    ),
    "exclude": _Matcher("[^/]*", "(/.+?)?"),
}


def is_implicit_glob(last_component: str) -> bool:
    """A last path segment with no dot or wildcard names a directory."""
    return not re.search(r"[.*?]", last_component)


def _path_components(spec: str, base_path: str) -> List[str]:
    absolute = get_normalized_absolute_path(spec, base_path)
    if absolute.startswith("/"):
        return ["/"] + [c for c in absolute[1:].split("/") if c]
    head, _, tail = absolute.partition("/")
    return [head + "/"] + [c for c in tail.split("/") if c]


def get_sub_pattern_from_spec(spec: str, base_path: str, usage: str) -> Optional[str]:
    """Translate one spec into a regex fragment, or None if it cannot match."""
    matcher = _MATCHERS[usage]
    components = _path_components(spec, base_path)
    last_component = components[-1]
    if usage != "exclude" and last_component == "**":
        return None

    components[0] = components[0].rstrip("/")
    if is_implicit_glob(last_component):
        components.extend(["**", "*"])

    subpattern = ""
    has_written_component = False
    optional_count = 0
    for component in components:
        if component == "**":
            subpattern += matcher.double_asterisk
        else:
            if usage == "directories":
                subpattern += "("
                optional_count += 1
            if has_written_component:
                subpattern += "/"
            if usage != "exclude":
                component_pattern = ""
                # Leading wildcards never match hidden entries
                if component.startswith("*"):
                    component_pattern += "([^./]" + matcher.single_asterisk + ")?"
                    component = component[1:]
                elif component.startswith("?"):
                    component_pattern += "[^./]"
                    component = component[1:]
                component_pattern += _RESERVED_CHARACTER.sub(matcher.replace_wildcard, component)
                if component_pattern != component:
                    subpattern += _IMPLICIT_EXCLUDE
                subpattern += component_pattern
            else:
                subpattern += _RESERVED_CHARACTER.sub(matcher.replace_wildcard, component)
        has_written_component = True

    subpattern += ")?" * optional_count
    return subpattern


def _compile(pattern: str, use_case_sensitive_file_names: bool) -> Pattern[str]:
    return re.compile(pattern, 0 if use_case_sensitive_file_names else re.IGNORECASE)


def get_regular_expression_for_wildcard(
    specs: Optional[Sequence[str]], base_path: str, usage: str
) -> Optional[str]:
    """Combine several specs into one anchored alternation."""
    if not specs:
        return None
    patterns = [
        p for p in (get_sub_pattern_from_spec(s, base_path, usage) for s in specs if s) if p
    ]
    if not patterns:
        return None
    terminator = "($|/)" if usage == "exclude" else "$"
    return "^(" + "|".join("(" + p + ")" for p in patterns) + ")" + terminator


def _has_extension(path: str) -> bool:
    name = path.rsplit("/", 1)[-1]
    return "." in name


def get_include_base_path(absolute: str) -> str:
    """Longest wildcard-free directory prefix of an include spec."""
    offsets = [absolute.find(c) for c in _WILDCARD_CHARACTERS if c in absolute]
    if not offsets:
        if not _has_extension(absolute):
            return absolute
        return get_directory_path(absolute)
    wildcard_offset = min(offsets)
    return absolute[: absolute.rfind("/", 0, wildcard_offset)] or "/"


def _contains_path(parent: str, child: str, ignore_case: bool) -> bool:
    if ignore_case:
        parent, child = parent.lower(), child.lower()
    if parent == child:
        return True
    return child.startswith(parent.rstrip("/") + "/")


def get_base_paths(
    path: str, includes: Optional[Sequence[str]], use_case_sensitive_file_names: bool
) -> List[str]:
    """Directories to walk so that every include spec is covered exactly once."""
    base_paths = [path]
    if includes:
        include_base_paths = []
        for include in includes:
            absolute = include if is_rooted(include) else normalize_path(path + "/" + include)
            include_base_paths.append(get_include_base_path(absolute))
        key = (lambda p: p) if use_case_sensitive_file_names else (lambda p: p.lower())
        for include_base_path in sorted(include_base_paths, key=key):
            if all(
                not _contains_path(base, include_base_path, not use_case_sensitive_file_names)
                for base in base_paths
            ):
                base_paths.append(include_base_path)
    return base_paths


def _extension_matches(name: str, extensions: Sequence[str], ignore_case: bool) -> bool:
    if ignore_case:
        name = name.lower()
        return any(name.endswith(ext.lower()) for ext in extensions)
    return any(name.endswith(ext) for ext in extensions)


def match_files(
    path: str,
    extensions: Optional[Sequence[str]],
    excludes: Optional[Sequence[str]],
    includes: Optional[Sequence[str]],
    use_case_sensitive_file_names: bool,
    current_directory: str,
    depth: Optional[int],
    get_file_system_entries: FileSystemEntries,
    realpath: Callable[[str], str],
) -> List[str]:
    """Walk ``path`` and return files selected by the include/exclude specs.

    Args:
        path: Directory the specs are relative to.
        extensions: Accepted file extensions (None accepts everything).
        excludes: Exclude specs.
        includes: Include specs (None includes everything).
        use_case_sensitive_file_names: Case sensitivity of the file system.
        current_directory: Anchor for relative ``path``.
        depth: Maximum directory depth, None for unlimited.
        get_file_system_entries: Lists (files, directories) of a directory.
        realpath: Resolves symlinks, used to avoid visiting a directory twice.

    Returns:
        List[str]: Matched file paths, grouped by the first matching include.
    """
    path = normalize_path(path)
    current_directory = normalize_path(current_directory)
    absolute_path = get_normalized_absolute_path(path, current_directory)

    include_file_patterns = None
    if includes:
        include_file_patterns = [
            "^(" + p + ")$"
            for p in (get_sub_pattern_from_spec(s, absolute_path, "files") for s in includes)
            if p
        ]
    include_directory_pattern = get_regular_expression_for_wildcard(
        includes, absolute_path, "directories"
    )
    exclude_pattern = get_regular_expression_for_wildcard(excludes, absolute_path, "exclude")

    include_file_regexes = (
        [_compile(p, use_case_sensitive_file_names) for p in include_file_patterns]
        if include_file_patterns is not None
        else None
    )
    include_directory_regex = (
        _compile(include_directory_pattern, use_case_sensitive_file_names)
        if include_directory_pattern
        else None
    )
    exclude_regex = (
        _compile(exclude_pattern, use_case_sensitive_file_names) if exclude_pattern else None
    )

    results: List[List[str]] = (
        [[] for _ in include_file_regexes] if include_file_regexes else [[]]
    )
    visited: Set[str] = set()
    ignore_case = not use_case_sensitive_file_names

    def visit_directory(directory: str, absolute_directory: str, remaining: Optional[int]) -> None:
        canonical = realpath(absolute_directory)
        if ignore_case:
            canonical = canonical.lower()
        if canonical in visited:
            return
        visited.add(canonical)

        files, directories = get_file_system_entries(directory)
        for file_name in files:
            name = _combine(directory, file_name)
            absolute_name = _combine(absolute_directory, file_name)
            if extensions and not _extension_matches(name, extensions, ignore_case):
                continue
            if exclude_regex and exclude_regex.search(absolute_name):
                continue
            if include_file_regexes is None:
                results[0].append(name)
                continue
            for index, regex in enumerate(include_file_regexes):
                if regex.search(absolute_name):
                    results[index].append(name)
                    break

        if remaining is not None:
            remaining -= 1
            if remaining == 0:
                return

        for directory_name in directories:
            name = _combine(directory, directory_name)
            absolute_name = _combine(absolute_directory, directory_name)
            if include_directory_regex and not include_directory_regex.search(absolute_name):
                continue
            if exclude_regex and exclude_regex.search(absolute_name):
                continue
            visit_directory(name, absolute_name, remaining)

    for base_path in get_base_paths(path, includes, use_case_sensitive_file_names):
        visit_directory(
            base_path, get_normalized_absolute_path(base_path, current_directory), depth
        )

    matched = [name for group in results for name in group]
    logger.debug("Matched %d file(s) under %s", len(matched), path)
    return matched


def _combine(directory: str, name: str) -> str:
    if not directory:
        return name
    if directory.endswith("/"):
        return directory + name
    return directory + "/" + name


__all__ = [
    "match_files",
    "get_sub_pattern_from_spec",
    "get_regular_expression_for_wildcard",
    "get_base_paths",
    "get_include_base_path",
    "is_implicit_glob",
]
