"""Tree-sitter backed source files.

A ``SourceFile`` owns the text of one JavaScript/TypeScript file and its
syntax tree. Tree-sitter reports byte offsets into the UTF-8 encoding; every
offset this module hands out is a character offset into ``text``.
"""

import bisect
import logging
import re
from enum import Enum
from functools import lru_cache
from typing import List, Optional, Tuple

import tree_sitter_javascript as ts_javascript
import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser, Tree

from localize_ts.diagnostics import messages
from localize_ts.diagnostics.model import Diagnostic, create_file_diagnostic

logger = logging.getLogger("localize_ts.syntax.source_file")

_LINE_BREAK = re.compile("\r\n|[\n\r\u2028\u2029]")
_SURROGATE = re.compile("[\ud800-\udfff]")


class ScriptKind(Enum):
    """Grammar used to parse a file."""

    JS = "js"
    JSX = "jsx"
    TS = "ts"
    TSX = "tsx"


_EXTENSION_SCRIPT_KINDS = (
    (".d.mts", ScriptKind.TS),
    (".d.cts", ScriptKind.TS),
    (".d.ts", ScriptKind.TS),
    (".mts", ScriptKind.TS),
    (".cts", ScriptKind.TS),
    (".tsx", ScriptKind.TSX),
    (".ts", ScriptKind.TS),
    (".jsx", ScriptKind.JSX),
    (".mjs", ScriptKind.JS),
    (".cjs", ScriptKind.JS),
    (".js", ScriptKind.JS),
)


def get_script_kind_from_file_name(file_name: str) -> ScriptKind:
    """Pick a grammar from the file extension, TypeScript by default."""
    lowered = file_name.lower()
    for extension, kind in _EXTENSION_SCRIPT_KINDS:
        if lowered.endswith(extension):
            return kind
    return ScriptKind.TS


@lru_cache(maxsize=None)
def _language(kind: ScriptKind) -> Language:
    if kind is ScriptKind.TS:
        return Language(ts_typescript.language_typescript())
    if kind is ScriptKind.TSX:
        return Language(ts_typescript.language_tsx())
    # The JavaScript grammar parses JSX as well
    return Language(ts_javascript.language())


def _parser_input(text: str) -> bytes:
    """Encode ``text`` for tree-sitter, byte-aligned with ``_encode(text)``.

    The grammars read U+0000 as end of input, so it is handed over as U+0001.
    Surrogates have no UTF-8 form; each becomes U+FFFD, which is as wide as
    its surrogatepass encoding.
    """
    text = text.replace("\x00", "\x01")
    text = _SURROGATE.sub("\ufffd", text)
    return text.encode("utf-8")


def _encode(text: str) -> bytes:
    return text.encode("utf-8", "surrogatepass")


def _decode(data: bytes) -> str:
    return data.decode("utf-8", "surrogatepass")


def parse_text(text: str, kind: ScriptKind) -> Tree:
    """Parse ``text`` with a fresh parser; parsers are not shared between calls."""
    parser = Parser(_language(kind))
    return parser.parse(_parser_input(text))


class SourceFile:
    """One parsed file: name, text, grammar and syntax tree.

    Instances are read-only. Node positions are exposed as character offsets
    through ``get_start``/``get_end``/``get_width``.
    """

    def __init__(self, file_name: str, text: str, script_kind: ScriptKind, tree: Tree) -> None:
        self._file_name = file_name
        self._text = text
        self._script_kind = script_kind
        self._tree = tree
        self._encoded = _encode(text)
        self._is_ascii = text.isascii()
        self._line_starts: Optional[List[int]] = None
        self._parse_diagnostics: Optional[Tuple[Diagnostic, ...]] = None

    def __repr__(self) -> str:
        return f"SourceFile({self._file_name!r}, kind={self._script_kind.value})"

    @property
    def file_name(self) -> str:
        return self._file_name

    @property
    def text(self) -> str:
        return self._text

    @property
    def script_kind(self) -> ScriptKind:
        return self._script_kind

    @property
    def root(self) -> Node:
        return self._tree.root_node

    @property
    def statements(self) -> List[Node]:
        """Top-level statements, comments excluded."""
        return [child for child in self.root.named_children if child.type != "comment"]

    def char_offset(self, byte_offset: int) -> int:
        """Convert a tree-sitter byte offset into a character offset."""
        if self._is_ascii:
            return byte_offset
        return len(_decode(self._encoded[:byte_offset]))

    def get_start(self, node: Node) -> int:
        return self.char_offset(node.start_byte)

    def get_end(self, node: Node) -> int:
        return self.char_offset(node.end_byte)

    def get_width(self, node: Node) -> int:
        return self.get_end(node) - self.get_start(node)

    def get_text(self, node: Node) -> str:
        return _decode(self._encoded[node.start_byte : node.end_byte])

    @property
    def line_starts(self) -> List[int]:
        if self._line_starts is None:
            self._line_starts = [0] + [m.end() for m in _LINE_BREAK.finditer(self._text)]
        return self._line_starts

    def get_line_and_character_of_position(self, position: int) -> Tuple[int, int]:
        """Zero-based (line, character) of a character offset."""
        line = bisect.bisect_right(self.line_starts, position) - 1
        return line, position - self.line_starts[line]

    def get_position_of_line_and_character(self, line: int, character: int) -> int:
        if line < 0 or line >= len(self.line_starts):
            raise ValueError(f"Line {line} out of range for {self._file_name}")
        return self.line_starts[line] + character

    @property
    def parse_diagnostics(self) -> Tuple[Diagnostic, ...]:
        """Syntax errors found by the parser, in document order."""
        if self._parse_diagnostics is None:
            self._parse_diagnostics = tuple(self._collect_parse_diagnostics())
        return self._parse_diagnostics

    def _collect_parse_diagnostics(self) -> List[Diagnostic]:
        found: List[Diagnostic] = []
        if not self.root.has_error:
            return found
        stack = [self.root]
        while stack:
            node = stack.pop()
            start = self.get_start(node)
            if node.is_missing:
                found.append(create_file_diagnostic(self, start, 0, messages._0_expected, node.type))
                continue
            if node.type == "ERROR":
                found.append(
                    create_file_diagnostic(
                        self, start, self.get_width(node), messages.Unexpected_token
                    )
                )
                continue
            stack.extend(
                child for child in reversed(node.children) if child.has_error or child.is_missing
            )
        return found


def create_source_file(
    file_name: str, text: str, script_kind: Optional[ScriptKind] = None
) -> SourceFile:
    """Parse ``text`` into a ``SourceFile``.

    Args:
        file_name: Name recorded on the file and shown in diagnostics.
        text: Source text.
        script_kind: Grammar to use; derived from ``file_name`` when omitted.
    """
    kind = script_kind or get_script_kind_from_file_name(file_name)
    tree = parse_text(text, kind)
    logger.debug("Parsed %s as %s (%d chars)", file_name, kind.value, len(text))
    return SourceFile(file_name, text, kind, tree)


__all__ = [
    "ScriptKind",
    "SourceFile",
    "create_source_file",
    "get_script_kind_from_file_name",
    "parse_text",
]
