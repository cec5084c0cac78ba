"""Build template literal (backtick string) nodes from runtime strings.

The generator embeds arbitrary strings in emitted code as template literals.
Rather than assembling nodes by hand, the escaped string is wrapped in
backticks, parsed as a one-statement fragment, and the literal is taken back
out of the tree only after the fragment's shape has been verified.
"""

import logging
import re
from typing import Dict

from tree_sitter import Node

from localize_ts.errors import KnownError
from localize_ts.syntax.source_file import ScriptKind, create_source_file

logger = logging.getLogger("localize_ts.syntax.template_literal")

_DUMMY_FILE_NAME = "__DUMMY__.ts"

_ESCAPE_SEQUENCE = re.compile(
    r"\\(u[dD][89abAB][0-9a-fA-F]{2}\\u[dD][c-fC-F][0-9a-fA-F]{2}"
    r"|u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])"
)
_SINGLE_CHARACTER_ESCAPES: Dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
    # Line continuations
    "\n": "",
    "\r": "",
    "\r\n": "",
    "\u2028": "",
    "\u2029": "",
}


def escape_string_to_embed_in_template_literal(unescaped: str) -> str:
    """Escape a string so it can be embedded in a template literal.

    Backslashes are doubled first so the escapes added for backticks and
    dollar signs are not escaped again.
    """
    return unescaped.replace("\\", "\\\\").replace("`", "\\`").replace("$", "\\$")


def _cook_escape(match: "re.Match[str]") -> str:
    sequence = match.group(1)
    if sequence in _SINGLE_CHARACTER_ESCAPES:
        return _SINGLE_CHARACTER_ESCAPES[sequence]
    if sequence.startswith("u{"):
        return chr(int(sequence[2:-1], 16))
    if len(sequence) == 11:
        # \uD8xx\uDCxx pair
        high = int(sequence[1:5], 16)
        low = int(sequence[7:], 16)
        return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))
    if len(sequence) > 1 and sequence[0] in "ux":
        return chr(int(sequence[1:], 16))
    return sequence


def cook_template_text(raw: str) -> str:
    """Evaluate the escape sequences of a template literal's raw text.

    Other characters, line terminators and lone surrogates included, are
    kept as written.
    """
    return _ESCAPE_SEQUENCE.sub(_cook_escape, raw)


def is_template_literal(node: Node) -> bool:
    """True for both plain and substituted template strings."""
    return node.type == "template_string"


class TemplateLiteral:
    """A verified template literal expression node.

    Attributes:
        node: The tree-sitter ``template_string`` node.
        raw: Source text between the backticks.
    """

    def __init__(self, node: Node, raw: str) -> None:
        self._node = node
        self._raw = raw

    def __repr__(self) -> str:
        return f"TemplateLiteral({self._raw!r})"

    @property
    def node(self) -> Node:
        return self._node

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def substitution_count(self) -> int:
        return sum(1 for child in self._node.named_children if child.type == "template_substitution")

    @property
    def text(self) -> str:
        """The string value the literal evaluates to.

        Raises:
            ValueError: If the literal contains ``${...}`` substitutions.
        """
        if self.substitution_count:
            raise ValueError("Template literal with substitutions has no constant value")
        return cook_template_text(self._raw)


def parse_string_as_template_literal(template_literal_body: str) -> TemplateLiteral:
    """Parse a string as the body of a template literal.

    The body must already be escaped (see
    ``escape_string_to_embed_in_template_literal``) and must not include the
    surrounding backticks.

    Raises:
        KnownError: If the synthesized fragment is not exactly one expression
            statement holding a template literal.
    """
    source = create_source_file(
        _DUMMY_FILE_NAME, "`" + template_literal_body + "`", ScriptKind.JS
    )
    statements = source.statements
    if len(statements) != 1:
        raise KnownError("Internal error: expected 1 statement")
    statement = statements[0]
    if statement.type != "expression_statement":
        raise KnownError("Internal error: expected expression statement")
    expressions = [child for child in statement.named_children if child.type != "comment"]
    if not expressions or not is_template_literal(expressions[0]):
        raise KnownError("Internal error: expected template literal expression")
    expression = expressions[0]
    raw = source.get_text(expression)[1:-1]
    logger.debug("Synthesized template literal of %d chars", len(raw))
    return TemplateLiteral(expression, raw)


__all__ = [
    "TemplateLiteral",
    "escape_string_to_embed_in_template_literal",
    "parse_string_as_template_literal",
    "cook_template_text",
    "is_template_literal",
]
