"""Template literal escaping and synthesis tests."""

from __future__ import annotations

import random

import pytest

from localize_ts.errors import KnownError
from localize_ts.syntax import (
    ScriptKind,
    create_source_file,
    escape_string_to_embed_in_template_literal,
    parse_string_as_template_literal,
)
from localize_ts.syntax import template_literal
from localize_ts.syntax.template_literal import cook_template_text


def test_escape_backticks_and_dollars() -> None:
    """Backticks and dollar signs are escaped for embedding."""
    assert (
        escape_string_to_embed_in_template_literal('He said "$100" `quoted`')
        == 'He said "\\$100" \\`quoted\\`'
    )


def test_escape_backslash_first() -> None:
    """Backslashes are doubled before other escapes are added."""
    assert escape_string_to_embed_in_template_literal("a`b\\c$d") == "a\\`b\\\\c\\$d"


def test_escape_leaves_plain_text_alone() -> None:
    """Strings without special characters are returned unchanged."""
    assert escape_string_to_embed_in_template_literal("plain text 123") == "plain text 123"


@pytest.mark.parametrize(
    "value",
    [
        "",
        "hello",
        "a`b\\c$d",
        "${notInterpolated}",
        "line1\nline2",
        "tab\tand \\n literal",
        "unicode ✓ 🎉",
        "$$$",
        "trailing backslash \\",
        "a\x00b",
        "\x00",
        "vertical\x0btab",
        "separator \u2028 here",
        "cr\rlf\r\n",
        "lone \ud83c high",
        "lone \udc00 low",
        "\\uD83D\\uDE00 stays escaped",
    ],
)
def test_escaped_strings_round_trip(value: str) -> None:
    """Escaping then parsing yields a literal whose value is the original string."""
    literal = parse_string_as_template_literal(escape_string_to_embed_in_template_literal(value))
    assert literal.substitution_count == 0
    assert literal.text == value


_ROUND_TRIP_ALPHABET = [
    "`", "$", "\\", "{", "}", "\r", "\n", "\x00", "\x0b", "\u2028", "\u2029",
    "a", "u", "x", "0", " ", "é", "\U0001F600", "\ud83c", "\udc00",
]


@pytest.mark.parametrize("seed", range(25))
def test_random_strings_round_trip(seed: int) -> None:
    """Any mix of special characters survives escaping and parsing."""
    rng = random.Random(seed)
    value = "".join(rng.choice(_ROUND_TRIP_ALPHABET) for _ in range(rng.randint(0, 40)))
    literal = parse_string_as_template_literal(escape_string_to_embed_in_template_literal(value))
    assert literal.substitution_count == 0
    assert literal.text == value


def test_lone_surrogate_keeps_offsets() -> None:
    """Text after a lone surrogate is located at the right character offset."""
    literal = parse_string_as_template_literal("\ud83c tail")
    assert literal.raw == "\ud83c tail"
    source = create_source_file("lone.ts", "`\ud83c`; let after = 1;", ScriptKind.TS)
    assert source.parse_diagnostics == ()
    declaration = source.statements[1]
    assert source.get_start(declaration) == 5
    assert source.get_text(source.statements[0]) == "`\ud83c`;"


def test_nul_does_not_end_the_file() -> None:
    """Text after a NUL character is still parsed."""
    source = create_source_file("nul.ts", "`a\x00b`; let after = 1;", ScriptKind.TS)
    assert source.parse_diagnostics == ()
    assert len(source.statements) == 2
    assert source.get_text(source.statements[0]) == "`a\x00b`;"


def test_parsed_literal_exposes_node_and_raw_text() -> None:
    """The literal keeps its raw body and tree-sitter node."""
    literal = parse_string_as_template_literal("Hello \\`world\\`")
    assert literal.node.type == "template_string"
    assert literal.raw == "Hello \\`world\\`"
    assert literal.text == "Hello `world`"


def test_escape_sequences_are_cooked() -> None:
    """Unicode, hex and single-character escapes evaluate to their characters."""
    literal = parse_string_as_template_literal("\\u0041\\x42\\u{1F600}\\n")
    assert literal.text == "AB\U0001F600\n"


def test_cook_joins_surrogate_pairs() -> None:
    """Escaped UTF-16 surrogate pairs become one code point."""
    assert cook_template_text("\\uD83D\\uDE00") == "\U0001F600"
    assert cook_template_text("\\ud83d\\ude00!") == "\U0001F600!"


def test_cook_keeps_lone_escaped_surrogates() -> None:
    """An escaped surrogate without its partner is kept as that code point."""
    assert cook_template_text("\\uD83C") == "\ud83c"
    assert cook_template_text("\\uDC00\\uD83C") == "\udc00\ud83c"


def test_substitutions_have_no_constant_text() -> None:
    """Unescaped substitutions are parsed but have no single value."""
    literal = parse_string_as_template_literal("a${b}c")
    assert literal.substitution_count == 1
    with pytest.raises(ValueError):
        literal.text


def test_unescaped_backtick_yields_two_statements() -> None:
    """A body that closes the literal early is rejected."""
    with pytest.raises(KnownError, match="expected 1 statement"):
        parse_string_as_template_literal("a`; `b")


def test_non_literal_expression_is_rejected() -> None:
    """A body that turns the fragment into another expression is rejected."""
    with pytest.raises(KnownError, match="expected template literal expression"):
        parse_string_as_template_literal("a` + `b")


def test_non_expression_statement_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    """A fragment whose statement is not an expression is rejected."""

    def declaration_source(file_name, text, script_kind=None):
        return create_source_file(file_name, "let x = 1;", ScriptKind.JS)

    monkeypatch.setattr(template_literal, "create_source_file", declaration_source)
    with pytest.raises(KnownError, match="expected expression statement"):
        parse_string_as_template_literal("anything")
