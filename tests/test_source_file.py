"""Source file parsing and position mapping tests."""

from __future__ import annotations

import pytest

from localize_ts.syntax import ScriptKind, create_source_file, get_script_kind_from_file_name


@pytest.mark.parametrize(
    "file_name, kind",
    [
        ("a.ts", ScriptKind.TS),
        ("a.d.ts", ScriptKind.TS),
        ("a.mts", ScriptKind.TS),
        ("a.tsx", ScriptKind.TSX),
        ("a.js", ScriptKind.JS),
        ("a.cjs", ScriptKind.JS),
        ("a.jsx", ScriptKind.JSX),
        ("README", ScriptKind.TS),
    ],
)
def test_script_kind_from_extension(file_name: str, kind: ScriptKind) -> None:
    """The grammar follows the file extension."""
    assert get_script_kind_from_file_name(file_name) is kind


def test_statements_skip_comments() -> None:
    """Top-level comments are not statements."""
    source = create_source_file("a.ts", "// header\nconst a = 1;\nlet b: number = 2;\n")
    assert [s.type for s in source.statements] == ["lexical_declaration", "lexical_declaration"]


def test_tsx_parses_jsx_elements() -> None:
    """TSX files accept JSX syntax."""
    source = create_source_file("view.tsx", "const v = <div>{msg('x')}</div>;\n")
    assert source.script_kind is ScriptKind.TSX
    assert source.parse_diagnostics == ()


def test_line_and_character_mapping() -> None:
    """Positions map to zero-based lines and columns across line break styles."""
    text = "a;\r\nbb;\ncc;\r dd;"
    source = create_source_file("a.ts", text)
    assert source.line_starts == [0, 4, 8, 12]
    assert source.get_line_and_character_of_position(0) == (0, 0)
    assert source.get_line_and_character_of_position(5) == (1, 1)
    assert source.get_line_and_character_of_position(len(text)) == (3, 4)
    assert source.get_position_of_line_and_character(2, 1) == 9
    with pytest.raises(ValueError):
        source.get_position_of_line_and_character(4, 0)


def test_text_and_offsets_with_multibyte_characters() -> None:
    """Node text and offsets are in characters even for non-ASCII input."""
    text = "const s = '日本';\nconst t = 'x';\n"
    source = create_source_file("a.ts", text)
    second = source.statements[1]
    assert source.get_text(second) == "const t = 'x';"
    assert source.get_start(second) == text.index("const t")
    assert source.get_width(second) == len("const t = 'x';")


def test_parse_diagnostics_for_invalid_code() -> None:
    """Syntax errors are reported against the file, in document order."""
    source = create_source_file("bad.ts", "const = ;\nconst ok = 1;\n")
    diagnostics = source.parse_diagnostics
    assert diagnostics
    assert all(d.file is source for d in diagnostics)
    assert {d.code for d in diagnostics} <= {1005, 1012}
    starts = [d.start for d in diagnostics]
    assert starts == sorted(starts)


def test_valid_code_has_no_parse_diagnostics() -> None:
    """Well-formed files produce no syntax errors."""
    source = create_source_file("ok.ts", "export const a: string = `x${1}`;\n")
    assert source.parse_diagnostics == ()
