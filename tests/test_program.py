"""Program construction from tsconfig files."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from localize_ts import program as program_module
from localize_ts.config.schema import CompilerOptions
from localize_ts.config.tsconfig import ConfigFileReadResult
from localize_ts.errors import KnownError
from localize_ts.program import create_program, program_from_tsconfig


def _write(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_program_from_files_list(tmp_path: Path) -> None:
    """Root names follow the files list and every file is parsed."""
    _write(tmp_path / "a.ts", "export const a = 1;\n")
    _write(tmp_path / "b.ts", "export const b = 2;\n")
    config = _write(tmp_path / "tsconfig.json", '{"files": ["a.ts", "b.ts"]}')

    program = program_from_tsconfig(config.as_posix())
    expected = ((tmp_path / "a.ts").as_posix(), (tmp_path / "b.ts").as_posix())
    assert program.get_root_file_names() == expected
    assert [f.file_name for f in program.get_source_files()] == list(expected)
    assert program.get_global_diagnostics() == ()
    assert program.get_syntactic_diagnostics() == ()
    assert program.get_compiler_options().config_file_path == config.as_posix()


def test_program_keeps_missing_files_as_diagnostics(tmp_path: Path) -> None:
    """Listed files that do not exist are reported, not fatal."""
    config = _write(tmp_path / "tsconfig.json", '{"files": ["a.ts", "b.ts"]}')
    program = program_from_tsconfig(config.as_posix())
    assert len(program.get_root_file_names()) == 2
    assert program.get_source_files() == ()
    assert [d.code for d in program.get_global_diagnostics()] == [6053, 6053]


def test_relative_config_path_uses_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A relative tsconfig path is resolved against the current directory."""
    _write(tmp_path / "src" / "index.ts", "export {};\n")
    _write(tmp_path / "tsconfig.json", '{"include": ["src"]}')
    monkeypatch.chdir(tmp_path)

    program = program_from_tsconfig("tsconfig.json")
    assert program.get_root_file_names() == ((tmp_path / "src" / "index.ts").as_posix(),)
    assert program.get_source_file("src/index.ts") is not None
    assert program.get_current_directory() == tmp_path.as_posix()


def test_malformed_config_raises_known_error(tmp_path: Path) -> None:
    """Unparseable JSON surfaces as one serialized diagnostic."""
    config = _write(tmp_path / "tsconfig.json", '{"files": [')
    with pytest.raises(KnownError) as excinfo:
        program_from_tsconfig(config.as_posix())
    record = json.loads(excinfo.value.message)
    assert record["code"] == 5014
    assert record["category"] == 1
    assert "file" not in record


def test_missing_config_raises_known_error(tmp_path: Path) -> None:
    """A config that cannot be read is a known error."""
    with pytest.raises(KnownError) as excinfo:
        program_from_tsconfig((tmp_path / "tsconfig.json").as_posix())
    assert json.loads(excinfo.value.message)["code"] == 5083


def test_resolution_errors_are_joined_one_per_line(tmp_path: Path) -> None:
    """Every resolution error is serialized on its own line, in order."""
    config = _write(
        tmp_path / "tsconfig.json",
        json.dumps({"files": ["a.ts"], "compilerOptions": {"target": "es1999", "strict": "yes"}}),
    )
    with pytest.raises(KnownError) as excinfo:
        program_from_tsconfig(config.as_posix())
    lines = excinfo.value.message.split("\n")
    assert [json.loads(line)["code"] for line in lines] == [6046, 5024]


def test_empty_project_is_a_known_error(tmp_path: Path) -> None:
    """A config that matches no inputs cannot produce a program."""
    config = _write(tmp_path / "tsconfig.json", "{}")
    with pytest.raises(KnownError, match="18003"):
        program_from_tsconfig(config.as_posix())


def test_syntax_errors_are_reported_per_file(tmp_path: Path) -> None:
    """Broken files still parse and report their syntax errors."""
    _write(tmp_path / "ok.ts", "export const ok = 1;\n")
    _write(tmp_path / "bad.ts", "const = ;\n")
    program = create_program(
        [(tmp_path / "ok.ts").as_posix(), (tmp_path / "bad.ts").as_posix()],
        CompilerOptions(),
    )
    bad = program.get_source_file((tmp_path / "bad.ts").as_posix())
    ok = program.get_source_file((tmp_path / "ok.ts").as_posix())
    assert program.get_syntactic_diagnostics(ok) == ()
    assert program.get_syntactic_diagnostics(bad)
    assert program.get_syntactic_diagnostics() == program.get_syntactic_diagnostics(bad)


def test_duplicate_root_names_are_parsed_once(tmp_path: Path) -> None:
    """The same file listed twice yields one source file."""
    path = _write(tmp_path / "a.ts", "export {};\n").as_posix()
    program = create_program([path, path], CompilerOptions())
    assert len(program.get_source_files()) == 1


def test_plugins_option_does_not_block_loading(tmp_path: Path) -> None:
    """Editor plugin settings are accepted when loading a project."""
    _write(tmp_path / "a.ts", "export {};\n")
    config = _write(
        tmp_path / "tsconfig.json",
        json.dumps(
            {
                "files": ["a.ts"],
                "compilerOptions": {"plugins": [{"name": "ts-lit-plugin"}]},
            }
        ),
    )
    program = program_from_tsconfig(config.as_posix())
    assert program.get_compiler_options().plugins == [{"name": "ts-lit-plugin"}]


def test_config_without_content_raises_known_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A read that yields no config and no error is still a known error."""
    config = _write(tmp_path / "tsconfig.json", "{}")
    monkeypatch.setattr(
        program_module, "read_config_file", lambda file_name, read_file: ConfigFileReadResult(None)
    )
    with pytest.raises(KnownError) as excinfo:
        program_from_tsconfig(config.as_posix())
    assert json.loads(excinfo.value.message)["code"] == 5083
