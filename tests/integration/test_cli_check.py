"""CLI tests for the check, schema and init commands."""

import json
from pathlib import Path

from pytest import MonkeyPatch
from typer.testing import CliRunner

from typedini import __version__
from typedini.cli.app import app
from typedini.core.errors import ExitCode

SCHEMA_YAML = """\
sections:
  sect:
    x: {type: int64, default: 7}
    s: {type: string}
    factors: {type: float64-list}
  other:
    flag: {type: bool}
"""


def _setup(tmp_path: Path, ini_text: str) -> Path:
    (tmp_path / "schema.yaml").write_text(SCHEMA_YAML, encoding="utf-8")
    ini = tmp_path / "cfg.ini"
    ini.write_text(ini_text, encoding="utf-8")
    return ini


def _check(*args: str):
    return CliRunner().invoke(app, ["check", *args])


def test_check_prints_effective_values_as_json(tmp_path: Path) -> None:
    """Check should print parsed values and defaults for every declared field."""

    ini = _setup(tmp_path, '[sect]\ns = "hi"\nfactors = [\n10, 20,\n\n23.5, "12.75"\n]\n')

    result = _check(str(ini), "--schema", str(tmp_path / "schema.yaml"), "--json")

    assert result.exit_code == int(ExitCode.OK)
    assert json.loads(result.output) == {
        "sect": {"x": 7, "s": "hi", "factors": [10.0, 20.0, 23.5, 12.75]},
        "other": {"flag": False},
    }


def test_check_renders_table(tmp_path: Path) -> None:
    """Without --json check should render a table and report OK."""

    ini = _setup(tmp_path, "[sect]\nx = 3\n")

    result = _check(str(ini), "--schema", str(tmp_path / "schema.yaml"))

    assert result.exit_code == int(ExitCode.OK)
    assert "Section" in result.output
    assert "OK" in result.output


def test_check_reports_parse_error_with_line(tmp_path: Path) -> None:
    """A parse error should print file and line, and exit with INVALID."""

    ini = _setup(tmp_path, "x = 1\n[sect]\n")

    result = _check(str(ini), "--schema", str(tmp_path / "schema.yaml"))

    assert result.exit_code == int(ExitCode.INVALID)
    assert f"{ini}:1:" in result.output
    assert "setting outside section: x" in result.output


def test_check_without_schema_fails(tmp_path: Path) -> None:
    """Check should exit with ERROR when no schema can be found."""

    ini = tmp_path / "cfg.ini"
    ini.write_text("[sect]\n", encoding="utf-8")

    result = _check(str(ini))

    assert result.exit_code == int(ExitCode.ERROR)
    assert "No schema file found" in result.output


def test_check_no_quotes_override(tmp_path: Path) -> None:
    """--no-quotes should keep quotes as part of the value."""

    ini = _setup(tmp_path, '[sect]\ns = "hi"\n')

    result = _check(str(ini), "--schema", str(tmp_path / "schema.yaml"), "--no-quotes", "--json")

    assert result.exit_code == int(ExitCode.OK)
    assert json.loads(result.output)["sect"]["s"] == '"hi"'


def test_check_comment_char_override(tmp_path: Path) -> None:
    """--comment-char should replace the schema's comment character."""

    ini = _setup(tmp_path, "; comment\n[sect]\nx = 4\n")

    result = _check(str(ini), "--schema", str(tmp_path / "schema.yaml"), "--comment-char", ";", "--json")

    assert result.exit_code == int(ExitCode.OK)
    assert json.loads(result.output)["sect"]["x"] == 4


def test_check_invalid_option_is_a_schema_error(tmp_path: Path) -> None:
    """An unusable comment char should fail with ERROR, not a traceback."""

    ini = _setup(tmp_path, "[sect]\n")

    result = _check(str(ini), "--schema", str(tmp_path / "schema.yaml"), "--comment-char", "##")

    assert result.exit_code == int(ExitCode.ERROR)
    assert "Schema error" in result.output


def test_check_expand_vars(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    """--expand-vars should resolve variables from the environment."""

    monkeypatch.setenv("TYPEDINI_CLI_X", "42")
    ini = _setup(tmp_path, "[sect]\nx = $TYPEDINI_CLI_X\n")

    result = _check(str(ini), "--schema", str(tmp_path / "schema.yaml"), "--expand-vars", "--json")

    assert result.exit_code == int(ExitCode.OK)
    assert json.loads(result.output)["sect"]["x"] == 42


def test_init_then_check_example(tmp_path: Path) -> None:
    """The files written by init should pass check using schema discovery."""

    runner = CliRunner()

    init = runner.invoke(app, ["init", str(tmp_path)])
    result = runner.invoke(app, ["check", str(tmp_path / "example.ini"), "--json"])

    assert init.exit_code == 0
    assert (tmp_path / ".typedini" / "schema.yaml").is_file()
    assert result.exit_code == int(ExitCode.OK)
    assert json.loads(result.output) == {
        "global": {"verbose": True},
        "user": {
            "name": "Frank",
            "level": 37,
            "mode": "slow",
            "factors": [10.0, 20.0, 23.5, 38.25],
        },
    }


def test_init_keeps_existing_files(tmp_path: Path) -> None:
    """init should not overwrite files unless --force is given."""

    runner = CliRunner()
    schema = tmp_path / ".typedini" / "schema.yaml"
    schema.parent.mkdir()
    schema.write_text("sections: {}\n", encoding="utf-8")

    kept = runner.invoke(app, ["init", str(tmp_path)])
    assert schema.read_text(encoding="utf-8") == "sections: {}\n"
    assert "Kept existing" in kept.output

    runner.invoke(app, ["init", str(tmp_path), "--force"])
    assert "sections:" in schema.read_text(encoding="utf-8")
    assert schema.read_text(encoding="utf-8") != "sections: {}\n"


def test_schema_command_lists_fields(tmp_path: Path) -> None:
    """The schema command should list declared sections and fields."""

    _setup(tmp_path, "")

    result = CliRunner().invoke(app, ["schema", "--schema", str(tmp_path / "schema.yaml")])

    assert result.exit_code == 0
    assert "factors" in result.output
    assert "float64-list" in result.output


def test_version() -> None:
    """--version should print the package version."""

    result = CliRunner().invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output
