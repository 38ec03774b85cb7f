from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer

from relcfg.cli.context import CLIContext
from relcfg.core.errors import ErrorCode
from relcfg.output.console import MockConsole

VALID_CONFIG: dict[str, object] = {
    "branches": ["main"],
    "plugins": [
        "@semantic-release/commit-analyzer",
        "@semantic-release/release-notes-generator",
        "@semantic-release/github",
    ],
}


def _use_context(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> MockConsole:
    import relcfg.cli.commands.validate as validate_cmd

    console = MockConsole()
    monkeypatch.setattr(
        validate_cmd, "build_context", lambda: CLIContext(cwd=tmp_path, console=console)
    )
    return console


def _write_config(tmp_path: Path, data: object, name: str = ".releaserc.json") -> None:
    (tmp_path / name).write_text(json.dumps(data), encoding="utf-8")


def test_validate_valid_config_reports_success(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import relcfg.cli.commands.validate as validate_cmd

    console = _use_context(monkeypatch, tmp_path)
    _write_config(tmp_path, VALID_CONFIG)

    validate_cmd.validate(config=None, strict=False, check_plugins=True, quiet=False, as_json=False)

    assert console.find("Configuration is VALID")
    assert console.find("SUMMARY")
    assert console.find("  Plugins: 3")
    assert not console.has_error()


def test_validate_invalid_config_exits_with_user_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import relcfg.cli.commands.validate as validate_cmd

    console = _use_context(monkeypatch, tmp_path)
    _write_config(tmp_path, {"branches": ["main"]}, name="custom.json")

    with pytest.raises(typer.Exit) as exc:
        validate_cmd.validate(
            config=Path("custom.json"), strict=False, check_plugins=True, quiet=False, as_json=False
        )

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert console.find("Configuration is INVALID")
    assert console.find("  1. No plugins specified")


def test_validate_strict_fails_on_warnings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relcfg.cli.commands.validate as validate_cmd

    _use_context(monkeypatch, tmp_path)
    _write_config(tmp_path, {"plugins": VALID_CONFIG["plugins"]})

    with pytest.raises(typer.Exit) as exc:
        validate_cmd.validate(config=None, strict=True, check_plugins=True, quiet=True, as_json=False)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_validate_missing_file_prints_usage(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relcfg.cli.commands.validate as validate_cmd

    console = _use_context(monkeypatch, tmp_path)

    with pytest.raises(typer.Exit) as exc:
        validate_cmd.validate(config=None, strict=False, check_plugins=True, quiet=False, as_json=False)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert console.find("error: Error loading configuration: Configuration file not found")
    assert console.find("usage: relcfg validate")


def test_validate_json_output(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    import relcfg.cli.commands.validate as validate_cmd

    console = _use_context(monkeypatch, tmp_path)
    _write_config(tmp_path, VALID_CONFIG)

    validate_cmd.validate(config=None, strict=False, check_plugins=True, quiet=True, as_json=True)

    assert console.outputs == []
    payload = json.loads(capsys.readouterr().out)
    assert payload["isValid"] is True
    assert payload["summary"]["pluginCount"] == 3
    assert payload["suggestions"] == []


def test_validate_default_config_skips_javascript(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import relcfg.cli.commands.validate as validate_cmd

    console = _use_context(monkeypatch, tmp_path)
    (tmp_path / "release.config.js").write_text("module.exports = {}\n", encoding="utf-8")
    _write_config(tmp_path, VALID_CONFIG)

    validate_cmd.validate(config=None, strict=False, check_plugins=True, quiet=False, as_json=False)

    assert console.find(f"Loading configuration from: {tmp_path / '.releaserc.json'}")
    assert console.find("Configuration is VALID")
    assert not console.find("cannot be evaluated")
