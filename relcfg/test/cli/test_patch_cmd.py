from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer

from relcfg.cli.context import CLIContext
from relcfg.core.errors import ErrorCode
from relcfg.output.console import MockConsole
from relcfg.release.config import UPDATE_VERSION_PLUGIN


def _use_context(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> MockConsole:
    import relcfg.cli.commands.patch as patch_cmd

    console = MockConsole()
    monkeypatch.setattr(patch_cmd, "build_context", lambda: CLIContext(cwd=tmp_path, console=console))
    return console


def _write_config(tmp_path: Path, files: list[object]) -> None:
    config = {
        "branches": ["main"],
        "plugins": [
            "@semantic-release/commit-analyzer",
            [UPDATE_VERSION_PLUGIN, {"files": files}],
        ],
    }
    (tmp_path / ".releaserc.json").write_text(json.dumps(config), encoding="utf-8")


def test_patch_updates_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relcfg.cli.commands.patch as patch_cmd

    console = _use_context(monkeypatch, tmp_path)
    (tmp_path / "VERSION").write_text("0.0.0\n", encoding="utf-8")
    _write_config(tmp_path, [{"path": "VERSION", "pattern": r"\d+\.\d+\.\d+", "replacement": "{version}"}])

    patch_cmd.patch(release_version="2.1.0", config=None, project=Path("."))

    assert (tmp_path / "VERSION").read_text(encoding="utf-8") == "2.1.0\n"
    assert console.find("Version update completed")


def test_patch_failure_exits_with_release_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relcfg.cli.commands.patch as patch_cmd

    console = _use_context(monkeypatch, tmp_path)
    (tmp_path / "VERSION").write_text("dev\n", encoding="utf-8")
    _write_config(tmp_path, [{"path": "VERSION", "pattern": r"\d+\.\d+\.\d+", "replacement": "{version}"}])

    with pytest.raises(typer.Exit) as exc:
        patch_cmd.patch(release_version="2.1.0", config=None, project=Path("."))

    assert exc.value.exit_code == int(ErrorCode.RELEASE_ERROR)
    assert (tmp_path / "VERSION").read_text(encoding="utf-8") == "dev\n"
    assert console.has_error()


def test_patch_without_plugin(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relcfg.cli.commands.patch as patch_cmd

    console = _use_context(monkeypatch, tmp_path)
    config = {"branches": ["main"], "plugins": ["@semantic-release/commit-analyzer"]}
    (tmp_path / "release.json").write_text(json.dumps(config), encoding="utf-8")

    with pytest.raises(typer.Exit) as exc:
        patch_cmd.patch(release_version="2.1.0", config=Path("release.json"), project=Path("."))

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert console.find("no update-version plugin configured")


def test_patch_missing_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relcfg.cli.commands.patch as patch_cmd

    console = _use_context(monkeypatch, tmp_path)

    with pytest.raises(typer.Exit) as exc:
        patch_cmd.patch(release_version="2.1.0", config=None, project=Path("."))

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert console.find("Configuration file not found")
