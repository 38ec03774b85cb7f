from __future__ import annotations

from pathlib import Path

import pytest
import typer

from relcfg.cli.context import CLIContext
from relcfg.core.errors import ErrorCode
from relcfg.output.console import MockConsole


def _use_context(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> MockConsole:
    import relcfg.cli.commands.setup_workflow as setup_cmd

    console = MockConsole()
    monkeypatch.setattr(setup_cmd, "build_context", lambda: CLIContext(cwd=tmp_path, console=console))
    return console


def test_setup_workflow_writes_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relcfg.cli.commands.setup_workflow as setup_cmd

    console = _use_context(monkeypatch, tmp_path)

    setup_cmd.setup_workflow_cmd(project=Path("."), name="Publish", stdout=False)

    path = tmp_path / ".github" / "workflows" / "release.yml"
    assert path.read_text(encoding="utf-8").startswith("name: Publish\n")
    assert console.find("OK Created .github/workflows/release.yml")
    assert console.find("Next steps")


def test_setup_workflow_stdout_does_not_write(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    import relcfg.cli.commands.setup_workflow as setup_cmd

    console = _use_context(monkeypatch, tmp_path)

    setup_cmd.setup_workflow_cmd(project=Path("."), name="Release", stdout=True)

    assert not (tmp_path / ".github").exists()
    assert console.outputs == []
    out = capsys.readouterr().out
    assert out.startswith("name: Release\n")
    assert out.endswith("GITHUB_TOKEN }}\n")


def test_setup_workflow_write_failure_exits_with_io_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import relcfg.cli.commands.setup_workflow as setup_cmd
    import relcfg.release.workflow as workflow

    console = _use_context(monkeypatch, tmp_path)

    def fail_write(_path: Path, _content: str) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(workflow, "atomic_write_text", fail_write)

    with pytest.raises(typer.Exit) as exc:
        setup_cmd.setup_workflow_cmd(project=Path("."), name="Release", stdout=False)

    assert exc.value.exit_code == int(ErrorCode.IO_ERROR)
    assert console.find("disk full")
