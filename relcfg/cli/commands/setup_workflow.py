from __future__ import annotations

from pathlib import Path

import typer

from relcfg.cli.commands._helpers import exit_on_error
from relcfg.cli.commands.detect import print_detected
from relcfg.cli.context import build_context, resolve_path
from relcfg.core.errors import ErrorCode
from relcfg.output.console import Style
from relcfg.release.config import DEFAULT_WORKFLOW_NAME
from relcfg.release.detector import detect_user_configuration
from relcfg.release.workflow import create_smart_workflow, setup_workflow


def setup_workflow_cmd(
    project: Path = typer.Option(Path("."), "--project", "-p", help="Project directory."),
    name: str = typer.Option(DEFAULT_WORKFLOW_NAME, "--name", help="Workflow name."),
    stdout: bool = typer.Option(False, "--stdout", help="Print the workflow instead of writing it."),
) -> None:
    """Generate the GitHub Actions release workflow from the project's settings."""
    ctx = build_context()
    root = resolve_path(ctx, project)
    overrides: dict[str, object] = {"name": name}

    if stdout:
        typer.echo(create_smart_workflow(root, console=ctx.console, overrides=overrides), nl=False)
        return

    ctx.console.print("Analyzing project configuration...", Style.DIM)
    print_detected(ctx, detect_user_configuration(root, console=ctx.console))
    ctx.console.newline()

    path = exit_on_error(
        setup_workflow(root, console=ctx.console, overrides=overrides),
        ctx,
        ErrorCode.IO_ERROR,
    )

    ctx.console.header("Next steps")
    ctx.console.print("  1. Commit and push the workflow")
    ctx.console.print('  2. Give GitHub Actions "Read and write permissions" in the repository settings')
    ctx.console.print("  3. Push a conventional commit (feat:, fix:, ...) to trigger a release")
    ctx.console.print(f"workflow: {path}", Style.DIM)
