from __future__ import annotations

from pathlib import Path

import typer

from relcfg.cli.commands._helpers import exit_with_code
from relcfg.cli.context import build_context, resolve_path
from relcfg.core.errors import ErrorCode
from relcfg.output.console import Style
from relcfg.platform.files import atomic_write_text
from relcfg.release.builder import build_release_config, dump_release_config
from relcfg.release.config import DEFAULT_RELEASE_CONFIG_FILE


def init(
    project: Path = typer.Option(Path("."), "--project", "-p", help="Project directory."),
    npm_publish: bool = typer.Option(False, "--npm-publish", help="Publish the package to npm."),
    branch: list[str] | None = typer.Option(
        None,
        "--branch",
        "-b",
        help="Release branch (repeatable). Default: main plus a beta prerelease branch.",
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file."),
) -> None:
    """Write a default .releaserc.json."""
    ctx = build_context()
    path = resolve_path(ctx, project) / DEFAULT_RELEASE_CONFIG_FILE

    if path.exists() and not force:
        ctx.console.error(f"{path.name} already exists")
        ctx.console.print("hint: pass --force to overwrite it", Style.DIM)
        exit_with_code(ErrorCode.USER_ERROR)

    config = build_release_config(branches=branch or None, npm_publish=npm_publish)
    try:
        atomic_write_text(path, dump_release_config(config))
    except OSError as e:
        ctx.console.error(f"failed to write {path.name}: {e}")
        exit_with_code(ErrorCode.IO_ERROR)

    ctx.console.success(f"Created {path}")
    ctx.console.print("next: relcfg validate && relcfg setup-workflow", Style.DIM)
