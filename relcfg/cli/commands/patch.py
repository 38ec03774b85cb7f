from __future__ import annotations

from pathlib import Path

import typer

from relcfg.cli.commands._helpers import exit_on_error, exit_with_code
from relcfg.cli.context import build_context, resolve_path
from relcfg.core.errors import ErrorCode
from relcfg.core.structured import as_str_dict
from relcfg.output.console import Style
from relcfg.release.builder import is_update_version_plugin
from relcfg.release.loader import default_config_path, load_release_config
from relcfg.release.model import ReleaseConfig
from relcfg.release.patcher import prepare


def patch(
    release_version: str = typer.Option(
        ...,
        "--release-version",
        help="Version being released (e.g. ${nextRelease.version} from an exec prepare step).",
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Release config file."),
    project: Path = typer.Option(
        Path("."),
        "--project",
        "-p",
        help="Directory file paths are resolved against.",
    ),
) -> None:
    """Apply the config's update-version file rules for a release."""
    ctx = build_context()
    root = resolve_path(ctx, project)
    path = resolve_path(ctx, config) if config is not None else default_config_path(root)

    raw = exit_on_error(load_release_config(path), ctx, ErrorCode.USER_ERROR)
    data = as_str_dict(raw)
    if data is None:
        ctx.console.error(f"{path.name}: configuration must be an object")
        exit_with_code(ErrorCode.USER_ERROR)

    plugins = ReleaseConfig.from_dict(data).find_plugins(is_update_version_plugin)
    if not plugins:
        ctx.console.error(f"{path.name}: no update-version plugin configured")
        ctx.console.print("hint: add one with create_update_version_plugin()", Style.DIM)
        exit_with_code(ErrorCode.USER_ERROR)

    for plugin in plugins:
        exit_on_error(
            prepare(plugin.options or {}, version=release_version, cwd=root, console=ctx.console),
            ctx,
            ErrorCode.RELEASE_ERROR,
        )
