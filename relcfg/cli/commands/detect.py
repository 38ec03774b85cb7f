from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

import typer

from relcfg.cli.context import CLIContext, build_context, resolve_path
from relcfg.output.console import Style
from relcfg.release.detector import detect_user_configuration
from relcfg.release.model import DetectedConfig


def print_detected(ctx: CLIContext, detected: DetectedConfig) -> None:
    console = ctx.console
    console.header("Detected configuration")
    console.print(f"  Branches: {', '.join(detected.branches)}")
    console.print(f"  Node.js version: {detected.node_version}")
    console.print(f"  Run tests: {'yes' if detected.run_tests else 'no'}")
    if detected.test_command:
        console.print(f"  Test command: {detected.test_command}")
    if detected.build_command:
        console.print(f"  Build command: {detected.build_command}")
    if detected.additional_scripts:
        console.print(f"  Additional scripts: {', '.join(detected.additional_scripts)}")
    console.print(f"  NPM package: {'yes' if detected.is_npm_package else 'no'}")


def detect(
    project: Path = typer.Option(Path("."), "--project", "-p", help="Project directory."),
    as_json: bool = typer.Option(False, "--json", help="Print the detected settings as JSON."),
) -> None:
    """Show the release settings inferred from the project's files."""
    ctx = build_context()
    root = resolve_path(ctx, project)
    if not as_json:
        ctx.console.print(f"project: {root}", Style.DIM)

    detected = detect_user_configuration(root, console=ctx.console)
    if as_json:
        typer.echo(json.dumps(asdict(detected), indent=2))
        return
    print_detected(ctx, detected)
