from __future__ import annotations

import json
from pathlib import Path

import typer

from relcfg.cli.commands._helpers import exit_with_code
from relcfg.cli.context import CLIContext, build_context, resolve_path
from relcfg.core.errors import ErrorCode
from relcfg.core.result import Err
from relcfg.output.console import Style
from relcfg.release.config import DEFAULT_RELEASE_CONFIG_FILE
from relcfg.release.loader import default_config_path
from relcfg.release.model import ValidationOptions, ValidationResult
from relcfg.release.validator import validate_config_file


def validate(
    config: Path | None = typer.Argument(
        None,
        help="Release config file (default: first conventional config in the current directory).",
    ),
    strict: bool = typer.Option(False, "--strict", help="Treat warnings as failures."),
    check_plugins: bool = typer.Option(
        True,
        "--check-plugins/--no-check-plugins",
        help="Check recommended plugins and dry-run file-patch rules.",
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Omit explanatory suggestions."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """Validate a semantic-release configuration."""
    ctx = build_context()
    path = resolve_path(ctx, config) if config is not None else default_config_path(ctx.cwd)

    if not as_json:
        ctx.console.header("Semantic Release Configuration Validator")
        ctx.console.print(f"Loading configuration from: {path}", Style.DIM)

    options = ValidationOptions(strict=strict, check_plugins=check_plugins, verbose=not quiet)
    loaded = validate_config_file(path, options=options, cwd=ctx.cwd)
    if isinstance(loaded, Err):
        ctx.console.error(f"Error loading configuration: {loaded.error.message}")
        if loaded.error.hint:
            ctx.console.print(f"hint: {loaded.error.hint}", Style.DIM)
        if not path.exists():
            ctx.console.print(
                f"usage: relcfg validate [CONFIG]  (e.g. relcfg validate ./{DEFAULT_RELEASE_CONFIG_FILE})",
                Style.WARNING,
            )
        exit_with_code(ErrorCode.USER_ERROR)
    result = loaded.value

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_report(ctx, result)

    if not result.is_valid:
        exit_with_code(ErrorCode.USER_ERROR)


def _print_section(ctx: CLIContext, title: str, items: list[str], style: Style) -> None:
    if not items:
        return
    ctx.console.header(title)
    for n, item in enumerate(items, start=1):
        ctx.console.print(f"  {n}. {item}", style)


def _mark(flag: bool) -> str:
    return "yes" if flag else "no"


def print_report(ctx: CLIContext, result: ValidationResult) -> None:
    console = ctx.console
    if result.is_valid:
        console.success("Configuration is VALID")
    else:
        console.error("Configuration is INVALID")

    _print_section(ctx, "ERRORS", result.errors, Style.ERROR)
    _print_section(ctx, "WARNINGS", result.warnings, Style.WARNING)
    _print_section(ctx, "SUGGESTIONS", result.suggestions, Style.INFO)

    summary = result.summary
    console.header("SUMMARY")
    console.print(f"  Valid structure: {_mark(summary.has_valid_structure)}")
    console.print(f"  Branches: {summary.branch_count}")
    console.print(f"  Plugins: {summary.plugin_count}")
    console.print(f"  NPM plugin: {_mark(summary.has_npm_plugin)}")
    console.print(f"  Git plugin: {_mark(summary.has_git_plugin)}")
    console.print(f"  GitHub plugin: {_mark(summary.has_github_plugin)}")
    if summary.file_rule_count:
        console.print(
            f"  File rules: {summary.file_rule_count} ({summary.replacement_count} replacements simulated)"
        )

    console.newline()
    if result.is_valid:
        console.success("Configuration validation completed successfully")
    else:
        console.print("Please fix the errors above and try again.", Style.WARNING)
