from __future__ import annotations

import typer

from relcfg import __version__
from relcfg.cli.commands.detect import detect
from relcfg.cli.commands.init_cmd import init
from relcfg.cli.commands.patch import patch
from relcfg.cli.commands.setup_workflow import setup_workflow_cmd
from relcfg.cli.commands.validate import validate


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


app.command()(validate)
app.command()(detect)
app.command("setup-workflow")(setup_workflow_cmd)
app.command()(init)
app.command()(patch)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def main() -> None:
    app()
