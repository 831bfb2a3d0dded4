from __future__ import annotations

import typer
from rich.console import Console

from typedini import __version__
from typedini.cli.commands.check import check_cmd
from typedini.cli.commands.init import init_cmd
from typedini.cli.commands.schema import schema_cmd

app = typer.Typer(
    name="typedini",
    help="Check ini files against a typed schema.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"typedini {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", callback=_version_callback
    ),
) -> None:
    pass


app.command("check")(check_cmd)
app.command("schema")(schema_cmd)
app.command("init")(init_cmd)
