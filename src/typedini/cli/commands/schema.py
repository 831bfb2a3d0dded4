from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from typedini.cli.commands.check import resolve_schema_path
from typedini.cli.ui import get_ui, render_schema_table
from typedini.core.config import load_parser
from typedini.core.errors import ExitCode, SchemaError


def schema_cmd(
    schema: Optional[Path] = typer.Option(
        None, "--schema", "-s", exists=True, dir_okay=False, help="Schema file (YAML or TOML)."
    ),
    path: Path = typer.Argument(
        Path("."), help="Directory to look for .typedini/schema.* from."
    ),
) -> None:
    """Show the sections and fields a schema declares."""
    ui = get_ui()
    try:
        loaded = load_parser(resolve_schema_path(schema, path.resolve()))
    except SchemaError as e:
        ui.console.print(f"[err]Schema error:[/err] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(code=int(ExitCode.ERROR))

    render_schema_table(ui.console, loaded.parser, title=str(loaded.path))
