from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.markup import escape

from typedini.cli.ui import effective_rows, get_ui, render_parse_error, render_values_table
from typedini.cli.ui.formatters import rows_to_dict
from typedini.core.config import find_schema_file, load_parser
from typedini.core.errors import ExitCode, SchemaError
from typedini.parsers.errors import ParseError


def resolve_schema_path(schema: Optional[Path], start_dir: Path) -> Path:
    if schema is not None:
        return schema
    found = find_schema_file(start_dir)
    if found is None:
        raise SchemaError(
            f"No schema file found from {start_dir} upwards (looked for .typedini/schema.yaml|yml|toml); "
            "pass --schema or run `typedini init`."
        )
    return found


def _option_overrides(
    comment_char: Optional[str],
    quote_char: Optional[str],
    no_quotes: bool,
    expand_vars: Optional[bool],
) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if comment_char is not None:
        overrides["comment_char"] = comment_char
    if no_quotes:
        overrides["quote_char"] = None
    elif quote_char is not None:
        overrides["quote_char"] = quote_char
    if expand_vars is not None:
        overrides["expand_vars"] = bool(expand_vars)
    return overrides


def check_cmd(
    config: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Ini file to check."
    ),
    schema: Optional[Path] = typer.Option(
        None,
        "--schema",
        "-s",
        exists=True,
        dir_okay=False,
        help="Schema file (YAML or TOML). Defaults to the closest .typedini/schema.*",
    ),
    comment_char: Optional[str] = typer.Option(
        None, "--comment-char", help="Comment character (overrides the schema)."
    ),
    quote_char: Optional[str] = typer.Option(
        None, "--quote-char", help="Quote character (overrides the schema)."
    ),
    no_quotes: bool = typer.Option(False, "--no-quotes", help="Disable quote stripping."),
    expand_vars: Optional[bool] = typer.Option(
        None,
        "--expand-vars/--no-expand-vars",
        help="Expand $NAME and ${NAME} from the environment (overrides the schema if set).",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print effective values as JSON."),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output."),
) -> None:
    """Parse CONFIG against a schema and print the resulting values."""
    ui = get_ui(verbose=verbose)
    console = ui.console

    try:
        schema_path = resolve_schema_path(schema, config.resolve().parent)
        loaded = load_parser(
            schema_path,
            option_overrides=_option_overrides(comment_char, quote_char, no_quotes, expand_vars),
        )
    except SchemaError as e:
        console.print(f"[err]Schema error:[/err] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(code=int(ExitCode.ERROR))

    if ui.verbose:
        console.print(f"[bold]Schema:[/bold] [path]{loaded.path}[/path]")

    parser = loaded.parser
    try:
        store = parser.parse_file(config)
    except ParseError as e:
        render_parse_error(console, e, source_name=str(config), verbose=ui.verbose)
        raise typer.Exit(code=int(ExitCode.INVALID))
    except OSError as e:
        console.print(f"[err]Cannot read {config}:[/err] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(code=int(ExitCode.ERROR))

    rows = effective_rows(parser, store)
    if as_json:
        typer.echo(json.dumps(rows_to_dict(rows), indent=2, default=str))
    else:
        render_values_table(console, rows, title=str(config))
        console.print("[ok]OK[/ok]")

    raise typer.Exit(code=int(ExitCode.OK))
