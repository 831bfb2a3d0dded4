from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from typedini.cli.ui.formatters import (
    ValueRow,
    effective_rows,
    render_parse_error,
    render_schema_table,
    render_values_table,
)

THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "muted": "dim",
        "path": "cyan",
        "section": "bold magenta",
        "default": "dim italic",
    }
)


@dataclass(frozen=True)
class UI:
    console: Console
    verbose: bool


def get_ui(*, verbose: bool = False, stderr: bool = False) -> UI:
    console = Console(theme=THEME, stderr=stderr, highlight=False)
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
            force=True,
        )
    return UI(console=console, verbose=verbose)


__all__ = [
    "THEME",
    "UI",
    "ValueRow",
    "effective_rows",
    "get_ui",
    "render_parse_error",
    "render_schema_table",
    "render_values_table",
]
