from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from typedini.core.schema import Parser
from typedini.core.store import Store
from typedini.parsers.errors import ParseError


def _short(s: str, max_len: int = 120) -> str:
    s = s or ""
    if len(s) <= max_len:
        return s
    return s[:max_len] + "…"


def format_value(v: Any) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, (list, tuple)):
        return "[" + ", ".join(format_value(x) for x in v) + "]"
    if isinstance(v, str):
        return repr(v)
    return str(v)


# ----------------------------
# Effective values
# ----------------------------

@dataclass(frozen=True)
class ValueRow:
    section: str
    field: str
    type_name: str
    value: Any
    is_set: bool
    section_present: bool


def effective_rows(parser: Parser, store: Store) -> List[ValueRow]:
    """
    One row per declared field, in declaration order, with the parsed
    value when set and the declared default otherwise.
    """
    rows: List[ValueRow] = []
    for section in parser.sections():
        present = section.present(store)
        for field in section.fields():
            v, found = field.value(store)
            if not found:
                v = field.default
            if field.is_list:
                v = list(v)
            rows.append(
                ValueRow(
                    section=section.name,
                    field=field.name,
                    type_name=field.type_name,
                    value=v,
                    is_set=found,
                    section_present=present,
                )
            )
    return rows


def rows_to_dict(rows: List[ValueRow]) -> Dict[str, Dict[str, Any]]:
    out: Dict[str, Dict[str, Any]] = {}
    for r in rows:
        out.setdefault(r.section, {})[r.field] = r.value
    return out


# ----------------------------
# Tables
# ----------------------------

def render_values_table(
    console: Console,
    rows: List[ValueRow],
    *,
    title: Optional[str] = None,
) -> None:
    table = Table(title=title or "Values", show_lines=False)
    table.add_column("Section", style="section", no_wrap=True)
    table.add_column("Field", style="bold", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Value")
    table.add_column("Source", no_wrap=True)

    for r in rows:
        source = Text("set", style="ok") if r.is_set else Text("default", style="default")
        section = r.section if r.section_present else f"{r.section} (absent)"
        table.add_row(section, r.field, r.type_name, Text(_short(format_value(r.value))), source)

    console.print(table)


def render_schema_table(console: Console, parser: Parser, *, title: str = "Schema") -> None:
    table = Table(title=title, show_lines=False)
    table.add_column("Section", style="section", no_wrap=True)
    table.add_column("Field", style="bold", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Default")

    for section in parser.sections():
        fields = section.fields()
        if not fields:
            table.add_row(section.name, "-", "-", "-")
        for field in fields:
            table.add_row(section.name, field.name, field.type_name, Text(_short(format_value(field.default))))

    console.print(table)
    opts = parser.options
    console.print(
        f"[muted]comment_char={opts.comment_char!r} quote_char={opts.quote_char!r} "
        f"expand_vars={opts.expand_vars}[/muted]"
    )


# ----------------------------
# Errors
# ----------------------------

def render_parse_error(
    console: Console,
    err: ParseError,
    *,
    source_name: str,
    verbose: bool = False,
) -> None:
    msg = Text()
    msg.append(f"{source_name}:{err.line}: ", style="path")
    msg.append(err.irritant, style="err")
    if err.section:
        msg.append(f" [section {err.section}]", style="muted")
    console.print(msg, soft_wrap=True)
    if verbose:
        console.print(f"[muted]kind: {err.kind.value}[/muted]")
