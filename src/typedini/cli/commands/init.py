from __future__ import annotations

from pathlib import Path

import typer

from typedini.cli.utils.files import ensure_dir, write_file


DEFAULT_SCHEMA_YAML = """\
# typedini schema: the sections and fields an ini file may contain.
options:
  comment_char: "#"
  quote_char: '"'
  expand_vars: false

sections:
  global:
    verbose: {type: bool, default: false}

  user:
    name: {type: string}
    level: {type: uint64, default: 1}
    mode: {type: string, choices: [fast, slow]}
    factors: {type: float64-list}
"""


DEFAULT_EXAMPLE_INI = """\
# example input, check it with:
#   typedini check example.ini
[global]
verbose = true

[user]
name = "Frank"
level = 37
mode = slow
factors = [
  # initially easy
  10, 20,

  # but gradually much harder
  23.5, "38.25",
]
"""


def init_cmd(
    path: Path = typer.Argument(Path("."), help="Directory to initialize."),
    force: bool = typer.Option(False, "--force", help="Overwrite existing files."),
) -> None:
    """Write a starter .typedini/schema.yaml and a matching example.ini."""
    root = path.resolve()
    cfg_dir = root / ".typedini"
    ensure_dir(cfg_dir)

    for target, content in (
        (cfg_dir / "schema.yaml", DEFAULT_SCHEMA_YAML),
        (root / "example.ini", DEFAULT_EXAMPLE_INI),
    ):
        if write_file(target, content, force=force):
            typer.echo(f"Wrote {target}")
        else:
            typer.echo(f"Kept existing {target} (use --force to overwrite)")
