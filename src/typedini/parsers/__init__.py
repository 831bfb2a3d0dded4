from __future__ import annotations

from typedini.parsers.engine import Source, run_parse
from typedini.parsers.errors import ParseError, ParseErrorKind
from typedini.parsers.preprocess import EnvLookup, expand_vars, preprocess_value, strip_quotes

__all__ = [
    "EnvLookup",
    "ParseError",
    "ParseErrorKind",
    "Source",
    "expand_vars",
    "preprocess_value",
    "run_parse",
    "strip_quotes",
]
