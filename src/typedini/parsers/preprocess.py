from __future__ import annotations

import os
import re
from typing import Callable, Optional

from typedini.core.models import ParserOptions

EnvLookup = Callable[[str], Optional[str]]

# $$, ${anything but a closing brace}, $NAME
_VAR_RE = re.compile(r"\$(?:(\$)|\{([^}]*)\}|([A-Za-z0-9_]+))")


def environ_lookup(name: str) -> Optional[str]:
    return os.environ.get(name)


def expand_vars(text: str, lookup: EnvLookup = environ_lookup) -> str:
    """
    Expand $NAME and ${NAME} from `lookup`, and $$ to a literal $.

    Unbound names expand to nothing. Single pass: the expansion of a
    variable is never expanded again. A `$` that starts none of the
    forms above is kept as is.
    """

    def _sub(m: "re.Match[str]") -> str:
        if m.group(1) is not None:
            return "$"
        name = m.group(2) if m.group(2) is not None else m.group(3)
        return lookup(name) or ""

    return _VAR_RE.sub(_sub, text)


def strip_quotes(text: str, quote_char: Optional[str]) -> str:
    if not quote_char:
        return text
    if len(text) >= 2 and text[0] == quote_char and text[-1] == quote_char:
        return text[1:-1]
    return text


def preprocess_value(
    raw: str,
    options: ParserOptions,
    lookup: EnvLookup = environ_lookup,
) -> str:
    """Expand variables, then trim, then strip one pair of matching quotes."""
    text = raw
    if options.expand_vars:
        text = expand_vars(text, lookup)
    text = text.strip()
    return strip_quotes(text, options.quote_char)
