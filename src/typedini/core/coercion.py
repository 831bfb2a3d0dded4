"""Built-in coercions from preprocessed text to typed values."""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Dict, Tuple

from typedini.core.models import FieldType

Coercion = Callable[[str], Tuple[Any, bool]]

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_bool(s: str) -> Tuple[Any, bool]:
    # An empty value means the flag was given without a value.
    if s in ("true", ""):
        return True, True
    if s == "false":
        return False, True
    return False, False


def parse_string(s: str) -> Tuple[Any, bool]:
    return s, True


def parse_int64(s: str) -> Tuple[Any, bool]:
    if not _INT_RE.fullmatch(s):
        return 0, False
    v = int(s, 10)
    if not INT64_MIN <= v <= INT64_MAX:
        return 0, False
    return v, True


def parse_uint64(s: str) -> Tuple[Any, bool]:
    if not _UINT_RE.fullmatch(s):
        return 0, False
    v = int(s, 10)
    if v > UINT64_MAX:
        return 0, False
    return v, True


def parse_float64(s: str) -> Tuple[Any, bool]:
    if not _FLOAT_RE.fullmatch(s):
        return 0.0, False
    v = float(s)
    # out of float64 range
    if math.isinf(v):
        return 0.0, False
    return v, True


BUILTIN_COERCIONS: Dict[FieldType, Coercion] = {
    FieldType.STRING: parse_string,
    FieldType.BOOL: parse_bool,
    FieldType.INT64: parse_int64,
    FieldType.UINT64: parse_uint64,
    FieldType.FLOAT64: parse_float64,
    # list tags map to their element coercion
    FieldType.STRING_LIST: parse_string,
    FieldType.FLOAT64_LIST: parse_float64,
}

BUILTIN_DEFAULTS: Dict[FieldType, Any] = {
    FieldType.STRING: "",
    FieldType.BOOL: False,
    FieldType.INT64: 0,
    FieldType.UINT64: 0,
    FieldType.FLOAT64: 0.0,
    FieldType.STRING_LIST: (),
    FieldType.FLOAT64_LIST: (),
}


def default_fits_type(ty: FieldType, default: Any) -> bool:
    """
    Check that `default` has the runtime representation the built-in
    coercion for `ty` produces.
    """
    if ty == FieldType.BOOL:
        return isinstance(default, bool)
    if ty == FieldType.STRING:
        return isinstance(default, str)
    if ty == FieldType.INT64:
        return isinstance(default, int) and not isinstance(default, bool) and INT64_MIN <= default <= INT64_MAX
    if ty == FieldType.UINT64:
        return isinstance(default, int) and not isinstance(default, bool) and 0 <= default <= UINT64_MAX
    if ty == FieldType.FLOAT64:
        return isinstance(default, float)
    if ty == FieldType.STRING_LIST:
        return isinstance(default, (list, tuple)) and all(isinstance(x, str) for x in default)
    if ty == FieldType.FLOAT64_LIST:
        return isinstance(default, (list, tuple)) and all(isinstance(x, float) for x in default)
    return True


def choices_coercion(choices: Tuple[str, ...]) -> Coercion:
    """Coercion for a string field restricted to a fixed set of values."""
    allowed = frozenset(choices)

    def _coerce(s: str) -> Tuple[Any, bool]:
        return s, s in allowed

    return _coerce
