from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    OK = 0
    INVALID = 1
    ERROR = 2


class TypedIniError(Exception):
    """Base class for every error raised by typedini."""


class SchemaError(TypedIniError, ValueError):
    """
    A defect in how the schema was declared: bad or duplicate names,
    unknown type tags, defaults that don't fit the type, or registration
    after the schema was sealed by a parse.
    """


class FieldTypeError(TypedIniError, TypeError):
    """A typed accessor was used on a field of a different type."""
