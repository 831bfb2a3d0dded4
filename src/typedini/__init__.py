"""
Schema-driven parser for sectioned, typed ini files.

Declare the sections and fields you accept, then parse:

    parser = Parser()
    user = parser.add_section("user")
    factors = user.add_float64_list("factors")

    store = parser.parse('''
    [user]
    factors = [10, 20, "12.75"]
    ''')
    factors.float64_list_val(store)  # [10.0, 20.0, 12.75]
"""

from typedini.core.coercion import (
    parse_bool,
    parse_float64,
    parse_int64,
    parse_string,
    parse_uint64,
)
from typedini.core.errors import FieldTypeError, SchemaError, TypedIniError
from typedini.core.models import FieldType, ParserOptions
from typedini.core.schema import Field, Parser, Section
from typedini.core.store import Store
from typedini.parsers.errors import ParseError, ParseErrorKind

__version__ = "0.1.0"

__all__ = [
    "Field",
    "FieldType",
    "FieldTypeError",
    "ParseError",
    "ParseErrorKind",
    "Parser",
    "ParserOptions",
    "SchemaError",
    "Section",
    "Store",
    "TypedIniError",
    "parse_bool",
    "parse_float64",
    "parse_int64",
    "parse_string",
    "parse_uint64",
]
