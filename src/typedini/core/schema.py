"""
Schema declaration and typed access to parse results.

    parser = Parser(comment_char=";")
    user = parser.add_section("user")
    name = user.add_string("name")
    level = user.add_uint64("level", default=1)

    store = parser.parse(open("user.ini", encoding="utf-8"))
    name.string_val(store), level.uint64_val(store)

Sections and fields are declared once, before the first parse. The first
parse seals the schema; declaring more sections or fields afterwards raises
SchemaError. Options (`parser.options`) stay changeable between parses.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from typedini.core.coercion import (
    BUILTIN_COERCIONS,
    BUILTIN_DEFAULTS,
    Coercion,
    default_fits_type,
)
from typedini.core.errors import FieldTypeError, SchemaError
from typedini.core.models import LIST_TYPES, FieldType, ParserOptions
from typedini.core.store import Store
from typedini.parsers.engine import Source, run_parse
from typedini.parsers.errors import ParseError
from typedini.parsers.lines import is_valid_name
from typedini.parsers.preprocess import EnvLookup

TypeTag = Union[FieldType, int]


def _check_type_tag(ty: TypeTag) -> TypeTag:
    if isinstance(ty, bool) or not isinstance(ty, int):
        raise SchemaError(f"Invalid type tag {ty!r}")
    if ty >= FieldType.USER:
        return ty
    try:
        return FieldType(ty)
    except ValueError:
        raise SchemaError(f"Invalid type tag {ty!r}") from None


class Parser:
    """A set of sections, plus the options used when parsing against them."""

    def __init__(
        self,
        *,
        comment_char: str = "#",
        quote_char: Optional[str] = '"',
        expand_vars: bool = False,
    ) -> None:
        self.options = ParserOptions(
            comment_char=comment_char, quote_char=quote_char, expand_vars=expand_vars
        )
        self._sections: Dict[str, Section] = {}
        self._sealed = False
        self._lock = threading.Lock()

    @property
    def sealed(self) -> bool:
        return self._sealed

    def _check_mutable(self) -> None:
        if self._sealed:
            raise SchemaError("Schema is sealed: sections and fields must be added before the first parse")

    def add_section(self, name: str) -> "Section":
        if not is_valid_name(name):
            raise SchemaError(f"Invalid section name {name!r}")
        with self._lock:
            self._check_mutable()
            if name in self._sections:
                raise SchemaError(f"Duplicated section name {name}")
            s = Section(self, name)
            self._sections[name] = s
        return s

    def section(self, name: str) -> Optional["Section"]:
        return self._sections.get(name)

    def sections(self) -> List["Section"]:
        return list(self._sections.values())

    # ----------------------------
    # Parsing
    # ----------------------------

    def parse(self, source: Source, *, lookup: Optional[EnvLookup] = None) -> Store:
        """
        Parse `source` into a Store.

        `source` is the document text, an open text stream, or any iterable
        of lines. `lookup` resolves variable names when `expand_vars` is on
        and defaults to the process environment.

        Raises ParseError for malformed input.
        """
        with self._lock:
            self._sealed = True
        # Snapshot so option changes during a parse don't affect it.
        options = self.options.model_copy()
        return run_parse(self, source, options=options, lookup=lookup)

    def try_parse(
        self, source: Source, *, lookup: Optional[EnvLookup] = None
    ) -> Union[Store, ParseError]:
        """Like parse(), but returns the ParseError instead of raising it."""
        try:
            return self.parse(source, lookup=lookup)
        except ParseError as e:
            return e

    def parse_file(self, path: Union[str, Path], *, lookup: Optional[EnvLookup] = None) -> Store:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return self.parse(f, lookup=lookup)


class Section:
    """A named group of fields. Created by Parser.add_section()."""

    def __init__(self, parser: Parser, name: str) -> None:
        self._parser = parser
        self._name = name
        self._fields: Dict[str, Field] = {}

    @property
    def name(self) -> str:
        return self._name

    def field(self, name: str) -> Optional["Field"]:
        return self._fields.get(name)

    def fields(self) -> List["Field"]:
        return list(self._fields.values())

    def present(self, store: Store) -> bool:
        return store.is_section_present(self._name)

    def _add_field(
        self,
        name: str,
        ty: TypeTag,
        default: Any,
        coerce: Coercion,
        *,
        is_list: bool,
    ) -> "Field":
        if not is_valid_name(name):
            raise SchemaError(f"Invalid field name {name!r}")
        if not callable(coerce):
            raise SchemaError(f"Coercion for field {name} is not callable")
        if isinstance(ty, FieldType) and ty != FieldType.USER and not default_fits_type(ty, default):
            raise SchemaError(
                f"Default {default!r} for field {name} in section {self._name} "
                f"does not fit type {ty.name.lower()}"
            )
        if is_list:
            default = tuple(default)
        with self._parser._lock:
            self._parser._check_mutable()
            if name in self._fields:
                raise SchemaError(f"Duplicated field name {name} in section {self._name}")
            f = Field(self, name, ty, default, coerce, is_list=is_list)
            self._fields[name] = f
        return f

    def _add_builtin(self, name: str, ty: FieldType, default: Any) -> "Field":
        if default is None:
            default = BUILTIN_DEFAULTS[ty]
        return self._add_field(
            name, ty, default, BUILTIN_COERCIONS[ty], is_list=ty in LIST_TYPES
        )

    def add_bool(self, name: str, default: Optional[bool] = None) -> "Field":
        """A boolean field. `true` and the empty value mean True, `false` means False."""
        return self._add_builtin(name, FieldType.BOOL, default)

    def add_string(self, name: str, default: Optional[str] = None) -> "Field":
        return self._add_builtin(name, FieldType.STRING, default)

    def add_int64(self, name: str, default: Optional[int] = None) -> "Field":
        return self._add_builtin(name, FieldType.INT64, default)

    def add_uint64(self, name: str, default: Optional[int] = None) -> "Field":
        return self._add_builtin(name, FieldType.UINT64, default)

    def add_float64(self, name: str, default: Optional[float] = None) -> "Field":
        return self._add_builtin(name, FieldType.FLOAT64, default)

    def add_string_list(self, name: str, default: Optional[Tuple[str, ...]] = None) -> "Field":
        return self._add_builtin(name, FieldType.STRING_LIST, default)

    def add_float64_list(self, name: str, default: Optional[Tuple[float, ...]] = None) -> "Field":
        return self._add_builtin(name, FieldType.FLOAT64_LIST, default)

    def add(self, name: str, ty: TypeTag, default: Any, coerce: Coercion) -> "Field":
        """
        Add a field with a caller supplied coercion.

        `ty` is either a built-in scalar tag (to replace its coercion or
        default) or any integer >= FieldType.USER, which the parser does not
        interpret. `coerce` takes the preprocessed text and returns
        `(value, is_valid)`.
        """
        ty = _check_type_tag(ty)
        if ty in LIST_TYPES:
            raise SchemaError(f"Use add_list() for list type {FieldType(ty).name.lower()}")
        return self._add_field(name, ty, default, coerce, is_list=False)

    def add_list(self, name: str, ty: TypeTag, default: Any, coerce: Coercion) -> "Field":
        """
        Add a list field. `coerce` converts one element; values accumulate
        across assignments and bracketed literals.
        """
        ty = _check_type_tag(ty)
        if ty < FieldType.USER and ty not in LIST_TYPES:
            raise SchemaError(f"Type {FieldType(ty).name.lower()} is not a list type")
        if not isinstance(default, (list, tuple)):
            raise SchemaError(f"Default for list field {name} must be a list or tuple")
        return self._add_field(name, ty, default, coerce, is_list=True)


class Field:
    """
    A field of a Section. Also the accessor for that field's value in a
    Store produced by the owning Parser.
    """

    def __init__(
        self,
        section: Section,
        name: str,
        ty: TypeTag,
        default: Any,
        coerce: Coercion,
        *,
        is_list: bool,
    ) -> None:
        self._section = section
        self._name = name
        self._ty = ty
        self._default = default
        self._coerce = coerce
        self._is_list = is_list

    def __repr__(self) -> str:
        return f"Field({self._section.name}.{self._name}, type={self.type_name})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def section(self) -> Section:
        return self._section

    @property
    def type(self) -> TypeTag:
        return self._ty

    @property
    def type_name(self) -> str:
        if isinstance(self._ty, FieldType):
            return self._ty.name.lower().replace("_", "-")
        return f"user:{int(self._ty)}"

    @property
    def default(self) -> Any:
        return self._default

    @property
    def is_list(self) -> bool:
        return self._is_list

    def coerce(self, text: str) -> Tuple[Any, bool]:
        return self._coerce(text)

    # ----------------------------
    # Store access
    # ----------------------------

    def present(self, store: Store) -> bool:
        return store.has_value(self._section.name, self._name)

    def value(self, store: Store) -> Tuple[Any, bool]:
        """Return `(value, True)` if the field was set, else `(None, False)`."""
        if store.has_value(self._section.name, self._name):
            return store.get_value(self._section.name, self._name), True
        return None, False

    def _typed(self, store: Store, ty: FieldType, label: str) -> Any:
        if self._ty != ty:
            raise FieldTypeError(f"{label} accessor on {self.type_name} field {self._name}")
        v, found = self.value(store)
        return v if found else self._default

    def bool_val(self, store: Store) -> bool:
        return self._typed(store, FieldType.BOOL, "Bool")

    def string_val(self, store: Store) -> str:
        return self._typed(store, FieldType.STRING, "String")

    def int64_val(self, store: Store) -> int:
        return self._typed(store, FieldType.INT64, "Int64")

    def uint64_val(self, store: Store) -> int:
        return self._typed(store, FieldType.UINT64, "Uint64")

    def float64_val(self, store: Store) -> float:
        return self._typed(store, FieldType.FLOAT64, "Float64")

    def string_list_val(self, store: Store) -> List[str]:
        return list(self._typed(store, FieldType.STRING_LIST, "String list"))

    def float64_list_val(self, store: Store) -> List[float]:
        return list(self._typed(store, FieldType.FLOAT64_LIST, "Float64 list"))

    def user_val(self, store: Store) -> Any:
        """Value of a field with a user type tag, or its default."""
        if isinstance(self._ty, FieldType) and self._ty != FieldType.USER:
            raise FieldTypeError(f"User accessor on {self.type_name} field {self._name}")
        v, found = self.value(store)
        if not found:
            v = self._default
        return list(v) if self._is_list else v
