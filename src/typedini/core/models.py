from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ================================
# Type tags
# ================================


class FieldType(IntEnum):
    STRING = 1
    BOOL = 2
    INT64 = 3
    UINT64 = 4
    FLOAT64 = 5
    STRING_LIST = 6
    FLOAT64_LIST = 7

    # Tags >= USER are opaque to the parser and belong to the caller.
    USER = 100


LIST_TYPES = frozenset({FieldType.STRING_LIST, FieldType.FLOAT64_LIST})


class FieldKind(str, Enum):
    """Spelling of the built-in type tags in schema documents."""

    STRING = "string"
    BOOL = "bool"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT64 = "float64"
    STRING_LIST = "string-list"
    FLOAT64_LIST = "float64-list"

    @property
    def field_type(self) -> FieldType:
        return FieldType[self.name]


# ================================
# Parser options
# ================================

_RESERVED_COMMENT_CHARS = frozenset("[]=")


class ParserOptions(BaseModel):
    """
    Options read by every parse. They may be changed between parses;
    assignments are validated.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    comment_char: str = Field(default="#", min_length=1, max_length=1)
    quote_char: Optional[str] = Field(default='"')
    expand_vars: bool = False

    @field_validator("comment_char")
    @classmethod
    def _comment_char_must_be_usable(cls, v: str) -> str:
        if v.isspace():
            raise ValueError("comment_char must not be whitespace")
        if v in _RESERVED_COMMENT_CHARS:
            raise ValueError(f"comment_char must not be one of {''.join(sorted(_RESERVED_COMMENT_CHARS))}")
        return v

    @field_validator("quote_char")
    @classmethod
    def _quote_char_single(cls, v: Optional[str]) -> Optional[str]:
        # Empty string disables quote stripping just like None.
        if v is None or v == "":
            return None
        if len(v) != 1:
            raise ValueError("quote_char must be a single character")
        return v


# ================================
# Schema documents (files)
# ================================


class FieldSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: FieldKind
    default: Any = None
    choices: List[str] = Field(default_factory=list)
    description: str = Field(default="", max_length=2000)

    @model_validator(mode="after")
    def _choices_only_for_strings(self) -> "FieldSpec":
        if self.choices and self.type != FieldKind.STRING:
            raise ValueError("`choices` is only allowed on string fields")
        if self.choices and self.default is not None and self.default not in self.choices:
            raise ValueError("`default` must be one of `choices`")
        return self


class SchemaDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    options: Dict[str, Any] = Field(default_factory=dict)
    sections: Dict[str, Dict[str, FieldSpec]] = Field(default_factory=dict)
