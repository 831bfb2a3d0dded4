from __future__ import annotations

from enum import Enum

from typedini.core.errors import TypedIniError


class ParseErrorKind(str, Enum):
    UNDEFINED_SECTION = "undefined section"
    OUTSIDE_SECTION = "setting outside section"
    NO_SUCH_FIELD = "no such field"
    INVALID_VALUE = "invalid value"
    INVALID_SYNTAX = "invalid syntax"
    UNTERMINATED_LIST = "unterminated list"
    READ_FAILED = "read failed"


class ParseError(TypedIniError):
    """
    Malformed input. Parsing stops at the first error and no partial
    result is kept.

    Attributes:
        line: 1-based number of the offending line.
        section: name of the active section, or "" outside any section.
        irritant: human readable description of the problem.
        kind: category of the problem.
    """

    def __init__(
        self,
        irritant: str,
        *,
        line: int,
        section: str = "",
        kind: ParseErrorKind = ParseErrorKind.INVALID_SYNTAX,
    ) -> None:
        self.irritant = irritant
        self.line = line
        self.section = section
        self.kind = kind
        super().__init__(self._format())

    def _format(self) -> str:
        msg = f"Line {self.line}: {self.irritant}"
        if self.section:
            msg += f" (section {self.section})"
        return msg

