from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

NAME_PATTERN = r"[-a-zA-Z0-9_$]+"

NAME_RE = re.compile(NAME_PATTERN)
_SECTION_RE = re.compile(rf"^\s*\[\s*({NAME_PATTERN})\s*\]\s*$")
_ASSIGN_RE = re.compile(rf"^\s*({NAME_PATTERN})\s*=(.*)$")


class LineKind(str, Enum):
    BLANK = "blank"
    SECTION = "section"
    ASSIGNMENT = "assignment"
    OTHER = "other"


@dataclass(frozen=True)
class ClassifiedLine:
    kind: LineKind
    name: Optional[str] = None
    value: Optional[str] = None  # raw text after `=` for assignments


class LineClassifier:
    """
    Sorts physical lines into blank/comment, section header, assignment
    or anything else. Built per parse so that comment char changes between
    parses take effect.
    """

    def __init__(self, comment_char: str) -> None:
        self._blank_re = re.compile(rf"^\s*(?:{re.escape(comment_char)}.*)?$")

    def is_blank(self, line: str) -> bool:
        return self._blank_re.match(line) is not None

    def classify(self, line: str) -> ClassifiedLine:
        if self.is_blank(line):
            return ClassifiedLine(LineKind.BLANK)

        m = _SECTION_RE.match(line)
        if m:
            return ClassifiedLine(LineKind.SECTION, name=m.group(1))

        m = _ASSIGN_RE.match(line)
        if m:
            return ClassifiedLine(LineKind.ASSIGNMENT, name=m.group(1), value=m.group(2))

        return ClassifiedLine(LineKind.OTHER)


def is_valid_name(name: str) -> bool:
    return isinstance(name, str) and NAME_RE.fullmatch(name) is not None
