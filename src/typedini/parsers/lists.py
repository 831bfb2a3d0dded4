"""
Bracketed list literals:

    factors = [
    # comments and blank lines are fine between elements
    10, 20,

    23.5, "12.75",
    ]

Elements are split on commas outside quotes. A quote only counts when it
opens the element. With variable expansion on, `${...}` and `$$` are never
split. A line break also ends the element being read. The accumulator only
collects raw element text; each element is preprocessed and coerced by the
engine.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

LIST_OPEN = "["
LIST_CLOSE = "]"
LIST_SEPARATOR = ","


class ListSyntaxError(ValueError):
    """Malformed text inside a list literal."""


def opens_list(raw_value: str) -> bool:
    return raw_value.lstrip().startswith(LIST_OPEN)


class ListAccumulator:
    def __init__(self, quote_char: Optional[str], *, expand_vars: bool = False) -> None:
        self._quote_char = quote_char
        self._expand_vars = expand_vars
        self._elements: List[Tuple[str, int]] = []
        self._closed = False

    @classmethod
    def open(
        cls,
        raw_value: str,
        quote_char: Optional[str],
        lineno: int = 0,
        *,
        expand_vars: bool = False,
    ) -> "ListAccumulator":
        """Start a list from the text after `=`, which must begin with `[`."""
        text = raw_value.lstrip()
        if not text.startswith(LIST_OPEN):
            raise ListSyntaxError("list literal must start with '['")
        acc = cls(quote_char, expand_vars=expand_vars)
        acc.feed(text[len(LIST_OPEN):], lineno)
        return acc

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def elements(self) -> List[str]:
        return [raw for raw, _ in self._elements]

    def located_elements(self) -> List[Tuple[str, int]]:
        """Element text paired with the line number it was read from."""
        return list(self._elements)

    def feed(self, line: str, lineno: int = 0) -> bool:
        """
        Consume one physical line of the literal. Returns True once the
        closing bracket has been seen.
        """
        if self._closed:
            raise ListSyntaxError("list literal is already closed")

        pending: List[str] = []
        in_quote = False
        i = 0
        while i < len(line):
            ch = line[i]
            if in_quote:
                pending.append(ch)
                if ch == self._quote_char:
                    in_quote = False
                i += 1
                continue
            if self._expand_vars:
                span = self._var_span(line, i)
                if span:
                    pending.append(span)
                    i += len(span)
                    continue
            # a quote only opens a quoted element when it leads the element
            if ch == self._quote_char and not "".join(pending).strip():
                in_quote = True
                pending.append(ch)
            elif ch == LIST_SEPARATOR:
                self._push("".join(pending), lineno, required=True)
                pending = []
            elif ch == LIST_CLOSE:
                self._push("".join(pending), lineno, required=False)
                rest = line[i + 1:]
                if rest.strip():
                    raise ListSyntaxError(f"unexpected text after list: {rest.strip()!r}")
                self._closed = True
                return True
            elif ch == LIST_OPEN:
                raise ListSyntaxError("nested lists are not supported")
            else:
                pending.append(ch)
            i += 1

        # end of line ends the element; an open quote does not carry over
        self._push("".join(pending), lineno, required=False)
        return False

    @staticmethod
    def _var_span(line: str, i: int) -> str:
        """`$$` or a closed `${...}` starting at i, kept whole while splitting."""
        if line[i] != "$":
            return ""
        if line.startswith("$$", i):
            return "$$"
        if line.startswith("${", i):
            end = line.find("}", i + 2)
            if end != -1:
                return line[i:end + 1]
        return ""

    def _push(self, raw: str, lineno: int, *, required: bool) -> None:
        if raw.strip():
            self._elements.append((raw, lineno))
        elif required:
            raise ListSyntaxError("empty list element")
