from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Optional, Tuple, Union

from typedini.core.models import ParserOptions
from typedini.core.store import Store, StoreBuilder
from typedini.parsers.errors import ParseError, ParseErrorKind
from typedini.parsers.lines import LineClassifier, LineKind
from typedini.parsers.lists import ListAccumulator, ListSyntaxError, opens_list
from typedini.parsers.preprocess import EnvLookup, environ_lookup, preprocess_value

if TYPE_CHECKING:
    from typedini.core.schema import Field, Parser, Section

logger = logging.getLogger(__name__)

Source = Union[str, Iterable[str]]


@dataclass
class _OpenList:
    field: "Field"
    acc: ListAccumulator
    start_line: int


class _Engine:
    """
    One pass over one input. States:

      no section     self._section is None
      in section     self._section is set, self._list is None
      in list        self._list is set (a bracketed literal is open)
    """

    def __init__(self, parser: "Parser", options: ParserOptions, lookup: EnvLookup) -> None:
        self._parser = parser
        self._options = options
        self._lookup = lookup
        self._classifier = LineClassifier(options.comment_char)
        self._store = StoreBuilder()
        self._section: Optional["Section"] = None
        self._list: Optional[_OpenList] = None
        self._lineno = 0

    @property
    def line_count(self) -> int:
        return self._lineno

    # ----------------------------
    # Driver
    # ----------------------------

    def run(self, lines: Iterator[str]) -> Store:
        while True:
            try:
                raw = next(lines)
            except StopIteration:
                break
            except (OSError, UnicodeDecodeError) as e:
                raise self._error(
                    f"read failed: {e}", ParseErrorKind.READ_FAILED, line=self._lineno + 1
                ) from e
            self._lineno += 1
            self._step(raw.rstrip("\r\n"))

        if self._list is not None:
            raise self._error(
                f"unterminated list for field {self._list.field.name} "
                f"(opened on line {self._list.start_line})",
                ParseErrorKind.UNTERMINATED_LIST,
            )
        return self._store.build()

    def _step(self, line: str) -> None:
        if self._list is not None:
            if not self._classifier.is_blank(line):
                self._continue_list(line)
            return

        cl = self._classifier.classify(line)
        if cl.kind == LineKind.BLANK:
            return
        if cl.kind == LineKind.SECTION:
            self._enter_section(cl.name or "")
        elif cl.kind == LineKind.ASSIGNMENT:
            self._assign(cl.name or "", cl.value or "")
        else:
            raise self._error("invalid syntax", ParseErrorKind.INVALID_SYNTAX)

    # ----------------------------
    # Transitions
    # ----------------------------

    def _enter_section(self, name: str) -> None:
        section = self._parser.section(name)
        if section is None:
            raise self._error(f"undefined section {name}", ParseErrorKind.UNDEFINED_SECTION)
        self._section = section
        self._store.mark_present(section.name)
        logger.debug("line %d: entering section %s", self._lineno, section.name)

    def _assign(self, name: str, raw_value: str) -> None:
        if self._section is None:
            raise self._error(f"setting outside section: {name}", ParseErrorKind.OUTSIDE_SECTION)
        field = self._section.field(name)
        if field is None:
            raise self._error(
                f"no such field {name}",
                ParseErrorKind.NO_SUCH_FIELD,
            )

        if field.is_list and opens_list(raw_value):
            try:
                acc = ListAccumulator.open(
                    raw_value,
                    self._options.quote_char,
                    self._lineno,
                    expand_vars=self._options.expand_vars,
                )
            except ListSyntaxError as e:
                raise self._error(str(e), ParseErrorKind.INVALID_SYNTAX) from e
            if acc.closed:
                self._finish_list(field, acc)
            else:
                logger.debug("line %d: list literal for %s opened", self._lineno, field.name)
                self._list = _OpenList(field=field, acc=acc, start_line=self._lineno)
            return

        value = self._coerce(field, raw_value)
        if field.is_list:
            self._append(field, (value,))
        else:
            self._store.set(self._section.name, field.name, value)

    def _continue_list(self, line: str) -> None:
        assert self._list is not None
        try:
            closed = self._list.acc.feed(line, self._lineno)
        except ListSyntaxError as e:
            raise self._error(str(e), ParseErrorKind.INVALID_SYNTAX) from e
        if closed:
            open_list, self._list = self._list, None
            logger.debug(
                "line %d: list literal for %s closed (opened on line %d)",
                self._lineno,
                open_list.field.name,
                open_list.start_line,
            )
            self._finish_list(open_list.field, open_list.acc)

    def _finish_list(self, field: "Field", acc: ListAccumulator) -> None:
        values = tuple(self._coerce(field, raw, line=lineno) for raw, lineno in acc.located_elements())
        self._append(field, values)

    # ----------------------------
    # Values
    # ----------------------------

    def _append(self, field: "Field", values: Tuple[Any, ...]) -> None:
        # Every assignment to a list field extends it, in input order.
        assert self._section is not None
        existing = self._store.get(self._section.name, field.name, ())
        self._store.set(self._section.name, field.name, tuple(existing) + values)

    def _coerce(self, field: "Field", raw: str, *, line: Optional[int] = None) -> Any:
        text = preprocess_value(raw, self._options, self._lookup)
        value, valid = field.coerce(text)
        if not valid:
            assert self._section is not None
            raise self._error(
                f"value not valid for field {field.name} of section {self._section.name}: '{text}'",
                ParseErrorKind.INVALID_VALUE,
                line=line,
            )
        return value

    def _error(self, irritant: str, kind: ParseErrorKind, *, line: Optional[int] = None) -> ParseError:
        return ParseError(
            irritant,
            line=self._lineno if line is None else line,
            section=self._section.name if self._section is not None else "",
            kind=kind,
        )


def _iter_lines(source: Source) -> Iterator[str]:
    if isinstance(source, str):
        return iter(io.StringIO(source))
    return iter(source)


def run_parse(
    parser: "Parser",
    source: Source,
    *,
    options: ParserOptions,
    lookup: Optional[EnvLookup] = None,
) -> Store:
    """
    Parse `source` (text, a text stream, or any iterable of lines) against
    the sections and fields of `parser`.

    Raises ParseError on the first problem found.
    """
    engine = _Engine(parser, options, lookup or environ_lookup)
    logger.debug(
        "parse start: comment_char=%r quote_char=%r expand_vars=%s",
        options.comment_char,
        options.quote_char,
        options.expand_vars,
    )
    store = engine.run(_iter_lines(source))
    logger.debug("parse done: %d line(s), sections=%s", engine.line_count, store.sections())
    return store
