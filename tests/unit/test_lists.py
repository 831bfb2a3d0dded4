"""Unit tests for the list literal accumulator."""

import pytest

from typedini.parsers.lists import ListAccumulator, ListSyntaxError, opens_list


def test_single_line_list() -> None:
    """A list closed on its opening line should be complete at once."""

    acc = ListAccumulator.open(" [10, 20 , 23.5]", '"')

    assert acc.closed
    assert [e.strip() for e in acc.elements] == ["10", "20", "23.5"]


def test_multi_line_list_with_trailing_comma() -> None:
    """Elements should accumulate across lines and a trailing comma is fine."""

    acc = ListAccumulator.open("[", '"', lineno=3)
    assert not acc.feed("10, 20,", 4)
    assert not acc.feed('23.5, "12.75",', 6)
    assert acc.feed("]", 7)

    assert [e.strip() for e in acc.elements] == ["10", "20", "23.5", '"12.75"']
    assert [line for _, line in acc.located_elements()] == [4, 4, 6, 6]


def test_commas_and_brackets_inside_quotes_do_not_split() -> None:
    """Quoted text should keep its commas and brackets."""

    acc = ListAccumulator.open('["a, b", "[c]"]', '"')

    assert acc.closed
    assert [e.strip() for e in acc.elements] == ['"a, b"', '"[c]"']


@pytest.mark.parametrize(
    "text,quote,expected",
    [
        ('[5" screen, b]', '"', ['5" screen', "b"]),
        ("[Bob's, x]", "'", ["Bob's", "x"]),
        ('[a "b", c]', '"', ['a "b"', "c"]),
    ],
)
def test_quote_inside_element_does_not_open_quoted_text(
    text: str, quote: str, expected: list
) -> None:
    """Only a quote leading an element should protect commas and brackets."""

    acc = ListAccumulator.open(text, quote)

    assert acc.closed
    assert [e.strip() for e in acc.elements] == expected


def test_variable_references_are_not_split_when_expanding() -> None:
    """With expansion on, `${...}` should stay one element even with commas."""

    acc = ListAccumulator.open("[${A,B}, $$, x]", '"', expand_vars=True)

    assert acc.closed
    assert [e.strip() for e in acc.elements] == ["${A,B}", "$$", "x"]


def test_variable_references_split_normally_without_expansion() -> None:
    """Without expansion, `${...}` is plain text and commas split it."""

    acc = ListAccumulator.open("[${A,B}, x]", '"')

    assert [e.strip() for e in acc.elements] == ["${A", "B}", "x"]


def test_line_break_ends_element() -> None:
    """A line without a trailing comma should still end its last element."""

    acc = ListAccumulator.open("[ a", '"')
    acc.feed(" b ]")

    assert [e.strip() for e in acc.elements] == ["a", "b"]


def test_empty_list() -> None:
    """An empty literal should produce no elements."""

    acc = ListAccumulator.open("[ ]", '"')

    assert acc.closed
    assert acc.elements == []


@pytest.mark.parametrize("text", ["[1,,2]", "[,]", "[ , 1]"])
def test_empty_element_is_an_error(text: str) -> None:
    """Two separators in a row should be rejected."""

    with pytest.raises(ListSyntaxError, match="empty list element"):
        ListAccumulator.open(text, '"')


def test_text_after_close_is_an_error() -> None:
    """Nothing but whitespace may follow the closing bracket."""

    with pytest.raises(ListSyntaxError, match="unexpected text"):
        ListAccumulator.open("[1, 2] x", '"')


def test_nested_list_is_an_error() -> None:
    """An opening bracket inside a list should be rejected."""

    with pytest.raises(ListSyntaxError, match="nested"):
        ListAccumulator.open("[1, [2]]", '"')


def test_feed_after_close_is_an_error() -> None:
    """A closed accumulator should not accept more input."""

    acc = ListAccumulator.open("[1]", '"')

    with pytest.raises(ListSyntaxError):
        acc.feed("2")


def test_opens_list() -> None:
    """Only values starting with a bracket open a list literal."""

    assert opens_list("  [1, 2]")
    assert not opens_list(' "[1, 2]"')
    assert not opens_list("10")
