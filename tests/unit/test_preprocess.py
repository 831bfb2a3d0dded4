"""Unit tests for variable expansion, trimming and quote stripping."""

from typing import Dict, Optional

import pytest

from typedini.core.models import ParserOptions
from typedini.parsers.preprocess import expand_vars, preprocess_value, strip_quotes


def _env(values: Dict[str, str]):
    def _lookup(name: str) -> Optional[str]:
        return values.get(name)

    return _lookup


def test_expand_vars_handles_all_forms() -> None:
    """$NAME, ${NAME} and $$ should all expand in one pass."""

    lookup = _env({"SHELL": "/bin/sh", "USER": "frank"})

    assert expand_vars("hi there $SHELL$SHUL$$${USER}", lookup) == "hi there /bin/sh$frank"


def test_expand_vars_double_dollar_is_literal() -> None:
    """$$NAME should yield a literal $ followed by NAME, whatever the environment."""

    lookup = _env({"NAME": "value"})

    assert expand_vars("$$NAME", lookup) == "$NAME"


def test_expand_vars_is_single_pass() -> None:
    """Expanded text should never be scanned for further variables."""

    lookup = _env({"A": "$B", "B": "oops"})

    assert expand_vars("$A", lookup) == "$B"


def test_expand_vars_braces_allow_any_chars() -> None:
    """${...} should accept any characters except the closing brace."""

    lookup = _env({"my var.x": "ok"})

    assert expand_vars("[${my var.x}]", lookup) == "[ok]"


def test_expand_vars_keeps_lone_dollar() -> None:
    """A $ that starts no variable form should be kept as is."""

    assert expand_vars("cost: 5$ ${", _env({})) == "cost: 5$ ${"


def test_expand_vars_defaults_to_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without an injected lookup the process environment should be used."""

    monkeypatch.setenv("TYPEDINI_TEST_VAR", "from-env")

    assert expand_vars("$TYPEDINI_TEST_VAR") == "from-env"


def test_strip_quotes_requires_both_ends() -> None:
    """Quotes should only be stripped when both ends match."""

    assert strip_quotes('"abc"', '"') == "abc"
    assert strip_quotes('"abc', '"') == '"abc'
    assert strip_quotes('abc"', '"') == 'abc"'
    assert strip_quotes('"', '"') == '"'
    assert strip_quotes('""', '"') == ""


def test_strip_quotes_disabled() -> None:
    """No stripping should happen when the quote char is disabled."""

    assert strip_quotes('"abc"', None) == '"abc"'


def test_preprocess_order_expands_before_trim_and_quotes() -> None:
    """Expansion should happen before trimming and quote stripping."""

    options = ParserOptions(expand_vars=True)
    lookup = _env({"Q": '"', "S": " "})

    assert preprocess_value(" $Q${S}hello hello $Q", options, lookup) == " hello hello "
    assert preprocess_value("${S}37$S", options, lookup) == "37"


def test_preprocess_without_expansion_keeps_dollars() -> None:
    """Variables should be left alone when expansion is off."""

    options = ParserOptions()

    assert preprocess_value('  "$HOME"  ', options) == "$HOME"
