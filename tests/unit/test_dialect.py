"""Unit tests for the dialect registry and options."""

from typing import Any

import pytest

from sqlbricks import Dialect, ParameterStyle, get_dialect, get_option, render, reset_options, select, set_option
from sqlbricks.dialect import DEFAULT_DIALECT, DialectRegistry
from sqlbricks.exceptions import UnsupportedOptionError


def scenario() -> Any:
    return select(["id", "name"]).from_("users").where({"id": 1})


def test_defaults() -> None:
    assert get_dialect() == DEFAULT_DIALECT
    assert get_option("placeholder") == "$"
    assert get_option("quoteChar") is None
    assert get_option("parameterizeLimits") is False
    assert get_option("dialect") is None


def test_placeholder_option_changes_only_the_token() -> None:
    numbered = scenario().build()
    set_option("placeholder", "?")
    fixed = scenario().build()

    assert numbered.text == "SELECT id, name FROM users WHERE id = $1"
    assert fixed.text == "SELECT id, name FROM users WHERE id = ?"
    assert fixed.values == numbered.values == [1]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("$", "a = $1 AND b = $2"),
        ("?", "a = ? AND b = ?"),
        (":", "a = :1 AND b = :2"),
        ("%s", "a = %s AND b = %s"),
        ("numeric", "a = $1 AND b = $2"),
        ("qmark", "a = ? AND b = ?"),
        (ParameterStyle.POSITIONAL_COLON, "a = :1 AND b = :2"),
        (ParameterStyle.POSITIONAL_PYFORMAT, "a = %s AND b = %s"),
    ],
)
def test_placeholder_styles(value: Any, expected: str) -> None:
    set_option("placeholder", value)

    assert select().from_("t").where({"a": 1, "b": 2}).build().text == f"SELECT * FROM t WHERE {expected}"


def test_option_read_at_build_time() -> None:
    builder = scenario()
    set_option("placeholder", "?")

    assert builder.build().text == "SELECT id, name FROM users WHERE id = ?"


def test_captured_dialect_is_a_snapshot() -> None:
    snapshot = get_dialect()
    set_option("placeholder", "?")
    set_option("quoteChar", '"')

    assert snapshot.placeholder(3) == "$3"
    assert render(scenario(), snapshot).text == "SELECT id, name FROM users WHERE id = $1"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("placeholder", "@"),
        ("placeholder", None),
        ("placeholder", "named_colon"),
        ("quoteChar", "ab"),
        ("quoteChar", "a"),
        ("quoteChar", " "),
        ("quoteChar", 1),
        ("parameterizeLimits", "yes"),
        ("dialect", "not_a_real_dialect"),
        ("dialect", ""),
        ("placeholderStyle", "?"),
        ("", "?"),
    ],
)
def test_unsupported_options_leave_dialect_untouched(name: str, value: Any) -> None:
    set_option("placeholder", "?")
    before = get_dialect()

    with pytest.raises(UnsupportedOptionError):
        set_option(name, value)

    assert get_dialect() is before


def test_unknown_option_read_raises() -> None:
    with pytest.raises(UnsupportedOptionError):
        get_option("colour")


def test_quote_char_option() -> None:
    set_option("quoteChar", '"')

    assert scenario().build().text == 'SELECT "id", "name" FROM "users" WHERE "id" = $1'

    set_option("quote_char", None)
    assert scenario().build().text == "SELECT id, name FROM users WHERE id = $1"


def test_bracket_quotes_are_paired() -> None:
    set_option("quoteChar", "[")

    assert select("u.id").from_("users u").build().text == "SELECT [u].[id] FROM [users] [u]"


def test_embedded_quote_is_doubled() -> None:
    assert Dialect(quote_char='"', quote_end='"').quote('we"ird') == '"we""ird"'
    assert Dialect(quote_char="[", quote_end="]").quote("a]b") == "[a]]b]"
    assert Dialect().quote("plain") == "plain"


@pytest.mark.parametrize(
    ("name", "quote", "placeholder"),
    [("postgres", '"', "$1"), ("mysql", "`", "?"), ("sqlite", '"', "?"), ("oracle", '"', ":1")],
)
def test_named_dialects(name: str, quote: str, placeholder: str) -> None:
    set_option("dialect", name)
    dialect = get_dialect()

    assert dialect.name == name
    assert dialect.quote_char == quote
    assert dialect.placeholder(1) == placeholder
    assert get_option("dialect") == name


def test_named_dialect_keeps_parameterized_limits() -> None:
    set_option("parameterizeLimits", True)
    set_option("dialect", "mysql")

    assert select().from_("t").limit(5).build().text == "SELECT * FROM `t` LIMIT ?"


def test_explicit_dialect_overrides_registry() -> None:
    set_option("placeholder", "?")
    qmark_free = Dialect(parameter_style=ParameterStyle.POSITIONAL_COLON)

    assert render(scenario(), qmark_free).text == "SELECT id, name FROM users WHERE id = :1"
    assert select("id", dialect=qmark_free).from_("t").where({"id": 1}).build().text == (
        "SELECT id FROM t WHERE id = :1"
    )


def test_with_option_returns_new_value() -> None:
    base = Dialect()
    changed = base.with_option("placeholder", "?")

    assert base.parameter_style is ParameterStyle.NUMERIC
    assert changed.parameter_style is ParameterStyle.QMARK
    assert changed.get_option("placeholder") == "?"


def test_reset_options() -> None:
    set_option("placeholder", "?")
    set_option("quoteChar", "`")
    reset_options()

    assert get_dialect() == DEFAULT_DIALECT


def test_registry_use() -> None:
    registry = DialectRegistry()
    registry.use("postgres")

    assert registry.current.quote_char == '"'
    registry.use(Dialect(parameter_style=ParameterStyle.QMARK))
    assert registry.current.placeholder(9) == "?"
    registry.reset()
    assert registry.current is DEFAULT_DIALECT
