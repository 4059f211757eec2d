"""Unit tests for UpdateBuilder."""

from typing import Any

import pytest

from sqlbricks import eq, raw, select, update
from sqlbricks.builder import UpdateBuilder
from sqlbricks.exceptions import MalformedClauseError


def test_update_with_mapping_where() -> None:
    result = update("users").set({"name": "Joe"}).where({"id": 1, "name": "John"}).build()

    assert result.text == "UPDATE users SET name = $1 WHERE id = $2 AND name = $3"
    assert result.values == ["Joe", 1, "John"]


def test_update_without_where() -> None:
    result = update("users").set({"active": False, "score": 0}).build()

    assert result.text == "UPDATE users SET active = $1, score = $2"
    assert result.values == [False, 0]


def test_set_replaces_previous_assignments() -> None:
    result = update("users").set({"name": "a", "email": "b"}).set({"status": "x"}).build()

    assert result.text == "UPDATE users SET status = $1"
    assert result.values == ["x"]


@pytest.mark.parametrize(
    "assignments", [{}, [("name", "Joe")], "name = 'Joe'", None], ids=["empty", "pairs", "string", "none"]
)
def test_set_requires_non_empty_mapping(assignments: Any) -> None:
    with pytest.raises(MalformedClauseError, match="SET"):
        update("users").set(assignments)


def test_build_without_set_raises() -> None:
    with pytest.raises(MalformedClauseError, match="SET"):
        update("users").where({"id": 1}).build()


def test_build_without_table_raises() -> None:
    with pytest.raises(MalformedClauseError, match="target table"):
        UpdateBuilder().set({"name": "Joe"}).build()


def test_update_requires_table_name() -> None:
    with pytest.raises(MalformedClauseError):
        update("")


def test_where_calls_accumulate() -> None:
    result = update("users").set({"name": "Joe"}).where({"id": 1}).where(eq("version", 3)).build()

    assert result.text == "UPDATE users SET name = $1 WHERE id = $2 AND version = $3"
    assert result.values == ["Joe", 1, 3]


def test_raw_assignment() -> None:
    result = update("counters").set({"hits": raw("hits + ?", [1])}).where({"id": 9}).build()

    assert result.text == "UPDATE counters SET hits = hits + $1 WHERE id = $2"
    assert result.values == [1, 9]


def test_subselect_assignment_shares_numbering() -> None:
    total = select("sum(amount)").from_("orders").where(eq("orders.user_id", 7))
    result = update("users").set({"total": total}).where({"id": 7}).build()

    assert result.text == (
        "UPDATE users SET total = (SELECT sum(amount) FROM orders WHERE orders.user_id = $1) WHERE id = $2"
    )
    assert result.values == [7, 7]


def test_returning() -> None:
    result = update("users").set({"name": "Joe"}).where({"id": 1}).returning("id", "name").build()

    assert result.text == "UPDATE users SET name = $1 WHERE id = $2 RETURNING id, name"


def test_set_copies_the_mapping() -> None:
    assignments = {"name": "Joe"}
    builder = update("users").set(assignments)
    assignments["email"] = "joe@example.com"

    assert builder.build().text == "UPDATE users SET name = $1"
