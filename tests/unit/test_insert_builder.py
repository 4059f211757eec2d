"""Unit tests for InsertBuilder."""

from typing import Any

import pytest

from sqlbricks import insert, lt, raw, select, set_option
from sqlbricks.exceptions import MalformedClauseError


def test_insert_multiple_rows() -> None:
    result = insert().into("users").values([{"id": 1, "name": "John"}, {"id": 2, "name": "Joe"}]).build()

    assert result.text == "INSERT INTO users (id, name) VALUES ($1, $2), ($3, $4)"
    assert result.values == [1, "John", 2, "Joe"]


def test_insert_single_mapping() -> None:
    result = insert("users").values({"id": 1}).build()

    assert result.text == "INSERT INTO users (id) VALUES ($1)"
    assert result.values == [1]


def test_later_rows_follow_first_row_column_order() -> None:
    result = insert("users").values([{"id": 1, "name": "a"}, {"name": "b", "id": 2}]).build()

    assert result.text == "INSERT INTO users (id, name) VALUES ($1, $2), ($3, $4)"
    assert result.values == [1, "a", 2, "b"]


def test_insert_with_fixed_token_placeholders() -> None:
    set_option("placeholder", "?")
    result = insert().into("users").values([{"id": 1, "name": "John"}, {"id": 2, "name": "Joe"}]).build()

    assert result.text == "INSERT INTO users (id, name) VALUES (?, ?), (?, ?)"
    assert result.values == [1, "John", 2, "Joe"]


@pytest.mark.parametrize(
    "rows",
    [
        [{"id": 1, "name": "a"}, {"id": 2}],
        [{"id": 1}, {"id": 2, "name": "b"}],
        [{"id": 1}, {"name": "b"}],
    ],
    ids=["missing_column", "extra_column", "different_column"],
)
def test_mismatched_rows_raise(rows: Any) -> None:
    with pytest.raises(MalformedClauseError, match="row 1"):
        insert("users").values(rows)


@pytest.mark.parametrize(
    "rows",
    [[], {}, [{}], ["id"], "id", 5],
    ids=["no_rows", "empty_row", "empty_in_list", "string_row", "string", "scalar"],
)
def test_invalid_rows_raise(rows: Any) -> None:
    with pytest.raises(MalformedClauseError):
        insert("users").values(rows)


def test_failed_values_call_keeps_previous_rows() -> None:
    builder = insert("users").values({"id": 1})
    with pytest.raises(MalformedClauseError):
        builder.values([{"id": 2}, {"name": "x"}])

    assert builder.build().values == [1]


def test_values_replace_previous_rows() -> None:
    result = insert("users").values({"id": 1}).values([{"id": 2}, {"id": 3}]).build()

    assert result.text == "INSERT INTO users (id) VALUES ($1), ($2)"
    assert result.values == [2, 3]


def test_explicit_columns_fix_order() -> None:
    result = insert("users").columns("name", "id").values([{"id": 1, "name": "a"}]).build()

    assert result.text == "INSERT INTO users (name, id) VALUES ($1, $2)"
    assert result.values == ["a", 1]


def test_explicit_columns_must_match_rows() -> None:
    with pytest.raises(MalformedClauseError):
        insert("users").columns("id").values({"id": 1, "name": "a"})
    with pytest.raises(MalformedClauseError):
        insert("users").values({"id": 1, "name": "a"}).columns("id")
    with pytest.raises(MalformedClauseError, match="unique"):
        insert("users").columns("id", "id")


def test_insert_select() -> None:
    source = select("id", "name").from_("users").where(lt("created_at", "2020-01-01"))
    result = insert().into("archive").columns("id", "name").select(source).build()

    assert result.text == "INSERT INTO archive (id, name) SELECT id, name FROM users WHERE created_at < $1"
    assert result.values == ["2020-01-01"]


def test_insert_select_without_columns() -> None:
    result = insert("archive").select(select().from_("users")).build()

    assert result.text == "INSERT INTO archive SELECT * FROM users"


def test_rows_and_subselect_are_mutually_exclusive() -> None:
    with pytest.raises(MalformedClauseError, match="both"):
        insert("users").values({"id": 1}).select(select().from_("staging"))
    with pytest.raises(MalformedClauseError, match="both"):
        insert("users").select(select().from_("staging")).values({"id": 1})


def test_select_source_must_be_a_builder() -> None:
    with pytest.raises(MalformedClauseError):
        insert("users").select("SELECT * FROM staging")  # type: ignore[arg-type]


def test_returning() -> None:
    assert insert("users").values({"id": 1}).returning().build().text == (
        "INSERT INTO users (id) VALUES ($1) RETURNING *"
    )
    assert insert("users").values({"id": 1}).returning("id", "created_at").build().text == (
        "INSERT INTO users (id) VALUES ($1) RETURNING id, created_at"
    )


def test_raw_cell_is_inlined() -> None:
    result = insert("users").values({"id": 1, "created_at": raw("now()")}).build()

    assert result.text == "INSERT INTO users (id, created_at) VALUES ($1, now())"
    assert result.values == [1]


def test_missing_table_raises_on_build() -> None:
    with pytest.raises(MalformedClauseError, match="target table"):
        insert().values({"id": 1}).build()


def test_missing_source_raises_on_build() -> None:
    with pytest.raises(MalformedClauseError, match="row values or a subselect"):
        insert("users").build()


def test_quoted_insert() -> None:
    set_option("quoteChar", "`")
    result = insert("users").values({"id": 1, "first name": "a"}).build()

    assert result.text == "INSERT INTO `users` (`id`, first name) VALUES ($1, $2)"
