"""Statement builders and their factory functions."""

from typing import TYPE_CHECKING, Optional

from sqlbricks.builder._base import BuiltQuery, QueryBuilder
from sqlbricks.builder._delete import DeleteBuilder
from sqlbricks.builder._insert import InsertBuilder
from sqlbricks.builder._select import SelectBuilder
from sqlbricks.builder._update import UpdateBuilder
from sqlbricks.builder.mixins import JoinKind

if TYPE_CHECKING:
    from sqlbricks.dialect import Dialect
    from sqlbricks.typing import ColumnExpression

__all__ = (
    "BuiltQuery",
    "DeleteBuilder",
    "InsertBuilder",
    "JoinKind",
    "QueryBuilder",
    "SelectBuilder",
    "UpdateBuilder",
    "delete_from",
    "insert",
    "select",
    "update",
)


def select(*columns: "ColumnExpression", dialect: "Optional[Dialect]" = None) -> SelectBuilder:
    """Create a SELECT builder.

    Args:
        *columns: Optional columns to select, or a single list of them. If not
            provided, selects all columns.
        dialect: Optional dialect pinned to this builder.

    Returns:
        SelectBuilder: A new SelectBuilder instance with the specified columns.
    """
    builder = SelectBuilder(dialect=dialect)
    if columns:
        builder.columns(*columns)
    return builder


def insert(table: Optional[str] = None, dialect: "Optional[Dialect]" = None) -> InsertBuilder:
    """Create an INSERT builder.

    Args:
        table: Optional target table; the same as calling ``into(table)``.
        dialect: Optional dialect pinned to this builder.

    Returns:
        InsertBuilder: A new InsertBuilder instance.
    """
    builder = InsertBuilder(dialect=dialect)
    if table is not None:
        builder.into(table)
    return builder


def update(table: str, dialect: "Optional[Dialect]" = None) -> UpdateBuilder:
    """Create an UPDATE builder for ``table``.

    Returns:
        UpdateBuilder: A new UpdateBuilder instance with the target table set.
    """
    return UpdateBuilder(dialect=dialect).table(table)


def delete_from(table: str, dialect: "Optional[Dialect]" = None) -> DeleteBuilder:
    """Create a DELETE builder for ``table``.

    Returns:
        DeleteBuilder: A new DeleteBuilder instance with the target table set.
    """
    return DeleteBuilder(dialect=dialect).from_(table)
