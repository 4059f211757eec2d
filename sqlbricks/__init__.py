"""Composable SQL statement builders that render text plus bound values.

Example:
    ```python
    from sqlbricks import select

    text, values = select("id", "name").from_("users").where({"id": 1}).build()
    # text == "SELECT id, name FROM users WHERE id = $1", values == [1]
    ```
"""

from sqlbricks.builder import (
    BuiltQuery,
    DeleteBuilder,
    InsertBuilder,
    JoinKind,
    QueryBuilder,
    SelectBuilder,
    UpdateBuilder,
    delete_from,
    insert,
    select,
    update,
)
from sqlbricks.conditions import (
    Condition,
    and_,
    between,
    eq,
    exists,
    gt,
    gte,
    ilike,
    in_,
    is_not_null,
    is_null,
    like,
    lt,
    lte,
    not_,
    not_eq,
    not_exists,
    or_,
    raw,
)
from sqlbricks.dialect import (
    Dialect,
    ParameterStyle,
    get_dialect,
    get_option,
    reset_options,
    set_option,
)
from sqlbricks.exceptions import MalformedClauseError, SQLBricksError, UnsupportedOptionError
from sqlbricks.renderer import render

__all__ = (
    "BuiltQuery",
    "Condition",
    "DeleteBuilder",
    "Dialect",
    "InsertBuilder",
    "JoinKind",
    "MalformedClauseError",
    "ParameterStyle",
    "QueryBuilder",
    "SQLBricksError",
    "SelectBuilder",
    "UnsupportedOptionError",
    "UpdateBuilder",
    "and_",
    "between",
    "delete_from",
    "eq",
    "exists",
    "get_dialect",
    "get_option",
    "gt",
    "gte",
    "ilike",
    "in_",
    "insert",
    "is_not_null",
    "is_null",
    "like",
    "lt",
    "lte",
    "not_",
    "not_eq",
    "not_exists",
    "or_",
    "raw",
    "render",
    "reset_options",
    "select",
    "set_option",
    "update",
)
