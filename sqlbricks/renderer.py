"""Render statement builders to SQL text and an ordered value list.

Rendering is a single left-to-right pass. Every bound value is appended to
the context's value list at the moment its placeholder is emitted, so the
N-th placeholder always corresponds to the N-th value, including values that
come from nested subselects.
"""

import re
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from sqlbricks.builder._base import BuiltQuery, QueryBuilder
from sqlbricks.builder._delete import DeleteBuilder
from sqlbricks.builder._insert import InsertBuilder
from sqlbricks.builder._select import SelectBuilder
from sqlbricks.builder._update import UpdateBuilder
from sqlbricks.builder.mixins import JoinSpec
from sqlbricks.conditions import (
    Between,
    Comparison,
    Condition,
    Exists,
    InSet,
    IsNull,
    Logical,
    Negation,
    Pattern,
    Raw,
)
from sqlbricks.dialect import Dialect, get_dialect
from sqlbricks.exceptions import MalformedClauseError
from sqlbricks.utils.dispatch import TypeDispatcher
from sqlbricks.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlbricks.typing import ColumnExpression

__all__ = (
    "RenderContext",
    "render",
    "render_condition",
    "render_identifier",
)

logger = get_logger("renderer")

_IDENT = r"[A-Za-z_][A-Za-z0-9_$]*"
_PATH = rf"{_IDENT}(?:\.{_IDENT})*"
_PATH_RE = re.compile(rf"^{_PATH}(?:\.\*)?$")
_ALIASED_RE = re.compile(rf"^(?P<path>{_PATH})\s+(?P<as>[Aa][Ss]\s+)?(?P<alias>{_IDENT})$")
_ORDERED_RE = re.compile(
    r"^(?P<expr>.+?)\s+(?P<direction>ASC|DESC)(?P<nulls>\s+NULLS\s+(?:FIRST|LAST))?$", re.IGNORECASE
)


class RenderContext:
    """State shared by one render: the dialect and the values bound so far."""

    __slots__ = ("dialect", "selects", "values")

    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect
        self.values: list[Any] = []
        # ids of the select builders currently being rendered, outermost first
        self.selects: list[int] = []

    def bind(self, value: Any) -> str:
        """Append a value and return the placeholder that refers to it."""
        self.values.append(value)
        return self.dialect.placeholder(len(self.values))


def render(statement: QueryBuilder, dialect: Optional[Dialect] = None) -> BuiltQuery:
    """Render a statement builder.

    Args:
        statement: Any select, insert, update or delete builder.
        dialect: Dialect to render with. Defaults to the dialect pinned on the
            statement, then to the process-wide dialect current at call time.

    Raises:
        MalformedClauseError: If the statement is incomplete or inconsistent.

    Returns:
        The SQL text and the values for its placeholders, in order.
    """
    active = dialect or statement.dialect or get_dialect()
    context = RenderContext(active)
    text = _render_statement(statement, context)
    logger.debug("Rendered %s with %d parameter(s)", type(statement).__name__, len(context.values))
    return BuiltQuery(text=text, values=context.values, dialect=active)


# -- identifiers -------------------------------------------------------------


def render_identifier(name: str, context: RenderContext) -> str:
    """Quote a bare or dotted identifier; anything else is emitted verbatim.

    ``users.id`` is quoted per segment and a trailing ``.*`` is left alone.
    """
    dialect = context.dialect
    if dialect.quote_char is None or not _PATH_RE.match(name):
        return name
    return ".".join(segment if segment == "*" else dialect.quote(segment) for segment in name.split("."))


def _render_aliasable(name: str, context: RenderContext) -> str:
    # select-list entries and table references may carry "name alias" or "name AS alias"
    aliased = _ALIASED_RE.match(name) if context.dialect.quote_char is not None else None
    if aliased is None:
        return render_identifier(name, context)
    keyword = " AS " if aliased.group("as") else " "
    path = render_identifier(aliased.group("path"), context)
    return f"{path}{keyword}{context.dialect.quote(aliased.group('alias'))}"


def _render_column(column: "ColumnExpression", context: RenderContext) -> str:
    if isinstance(column, Raw):
        return _render_raw(column, context)
    if isinstance(column, SelectBuilder):
        return f"({_render_select(column, context)})"
    return _render_aliasable(column, context)


def _render_order_item(item: "ColumnExpression", context: RenderContext) -> str:
    if isinstance(item, str):
        ordered = _ORDERED_RE.match(item)
        if ordered:
            direction = ordered.group("direction").upper()
            nulls = " ".join(ordered.group("nulls").split()).upper() if ordered.group("nulls") else ""
            suffix = f" {direction} {nulls}" if nulls else f" {direction}"
            return f"{render_identifier(ordered.group('expr'), context)}{suffix}"
    return _render_column(item, context)


def _render_columns(columns: "list[ColumnExpression]", context: RenderContext) -> str:
    return ", ".join(_render_column(column, context) for column in columns)


def _render_identifiers(names: "list[str]", context: RenderContext) -> str:
    return ", ".join(render_identifier(name, context) for name in names)


# -- values and conditions ---------------------------------------------------


def _render_value(value: Any, context: RenderContext) -> str:
    if isinstance(value, Raw):
        return _render_raw(value, context)
    if isinstance(value, SelectBuilder):
        return f"({_render_select(value, context)})"
    return context.bind(value)


def _render_raw(node: Raw, context: RenderContext) -> str:
    fragments = node.fragments
    parts = [fragments[0]]
    for value, fragment in zip(node.values, fragments[1:]):
        parts.append(_render_value(value, context))
        parts.append(fragment)
    return "".join(parts)


_CONDITIONS: "TypeDispatcher[Callable[[Any, RenderContext], str]]" = TypeDispatcher()


def _unwrap(condition: Condition) -> Condition:
    # a single-operand AND/OR renders exactly like its operand
    while isinstance(condition, Logical) and len(condition.operands) == 1:
        condition = condition.operands[0]
    return condition


def render_condition(condition: Condition, context: RenderContext) -> str:
    """Render a predicate tree depth first, left to right."""
    condition = _unwrap(condition)
    handler = _CONDITIONS.get(condition)
    if handler is None:
        msg = f"Cannot render condition of type {type(condition).__name__}"
        raise MalformedClauseError(msg)
    return handler(condition, context)


@_CONDITIONS.register(Comparison)
def _render_comparison(node: Comparison, context: RenderContext) -> str:
    column = render_identifier(node.column, context)
    return f"{column} {node.op} {_render_value(node.value, context)}"


@_CONDITIONS.register(IsNull)
def _render_is_null(node: IsNull, context: RenderContext) -> str:
    operator = "IS NOT NULL" if node.negated else "IS NULL"
    return f"{render_identifier(node.column, context)} {operator}"


@_CONDITIONS.register(Between)
def _render_between(node: Between, context: RenderContext) -> str:
    column = render_identifier(node.column, context)
    low = _render_value(node.low, context)
    high = _render_value(node.high, context)
    return f"{column} BETWEEN {low} AND {high}"


@_CONDITIONS.register(Pattern)
def _render_pattern(node: Pattern, context: RenderContext) -> str:
    operator = "ILIKE" if node.case_insensitive else "LIKE"
    return f"{render_identifier(node.column, context)} {operator} {_render_value(node.value, context)}"


@_CONDITIONS.register(InSet)
def _render_in_set(node: InSet, context: RenderContext) -> str:
    column = render_identifier(node.column, context)
    if isinstance(node.values, SelectBuilder):
        return f"{column} IN ({_render_select(node.values, context)})"
    if not node.values:
        msg = f"IN clause for column {node.column!r} requires at least one value"
        raise MalformedClauseError(msg)
    return f"{column} IN ({', '.join(_render_value(value, context) for value in node.values)})"


@_CONDITIONS.register(Logical)
def _render_logical(node: Logical, context: RenderContext) -> str:
    parts = []
    for operand in node.operands:
        operand = _unwrap(operand)
        text = render_condition(operand, context)
        if isinstance(operand, Negation) or (isinstance(operand, Logical) and operand.op != node.op):
            text = f"({text})"
        parts.append(text)
    return f" {node.op} ".join(parts)


@_CONDITIONS.register(Negation)
def _render_negation(node: Negation, context: RenderContext) -> str:
    inner = _unwrap(node.inner)
    text = render_condition(inner, context)
    if isinstance(inner, Logical):
        text = f"({text})"
    return f"NOT {text}"


@_CONDITIONS.register(Exists)
def _render_exists(node: Exists, context: RenderContext) -> str:
    keyword = "NOT EXISTS" if node.negated else "EXISTS"
    return f"{keyword} ({_render_select(node.subquery, context)})"


@_CONDITIONS.register(Raw)
def _render_raw_condition(node: Raw, context: RenderContext) -> str:
    return _render_raw(node, context)


# -- statements --------------------------------------------------------------

_STATEMENTS: "TypeDispatcher[Callable[[Any, RenderContext], str]]" = TypeDispatcher()


def _render_statement(statement: QueryBuilder, context: RenderContext) -> str:
    handler = _STATEMENTS.get(statement)
    if handler is None:
        msg = f"Cannot render statement of type {type(statement).__name__}"
        raise MalformedClauseError(msg)
    return handler(statement, context)


def _render_limit(value: int, context: RenderContext) -> str:
    if context.dialect.parameterize_limits:
        return context.bind(value)
    return str(value)


def _render_join(join: JoinSpec, context: RenderContext) -> str:
    table = _render_aliasable(join.table, context)
    if isinstance(join.on, Condition):
        on = render_condition(join.on, context)
    else:
        on = " AND ".join(
            f"{render_identifier(left, context)} = {render_identifier(right, context)}" for left, right in join.on
        )
    return f"{join.kind.value} {table} ON {on}"


def _render_returning(columns: "Optional[list[str]]", context: RenderContext) -> "list[str]":
    if columns is None:
        return []
    return [f"RETURNING {_render_columns(columns, context) if columns else '*'}"]


@_STATEMENTS.register(SelectBuilder)
def _render_select(builder: SelectBuilder, context: RenderContext) -> str:
    if id(builder) in context.selects:
        msg = "SELECT builder is nested inside itself; subselects must not form a cycle"
        raise MalformedClauseError(msg)
    context.selects.append(id(builder))
    try:
        return _render_select_clauses(builder, context)
    finally:
        context.selects.pop()


def _render_select_clauses(builder: SelectBuilder, context: RenderContext) -> str:
    parts = ["SELECT"]
    if builder._distinct:
        parts.append("DISTINCT")
    parts.append(_render_columns(builder._columns, context) if builder._columns else "*")
    source = _render_source(builder._table, builder._table_alias, context)
    if source:
        parts.append(f"FROM {source}")
    parts.extend(_render_join(join, context) for join in builder._joins)
    if builder._where is not None:
        parts.append(f"WHERE {render_condition(builder._where, context)}")
    if builder._group_by:
        parts.append(f"GROUP BY {_render_columns(builder._group_by, context)}")
    if builder._having is not None:
        parts.append(f"HAVING {render_condition(builder._having, context)}")
    if builder._order_by:
        parts.append(f"ORDER BY {', '.join(_render_order_item(item, context) for item in builder._order_by)}")
    if builder._limit is not None:
        parts.append(f"LIMIT {_render_limit(builder._limit, context)}")
    if builder._offset is not None:
        parts.append(f"OFFSET {_render_limit(builder._offset, context)}")
    if builder._for_update:
        parts.append("FOR UPDATE")
    return " ".join(parts)


def _render_source(
    table: "Union[str, SelectBuilder, None]", alias: Optional[str], context: RenderContext
) -> Optional[str]:
    if table is None:
        return None
    if isinstance(table, SelectBuilder):
        subquery = f"({_render_select(table, context)})"
        return f"{subquery} AS {context.dialect.quote(alias)}" if alias else subquery
    return _render_aliasable(table, context)


def _require_table(table: Optional[str], statement: str) -> None:
    if not table:
        msg = f"{statement} requires a target table"
        raise MalformedClauseError(msg)


@_STATEMENTS.register(InsertBuilder)
def _render_insert(builder: InsertBuilder, context: RenderContext) -> str:
    if builder._table is None:
        msg = "INSERT requires a target table; call into() first"
        raise MalformedClauseError(msg)
    parts = [f"INSERT INTO {render_identifier(builder._table, context)}"]
    if builder._rows:
        columns = builder.column_names
        parts.append(f"({_render_identifiers(columns, context)})")
        rows = ", ".join(
            f"({', '.join(_render_value(row[column], context) for column in columns)})" for row in builder._rows
        )
        parts.append(f"VALUES {rows}")
    elif builder._select is not None:
        if builder._columns:
            parts.append(f"({_render_identifiers(builder._columns, context)})")
        parts.append(_render_select(builder._select, context))
    else:
        msg = "INSERT requires either row values or a subselect"
        raise MalformedClauseError(msg)
    parts.extend(_render_returning(builder._returning, context))
    return " ".join(parts)


@_STATEMENTS.register(UpdateBuilder)
def _render_update(builder: UpdateBuilder, context: RenderContext) -> str:
    _require_table(builder._table, "UPDATE")
    if not builder._assignments:
        msg = "UPDATE requires at least one SET assignment; call set() first"
        raise MalformedClauseError(msg)
    assignments = ", ".join(
        f"{render_identifier(column, context)} = {_render_value(value, context)}"
        for column, value in builder._assignments.items()
    )
    parts = [f"UPDATE {render_identifier(builder._table, context)} SET {assignments}"]
    if builder._where is not None:
        parts.append(f"WHERE {render_condition(builder._where, context)}")
    parts.extend(_render_returning(builder._returning, context))
    return " ".join(parts)


@_STATEMENTS.register(DeleteBuilder)
def _render_delete(builder: DeleteBuilder, context: RenderContext) -> str:
    _require_table(builder._table, "DELETE")
    parts = [f"DELETE FROM {render_identifier(builder._table, context)}"]
    if builder._where is not None:
        parts.append(f"WHERE {render_condition(builder._where, context)}")
    parts.extend(_render_returning(builder._returning, context))
    return " ".join(parts)
