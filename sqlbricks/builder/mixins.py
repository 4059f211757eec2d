"""Clause mixins shared by the statement builders."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

from typing_extensions import Self

from sqlbricks.builder._base import check_name, flatten_args
from sqlbricks.conditions import Condition, Raw
from sqlbricks.exceptions import MalformedClauseError

if TYPE_CHECKING:
    from sqlbricks.typing import ColumnExpression

__all__ = (
    "JoinClauseMixin",
    "JoinKind",
    "JoinSpec",
    "LimitOffsetClauseMixin",
    "OrderByClauseMixin",
    "ReturningClauseMixin",
)


class JoinKind(str, Enum):
    INNER = "INNER JOIN"
    LEFT = "LEFT JOIN"
    RIGHT = "RIGHT JOIN"
    FULL = "FULL OUTER JOIN"

    @classmethod
    def parse(cls, kind: "Union[str, JoinKind]") -> "JoinKind":
        if isinstance(kind, JoinKind):
            return kind
        normalized = " ".join(str(kind).upper().split())
        if normalized.endswith(" JOIN"):
            normalized = normalized[: -len(" JOIN")]
        if normalized == "FULL OUTER":
            normalized = "FULL"
        elif normalized.endswith(" OUTER"):
            normalized = normalized[: -len(" OUTER")]
        try:
            return cls[normalized]
        except KeyError:
            msg = f"Unsupported join type: {kind!r}"
            raise MalformedClauseError(msg) from None


@dataclass(frozen=True)
class JoinSpec:
    """One JOIN: kind, target table, and either column pairs or a condition."""

    kind: JoinKind
    table: str
    on: "Union[tuple[tuple[str, str], ...], Condition]"


def _join_condition(on: Any) -> "Union[tuple[tuple[str, str], ...], Condition]":
    if isinstance(on, Condition):
        return on
    if isinstance(on, Mapping):
        if not on:
            msg = "JOIN ... ON requires at least one column pair"
            raise MalformedClauseError(msg)
        pairs = tuple(
            (check_name(left, "Join column"), check_name(right, "Join column")) for left, right in on.items()
        )
        return pairs
    msg = f"JOIN ... ON expects a mapping of left column to right column or a condition, got {on!r}"
    raise MalformedClauseError(msg)


class JoinClauseMixin:
    """JOIN support for SELECT builders.

    ``on`` is an ordered mapping of left column to right column; several pairs
    form a compound key joined with AND. A condition node is accepted for
    anything that is not a plain column equality.
    """

    _joins: "list[JoinSpec]"

    def join(
        self,
        table: str,
        on: "Union[Mapping[str, str], Condition]",
        kind: "Union[str, JoinKind]" = JoinKind.INNER,
    ) -> Self:
        self._joins.append(JoinSpec(JoinKind.parse(kind), check_name(table, "Join table"), _join_condition(on)))
        return self

    def inner_join(self, table: str, on: "Union[Mapping[str, str], Condition]") -> Self:
        return self.join(table, on, JoinKind.INNER)

    def left_join(self, table: str, on: "Union[Mapping[str, str], Condition]") -> Self:
        return self.join(table, on, JoinKind.LEFT)

    def right_join(self, table: str, on: "Union[Mapping[str, str], Condition]") -> Self:
        return self.join(table, on, JoinKind.RIGHT)

    def full_join(self, table: str, on: "Union[Mapping[str, str], Condition]") -> Self:
        return self.join(table, on, JoinKind.FULL)


def _check_expression(item: Any, clause: str) -> "ColumnExpression":
    if isinstance(item, Raw):
        return item
    return check_name(item, f"{clause} expression")


class OrderByClauseMixin:
    """ORDER BY and GROUP BY support; both replace their previous value."""

    _order_by: "list[ColumnExpression]"
    _group_by: "list[ColumnExpression]"

    def order_by(self, *items: "ColumnExpression") -> Self:
        """Set ORDER BY expressions, e.g. ``order_by("name", "created_at DESC")``.

        Returns:
            The current builder instance for method chaining.
        """
        self._order_by = [_check_expression(item, "ORDER BY") for item in flatten_args(items)]
        return self

    def group_by(self, *columns: "ColumnExpression") -> Self:
        self._group_by = [_check_expression(column, "GROUP BY") for column in flatten_args(columns)]
        return self


def _check_count(value: Any, clause: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        msg = f"{clause} must be a non-negative integer, got {value!r}"
        raise MalformedClauseError(msg)
    return value


class LimitOffsetClauseMixin:
    """LIMIT and OFFSET support. Passing ``None`` clears the clause."""

    _limit: Optional[int]
    _offset: Optional[int]

    def limit(self, value: Optional[int]) -> Self:
        self._limit = _check_count(value, "LIMIT")
        return self

    def offset(self, value: Optional[int]) -> Self:
        self._offset = _check_count(value, "OFFSET")
        return self


class ReturningClauseMixin:
    """RETURNING support for INSERT, UPDATE and DELETE builders."""

    _returning: "Optional[list[ColumnExpression]]"

    def returning(self, *columns: "ColumnExpression") -> Self:
        """Add a RETURNING clause; with no columns it renders ``RETURNING *``.

        Returns:
            The current builder instance for method chaining.
        """
        self._returning = [_check_expression(column, "RETURNING") for column in flatten_args(columns)]
        return self
