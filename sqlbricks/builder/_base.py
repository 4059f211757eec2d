"""Base classes shared by the statement builders.

Builders are plain mutable objects. Every mutator changes the builder in
place and returns the same instance, so chaining and holding a reference are
equivalent; no copies are made anywhere. Nothing is rendered until
:meth:`QueryBuilder.build` is called.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional, Union

from typing_extensions import Self

from sqlbricks.conditions import Condition, and_combine, eq, to_condition
from sqlbricks.exceptions import MalformedClauseError
from sqlbricks.typing import Empty

if TYPE_CHECKING:
    from sqlbricks.dialect import Dialect
    from sqlbricks.typing import ConditionLike, EmptyType

__all__ = (
    "BuiltQuery",
    "HavingClauseMixin",
    "QueryBuilder",
    "WhereClauseMixin",
)


@dataclass(frozen=True)
class BuiltQuery:
    """Rendered SQL text and the values for its placeholders, in order."""

    text: str
    values: "list[Any]" = field(default_factory=list)
    dialect: "Optional[Dialect]" = field(default=None, repr=False, compare=False)

    def __iter__(self) -> Any:
        return iter((self.text, self.values))


def check_name(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        msg = f"{what} must be a non-empty string, got {value!r}"
        raise MalformedClauseError(msg)
    return value


def flatten_args(args: "Sequence[Any]") -> "list[Any]":
    """Accept both ``f("a", "b")`` and ``f(["a", "b"])``."""
    if len(args) == 1 and isinstance(args[0], (list, tuple)):
        return list(args[0])
    return list(args)


@dataclass(eq=False)
class QueryBuilder:
    """Base class for SQL statement builders.

    ``dialect`` pins a dialect for this builder only; when it is ``None`` the
    process-wide dialect current at ``build()`` time is used.
    """

    dialect: "Optional[Dialect]" = None

    def build(self) -> BuiltQuery:
        """Render the statement.

        Does not change the builder, and may be called any number of times.

        Raises:
            MalformedClauseError: If the statement is incomplete or inconsistent.

        Returns:
            BuiltQuery: The SQL text and its ordered values.
        """
        from sqlbricks.renderer import render

        return render(self)

    def __str__(self) -> str:
        return self.build().text


def _resolve_condition(condition: Any, value: Any, clause: str) -> Condition:
    if value is not Empty:
        if not isinstance(condition, str):
            msg = f"{clause} with a value expects a column name first, got {condition!r}"
            raise MalformedClauseError(msg)
        return eq(condition, value)
    if isinstance(condition, str):
        msg = f"{clause} does not accept bare SQL strings; use raw({condition!r}) instead"
        raise MalformedClauseError(msg)
    return to_condition(condition)


class WhereClauseMixin:
    """WHERE clause support for SELECT, UPDATE and DELETE builders."""

    _where: Optional[Condition]

    def where(self, condition: "Union[ConditionLike, str]", value: "Union[Any, EmptyType]" = Empty) -> Self:
        """Add a WHERE condition.

        A second call ANDs its condition onto the existing one.

        Args:
            condition: A condition node, or a mapping of column to value that
                becomes equality tests joined by AND. With ``value`` given,
                a column name.
            value: Shorthand for ``where(eq(column, value))``.

        Raises:
            MalformedClauseError: If the condition cannot be interpreted.

        Returns:
            The current builder instance for method chaining.
        """
        self._where = and_combine(self._where, _resolve_condition(condition, value, "WHERE"))
        return self


class HavingClauseMixin:
    """HAVING clause support for SELECT builders."""

    _having: Optional[Condition]

    def having(self, condition: "Union[ConditionLike, str]", value: "Union[Any, EmptyType]" = Empty) -> Self:
        """Add a HAVING condition; a second call ANDs onto the first.

        Returns:
            The current builder instance for method chaining.
        """
        self._having = and_combine(self._having, _resolve_condition(condition, value, "HAVING"))
        return self
