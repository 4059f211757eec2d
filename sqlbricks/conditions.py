"""Predicate tree used in WHERE, HAVING and JOIN ... ON clauses.

Nodes are immutable. Build them with the constructor functions (``eq``,
``and_``, ``in_`` ...) rather than instantiating the classes directly; the
constructors validate their arguments and raise
:class:`~sqlbricks.exceptions.MalformedClauseError` on shapes that cannot
render to valid SQL. ``Logical`` and ``Raw`` also check their own shape when
instantiated directly.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from sqlbricks.exceptions import MalformedClauseError

if TYPE_CHECKING:
    from sqlbricks.builder._select import SelectBuilder
    from sqlbricks.typing import ConditionLike

__all__ = (
    "COMPARISON_OPERATORS",
    "RAW_MARKER",
    "Between",
    "Comparison",
    "Condition",
    "Exists",
    "InSet",
    "IsNull",
    "Logical",
    "Negation",
    "Pattern",
    "Raw",
    "and_",
    "and_combine",
    "between",
    "eq",
    "exists",
    "gt",
    "gte",
    "ilike",
    "in_",
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
    "to_condition",
)

COMPARISON_OPERATORS = frozenset({"=", "<>", "<", "<=", ">", ">="})
LOGICAL_OPERATORS = frozenset({"AND", "OR"})
RAW_MARKER = "?"
"""Neutral placeholder marker inside :func:`raw` text."""


class Condition:
    """Base class of every predicate node."""

    __slots__ = ()


@dataclass(frozen=True)
class Comparison(Condition):
    op: str
    column: str
    value: Any


@dataclass(frozen=True)
class IsNull(Condition):
    column: str
    negated: bool = False


@dataclass(frozen=True)
class Between(Condition):
    column: str
    low: Any
    high: Any


@dataclass(frozen=True)
class Pattern(Condition):
    column: str
    value: Any
    case_insensitive: bool = False


@dataclass(frozen=True)
class InSet(Condition):
    """``column IN (...)`` over literal values or a subselect."""

    column: str
    values: "Union[tuple[Any, ...], SelectBuilder]"


@dataclass(frozen=True)
class Logical(Condition):
    """AND/OR over operands; operand order is emission order."""

    op: str
    operands: "tuple[Condition, ...]"

    def __post_init__(self) -> None:
        if self.op not in LOGICAL_OPERATORS:
            msg = f"Unsupported logical operator {self.op!r}. Expected one of: {', '.join(sorted(LOGICAL_OPERATORS))}"
            raise MalformedClauseError(msg)
        if not self.operands:
            msg = f"{self.op} requires at least one condition"
            raise MalformedClauseError(msg)


@dataclass(frozen=True)
class Negation(Condition):
    inner: Condition


@dataclass(frozen=True)
class Exists(Condition):
    subquery: "SelectBuilder"
    negated: bool = False


@dataclass(frozen=True)
class Raw(Condition):
    """Opaque SQL text with positional values.

    Each ``?`` in ``text`` is replaced, left to right, by a placeholder of the
    active dialect. The text is never parsed or validated otherwise.
    """

    text: str
    values: "tuple[Any, ...]" = ()

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            msg = f"Raw SQL must be a string, got {self.text!r}"
            raise MalformedClauseError(msg)
        markers = self.text.count(RAW_MARKER)
        if markers != len(self.values):
            msg = f"Raw SQL has {markers} placeholder marker(s) but {len(self.values)} value(s): {self.text!r}"
            raise MalformedClauseError(msg)

    @property
    def fragments(self) -> "list[str]":
        return self.text.split(RAW_MARKER)


def _check_column(column: Any) -> str:
    if not isinstance(column, str) or not column.strip():
        msg = f"Column reference must be a non-empty string, got {column!r}"
        raise MalformedClauseError(msg)
    return column


def _is_select(value: Any) -> bool:
    from sqlbricks.builder._select import SelectBuilder

    return isinstance(value, SelectBuilder)


def _compare(op: str, column: str, value: Any) -> Comparison:
    if op not in COMPARISON_OPERATORS:
        msg = f"Unsupported comparison operator: {op!r}"
        raise MalformedClauseError(msg)
    return Comparison(op, _check_column(column), value)


def eq(column: str, value: Any) -> Comparison:
    return _compare("=", column, value)


def not_eq(column: str, value: Any) -> Comparison:
    return _compare("<>", column, value)


def lt(column: str, value: Any) -> Comparison:
    return _compare("<", column, value)


def lte(column: str, value: Any) -> Comparison:
    return _compare("<=", column, value)


def gt(column: str, value: Any) -> Comparison:
    return _compare(">", column, value)


def gte(column: str, value: Any) -> Comparison:
    return _compare(">=", column, value)


def is_null(column: str) -> IsNull:
    return IsNull(_check_column(column))


def is_not_null(column: str) -> IsNull:
    return IsNull(_check_column(column), negated=True)


def between(column: str, low: Any, high: Any) -> Between:
    return Between(_check_column(column), low, high)


def like(column: str, pattern: Any) -> Pattern:
    return Pattern(_check_column(column), pattern)


def ilike(column: str, pattern: Any) -> Pattern:
    return Pattern(_check_column(column), pattern, case_insensitive=True)


def in_(column: str, values: "Union[Iterable[Any], SelectBuilder]") -> InSet:
    """Build ``column IN (...)``.

    Args:
        column: The column to test.
        values: The candidate values, in emission order, or a select builder
            rendered as a subquery.

    Raises:
        MalformedClauseError: If ``values`` is empty or not a collection.

    Returns:
        The membership condition.
    """
    column = _check_column(column)
    if _is_select(values):
        return InSet(column, values)  # type: ignore[arg-type]
    if isinstance(values, (str, bytes, Mapping)) or not isinstance(values, Iterable):
        msg = f"IN values must be a sequence of values or a subselect, got {values!r}"
        raise MalformedClauseError(msg)
    items = tuple(values)
    if not items:
        msg = f"IN clause for column {column!r} requires at least one value"
        raise MalformedClauseError(msg)
    return InSet(column, items)


def _unpack(conditions: "Sequence[Any]") -> "Sequence[Any]":
    if len(conditions) == 1 and isinstance(conditions[0], (list, tuple)):
        return conditions[0]
    return conditions


def _logical(op: str, conditions: "Sequence[ConditionLike]") -> Logical:
    return Logical(op, tuple(to_condition(condition) for condition in _unpack(conditions)))


def and_(*conditions: "ConditionLike") -> Logical:
    """Combine conditions with AND, keeping their order.

    Accepts either several conditions or a single list/tuple of them. Plain
    mappings are desugared with :func:`to_condition`.
    """
    return _logical("AND", conditions)


def or_(*conditions: "ConditionLike") -> Logical:
    """Combine conditions with OR, keeping their order."""
    return _logical("OR", conditions)


def not_(condition: "ConditionLike") -> Negation:
    return Negation(to_condition(condition))


def exists(subquery: "SelectBuilder") -> Exists:
    if not _is_select(subquery):
        msg = f"EXISTS requires a select builder, got {subquery!r}"
        raise MalformedClauseError(msg)
    return Exists(subquery)


def not_exists(subquery: "SelectBuilder") -> Exists:
    return Exists(exists(subquery).subquery, negated=True)


def raw(text: str, values: "Iterable[Any]" = ()) -> Raw:
    """Embed SQL text verbatim.

    Args:
        text: SQL fragment; each ``?`` marks where the next value is bound.
        values: Values for the markers, in order.

    Raises:
        MalformedClauseError: If the marker count and value count differ.

    Returns:
        The raw fragment.
    """
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        msg = f"Raw SQL values must be a sequence, got {values!r}"
        raise MalformedClauseError(msg)
    return Raw(text, tuple(values))


def to_condition(condition: "ConditionLike") -> Condition:
    """Normalize a condition or an equality mapping into a condition node.

    A mapping ``{"id": 1, "name": "John"}`` becomes ``id = ? AND name = ?``
    in the mapping's iteration order.

    Raises:
        MalformedClauseError: For empty mappings or unsupported argument types.
    """
    if isinstance(condition, Condition):
        return condition
    if isinstance(condition, Mapping):
        if not condition:
            msg = "Condition mapping must contain at least one column"
            raise MalformedClauseError(msg)
        return Logical("AND", tuple(eq(column, value) for column, value in condition.items()))
    msg = f"Expected a condition or a mapping of column to value, got {condition!r}"
    raise MalformedClauseError(msg)


def and_combine(prior: "Union[Condition, None]", condition: Condition) -> Condition:
    """AND a new condition onto an existing clause, narrowing it."""
    if prior is None:
        return condition
    return Logical("AND", (prior, condition))
