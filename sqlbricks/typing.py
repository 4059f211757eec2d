from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, Final, Literal, Union

from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from sqlbricks.builder._base import QueryBuilder
    from sqlbricks.conditions import Condition, Raw

__all__ = (
    "ColumnExpression",
    "ColumnMapping",
    "ConditionLike",
    "Empty",
    "EmptyEnum",
    "EmptyType",
    "Row",
)


class EmptyEnum(Enum):
    """A sentinel enum used as placeholder."""

    EMPTY = 0


EmptyType = Literal[EmptyEnum.EMPTY]
Empty: Final = EmptyEnum.EMPTY

Row: TypeAlias = Mapping[str, Any]
"""One INSERT row: an ordered mapping of column name to value."""
ColumnMapping: TypeAlias = Mapping[str, Any]
"""Ordered mapping used for SET assignments and equality shorthand."""
ConditionLike: TypeAlias = Union["Condition", Mapping[str, Any]]
"""Anything accepted where a predicate is expected."""
ColumnExpression: TypeAlias = Union[str, "Raw", "QueryBuilder"]
"""A select-list entry: identifier or expression text, raw fragment, or subselect."""
