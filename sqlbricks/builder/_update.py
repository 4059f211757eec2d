from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from typing_extensions import Self

from sqlbricks.builder._base import QueryBuilder, WhereClauseMixin, check_name
from sqlbricks.builder.mixins import ReturningClauseMixin
from sqlbricks.conditions import Condition
from sqlbricks.exceptions import MalformedClauseError

if TYPE_CHECKING:
    from sqlbricks.typing import ColumnExpression, ColumnMapping

__all__ = ("UpdateBuilder",)


@dataclass(eq=False)
class UpdateBuilder(QueryBuilder, WhereClauseMixin, ReturningClauseMixin):
    """Builder for UPDATE statements.

    Example:
        ```python
        update("users").set({"name": "Joe"}).where({"id": 1})
        ```
    """

    _table: str = field(default="", init=False)
    _assignments: "dict[str, Any]" = field(default_factory=dict, init=False)
    _where: Optional[Condition] = field(default=None, init=False)
    _returning: "Optional[list[ColumnExpression]]" = field(default=None, init=False)

    def table(self, table_name: str) -> Self:
        self._table = check_name(table_name, "Table name")
        return self

    def set(self, assignments: "ColumnMapping") -> Self:
        """Set the SET assignments, replacing any previous ones.

        Args:
            assignments: Ordered mapping of column to new value. Values may be
                :func:`~sqlbricks.raw` fragments or subselects.

        Raises:
            MalformedClauseError: If the mapping is empty.

        Returns:
            The current builder instance for method chaining.
        """
        if not isinstance(assignments, Mapping) or not assignments:
            msg = f"UPDATE ... SET requires a non-empty mapping of column to value, got {assignments!r}"
            raise MalformedClauseError(msg)
        self._assignments = {check_name(column, "Update column"): value for column, value in assignments.items()}
        return self
