from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from typing_extensions import Self

from sqlbricks.builder._base import QueryBuilder, WhereClauseMixin, check_name
from sqlbricks.builder.mixins import ReturningClauseMixin
from sqlbricks.conditions import Condition

if TYPE_CHECKING:
    from sqlbricks.typing import ColumnExpression

__all__ = ("DeleteBuilder",)


@dataclass(eq=False)
class DeleteBuilder(QueryBuilder, WhereClauseMixin, ReturningClauseMixin):
    """Builder for DELETE statements.

    Example:
        ```python
        delete_from("users").where({"id": 1})
        ```
    """

    _table: str = field(default="", init=False)
    _where: Optional[Condition] = field(default=None, init=False)
    _returning: "Optional[list[ColumnExpression]]" = field(default=None, init=False)

    def from_(self, table: str) -> Self:
        self._table = check_name(table, "Table name")
        return self
