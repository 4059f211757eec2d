from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Union

from typing_extensions import Self

from sqlbricks.builder._base import HavingClauseMixin, QueryBuilder, WhereClauseMixin, check_name, flatten_args
from sqlbricks.builder.mixins import JoinClauseMixin, JoinSpec, LimitOffsetClauseMixin, OrderByClauseMixin
from sqlbricks.conditions import Condition, Raw
from sqlbricks.exceptions import MalformedClauseError

if TYPE_CHECKING:
    from sqlbricks.typing import ColumnExpression

__all__ = ("SelectBuilder",)


@dataclass(eq=False)
class SelectBuilder(
    QueryBuilder,
    WhereClauseMixin,
    HavingClauseMixin,
    JoinClauseMixin,
    OrderByClauseMixin,
    LimitOffsetClauseMixin,
):
    """Builder for SELECT statements.

    Example:
        ```python
        query = (
            select("id", "name")
            .from_("users")
            .left_join("orders", {"users.id": "orders.user_id"})
            .where({"users.active": True})
            .order_by("name")
            .limit(10)
        )
        text, values = query.build()
        ```
    """

    _columns: "list[ColumnExpression]" = field(default_factory=list, init=False)
    _distinct: bool = field(default=False, init=False)
    _table: "Union[str, SelectBuilder, None]" = field(default=None, init=False)
    _table_alias: Optional[str] = field(default=None, init=False)
    _joins: "list[JoinSpec]" = field(default_factory=list, init=False)
    _where: Optional[Condition] = field(default=None, init=False)
    _group_by: "list[ColumnExpression]" = field(default_factory=list, init=False)
    _having: Optional[Condition] = field(default=None, init=False)
    _order_by: "list[ColumnExpression]" = field(default_factory=list, init=False)
    _limit: Optional[int] = field(default=None, init=False)
    _offset: Optional[int] = field(default=None, init=False)
    _for_update: bool = field(default=False, init=False)

    def columns(self, *columns: "ColumnExpression") -> Self:
        """Replace the select list. With no columns the statement selects ``*``.

        Args:
            *columns: Column names, expression text, :func:`~sqlbricks.raw`
                fragments or subselects. A single list is accepted as well.

        Returns:
            The current builder instance for method chaining.
        """
        checked: "list[ColumnExpression]" = []
        for column in flatten_args(columns):
            if isinstance(column, (Raw, SelectBuilder)):
                if column is self:
                    msg = "A select cannot use itself as a column subquery"
                    raise MalformedClauseError(msg)
                checked.append(column)
            else:
                checked.append(check_name(column, "Select column"))
        self._columns = checked
        return self

    def distinct(self, enabled: bool = True) -> Self:
        self._distinct = enabled
        return self

    def from_(self, table: "Union[str, SelectBuilder]", alias: Optional[str] = None) -> Self:
        """Set the source table, or a subselect with an alias.

        Raises:
            MalformedClauseError: If a subselect is given without an alias.

        Returns:
            The current builder instance for method chaining.
        """
        if isinstance(table, SelectBuilder):
            if table is self:
                msg = "A select cannot use itself as its source"
                raise MalformedClauseError(msg)
            self._table = table
            self._table_alias = check_name(alias, "Subselect alias")
            return self
        self._table = check_name(table, "Table name")
        self._table_alias = None
        return self

    def for_update(self, enabled: bool = True) -> Self:
        self._for_update = enabled
        return self
