from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional, Union

from typing_extensions import Self

from sqlbricks.builder._base import QueryBuilder, check_name, flatten_args
from sqlbricks.builder._select import SelectBuilder
from sqlbricks.builder.mixins import ReturningClauseMixin
from sqlbricks.exceptions import MalformedClauseError

if TYPE_CHECKING:
    from sqlbricks.typing import ColumnExpression, Row

__all__ = ("InsertBuilder",)


@dataclass(eq=False)
class InsertBuilder(QueryBuilder, ReturningClauseMixin):
    """Builder for INSERT statements.

    Rows are given as mappings; the first row's keys define the column list
    and every later row must have exactly the same keys. Row values and a
    source subselect are mutually exclusive.

    Example:
        ```python
        insert().into("users").values([{"id": 1, "name": "John"}, {"id": 2, "name": "Joe"}])

        insert().into("archive").columns("id", "name").select(select("id", "name").from_("users"))
        ```
    """

    _table: Optional[str] = field(default=None, init=False)
    _columns: "list[str]" = field(default_factory=list, init=False)
    _rows: "list[dict[str, Any]]" = field(default_factory=list, init=False)
    _select: Optional[SelectBuilder] = field(default=None, init=False)
    _returning: "Optional[list[ColumnExpression]]" = field(default=None, init=False)

    def into(self, table: str) -> Self:
        self._table = check_name(table, "Table name")
        return self

    def columns(self, *columns: str) -> Self:
        """Set an explicit column list.

        Required order for ``INSERT ... SELECT``; with row values it fixes the
        column order and every row must have exactly these keys.

        Returns:
            The current builder instance for method chaining.
        """
        names = [check_name(column, "Insert column") for column in flatten_args(columns)]
        if len(set(names)) != len(names):
            msg = f"Insert columns must be unique, got {names!r}"
            raise MalformedClauseError(msg)
        if self._rows:
            _check_row_keys(self._rows, names)
        self._columns = names
        return self

    def values(self, rows: "Union[Row, Sequence[Row]]") -> Self:
        """Set the rows to insert, replacing any previous rows.

        Args:
            rows: One mapping of column to value, or a sequence of them.

        Raises:
            MalformedClauseError: If there are no rows, rows disagree on their
                columns, or a subselect has already been set.

        Returns:
            The current builder instance for method chaining.
        """
        if self._select is not None:
            msg = "INSERT cannot have both row values and a subselect"
            raise MalformedClauseError(msg)
        row_list = [rows] if isinstance(rows, Mapping) else rows
        if isinstance(row_list, (str, bytes)) or not isinstance(row_list, Sequence) or not row_list:
            msg = f"INSERT values must be a mapping or a non-empty sequence of mappings, got {rows!r}"
            raise MalformedClauseError(msg)
        copied: "list[dict[str, Any]]" = []
        for row in row_list:
            if not isinstance(row, Mapping) or not row:
                msg = f"INSERT row must be a non-empty mapping of column to value, got {row!r}"
                raise MalformedClauseError(msg)
            copied.append({check_name(column, "Insert column"): value for column, value in row.items()})
        _check_row_keys(copied, self._columns or list(copied[0]))
        self._rows = copied
        return self

    def select(self, subselect: SelectBuilder) -> Self:
        """Insert the result of a subselect instead of literal rows.

        Raises:
            MalformedClauseError: If row values have already been set.

        Returns:
            The current builder instance for method chaining.
        """
        if self._rows:
            msg = "INSERT cannot have both row values and a subselect"
            raise MalformedClauseError(msg)
        if not isinstance(subselect, SelectBuilder):
            msg = f"INSERT ... SELECT expects a select builder, got {subselect!r}"
            raise MalformedClauseError(msg)
        self._select = subselect
        return self

    @property
    def column_names(self) -> "list[str]":
        """Columns in emission order: the explicit list, else the first row's keys."""
        if self._columns:
            return list(self._columns)
        if self._rows:
            return list(self._rows[0])
        return []


def _check_row_keys(rows: "list[dict[str, Any]]", columns: "list[str]") -> None:
    expected = set(columns)
    for index, row in enumerate(rows):
        if set(row) != expected:
            msg = f"INSERT row {index} has columns {sorted(row)!r}, expected {sorted(expected)!r}"
            raise MalformedClauseError(msg)
