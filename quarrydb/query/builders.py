"""Fluent builders that accumulate the options of one SQL statement.

Every builder owns a plain options dict and returns ``self`` from each setter
so calls can be chained::

    result = (
        Query.select()
        .expr("u.user_id, u.user_name")
        .from_("users", "u")
        .join("left", "groups", "g", "g.group_id = u.group_id")
        .where("u.user_id = {int:user_id}")
        .variables(user_id=42)
        .limit(1)
        .execute()
    )

Builders know nothing about SQL text; :meth:`Query.build` validates the
accumulated options into a :data:`~quarrydb.query.options.QueryOptions` model
and :meth:`Query.execute` hands that model to the current execution target.

.. warning::
   ``UpdateQuery`` and ``DeleteQuery`` without ``where()`` affect **every
   row** of the table.
"""
from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from quarrydb.context import QueryExecutor, get_default_context
from quarrydb.errors import InvalidQueryError
from quarrydb.query.options import coerce_options, normalize_type

if TYPE_CHECKING:
    from quarrydb.driver.result import DriverResult


class Query:
    """Base builder, also usable directly as the generic fallback builder.

    The statement ``type`` is fixed at construction; attempts to overwrite it
    through a setter are ignored.

    Args:
        query_type: Statement kind, case-insensitive (``select``, ``insert`` …).

    Raises:
        InvalidQueryError: If ``query_type`` is unknown.
    """

    def __init__(self, query_type: str) -> None:
        self._options: dict[str, Any] = {"type": normalize_type(query_type)}

    # ------------------------------------------------------------------
    # Option access
    # ------------------------------------------------------------------

    def _set_option(self, name: str, value: Any) -> None:
        if name == "type":
            return
        self._options[name] = value

    def _get_option(self, name: str, default: Any = None) -> Any:
        return self._options.get(name, default)

    @property
    def type(self) -> str:
        return self._options["type"]

    @property
    def options(self) -> dict[str, Any]:
        """A copy of the accumulated options."""
        return copy.deepcopy(self._options)

    def option(self, name: str, value: Any) -> Query:
        """Set an arbitrary option (``type`` cannot be changed)."""
        self._set_option(name, value)
        return self

    def variables(
        self,
        variables: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> Query:
        """Merge values for ``{type:name}`` placeholders into the query."""
        merged = dict(self._get_option("variables", {}))
        merged.update(variables or {})
        merged.update(kwargs)
        self._set_option("variables", merged)
        return self

    # ------------------------------------------------------------------
    # Build / execute
    # ------------------------------------------------------------------

    def build(self) -> Any:
        """Validate the accumulated options into a ``QueryOptions`` model.

        Raises:
            InvalidQueryError: If a required option is missing or malformed.
        """
        return coerce_options(self._options)

    def execute(self, context: QueryExecutor | None = None) -> DriverResult:
        """Execute the query and return its result cursor.

        Args:
            context: Execution target.  Defaults to the process-wide
                :class:`~quarrydb.context.ExecutionContext`, which prefers an
                installed mocker over the default database.  The target is
                resolved now, not when the builder was created.

        The options are validated with :meth:`build` before any target sees
        them, so a mocker never records a structurally invalid query.

        Raises:
            InvalidQueryError: If the accumulated options do not validate.
        """
        target = context if context is not None else get_default_context()
        return target.execute(self.build())

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def create(cls, query_type: str) -> Query:
        """Return a generic builder for ``query_type``."""
        return Query(query_type)

    @staticmethod
    def select() -> SelectQuery:
        return SelectQuery()

    @staticmethod
    def insert() -> InsertQuery:
        return InsertQuery()

    @staticmethod
    def replace() -> ReplaceQuery:
        return ReplaceQuery()

    @staticmethod
    def update() -> UpdateQuery:
        return UpdateQuery()

    @staticmethod
    def delete() -> DeleteQuery:
        return DeleteQuery()

    @staticmethod
    def native() -> NativeQuery:
        return NativeQuery()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._options!r})"


class SelectQuery(Query):
    """Builder for SELECT statements."""

    def __init__(self) -> None:
        super().__init__("SELECT")

    def distinct(self, is_distinct: bool = True) -> SelectQuery:
        self._set_option("distinct", bool(is_distinct))
        return self

    def expr(self, expr: str) -> SelectQuery:
        """Set the select expression list (defaults to ``*``)."""
        self._set_option("expr", expr)
        return self

    def from_(self, table: str, alias: str | None = None) -> SelectQuery:
        self._set_option("table", table)
        if alias is not None:
            self._set_option("alias", alias)
        return self

    def join(
        self,
        join_type: str,
        table: str,
        alias: str | None = None,
        condition: str | None = None,
    ) -> SelectQuery:
        """Append a JOIN; joins are rendered in the order they are added."""
        joins = list(self._get_option("joins", []))
        joins.append(
            {
                "join_type": join_type,
                "table": table,
                "alias": alias,
                "condition": condition,
            }
        )
        self._set_option("joins", joins)
        return self

    def where(self, condition: str) -> SelectQuery:
        self._set_option("condition", condition)
        return self

    def group_by(self, group_by: str) -> SelectQuery:
        self._set_option("group_by", group_by)
        return self

    def having(self, having: str) -> SelectQuery:
        """Set the HAVING condition (only rendered when GROUP BY is set)."""
        self._set_option("having", having)
        return self

    def order_by(self, order_by: str) -> SelectQuery:
        self._set_option("order_by", order_by)
        return self

    def limit(self, limit: int | None) -> SelectQuery:
        if limit is not None:
            self._set_option("limit", limit)
        return self

    def offset(self, offset: int | None) -> SelectQuery:
        if offset is not None:
            self._set_option("offset", offset)
        return self


class InsertQuery(Query):
    """Builder for INSERT statements.

    Each :meth:`values` call appends one row, so several calls produce a
    multi-row INSERT.  All rows must share the same columns in the same order.
    """

    _TYPE = "INSERT"

    def __init__(self) -> None:
        super().__init__(self._TYPE)

    def ignore(self, ignore: bool = True) -> InsertQuery:
        self._set_option("ignore", bool(ignore))
        return self

    def into(self, table: str) -> InsertQuery:
        self._set_option("table", table)
        return self

    def values(self, row: Mapping[str, Any]) -> InsertQuery:
        """Append one row of column → SQL value fragment."""
        rows = list(self._get_option("rows", []))
        rows.append(dict(row))
        self._set_option("rows", rows)
        return self


class ReplaceQuery(InsertQuery):
    """Builder for REPLACE statements."""

    _TYPE = "REPLACE"

    def keys(self, column_names: Iterable[str]) -> ReplaceQuery:
        """Set the primary / unique key columns of the target table."""
        self._set_option("keys", list(column_names))
        return self


class UpdateQuery(Query):
    """Builder for UPDATE statements.

    .. warning:: Without :meth:`where` every row of the table is updated.
    """

    def __init__(self) -> None:
        super().__init__("UPDATE")

    def table(self, table: str) -> UpdateQuery:
        self._set_option("table", table)
        return self

    def ignore(self, ignore: bool = True) -> UpdateQuery:
        self._set_option("ignore", bool(ignore))
        return self

    def set(self, values: Mapping[str, Any]) -> UpdateQuery:
        """Set the column → SQL value fragment map for the SET clause."""
        self._set_option("values", dict(values))
        return self

    def where(self, condition: str) -> UpdateQuery:
        self._set_option("condition", condition)
        return self

    def order_by(self, order_by: str) -> UpdateQuery:
        self._set_option("order_by", order_by)
        return self

    def limit(self, limit: int | None) -> UpdateQuery:
        if limit is not None:
            self._set_option("limit", limit)
        return self


class DeleteQuery(Query):
    """Builder for DELETE statements.

    .. warning:: Without :meth:`where` every row of the table is deleted.
    """

    def __init__(self) -> None:
        super().__init__("DELETE")

    def from_(self, table: str) -> DeleteQuery:
        self._set_option("table", table)
        return self

    def where(self, condition: str) -> DeleteQuery:
        self._set_option("condition", condition)
        return self

    def order_by(self, order_by: str) -> DeleteQuery:
        self._set_option("order_by", order_by)
        return self

    def limit(self, limit: int | None) -> DeleteQuery:
        if limit is not None:
            self._set_option("limit", limit)
        return self


class NativeQuery(Query):
    """Builder for hand-written, engine-specific SQL.

    Register one template per engine; the driver executing the query picks
    the template written for its own dialect::

        Query.native().using("mysql").query("SHOW TABLES").execute()
    """

    def __init__(self) -> None:
        super().__init__("NATIVE")
        self._using: str | None = None

    def using(self, engine_name: str) -> NativeQuery:
        """Select the engine the next :meth:`query` call is written for."""
        self._using = engine_name.lower()
        return self

    def query(self, sql: str) -> NativeQuery:
        """Register ``sql`` as the template for the engine chosen by :meth:`using`.

        Raises:
            InvalidQueryError: If :meth:`using` was not called first.
        """
        if self._using is None:
            raise InvalidQueryError(
                "The engine for a native query must be specified with using() first.",
                clause="NATIVE",
            )
        queries = dict(self._get_option("queries", {}))
        queries[self._using] = sql
        self._set_option("queries", queries)
        return self
