"""Generator abstraction: QueryOptions → SQL text.

The Template Method pattern is used:

- ``SQLGenerator`` defines the algorithm skeleton for each statement kind
  and the fixed clause order.
- ``MySQLGenerator`` and ``SQLiteGenerator`` override the dialect-specific
  steps (INSERT / REPLACE / UPDATE keywords, LIMIT placement, quoting).

Generation is pure: the same options always produce the same text, and
nothing is executed.  Placeholders are left untouched; substitution happens
afterwards in the driver.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from quarrydb.compile.clauses import JoinClauseBuilder, RowsClauseBuilder, SetClauseBuilder
from quarrydb.errors import InvalidQueryError
from quarrydb.query.options import (
    DeleteOptions,
    InsertOptions,
    NativeOptions,
    ReplaceOptions,
    SelectOptions,
    UpdateOptions,
    coerce_options,
)

logger = logging.getLogger(__name__)


class SQLGenerator(ABC):
    """Abstract base for dialect-specific SQL generators."""

    def __init__(self) -> None:
        self._joins = JoinClauseBuilder()
        self._set = SetClauseBuilder()
        self._rows = RowsClauseBuilder(self)
        self._handlers: dict[str, Callable[[Any], str]] = {
            "SELECT": self.build_select,
            "UPDATE": self.build_update,
            "INSERT": self.build_insert,
            "REPLACE": self.build_insert,
            "DELETE": self.build_delete,
            "NATIVE": self.build_native,
        }

    # ------------------------------------------------------------------
    # Dialect hooks
    # ------------------------------------------------------------------

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (``'mysql'`` or ``'sqlite'``)."""

    @property
    def dialect_aliases(self) -> tuple[str, ...]:
        """Names a native query may be registered under for this dialect."""
        return (self.dialect_name,)

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Return a properly-quoted SQL identifier."""

    @abstractmethod
    def insert_keyword(self, options: InsertOptions | ReplaceOptions) -> str:
        """Return the statement head up to ``INTO`` (e.g. ``INSERT IGNORE``)."""

    @abstractmethod
    def update_keyword(self, options: UpdateOptions) -> str:
        """Return the statement head before the table (e.g. ``UPDATE IGNORE``)."""

    @abstractmethod
    def limit_clause(self, limit: int, offset: int | None = None) -> str:
        """Return the LIMIT clause, including the offset when given."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self, options: Any) -> str:
        """Compile ``options`` to SQL.

        Args:
            options: A ``QueryOptions`` model, or a mapping that validates
                into one.

        Returns:
            The SQL text, placeholders still in place.

        Raises:
            InvalidQueryError: If the options are structurally invalid.
        """
        options = coerce_options(options)
        return self._handlers[options.type](options)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def build_select(self, options: SelectOptions) -> str:
        head = "SELECT DISTINCT" if options.distinct else "SELECT"
        parts: list[str] = [f"{head} {options.expr}", f"FROM {options.table}"]
        if options.alias:
            parts.append(f"AS {options.alias}")

        parts.extend(self._joins.build(options.joins))
        parts.append(f"WHERE {options.condition or '1 = 1'}")

        if options.group_by:
            parts.append(f"GROUP BY {options.group_by}")
            if options.having:
                parts.append(f"HAVING {options.having}")
        elif options.having:
            logger.warning(
                "HAVING %r ignored: it is only rendered together with GROUP BY",
                options.having,
            )

        if options.order_by:
            parts.append(f"ORDER BY {options.order_by}")
        if options.limit is not None:
            parts.append(self.limit_clause(options.limit, options.offset))

        return " ".join(parts)

    def build_update(self, options: UpdateOptions) -> str:
        parts: list[str] = [
            f"{self.update_keyword(options)} {options.table}",
            self._set.build(options.values),
        ]
        parts.extend(self._filter_clauses(options, "UPDATE"))
        return " ".join(parts)

    def build_insert(self, options: InsertOptions | ReplaceOptions) -> str:
        return (
            f"{self.insert_keyword(options)} INTO {options.table} "
            f"{self._rows.build(options.rows)}"
        )

    def build_delete(self, options: DeleteOptions) -> str:
        parts: list[str] = [f"DELETE FROM {options.table}"]
        parts.extend(self._filter_clauses(options, "DELETE"))
        return " ".join(parts)

    def build_native(self, options: NativeOptions) -> str:
        for name in self.dialect_aliases:
            if name in options.queries:
                return options.queries[name]
        raise InvalidQueryError(
            f"The native query has no SQL for the {self.dialect_name} engine "
            f"(available: {sorted(options.queries)}).",
            clause="NATIVE",
        )

    # ------------------------------------------------------------------
    # Shared tail: WHERE / ORDER BY / LIMIT
    # ------------------------------------------------------------------

    def _filter_clauses(self, options: UpdateOptions | DeleteOptions, kind: str) -> list[str]:
        parts: list[str] = []
        if options.condition:
            parts.append(f"WHERE {options.condition}")
        else:
            logger.warning("%s on %s has no WHERE condition: every row is affected", kind, options.table)
        if options.order_by:
            parts.append(f"ORDER BY {options.order_by}")
        if options.limit is not None:
            parts.append(self.limit_clause(options.limit))
        return parts
