"""Clause-level SQL builders.

Each class handles exactly one SQL clause and is shared by every dialect.
Dialect differences are reached through the owning
:class:`~quarrydb.compile.base.SQLGenerator` (identifier quoting).

Classes
-------
JoinClauseBuilder:  ``<TYPE> JOIN <table> [AS <alias>] [ON <condition>]``
SetClauseBuilder:   ``SET <col> = <value>, …``
RowsClauseBuilder:  ``(<columns>) VALUES (…), (…)`` with row validation
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from quarrydb.errors import InvalidQueryError
from quarrydb.query.options import JoinSpec

if TYPE_CHECKING:
    from quarrydb.compile.base import SQLGenerator


def render_value(value: Any) -> str:
    """Render a row / SET value fragment.

    ``None`` becomes ``NULL`` and booleans become ``1`` / ``0``; anything else
    is taken as an SQL fragment.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def humanize_positions(positions: Sequence[int]) -> str:
    """Return ``"1, 2 and 4"`` for ``[1, 2, 4]`` (a bare number for one item)."""
    if len(positions) == 1:
        return str(positions[0])
    head = ", ".join(str(p) for p in positions[:-1])
    return f"{head} and {positions[-1]}"


class JoinClauseBuilder:
    """Builds the JOIN fragments of a SELECT."""

    def build(self, joins: Sequence[JoinSpec]) -> list[str]:
        return [self._build_one(join) for join in joins]

    @staticmethod
    def _build_one(join: JoinSpec) -> str:
        sql = f"{join.join_type.upper()} JOIN {join.table}"
        if join.alias:
            sql += f" AS {join.alias}"
        if join.condition:
            sql += f" ON {join.condition}"
        return sql


class SetClauseBuilder:
    """Builds the ``SET`` clause of an UPDATE."""

    def build(self, values: dict[str, Any]) -> str:
        if not values:
            raise InvalidQueryError(
                "An UPDATE requires at least one column to set.", clause="SET"
            )
        assignments = [f"{column} = {render_value(v)}" for column, v in values.items()]
        return f"SET {', '.join(assignments)}"


class RowsClauseBuilder:
    """Builds the column list and VALUES tuples of an INSERT / REPLACE.

    The first row's keys define the column list; every other row must have
    the same keys in the same order.
    """

    def __init__(self, generator: SQLGenerator) -> None:
        self._generator = generator

    def columns(self, rows: Sequence[dict[str, Any]]) -> list[str]:
        """Return the shared column names of ``rows``.

        Raises:
            InvalidQueryError: If there are no rows, or if any row's keys
                differ from the first row's (every offending 1-based row
                position is listed).
        """
        if not rows:
            raise InvalidQueryError(
                "There must be at least one row specified to insert or replace.",
                clause="VALUES",
            )

        columns = list(rows[0].keys())
        mismatched = [
            position
            for position, row in enumerate(rows[1:], start=2)
            if list(row.keys()) != columns
        ]
        if mismatched:
            raise InvalidQueryError(
                "Row keys do not match, found at row values "
                f"{humanize_positions(mismatched)}.",
                clause="VALUES",
            )
        if not columns:
            raise InvalidQueryError(
                "Rows to insert or replace must have at least one column.",
                clause="VALUES",
            )
        return columns

    def build(self, rows: Sequence[dict[str, Any]]) -> str:
        columns = self.columns(rows)
        quote = self._generator.quote_identifier
        column_sql = ", ".join(quote(c) for c in columns)
        tuples = [
            f"({', '.join(render_value(v) for v in row.values())})" for row in rows
        ]
        return f"({column_sql}) VALUES {', '.join(tuples)}"
