"""SQLite dialect generator."""
from __future__ import annotations

from quarrydb.compile.base import SQLGenerator
from quarrydb.query.options import InsertOptions, ReplaceOptions, UpdateOptions


class SQLiteGenerator(SQLGenerator):
    """Generates SQLite-flavoured SQL.

    SQLite has no ``REPLACE``/``IGNORE`` modifiers of its own; the conflict
    clauses ``INSERT OR REPLACE``, ``INSERT OR IGNORE`` and
    ``UPDATE OR IGNORE`` are used instead.  The offset follows the row
    count: ``LIMIT n OFFSET offset``.
    """

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    @property
    def dialect_aliases(self) -> tuple[str, ...]:
        return ("sqlite", "sqlite3")

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def insert_keyword(self, options: InsertOptions | ReplaceOptions) -> str:
        if options.type == "REPLACE":
            return "INSERT OR REPLACE"
        return "INSERT OR IGNORE" if options.ignore else "INSERT"

    def update_keyword(self, options: UpdateOptions) -> str:
        return "UPDATE OR IGNORE" if options.ignore else "UPDATE"

    def limit_clause(self, limit: int, offset: int | None = None) -> str:
        if offset:
            return f"LIMIT {limit} OFFSET {offset}"
        return f"LIMIT {limit}"
