"""MySQL dialect generator."""
from __future__ import annotations

from quarrydb.compile.base import SQLGenerator
from quarrydb.query.options import InsertOptions, ReplaceOptions, UpdateOptions


class MySQLGenerator(SQLGenerator):
    """Generates MySQL-flavoured SQL.

    MySQL supports ``REPLACE INTO`` natively, so the ``keys`` of a REPLACE
    are not needed.  ``IGNORE`` applies to INSERT and UPDATE only; a REPLACE
    never ignores.  The offset goes in front of the row count:
    ``LIMIT offset, n``.

    Identifiers are quoted with backticks (`` ` ``) rather than double-quotes.
    """

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace("`", "``")
        return f"`{escaped}`"

    def insert_keyword(self, options: InsertOptions | ReplaceOptions) -> str:
        if options.type == "REPLACE":
            return "REPLACE"
        return "INSERT IGNORE" if options.ignore else "INSERT"

    def update_keyword(self, options: UpdateOptions) -> str:
        return "UPDATE IGNORE" if options.ignore else "UPDATE"

    def limit_clause(self, limit: int, offset: int | None = None) -> str:
        if offset:
            return f"LIMIT {offset}, {limit}"
        return f"LIMIT {limit}"
