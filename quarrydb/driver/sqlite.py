"""SQLite driver built on the standard library ``sqlite3`` module."""
from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from quarrydb.compile.sqlite import SQLiteGenerator
from quarrydb.driver.base import Driver
from quarrydb.driver.result import BufferedResult, DriverResult
from quarrydb.errors import ConnectionOptionsError, DatabaseConnectionError

logger = logging.getLogger(__name__)

#: Generic SQLite error code, used when the exception carries none.
SQLITE_ERROR = 1

MEMORY = ":memory:"


class SQLiteConnectionOptions(BaseModel):
    """Connection options for :class:`SQLiteDriver`.

    Attributes:
        filename: Database file path, or ``:memory:``.
        read_only: Open the file read-only.
        create: Create the file when it does not exist (ignored when read-only).
        timeout: Seconds to wait for a locked database.
    """

    model_config = ConfigDict(extra="forbid")

    filename: str
    read_only: bool = False
    create: bool = True
    timeout: float = 5.0

    def database_uri(self) -> str:
        if self.filename == MEMORY:
            return MEMORY
        mode = "ro" if self.read_only else ("rwc" if self.create else "rw")
        return f"file:{quote(self.filename)}?mode={mode}"


class SQLiteResult(BufferedResult):
    """Result cursor for SQLite.

    Rows are read from the ``sqlite3`` cursor up front (it cannot seek); the
    cursor itself stays owned by the result until it is released.
    """

    def __init__(
        self,
        result: Any,
        affected_rows: int = 0,
        insert_id: int = 0,
        error_code: int | None = None,
        error_message: str | None = None,
        query: str | None = None,
    ) -> None:
        rows: list[dict[str, Any]] = []
        if isinstance(result, sqlite3.Cursor):
            columns = [d[0] for d in result.description or ()]
            rows = [dict(zip(columns, values)) for values in result.fetchall()]
            affected_rows = insert_id = 0
        super().__init__(
            result,
            rows,
            affected_rows=affected_rows,
            insert_id=insert_id,
            error_code=error_code,
            error_message=error_message,
            query=query,
        )

    def _release_callback(self) -> Callable[[], None]:
        if isinstance(self._result, sqlite3.Cursor):
            return self._result.close
        return super()._release_callback()


class SQLiteDriver(Driver):
    """Driver for SQLite databases.

    Required connection options: ``filename``.  The connection runs in
    autocommit mode (``isolation_level=None``) so every ``execute()`` stands
    alone.

    Args:
        client_factory: Replacement for :func:`sqlite3.connect`.
        escape_html: Passed to the variable substituter.
    """

    engine_name = "sqlite"
    generator_class = SQLiteGenerator

    def __init__(
        self,
        client_factory: Callable[..., Any] | None = None,
        escape_html: bool = True,
    ) -> None:
        super().__init__(client_factory or sqlite3.connect, escape_html=escape_html)

    def connect(self, options: Mapping[str, Any]) -> bool:
        try:
            settings = SQLiteConnectionOptions.model_validate(dict(options))
        except PydanticValidationError as exc:
            if "filename" not in options:
                raise ConnectionOptionsError("SQLite", ["filename"]) from exc
            raise ConnectionOptionsError(
                "SQLite", [], f"Invalid SQLite engine options: {exc}"
            ) from exc

        try:
            self._connection = self._client_factory(
                settings.database_uri(),
                timeout=settings.timeout,
                isolation_level=None,
                uri=settings.filename != MEMORY,
            )
        except sqlite3.Error as exc:
            raise DatabaseConnectionError(str(exc)) from exc

        logger.info("Connected to SQLite database %s", settings.filename)
        return True

    def _run(self, sql: str) -> DriverResult:
        cursor = self._connection.cursor()
        try:
            cursor.execute(sql)
        except (sqlite3.Error, UnicodeEncodeError) as exc:
            cursor.close()
            return SQLiteResult(
                False,
                error_code=getattr(exc, "sqlite_errorcode", None) or SQLITE_ERROR,
                error_message=str(exc),
                query=sql,
            )

        if cursor.description is not None:
            return SQLiteResult(cursor, query=sql)

        affected, insert_id = cursor.rowcount, cursor.lastrowid or 0
        cursor.close()
        return SQLiteResult(
            True,
            affected_rows=max(affected, 0),
            insert_id=insert_id,
            query=sql,
        )

    def sanitize(self, text: str) -> str:
        self._require_connection()
        return text.replace("'", "''")
