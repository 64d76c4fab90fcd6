"""MySQL driver built on PyMySQL."""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

import pymysql
import pymysql.cursors
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from quarrydb.compile.mysql import MySQLGenerator
from quarrydb.driver.base import Driver
from quarrydb.driver.result import DriverResult
from quarrydb.errors import ConnectionOptionsError, DatabaseConnectionError

logger = logging.getLogger(__name__)

#: Client error code used when PyMySQL raises without one (CR_UNKNOWN_ERROR).
UNKNOWN_ERROR_CODE = 2000


class MySQLConnectionOptions(BaseModel):
    """Connection options for :class:`MySQLDriver`.

    Unknown keys are passed through to :func:`pymysql.connect` unchanged.

    Attributes:
        host: Server host name.
        user: User name.
        db_name: Database to select.
        pwd: Password; empty when omitted.
        port: Server port.
        charset: Connection character set.
    """

    model_config = ConfigDict(extra="allow")

    host: str
    user: str
    db_name: str
    pwd: str = ""
    port: int = 3306
    charset: str = "utf8mb4"

    def client_kwargs(self) -> dict[str, Any]:
        return {
            "host": self.host,
            "user": self.user,
            "password": self.pwd,
            "database": self.db_name,
            "port": self.port,
            "charset": self.charset,
            "autocommit": True,
            **(self.model_extra or {}),
        }


def _error_details(exc: Exception) -> tuple[int, str]:
    """Split a PyMySQL (or encoding) exception into ``(errno, message)``."""
    args = exc.args
    if args and isinstance(args[0], int):
        message = str(args[1]) if len(args) > 1 else str(exc)
        return args[0], message
    return UNKNOWN_ERROR_CODE, str(exc)


class MySQLResult(DriverResult):
    """Result cursor over a buffered PyMySQL cursor.

    Args:
        result: The PyMySQL cursor for row-returning statements, otherwise a
            bool acknowledgement.
        affected_rows: Rows changed (acknowledgements only).
        insert_id: Last auto-increment id (acknowledgements only).
        error_code: MySQL error number; ``0`` means no error.
        error_message: MySQL error message.
        query: The SQL that was executed.
    """

    def __init__(
        self,
        result: Any,
        affected_rows: int = 0,
        insert_id: int = 0,
        error_code: int | None = 0,
        error_message: str | None = None,
        query: str | None = None,
    ) -> None:
        self._affected_rows = affected_rows
        self._insert_id = insert_id
        self._columns: list[str] = []
        if not isinstance(result, bool) and result is not None:
            self._columns = [d[0] for d in result.description or ()]
        super().__init__(result, error_code, error_message, query)

    def _release_callback(self) -> Callable[[], None]:
        if self.has_rows:
            return self._result.close
        return super()._release_callback()

    def affected_rows(self) -> int:
        if self.has_rows:
            return 0
        return self._affected_rows

    def insert_id(self) -> int:
        if self.has_rows:
            return 0
        return self._insert_id

    def num_rows(self) -> int:
        if not self.has_rows:
            return 0
        return self._result.rowcount

    def seek(self, offset: int) -> bool:
        if not self.has_rows:
            return False
        try:
            offset = int(offset)
        except (TypeError, ValueError):
            return False
        if offset < 0 or offset >= self.num_rows():
            return False
        self._result.scroll(offset, mode="absolute")
        return True

    def fetch_row(self) -> tuple[Any, ...] | None:
        if not self.has_rows:
            return None
        row = self._result.fetchone()
        return tuple(row) if row is not None else None

    def fetch_assoc(self) -> dict[str, Any] | None:
        row = self.fetch_row()
        if row is None:
            return None
        return dict(zip(self._columns, row))


class MySQLDriver(Driver):
    """Driver for MySQL-family servers (MySQL, MariaDB).

    Required connection options: ``host``, ``user``, ``db_name``.  The
    connection runs in autocommit mode so every ``execute()`` stands alone.

    Args:
        client_factory: Replacement for :func:`pymysql.connect`.
        escape_html: Passed to the variable substituter.
    """

    engine_name = "mysql"
    generator_class = MySQLGenerator

    def __init__(
        self,
        client_factory: Callable[..., Any] | None = None,
        escape_html: bool = True,
    ) -> None:
        super().__init__(client_factory or pymysql.connect, escape_html=escape_html)

    def connect(self, options: Mapping[str, Any]) -> bool:
        try:
            settings = MySQLConnectionOptions.model_validate(dict(options))
        except PydanticValidationError as exc:
            missing = [str(e["loc"][0]) for e in exc.errors() if e["type"] == "missing"]
            raise ConnectionOptionsError(
                "MySQL",
                missing,
                None if missing else f"Invalid MySQL engine options: {exc}",
            ) from exc

        try:
            self._connection = self._client_factory(**settings.client_kwargs())
        except pymysql.MySQLError as exc:
            raise DatabaseConnectionError(_error_details(exc)[1]) from exc

        logger.info("Connected to MySQL database %s on %s", settings.db_name, settings.host)
        return True

    def _run(self, sql: str) -> DriverResult:
        cursor = self._connection.cursor(pymysql.cursors.Cursor)
        try:
            cursor.execute(sql)
        except (pymysql.MySQLError, UnicodeEncodeError) as exc:
            cursor.close()
            code, message = _error_details(exc)
            return MySQLResult(False, error_code=code, error_message=message, query=sql)

        if cursor.description is not None:
            return MySQLResult(cursor, query=sql)

        affected, insert_id = cursor.rowcount, cursor.lastrowid or 0
        cursor.close()
        return MySQLResult(
            True,
            affected_rows=max(affected, 0),
            insert_id=insert_id,
            query=sql,
        )

    def sanitize(self, text: str) -> str:
        return self._require_connection().escape_string(text)
