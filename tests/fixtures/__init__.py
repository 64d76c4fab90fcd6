"""Test fixtures: an in-process stand-in for a PyMySQL connection and sample rows."""

from __future__ import annotations

from typing import Any

USERS = [
    {"user_id": 1, "user_name": "alice", "email": "alice@example.com"},
    {"user_id": 2, "user_name": "bob", "email": "bob@example.com"},
    {"user_id": 3, "user_name": "carol", "email": None},
]

MYSQL_OPTIONS = {"host": "localhost", "user": "app", "pwd": "secret", "db_name": "app"}

SQLITE_DDL = """
CREATE TABLE users (
    user_id   INTEGER PRIMARY KEY,
    user_name TEXT NOT NULL UNIQUE,
    email     TEXT,
    group_id  INTEGER
);
CREATE TABLE user_groups (
    group_id   INTEGER PRIMARY KEY,
    group_name TEXT NOT NULL
);
"""


class FakeCursor:
    """Buffered cursor answering from the connection's scripted responses."""

    def __init__(self, connection: FakeMySQLConnection) -> None:
        self._connection = connection
        self.description: tuple[tuple[Any, ...], ...] | None = None
        self.rowcount = -1
        self.lastrowid: int | None = None
        self.closed = False
        self._rows: list[tuple[Any, ...]] = []
        self._position = 0

    def execute(self, sql: str) -> int:
        sql.encode("utf-8")
        self._connection.executed.append(sql)
        response = self._connection.responses.pop(0) if self._connection.responses else {}
        if "error" in response:
            raise response["error"]

        if "rows" in response:
            columns = response.get("columns") or list(response["rows"][0].keys())
            self.description = tuple((name, None, None, None, None, None, None) for name in columns)
            self._rows = [tuple(row[c] for c in columns) for row in response["rows"]]
            self.rowcount = len(self._rows)
        else:
            self.rowcount = response.get("rowcount", 0)
            self.lastrowid = response.get("lastrowid", 0)
        return self.rowcount

    def fetchone(self) -> tuple[Any, ...] | None:
        if self._position >= len(self._rows):
            return None
        row = self._rows[self._position]
        self._position += 1
        return row

    def scroll(self, value: int, mode: str = "relative") -> None:
        assert mode == "absolute"
        self._position = value

    def close(self) -> None:
        self.closed = True


class FakeMySQLConnection:
    """Records every statement and replays ``responses`` in order.

    A response is a dict with either ``rows`` (list of row dicts, optional
    ``columns``), ``rowcount`` / ``lastrowid``, or ``error`` (an exception to
    raise from ``execute``).  With no response left, statements succeed with
    zero affected rows.
    """

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs
        self.executed: list[str] = []
        self.responses: list[dict[str, Any]] = []
        self.cursors: list[FakeCursor] = []

    def cursor(self, cursor_class: Any = None) -> FakeCursor:
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor

    def escape_string(self, text: str) -> str:
        return text.replace("\\", "\\\\").replace("'", "\\'")


class FakeMySQLClient:
    """Stands in for ``pymysql.connect``; keeps the connection it opened."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.connection: FakeMySQLConnection | None = None
        self.calls = 0

    def __call__(self, **kwargs: Any) -> FakeMySQLConnection:
        self.calls += 1
        if self.error is not None:
            raise self.error
        self.connection = FakeMySQLConnection(**kwargs)
        return self.connection
