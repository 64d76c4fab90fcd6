"""Execution context: where a built query is sent when executed.

An :class:`ExecutionContext` packages the two possible execution targets: an
optional mocker (takes precedence) and an optional :class:`Database`.  When
neither is set the process-wide default ``Database.get_instance()`` is used.

Builders resolve the target when ``execute()`` is called, never when they are
constructed, so installing or clearing a mocker between building a query and
executing it is honoured.

Application code normally relies on the module-level default context::

    from quarrydb.context import mocked
    from quarrydb.mock import QueryMocker

    mocker = QueryMocker()
    mocker.set_result([{"user_id": 1}])
    with mocked(mocker):
        result = Query.select().from_("users").execute()

Code that prefers explicit wiring passes its own context (or any object with
an ``execute(options)`` method) to ``execute()``.
"""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from quarrydb.database import Database
    from quarrydb.driver.result import DriverResult


class QueryExecutor(Protocol):
    """Anything that can execute a set of query options."""

    def execute(self, options: Any) -> DriverResult:
        ...


@dataclass
class ExecutionContext:
    """Selects the execution target for built queries.

    Attributes:
        database: Explicit database to execute against.  ``None`` means the
            process-wide default instance.
        mocker: When set, every execution is routed to it instead.
    """

    database: Database | None = None
    mocker: QueryExecutor | None = None

    def executor(self) -> QueryExecutor:
        """Return the target for an execution happening now."""
        if self.mocker is not None:
            return self.mocker
        if self.database is not None:
            return self.database

        from quarrydb.database import Database

        return Database.get_instance()

    def execute(self, options: Any) -> DriverResult:
        return self.executor().execute(options)


_default_context = ExecutionContext()


def get_default_context() -> ExecutionContext:
    """Return the process-wide context used when ``execute()`` gets none."""
    return _default_context


def set_mocker(mocker: QueryExecutor) -> None:
    """Route every default-context execution to ``mocker``."""
    _default_context.mocker = mocker


def get_mocker() -> QueryExecutor | None:
    return _default_context.mocker


def clear_mocker() -> None:
    _default_context.mocker = None


@contextmanager
def mocked(mocker: QueryExecutor) -> Iterator[QueryExecutor]:
    """Install ``mocker`` for the duration of the block.

    The previously installed mocker (if any) is restored on exit.
    """
    previous = _default_context.mocker
    _default_context.mocker = mocker
    try:
        yield mocker
    finally:
        _default_context.mocker = previous
