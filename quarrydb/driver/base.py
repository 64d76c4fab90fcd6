"""Driver abstraction: one executable unit per database engine.

A driver binds together an :class:`~quarrydb.compile.base.SQLGenerator`, a
:class:`~quarrydb.variables.VariableSubstituter` and a low-level client
connection.  ``execute(options)`` runs the whole pipeline::

    options ──generate──▶ SQL template ──substitute──▶ SQL ──client──▶ DriverResult

Lifecycle: a driver starts disconnected; :meth:`Driver.connect` opens the
connection (or raises).  Afterwards each :meth:`Driver.execute` call is
independent; no transaction spans several calls.  The connection lives as
long as the driver.
"""
from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, ClassVar

from quarrydb.compile.base import SQLGenerator
from quarrydb.driver.result import DriverResult
from quarrydb.errors import DatabaseConnectionError
from quarrydb.query.options import coerce_options
from quarrydb.variables import VariableSubstituter

logger = logging.getLogger(__name__)

#: ``YYYY-MM-DD HH:MM:SS`` – the TIMESTAMP literal format of MySQL and SQLite.
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class Driver(ABC):
    """Abstract base for engine drivers.

    Subclasses set :attr:`engine_name` and :attr:`generator_class`, and
    implement :meth:`connect`, :meth:`sanitize` and :meth:`_run`.

    Args:
        client_factory: Callable opening the low-level connection.  Drivers
            default to their client library's ``connect``; tests inject fakes.
        escape_html: Passed to the :class:`VariableSubstituter`.
    """

    engine_name: ClassVar[str]
    generator_class: ClassVar[type[SQLGenerator]]

    def __init__(
        self,
        client_factory: Callable[..., Any] | None = None,
        escape_html: bool = True,
    ) -> None:
        self._client_factory = client_factory
        self._connection: Any = None
        self.generator = self.generator_class()
        self.substituter = VariableSubstituter(self.sanitize, escape_html=escape_html)

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    @abstractmethod
    def connect(self, options: Mapping[str, Any]) -> bool:
        """Open the connection described by ``options``.

        Returns:
            ``True`` once connected.

        Raises:
            ConnectionOptionsError: If required options are missing.
            DatabaseConnectionError: If the client cannot connect.
        """

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @property
    def connection(self) -> Any:
        """The low-level client connection owned by this driver."""
        return self._require_connection()

    def _require_connection(self) -> Any:
        if self._connection is None:
            raise DatabaseConnectionError(
                f"The {self.engine_name} driver is not connected. Call connect() first."
            )
        return self._connection

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def render(self, options: Any) -> str:
        """Return the final SQL for ``options`` (generated and substituted)."""
        options = coerce_options(options)
        template = self.generator.generate(options)
        return self.substituter.substitute(template, options.variables)

    def execute(self, options: Any) -> DriverResult:
        """Compile and run ``options``, returning the wrapped client result.

        Client-level failures do not raise: they are reported through the
        result's ``success()``, ``error_code()`` and ``error_message()``.
        """
        self._require_connection()
        sql = self.render(options)
        logger.debug("Executing on %s: %s", self.engine_name, sql)
        result = self._run(sql)
        if not result.success() and result.error_code() != "-1":
            logger.warning(
                "Query failed on %s (error %s): %s",
                self.engine_name,
                result.error_code(),
                result.error_message(),
            )
        return result

    @abstractmethod
    def _run(self, sql: str) -> DriverResult:
        """Send ``sql`` to the client and wrap the outcome."""

    # ------------------------------------------------------------------
    # Client passthroughs
    # ------------------------------------------------------------------

    @abstractmethod
    def sanitize(self, text: str) -> str:
        """Escape ``text`` for safe inclusion inside a quoted SQL string."""

    def get_timestamp(self, timestamp: float | None = None) -> str:
        """Return ``timestamp`` (default: now) as a TIMESTAMP literal, local time."""
        self._require_connection()
        if not timestamp:
            timestamp = time.time()
        return datetime.fromtimestamp(timestamp).strftime(TIMESTAMP_FORMAT)
