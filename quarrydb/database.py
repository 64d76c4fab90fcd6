"""The Database facade: one connected driver behind a small API.

A :class:`Database` resolves an engine name to a driver class through the
:class:`~quarrydb.driver.registry.DriverFactory`, connects it, and forwards
``execute`` / ``sanitize`` / ``get_timestamp`` to it::

    db = Database("sqlite", {"filename": "app.db"})
    result = db.execute(Query.select().from_("users").build())

Explicit instances can be passed wherever a query is executed.  For
applications that want a single shared connection, the class also keeps a
lazily created default instance::

    Database.configure("mysql", {"host": "localhost", "user": "app", "db_name": "app"})
    Database.get_instance()       # created and connected on first use
    Database.clear_instance()     # dropped; the next get_instance() reconnects
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, ClassVar

from quarrydb.config import DatabaseSettings
from quarrydb.driver.base import Driver
from quarrydb.driver.registry import DriverFactory
from quarrydb.driver.result import DriverResult
from quarrydb.errors import EngineNotSpecifiedError

logger = logging.getLogger(__name__)


class Database:
    """A connected driver for one engine.

    Args:
        engine_name: Engine name, e.g. ``"mysql"`` or ``"sqlite"``.
        engine_options: Connection options for that engine's driver.
        factory: Registry used to resolve ``engine_name``.
        **driver_kwargs: Passed to the driver constructor
            (e.g. ``client_factory``).

    Raises:
        DriverNotFoundError: If no driver is registered for ``engine_name``.
        ConnectionOptionsError: If required connection options are missing.
        DatabaseConnectionError: If the connection cannot be established.
    """

    _engine_name: ClassVar[str | None] = None
    _engine_options: ClassVar[dict[str, Any]] = {}
    _instance: ClassVar[Database | None] = None

    def __init__(
        self,
        engine_name: str,
        engine_options: Mapping[str, Any] | None = None,
        factory: type[DriverFactory] = DriverFactory,
        **driver_kwargs: Any,
    ) -> None:
        self._driver = factory.create(engine_name, **driver_kwargs)
        self._driver.connect(dict(engine_options or {}))

    @classmethod
    def from_settings(cls, settings: DatabaseSettings, **driver_kwargs: Any) -> Database:
        return cls(settings.engine, settings.options, **driver_kwargs)

    # ------------------------------------------------------------------
    # Driver passthroughs
    # ------------------------------------------------------------------

    @property
    def driver(self) -> Driver:
        return self._driver

    @property
    def engine(self) -> str:
        return self._driver.engine_name

    def execute(self, options: Any) -> DriverResult:
        """Run ``options`` (a ``QueryOptions`` model or mapping) on the driver."""
        return self._driver.execute(options)

    def sanitize(self, text: str) -> str:
        return self._driver.sanitize(text)

    def get_timestamp(self, timestamp: float | None = None) -> str:
        return self._driver.get_timestamp(timestamp)

    # ------------------------------------------------------------------
    # Process-wide default instance
    # ------------------------------------------------------------------

    @classmethod
    def configure(cls, engine_name: str, engine_options: Mapping[str, Any] | None = None) -> None:
        """Set the engine and options used by :meth:`get_instance`.

        An already created default instance is kept until
        :meth:`clear_instance` is called.
        """
        Database._engine_name = engine_name
        Database._engine_options = dict(engine_options or {})

    @classmethod
    def configure_from_settings(cls, settings: DatabaseSettings) -> None:
        cls.configure(settings.engine, settings.options)

    @classmethod
    def get_engine_name(cls) -> str | None:
        return Database._engine_name

    @classmethod
    def get_engine_options(cls) -> dict[str, Any]:
        return dict(Database._engine_options)

    @classmethod
    def get_instance(cls) -> Database:
        """Return the default instance, creating and connecting it on first use.

        Raises:
            EngineNotSpecifiedError: If :meth:`configure` was never called.
        """
        if Database._instance is None:
            if not Database._engine_name:
                raise EngineNotSpecifiedError()
            Database._instance = Database(Database._engine_name, Database._engine_options)
            logger.debug("Created default %s database instance", Database._engine_name)
        return Database._instance

    @classmethod
    def set_instance(cls, instance: Database | None) -> None:
        """Install ``instance`` as the default (``None`` clears it)."""
        Database._instance = instance

    @classmethod
    def clear_instance(cls) -> None:
        Database._instance = None

    def __repr__(self) -> str:
        return f"Database(engine={self.engine!r})"
