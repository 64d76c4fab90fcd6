"""Driver registry (Open/Closed Principle).

Engine names are resolved to :class:`~quarrydb.driver.base.Driver` classes
through this registry, so a new engine is added by registering it rather than
by editing the :class:`~quarrydb.database.Database` facade.

Usage::

    from quarrydb.driver.registry import DriverFactory

    @DriverFactory.register("postgres")
    class PostgresDriver(Driver):
        ...
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, ClassVar

from quarrydb.driver.base import Driver
from quarrydb.errors import DriverNotFoundError

logger = logging.getLogger(__name__)


class DriverFactory:
    """Registry mapping engine names to :class:`Driver` classes.

    Names are matched case-insensitively, so ``"MySQL"`` and ``"mysql"``
    resolve to the same driver.

    Example::

        DriverFactory.register_class("sqlite3", SQLiteDriver)
        driver = DriverFactory.create("SQLite3")
    """

    _drivers: ClassVar[dict[str, type[Driver]]] = {}

    @staticmethod
    def _key(name: str) -> str:
        return name.strip().lower()

    @classmethod
    def register(cls, name: str) -> Callable[[type[Driver]], type[Driver]]:
        """Decorator that registers a driver class under ``name``."""

        def decorator(driver_cls: type[Driver]) -> type[Driver]:
            cls._drivers[cls._key(name)] = driver_cls
            return driver_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, driver_cls: type[Driver]) -> None:
        """Register a driver class without using the decorator form."""
        cls._drivers[cls._key(name)] = driver_cls

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._drivers.pop(cls._key(name), None)

    @classmethod
    def resolve(cls, name: str | None) -> type[Driver]:
        """Return the driver class registered for ``name``.

        Raises:
            DriverNotFoundError: If no driver is registered for ``name``.
        """
        driver_cls = cls._drivers.get(cls._key(name)) if name else None
        if driver_cls is None:
            raise DriverNotFoundError(str(name), cls.registered_engines())
        logger.debug("Resolved engine %r to %s", name, driver_cls.__name__)
        return driver_cls

    @classmethod
    def create(cls, name: str | None, **kwargs: Any) -> Driver:
        """Instantiate the (disconnected) driver registered for ``name``."""
        return cls.resolve(name)(**kwargs)

    @classmethod
    def registered_engines(cls) -> list[str]:
        """Return the sorted list of registered engine names."""
        return sorted(cls._drivers)
