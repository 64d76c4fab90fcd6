"""Database settings loaded from code or the environment.

Environment layout (a ``.env`` file in the working directory is honoured but
never overrides variables that are already set)::

    QUARRYDB_ENGINE=mysql
    QUARRYDB_HOST=localhost
    QUARRYDB_USER=app
    QUARRYDB_PWD=secret
    QUARRYDB_DB_NAME=app

Every ``QUARRYDB_<NAME>`` variable other than ``QUARRYDB_ENGINE`` becomes the
connection option ``<name>`` (lower-cased).  Values stay strings; the
driver's options model converts them (``port``, ``timeout`` …).
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from quarrydb.errors import EngineNotSpecifiedError

DEFAULT_PREFIX = "QUARRYDB_"


class DatabaseSettings(BaseModel):
    """Which engine to use and how to connect to it.

    Attributes:
        engine: Engine name resolved through the driver registry.
        options: Connection options passed to the driver's ``connect()``.
    """

    model_config = ConfigDict(extra="forbid")

    engine: str
    options: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_env(
        cls,
        prefix: str = DEFAULT_PREFIX,
        environ: Mapping[str, str] | None = None,
        dotenv: bool = True,
    ) -> DatabaseSettings:
        """Build settings from ``<prefix>*`` environment variables.

        Args:
            prefix: Variable name prefix.
            environ: Mapping to read instead of ``os.environ``.
            dotenv: Load a ``.env`` file first (only with ``os.environ``).

        Raises:
            EngineNotSpecifiedError: If ``<prefix>ENGINE`` is unset or empty.
        """
        if environ is None:
            if dotenv:
                load_dotenv(find_dotenv(usecwd=True), override=False)
            environ = os.environ

        engine = (environ.get(f"{prefix}ENGINE") or "").strip()
        if not engine:
            raise EngineNotSpecifiedError()

        options: dict[str, Any] = {}
        for key, value in environ.items():
            if not key.startswith(prefix) or key == f"{prefix}ENGINE":
                continue
            name = key[len(prefix):].lower()
            if name:
                options[name] = value
        return cls(engine=engine, options=options)
