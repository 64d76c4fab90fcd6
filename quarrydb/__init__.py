"""quarrydb – fluent query builders and pluggable SQL drivers.

Build the query, pick the engine, read the rows.

Public API
----------
``Query``
    Entry point for the fluent builders (``Query.select()``,
    ``Query.insert()`` …).  ``execute()`` sends the built options to the
    installed mocker, or to the default :class:`Database`.

``Database``
    Facade over one connected driver; also keeps a lazily created
    process-wide default instance.

``QueryMocker`` / ``mocked``
    Canned results in place of a live database, for tests.

``replace_variables``
    Substitute ``{type:name}`` placeholders in an SQL template.

Extensibility
-------------
New engines can be registered via::

    from quarrydb.driver.registry import DriverFactory

    @DriverFactory.register("postgres")
    class PostgresDriver(Driver):
        ...

After registration, ``Database("postgres", {...})`` picks it up.
"""

from __future__ import annotations

import logging

from quarrydb.compile.base import SQLGenerator
from quarrydb.compile.mysql import MySQLGenerator
from quarrydb.compile.sqlite import SQLiteGenerator
from quarrydb.config import DatabaseSettings
from quarrydb.context import (
    ExecutionContext,
    QueryExecutor,
    clear_mocker,
    get_default_context,
    get_mocker,
    mocked,
    set_mocker,
)
from quarrydb.database import Database
from quarrydb.driver.base import Driver
from quarrydb.driver.mysql import MySQLConnectionOptions, MySQLDriver, MySQLResult
from quarrydb.driver.registry import DriverFactory
from quarrydb.driver.result import BufferedResult, DriverResult
from quarrydb.driver.sqlite import SQLiteConnectionOptions, SQLiteDriver, SQLiteResult
from quarrydb.errors import (
    ConnectionOptionsError,
    DatabaseConnectionError,
    DriverNotFoundError,
    EngineNotSpecifiedError,
    InvalidQueryError,
    NotEnoughResultsError,
    QuarryError,
    TypeMismatchError,
    UndefinedVariableError,
    UnknownDataTypeError,
)
from quarrydb.mock.mocker import CannedResult, QueryMocker
from quarrydb.mock.result import MockResult
from quarrydb.query.builders import (
    DeleteQuery,
    InsertQuery,
    NativeQuery,
    Query,
    ReplaceQuery,
    SelectQuery,
    UpdateQuery,
)
from quarrydb.query.options import (
    DeleteOptions,
    InsertOptions,
    JoinSpec,
    NativeOptions,
    QueryOptions,
    ReplaceOptions,
    SelectOptions,
    UpdateOptions,
)
from quarrydb.variables import DataType, VariableSubstituter, replace_variables

logging.getLogger(__name__).addHandler(logging.NullHandler())

# ---------------------------------------------------------------------------
# Register built-in drivers with DriverFactory
# ---------------------------------------------------------------------------
DriverFactory.register_class("mysql", MySQLDriver)
DriverFactory.register_class("sqlite", SQLiteDriver)
DriverFactory.register_class("sqlite3", SQLiteDriver)

__all__ = [
    # Builders
    "Query",
    "SelectQuery",
    "InsertQuery",
    "ReplaceQuery",
    "UpdateQuery",
    "DeleteQuery",
    "NativeQuery",
    # Options
    "QueryOptions",
    "SelectOptions",
    "InsertOptions",
    "ReplaceOptions",
    "UpdateOptions",
    "DeleteOptions",
    "NativeOptions",
    "JoinSpec",
    # Substitution
    "DataType",
    "VariableSubstituter",
    "replace_variables",
    # Generators
    "SQLGenerator",
    "MySQLGenerator",
    "SQLiteGenerator",
    # Drivers & results
    "Driver",
    "DriverFactory",
    "DriverResult",
    "BufferedResult",
    "MySQLDriver",
    "MySQLResult",
    "MySQLConnectionOptions",
    "SQLiteDriver",
    "SQLiteResult",
    "SQLiteConnectionOptions",
    # Facade & config
    "Database",
    "DatabaseSettings",
    # Execution context & mocking
    "ExecutionContext",
    "QueryExecutor",
    "get_default_context",
    "set_mocker",
    "get_mocker",
    "clear_mocker",
    "mocked",
    "QueryMocker",
    "CannedResult",
    "MockResult",
    # Errors
    "QuarryError",
    "DriverNotFoundError",
    "EngineNotSpecifiedError",
    "DatabaseConnectionError",
    "ConnectionOptionsError",
    "UndefinedVariableError",
    "UnknownDataTypeError",
    "TypeMismatchError",
    "InvalidQueryError",
    "NotEnoughResultsError",
]
