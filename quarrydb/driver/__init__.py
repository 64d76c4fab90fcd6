"""quarrydb driver layer: engine drivers, result cursors and the registry."""
from quarrydb.driver.base import Driver
from quarrydb.driver.mysql import MySQLConnectionOptions, MySQLDriver, MySQLResult
from quarrydb.driver.registry import DriverFactory
from quarrydb.driver.result import BufferedResult, DriverResult
from quarrydb.driver.sqlite import SQLiteConnectionOptions, SQLiteDriver, SQLiteResult

__all__ = [
    "BufferedResult",
    "Driver",
    "DriverFactory",
    "DriverResult",
    "MySQLConnectionOptions",
    "MySQLDriver",
    "MySQLResult",
    "SQLiteConnectionOptions",
    "SQLiteDriver",
    "SQLiteResult",
]
