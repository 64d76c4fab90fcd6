"""quarrydb compilation layer: QueryOptions → SQL text."""
from quarrydb.compile.base import SQLGenerator
from quarrydb.compile.mysql import MySQLGenerator
from quarrydb.compile.sqlite import SQLiteGenerator

__all__ = [
    "SQLGenerator",
    "MySQLGenerator",
    "SQLiteGenerator",
]
