"""Shared pytest fixtures for quarrydb unit and integration tests."""
from __future__ import annotations

from collections.abc import Iterator

import pytest

from quarrydb.context import clear_mocker
from quarrydb.database import Database
from quarrydb.driver.mysql import MySQLDriver
from quarrydb.mock import QueryMocker
from tests.fixtures import MYSQL_OPTIONS, FakeMySQLClient


@pytest.fixture(autouse=True)
def _reset_globals() -> Iterator[None]:
    """Every test starts without a mocker or a default database."""
    clear_mocker()
    Database.clear_instance()
    Database._engine_name = None
    Database._engine_options = {}
    yield
    clear_mocker()
    Database.clear_instance()
    Database._engine_name = None
    Database._engine_options = {}


@pytest.fixture()
def query_mocker() -> QueryMocker:
    return QueryMocker()


@pytest.fixture()
def mysql_client() -> FakeMySQLClient:
    return FakeMySQLClient()


@pytest.fixture()
def mysql_driver(mysql_client: FakeMySQLClient) -> MySQLDriver:
    """A MySQL driver connected to the fake client."""
    driver = MySQLDriver(client_factory=mysql_client)
    driver.connect(MYSQL_OPTIONS)
    return driver


@pytest.fixture()
def sqlite_db() -> Iterator[Database]:
    db = Database("sqlite", {"filename": ":memory:"})
    yield db
    db.driver.connection.close()
