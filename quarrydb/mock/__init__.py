"""quarrydb mocking layer: canned results instead of a live database."""
from quarrydb.mock.mocker import CannedResult, QueryMocker
from quarrydb.mock.result import MockResult

__all__ = [
    "CannedResult",
    "MockResult",
    "QueryMocker",
]
