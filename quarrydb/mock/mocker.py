"""A test double that executes queries against canned results.

Install a :class:`QueryMocker` and every ``execute()`` goes to it instead of
the database::

    mocker = QueryMocker()
    mocker.add_result([{"user_id": 1, "user_name": "a"}])
    mocker.add_result(True, affected_rows=1)

    with mocked(mocker):
        rows = list(Query.select().from_("users").execute())
        Query.delete().from_("users").where("user_id = 1").execute()

    assert mocker.executed_count == 2
    assert mocker.last_executed.type == "DELETE"

Two modes, mutually exclusive:

single result
    :meth:`QueryMocker.set_result` – every execution returns the same result.
queued results
    :meth:`QueryMocker.add_result` – each execution consumes the next result;
    running out raises :class:`~quarrydb.errors.NotEnoughResultsError`.

Every executed option set is recorded, in order, whatever the mode.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from quarrydb.errors import NotEnoughResultsError
from quarrydb.mock.result import MockResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CannedResult:
    """One pre-programmed execution outcome.

    Attributes:
        result: Row dicts, or a bool acknowledgement.
        affected_rows: Reported affected row count.
        insert_id: Reported insert id.
        error_code: Reported error code (``-1`` for none).
        error_message: Reported error message.
    """

    result: Any = False
    affected_rows: int = 0
    insert_id: int = 0
    error_code: int | str = -1
    error_message: str | None = None

    def to_result(self, options: Any) -> MockResult:
        return MockResult(
            self.result,
            affected_rows=self.affected_rows,
            insert_id=self.insert_id,
            error_code=self.error_code,
            error_message=self.error_message,
            query=options,
        )


class QueryMocker:
    """Executes queries against canned results and records every execution."""

    def __init__(self) -> None:
        self._result: CannedResult | None = None
        self._results: list[CannedResult] | None = None
        self._result_index = 0
        self._executed: list[Any] = []
        self.debug = False
        self.reset()

    def reset(self) -> None:
        """Return to the initial state: single ``False`` result, empty log."""
        self.set_result(False)
        self._executed = []
        self.debug = False

    # ------------------------------------------------------------------
    # Programming results
    # ------------------------------------------------------------------

    def set_result(
        self,
        result: Any,
        affected_rows: int = 0,
        insert_id: int = 0,
        error_code: int | str = -1,
        error_message: str | None = None,
    ) -> None:
        """Return this result from every execution (drops queued results)."""
        self._results = None
        self._result_index = 0
        self._result = CannedResult(result, affected_rows, insert_id, error_code, error_message)

    def add_result(
        self,
        result: Any,
        affected_rows: int = 0,
        insert_id: int = 0,
        error_code: int | str = -1,
        error_message: str | None = None,
    ) -> None:
        """Queue a result for the next unserved execution (drops a single result)."""
        self._result = None
        if self._results is None:
            self._results = []
        self._results.append(
            CannedResult(result, affected_rows, insert_id, error_code, error_message)
        )

    # ------------------------------------------------------------------
    # Execution log
    # ------------------------------------------------------------------

    @property
    def executed_count(self) -> int:
        return len(self._executed)

    @property
    def last_executed(self) -> Any:
        """The most recently executed options, or ``None``."""
        return self._executed[-1] if self._executed else None

    def get_executed(self, offset: int | None = None) -> Any:
        """Return every executed option set, or the one at ``offset``.

        An ``offset`` past the end returns ``None``.
        """
        if offset is None:
            return list(self._executed)
        if 0 <= offset < len(self._executed):
            return self._executed[offset]
        return None

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self, options: Any) -> MockResult:
        """Record ``options`` and return the next canned result.

        Raises:
            NotEnoughResultsError: In queued mode, when every result has been
                served.
        """
        self._executed.append(options)

        if self._result is not None:
            canned = self._result
        else:
            queued = self._results or []
            if self._result_index >= len(queued):
                raise NotEnoughResultsError(len(self._executed), len(queued))
            canned = queued[self._result_index]
            self._result_index += 1

        if self.debug:
            logger.info("Mocked execution: %r -> %r", options, canned)
        else:
            logger.debug("Mocked execution #%d", len(self._executed))

        return canned.to_result(options)
