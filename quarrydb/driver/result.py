"""Result cursors: a uniform read interface over a statement's outcome.

A driver wraps whatever its client returned (a row-bearing cursor, or a plain
success / failure acknowledgement) in a :class:`DriverResult`.  Callers read
rows one at a time::

    with Query.select().from_("users").execute() as result:
        while (row := result.fetch_assoc()) is not None:
            ...

or simply iterate over the result.  ``None`` signals that the rows are
exhausted; it is not an error.

A result owns its native handle (if any) and releases it exactly once: on
:meth:`DriverResult.close`, on leaving a ``with`` block, or when the result is
garbage collected, whichever comes first.
"""
from __future__ import annotations

import weakref
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Sequence
from typing import Any

#: Error code meaning "no error".
NO_ERROR = "-1"


class DriverResult(ABC):
    """Abstract base for every driver's result cursor.

    Args:
        result: The client's raw outcome: a row-bearing handle, or a bool
            for statements that return no rows.
        error_code: The client's error code; ``0`` and ``None`` are
            normalized to the no-error sentinel ``"-1"``.
        error_message: The client's error message, if any.
        query: What was executed (SQL text, or options for mocks).
    """

    def __init__(
        self,
        result: Any,
        error_code: int | str | None = -1,
        error_message: str | None = None,
        query: Any = None,
    ) -> None:
        self._result = result
        self._error_code = NO_ERROR if error_code in (None, 0, "0") else str(error_code)
        self._error_message = error_message or None
        self._query = query
        self._finalizer = weakref.finalize(self, self._release_callback())

    # ------------------------------------------------------------------
    # Outcome
    # ------------------------------------------------------------------

    @property
    def has_rows(self) -> bool:
        """Whether the result is row-shaped (as opposed to an acknowledgement)."""
        return not isinstance(self._result, bool) and self._result is not None

    @property
    def query(self) -> Any:
        return self._query

    def success(self) -> bool:
        """Whether the underlying result is non-empty and not a failure."""
        return bool(self._result)

    def error_code(self) -> str:
        return self._error_code

    def error_message(self) -> str | None:
        return self._error_message

    @abstractmethod
    def affected_rows(self) -> int:
        """Return the number of rows changed by the statement."""

    @abstractmethod
    def insert_id(self) -> int:
        """Return the id generated for an auto-increment column."""

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    @abstractmethod
    def num_rows(self) -> int:
        """Return the number of rows in the result (0 for acknowledgements)."""

    @abstractmethod
    def seek(self, offset: int) -> bool:
        """Move the cursor to ``offset``.

        Returns:
            ``False`` without moving when ``offset`` is outside
            ``[0, num_rows())`` or the result has no rows.
        """

    @abstractmethod
    def fetch_assoc(self) -> dict[str, Any] | None:
        """Return the next row as a column → value dict, or ``None`` at the end."""

    @abstractmethod
    def fetch_row(self) -> tuple[Any, ...] | None:
        """Return the next row as a tuple, or ``None`` at the end."""

    def __iter__(self) -> Iterator[dict[str, Any]]:
        while (row := self.fetch_assoc()) is not None:
            yield row

    # ------------------------------------------------------------------
    # Release
    # ------------------------------------------------------------------

    def _release_callback(self) -> Callable[[], None]:
        """Return a callable that frees the native handle.

        The callable must not reference ``self``; it runs at most once.
        """
        return _noop

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def close(self) -> None:
        """Release the native handle (a no-op after the first call)."""
        self._finalizer()

    def __enter__(self) -> DriverResult:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(success={self.success()}, "
            f"num_rows={self.num_rows()}, error_code={self._error_code!r})"
        )


def _noop() -> None:
    return None


class BufferedResult(DriverResult):
    """A result whose rows are held in memory.

    Args:
        result: Raw outcome used for :meth:`success` (handle, row list or bool).
        rows: Buffered rows as column → value dicts.
        affected_rows: Rows changed by the statement.
        insert_id: Last generated id.
        error_code: See :class:`DriverResult`.
        error_message: See :class:`DriverResult`.
        query: See :class:`DriverResult`.
    """

    def __init__(
        self,
        result: Any,
        rows: Sequence[dict[str, Any]] | None = None,
        affected_rows: int = 0,
        insert_id: int = 0,
        error_code: int | str | None = -1,
        error_message: str | None = None,
        query: Any = None,
    ) -> None:
        self._rows: list[dict[str, Any]] = list(rows or [])
        self._position = 0
        self._affected_rows = affected_rows
        self._insert_id = insert_id
        super().__init__(result, error_code, error_message, query)

    def affected_rows(self) -> int:
        return self._affected_rows

    def insert_id(self) -> int:
        return self._insert_id

    def num_rows(self) -> int:
        if not self.has_rows:
            return 0
        return len(self._rows)

    def seek(self, offset: int) -> bool:
        if not self.has_rows:
            return False
        try:
            offset = int(offset)
        except (TypeError, ValueError):
            return False
        if offset < 0 or offset >= len(self._rows):
            return False
        self._position = offset
        return True

    def fetch_assoc(self) -> dict[str, Any] | None:
        if not self.has_rows or self._position >= len(self._rows):
            return None
        row = self._rows[self._position]
        self._position += 1
        return dict(row)

    def fetch_row(self) -> tuple[Any, ...] | None:
        row = self.fetch_assoc()
        if row is None:
            return None
        return tuple(row.values())
