"""Result cursor returned by the query mocker."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from quarrydb.driver.result import BufferedResult


class MockResult(BufferedResult):
    """A :class:`BufferedResult` built from a canned result.

    Args:
        result: A sequence of row dicts, or a bool acknowledgement.  An
            empty sequence counts as unsuccessful, like an empty client result.
        affected_rows: Reported affected row count.
        insert_id: Reported insert id.
        error_code: Reported error code.
        error_message: Reported error message.
        query: The options that were executed.
    """

    def __init__(
        self,
        result: Any,
        affected_rows: int = 0,
        insert_id: int = 0,
        error_code: int | str | None = -1,
        error_message: str | None = None,
        query: Any = None,
    ) -> None:
        rows = None
        if isinstance(result, Sequence) and not isinstance(result, (str, bytes)):
            rows = result
        super().__init__(
            result,
            rows,
            affected_rows=affected_rows,
            insert_id=insert_id,
            error_code=error_code,
            error_message=error_message,
            query=query,
        )
