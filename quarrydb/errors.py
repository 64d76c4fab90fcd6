"""Custom exception hierarchy for quarrydb.

All public errors inherit from QuarryError so callers can catch the base
class for any quarrydb-specific failure.  Every error carries a
machine-readable ``code`` so callers can branch on the failure kind without
matching on class names or messages.
"""
from __future__ import annotations

from typing import Any


class QuarryError(Exception):
    """Base exception for all quarrydb errors.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. ``UNDEFINED_VARIABLE``).
        details: Extra context about the failure.
    """

    code: str = "QUARRY_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class DriverNotFoundError(QuarryError):
    """Raised when no driver is registered for the requested engine."""

    code = "DRIVER_NOT_FOUND"

    def __init__(self, engine_name: str, registered: list[str]) -> None:
        super().__init__(
            f"The database driver '{engine_name}' was not found. "
            f"Registered engines: {registered}.",
            details={"engine": engine_name, "registered": registered},
        )


class EngineNotSpecifiedError(QuarryError):
    """Raised when the default Database is requested before an engine is set."""

    code = "ENGINE_NOT_SPECIFIED"

    def __init__(self) -> None:
        super().__init__(
            "No database engine has been configured. "
            "Call Database.configure() before Database.get_instance()."
        )


class DatabaseConnectionError(QuarryError):
    """Raised when the underlying client cannot establish a connection.

    The client's own message is passed through unchanged.
    """

    code = "CONNECTION_ERROR"


class ConnectionOptionsError(DatabaseConnectionError):
    """Raised when a driver is given incomplete or malformed connection options.

    Args:
        engine_name: The engine whose options were rejected.
        missing: Required option names that were not supplied.
        message: Optional override for the default message.
    """

    code = "INVALID_CONNECTION_OPTIONS"

    def __init__(
        self,
        engine_name: str,
        missing: list[str],
        message: str | None = None,
    ) -> None:
        super().__init__(
            message
            or f"The {engine_name} driver requires the following engine options: "
            f"{', '.join(missing)}.",
            details={"engine": engine_name, "missing": missing},
        )
        self.missing = missing


class UndefinedVariableError(QuarryError):
    """Raised when a placeholder references a variable that was not supplied."""

    code = "UNDEFINED_VARIABLE"

    def __init__(self, variable: str) -> None:
        super().__init__(
            f"The variable {variable} was not defined.",
            details={"variable": variable},
        )
        self.variable = variable


class UnknownDataTypeError(QuarryError):
    """Raised when a placeholder uses a type tag that is not recognised."""

    code = "UNKNOWN_DATATYPE"

    def __init__(self, data_type: str) -> None:
        super().__init__(
            f"Unknown data type: {data_type}.",
            details={"type": data_type},
        )
        self.data_type = data_type


class TypeMismatchError(QuarryError):
    """Raised when a variable's value does not fit its declared type tag."""

    code = "TYPE_MISMATCH"

    def __init__(self, variable: str, expected: str, value: Any) -> None:
        super().__init__(
            f"Expected variable {variable} to be of type {expected}, "
            f"got {type(value).__name__}.",
            details={
                "variable": variable,
                "expected": expected,
                "actual": type(value).__name__,
            },
        )
        self.variable = variable


class InvalidQueryError(QuarryError):
    """Raised when a query request is structurally invalid.

    Args:
        message: Human-readable description.
        clause: The clause or option being processed when the error occurred.
    """

    code = "INVALID_QUERY"

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message, details={"clause": clause} if clause else None)
        self.clause = clause


class NotEnoughResultsError(QuarryError):
    """Raised when a queued mocker runs out of canned results."""

    code = "NOT_ENOUGH_RESULTS"

    def __init__(self, executed: int, available: int) -> None:
        super().__init__(
            "Not expecting any more query executions. "
            "There are not enough results specified.",
            details={"executed": executed, "available": available},
        )
