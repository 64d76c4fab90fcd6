"""Pydantic models for the options of a single SQL statement.

Each statement kind has its own model; all of them share the ``variables``
map used for placeholder substitution.  ``QueryOptions`` is the tagged union
over every kind, discriminated by ``type``.

The models hold no SQL knowledge.  Text fields (``expr``, ``condition``,
``order_by``, row values …) are SQL fragments written by the caller and may
contain ``{type:name}`` placeholders.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from quarrydb.errors import InvalidQueryError

#: Statement kinds understood by the builders and generators.
QUERY_TYPES: tuple[str, ...] = ("SELECT", "UPDATE", "INSERT", "REPLACE", "DELETE", "NATIVE")


class _BaseOptions(BaseModel):
    """Fields shared by every statement kind.

    Attributes:
        variables: Values for ``{type:name}`` placeholders, keyed by name.
    """

    model_config = ConfigDict(extra="forbid")

    variables: dict[str, Any] = Field(default_factory=dict)


class JoinSpec(BaseModel):
    """A single JOIN entry of a SELECT.

    Attributes:
        join_type: Join keyword (``inner``, ``left`` …); upper-cased when rendered.
        table: The joined table.
        alias: Optional alias for the joined table.
        condition: Optional ``ON`` condition (omitted for ``CROSS`` joins).
    """

    model_config = ConfigDict(extra="forbid")

    join_type: str
    table: str
    alias: str | None = None
    condition: str | None = None


class SelectOptions(_BaseOptions):
    """Options for a SELECT statement.

    Attributes:
        distinct: Emit ``SELECT DISTINCT``.
        expr: The select expression list; defaults to ``*``.
        table: Source table.
        alias: Optional alias for the source table.
        joins: JOINs in the order they were added.
        condition: WHERE condition; ``1 = 1`` when omitted.
        group_by: GROUP BY expression.
        having: HAVING condition (only rendered together with ``group_by``).
        order_by: ORDER BY expression.
        limit: Maximum number of rows.
        offset: Rows to skip (only rendered together with ``limit``).
    """

    type: Literal["SELECT"] = "SELECT"
    distinct: bool = False
    expr: str = "*"
    table: str
    alias: str | None = None
    joins: list[JoinSpec] = Field(default_factory=list)
    condition: str | None = None
    group_by: str | None = None
    having: str | None = None
    order_by: str | None = None
    limit: int | None = Field(default=None, ge=0)
    offset: int | None = Field(default=None, ge=0)


class UpdateOptions(_BaseOptions):
    """Options for an UPDATE statement.

    Attributes:
        table: Table to update.
        ignore: Ignore conflicting rows (dialect-specific keyword).
        values: Column → SQL value fragment for the SET clause.
        condition: WHERE condition; **every row is updated when omitted**.
        order_by: ORDER BY expression.
        limit: Maximum number of rows to update.
    """

    type: Literal["UPDATE"] = "UPDATE"
    table: str
    ignore: bool = False
    values: dict[str, Any] = Field(default_factory=dict)
    condition: str | None = None
    order_by: str | None = None
    limit: int | None = Field(default=None, ge=0)


class InsertOptions(_BaseOptions):
    """Options for an INSERT statement.

    Attributes:
        table: Target table.
        ignore: Skip rows that would violate a unique key.
        rows: Column → SQL value fragment maps; every row must have the same
            columns in the same order.
    """

    type: Literal["INSERT"] = "INSERT"
    table: str
    ignore: bool = False
    rows: list[dict[str, Any]] = Field(default_factory=list)


class ReplaceOptions(_BaseOptions):
    """Options for a REPLACE statement.

    Attributes:
        table: Target table.
        ignore: Accepted for symmetry with INSERT; REPLACE never ignores.
        rows: Same shape as :attr:`InsertOptions.rows`.
        keys: Primary / unique key columns, for engines that must emulate
            REPLACE.
    """

    type: Literal["REPLACE"] = "REPLACE"
    table: str
    ignore: bool = False
    rows: list[dict[str, Any]] = Field(default_factory=list)
    keys: list[str] | None = None


class DeleteOptions(_BaseOptions):
    """Options for a DELETE statement.

    Attributes:
        table: Table to delete from.
        condition: WHERE condition; **every row is deleted when omitted**.
        order_by: ORDER BY expression.
        limit: Maximum number of rows to delete.
    """

    type: Literal["DELETE"] = "DELETE"
    table: str
    condition: str | None = None
    order_by: str | None = None
    limit: int | None = Field(default=None, ge=0)


class NativeOptions(_BaseOptions):
    """A hand-written statement, one template per engine.

    Attributes:
        queries: Dialect name → SQL template.
    """

    type: Literal["NATIVE"] = "NATIVE"
    queries: dict[str, str] = Field(default_factory=dict)


QueryOptions = Annotated[
    Union[
        SelectOptions,
        UpdateOptions,
        InsertOptions,
        ReplaceOptions,
        DeleteOptions,
        NativeOptions,
    ],
    Field(discriminator="type"),
]

_QUERY_OPTIONS_ADAPTER: TypeAdapter[Any] = TypeAdapter(QueryOptions)

_OPTION_MODELS = (
    SelectOptions,
    UpdateOptions,
    InsertOptions,
    ReplaceOptions,
    DeleteOptions,
    NativeOptions,
)


def normalize_type(query_type: str) -> str:
    """Upper-case ``query_type`` and check it is a known statement kind.

    Raises:
        InvalidQueryError: If the type is unknown.
    """
    normalized = str(query_type).upper()
    if normalized not in QUERY_TYPES:
        raise InvalidQueryError(f"The query type {query_type} is unknown.", clause="type")
    return normalized


def coerce_options(options: Any) -> Any:
    """Return ``options`` as a validated ``QueryOptions`` model.

    Models pass through untouched; mappings are validated (``type`` is
    matched case-insensitively).

    Raises:
        InvalidQueryError: If the mapping does not describe a valid statement.
    """
    if isinstance(options, _OPTION_MODELS):
        return options
    if not isinstance(options, Mapping):
        raise InvalidQueryError(
            f"Query options must be a mapping, got {type(options).__name__}."
        )
    if "type" not in options:
        raise InvalidQueryError("Query options are missing the 'type' field.", clause="type")

    data = dict(options)
    data["type"] = normalize_type(data["type"])
    try:
        return _QUERY_OPTIONS_ADAPTER.validate_python(data)
    except PydanticValidationError as exc:
        raise InvalidQueryError(
            f"{data['type']} options are invalid: {exc}", clause=data["type"]
        ) from exc
