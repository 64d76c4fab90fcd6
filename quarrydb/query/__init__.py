"""quarrydb query layer: option models and fluent builders."""
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
    QUERY_TYPES,
    DeleteOptions,
    InsertOptions,
    JoinSpec,
    NativeOptions,
    QueryOptions,
    ReplaceOptions,
    SelectOptions,
    UpdateOptions,
    coerce_options,
)

__all__ = [
    "QUERY_TYPES",
    "DeleteOptions",
    "DeleteQuery",
    "InsertOptions",
    "InsertQuery",
    "JoinSpec",
    "NativeOptions",
    "NativeQuery",
    "Query",
    "QueryOptions",
    "ReplaceOptions",
    "ReplaceQuery",
    "SelectOptions",
    "SelectQuery",
    "UpdateOptions",
    "UpdateQuery",
    "coerce_options",
]
