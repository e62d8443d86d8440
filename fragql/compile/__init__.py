"""fragQL composition layer: SqlBuilder trees → parameterized SQL."""
from fragql.compile.base import QueryConfig
from fragql.compile.builder import (
    JoinedSql,
    ParamSql,
    RawSql,
    SqlBuilder,
    TransformedSql,
    is_sql_builder,
    render,
)
from fragql.compile.combinators import (
    join_sql,
    merge_lists,
    param,
    parenthesize,
    raw,
    to_builder,
    transform_sql,
)
from fragql.compile.identifier import escape_identifier
from fragql.compile.spread import (
    UNSET,
    extract_columns,
    filter_unset,
    spread_and,
    spread_insert,
    spread_update,
)

__all__ = [
    "QueryConfig",
    "SqlBuilder",
    "RawSql",
    "ParamSql",
    "JoinedSql",
    "TransformedSql",
    "is_sql_builder",
    "render",
    "raw",
    "param",
    "to_builder",
    "join_sql",
    "transform_sql",
    "parenthesize",
    "merge_lists",
    "escape_identifier",
    "UNSET",
    "filter_unset",
    "extract_columns",
    "spread_and",
    "spread_insert",
    "spread_update",
]
