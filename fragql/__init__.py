"""fragQL – composable, parameterized SQL fragments.

Write SQL. Don't Concatenate It.

Public API
----------
``sql`` / ``sql_format`` / ``sql_template``
    Turn literal text plus interpolated values into a ``QueryConfig`` with
    ``$1, $2, …`` placeholders and the matching list of bind values.

``spread_and`` / ``spread_insert`` / ``spread_update``
    Expand records into WHERE AND-chains, INSERT value lists and UPDATE
    SET lists.

``raw`` / ``safe``
    Splice trusted text verbatim, or force a value to be bound.

Example::

    from fragql import UNSET, spread_and, spread_insert, sql, sql_format

    query = sql_format(
        "SELECT * FROM users WHERE {} LIMIT {}",
        spread_and({"name": "Hugo", "role": role or UNSET}),
        10,
    )
    rows = await connection.fetch(*query.to_args())

    query = sql(
        ["INSERT INTO users ", " RETURNING *"],
        spread_insert({"name": "Hugo", "created_at": sql.raw("NOW()")}),
    )

Placeholders are numbered only when the final query is built, so fragments
can be created independently and nested in any order.

Re-exported types
-----------------
``QueryConfig``, ``SqlBuilder`` and its cases, ``TableSchema`` and the
schema helpers, ``TraceConfig``, and all error classes.
"""

from __future__ import annotations

import logging

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
from fragql.errors import (
    ColumnMismatchError,
    CompilationError,
    EmptyRecordError,
    FragQLError,
    InvalidIdentifierError,
    MissingColumnValueError,
    RecordShapeError,
    SchemaDefinitionError,
    TemplateError,
)
from fragql.schema.table import (
    ColumnDescription,
    ColumnType,
    Schema,
    TableRegistry,
    TableSchema,
    define_table,
    get_all_table_schemas,
)
from fragql.sql import (
    build_query,
    fragment,
    fragment_format,
    sql,
    sql_format,
    sql_template,
)
from fragql.trace import TraceConfig, configure_tracing

logging.getLogger(__name__).addHandler(logging.NullHandler())

safe = param

__all__ = [
    # Templates
    "sql",
    "sql_format",
    "sql_template",
    "fragment",
    "fragment_format",
    "build_query",
    # Builders
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
    "safe",
    "to_builder",
    "join_sql",
    "transform_sql",
    "parenthesize",
    "merge_lists",
    # Spread helpers
    "UNSET",
    "filter_unset",
    "extract_columns",
    "spread_and",
    "spread_insert",
    "spread_update",
    "escape_identifier",
    # Schema
    "ColumnDescription",
    "ColumnType",
    "Schema",
    "TableRegistry",
    "TableSchema",
    "define_table",
    "get_all_table_schemas",
    # Tracing
    "TraceConfig",
    "configure_tracing",
    # Errors
    "FragQLError",
    "InvalidIdentifierError",
    "EmptyRecordError",
    "RecordShapeError",
    "ColumnMismatchError",
    "MissingColumnValueError",
    "TemplateError",
    "CompilationError",
    "SchemaDefinitionError",
]
