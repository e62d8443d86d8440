"""Utilities for building table descriptions from external sources.

SQLAlchemy converter
--------------------
:func:`table_schemas_from_sqlalchemy` reflects a live database engine and
returns one :class:`~fragql.schema.table.TableSchema` per table.

Install the optional dependency before using this module::

    pip install "fragql[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from fragql.schema.converters import table_schema_from_sqlalchemy

    engine = create_engine("postgresql+psycopg://user:pw@host/db")
    users = table_schema_from_sqlalchemy(engine, "users")

Reflected tables are returned, not registered; pass them to
:meth:`~fragql.schema.table.TableRegistry.register` to make them visible to
:func:`~fragql.schema.table.get_all_table_schemas`.
"""

from __future__ import annotations

import datetime
import decimal
import logging
from typing import TYPE_CHECKING, Any

from fragql.schema.table import ColumnDescription, ColumnType, Schema, TableSchema

if TYPE_CHECKING:
    from sqlalchemy import Column, Engine, MetaData
    from sqlalchemy.types import TypeEngine

logger = logging.getLogger(__name__)


def table_schemas_from_sqlalchemy(
    engine: Engine,
    *,
    include_tables: list[str] | None = None,
    schema: str | None = None,
) -> list[TableSchema]:
    """Describe every table visible to a SQLAlchemy engine.

    Column kinds are derived from the reflected SQL types: ``ENUM`` types
    keep their labels, ``ARRAY`` types their item kind, ``JSON`` types become
    JSON columns, and everything else is mapped through the type's Python
    type (``bool`` → boolean, ``int``/``float``/``Decimal`` → number,
    ``str`` → string, dates and times → date).  Types SQLAlchemy cannot map
    become ``any``.

    A column has a default when the database declares a server default or
    when it is an auto-incrementing integer primary key.  Nullable columns
    have a default as well (``NULL``).

    Args:
        engine: A connected :class:`sqlalchemy.engine.Engine` instance.
        include_tables: Optional allowlist of table names to reflect.
            When ``None`` all tables in the schema are reflected.
        schema: Optional database schema name (e.g. ``"public"`` for
            PostgreSQL).  Passed directly to
            :meth:`sqlalchemy.schema.MetaData.reflect`.

    Returns:
        Table descriptions in dependency order.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
    """
    try:
        from sqlalchemy import MetaData as _MetaData
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for table_schemas_from_sqlalchemy(). "
            'Install it with: pip install "fragql[sqlalchemy]"'
        ) from exc

    metadata = _MetaData()
    with engine.connect() as conn:
        metadata.reflect(bind=conn, only=include_tables, schema=schema)

    tables = _metadata_to_table_schemas(metadata)
    # reflect() also pulls in every table a listed one references by foreign key.
    if include_tables is not None:
        wanted = set(include_tables)
        tables = [table for table in tables if table.name in wanted]
    return tables


def table_schema_from_sqlalchemy(
    engine: Engine,
    table_name: str,
    *,
    schema: str | None = None,
) -> TableSchema:
    """Describe a single table visible to a SQLAlchemy engine.

    Tables it references by foreign key are reflected too, but only the
    requested one is returned.

    Raises:
        sqlalchemy.exc.InvalidRequestError: If the table does not exist.
    """
    from sqlalchemy.exc import InvalidRequestError

    for table in table_schemas_from_sqlalchemy(
        engine, include_tables=[table_name], schema=schema
    ):
        if table.name == table_name:
            return table
    raise InvalidRequestError(f"Could not reflect table {table_name!r}.")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _metadata_to_table_schemas(metadata: MetaData) -> list[TableSchema]:
    """Convert a reflected :class:`~sqlalchemy.schema.MetaData` into table
    descriptions.

    Separated from :func:`table_schemas_from_sqlalchemy` so it can be reused
    with a ``MetaData`` object declared in application code.
    """
    tables = [
        TableSchema(
            name=table.name,
            columns={col.name: _column_description(col) for col in table.columns},
        )
        for table in metadata.sorted_tables
    ]
    logger.debug("Reflected %d table(s): %s", len(tables), [t.name for t in tables])
    return tables


def _column_description(column: Column[Any]) -> ColumnDescription:
    description = _describe_type(column.type)

    # Primary keys never hold NULL even when the dialect reports them nullable.
    nullable = column.nullable is not False and not column.primary_key
    if nullable:
        return Schema.nullable(description)

    if column.server_default is not None or _is_autoincrement_key(column):
        return Schema.default(description)
    return description


def _is_autoincrement_key(column: Column[Any]) -> bool:
    if not column.primary_key or column.autoincrement not in (True, "auto"):
        return False
    return _python_type(column.type) is int and len(column.table.primary_key.columns) == 1


def _describe_type(sql_type: TypeEngine[Any]) -> ColumnDescription:
    from sqlalchemy import ARRAY, JSON
    from sqlalchemy import Enum as SAEnum

    # Enum subclasses String, so it must be checked first.
    if isinstance(sql_type, SAEnum) and sql_type.enums:
        return Schema.Enum(list(sql_type.enums))
    if isinstance(sql_type, ARRAY):
        return Schema.Array(_describe_type(sql_type.item_type))
    if isinstance(sql_type, JSON):
        return Schema.JSON(Schema.Any)

    python_type = _python_type(sql_type)
    if python_type is bool:
        return Schema.Boolean
    if python_type in (int, float, decimal.Decimal):
        return Schema.Number
    if python_type is str:
        return Schema.String
    if python_type in (datetime.date, datetime.datetime, datetime.time):
        return Schema.Date
    if python_type is dict:
        return ColumnDescription(type=ColumnType.OBJECT)
    if python_type is list:
        return Schema.Array(Schema.Any)
    return Schema.Any


def _python_type(sql_type: TypeEngine[Any]) -> type | None:
    try:
        return sql_type.python_type
    except NotImplementedError:
        return None
