"""fragQL table descriptions: column kinds, table schemas, row models."""
from fragql.schema.table import (
    ColumnDescription,
    ColumnType,
    Schema,
    TableRegistry,
    TableSchema,
    define_table,
    get_all_table_schemas,
)

__all__ = [
    "ColumnDescription",
    "ColumnType",
    "Schema",
    "TableRegistry",
    "TableSchema",
    "define_table",
    "get_all_table_schemas",
]
