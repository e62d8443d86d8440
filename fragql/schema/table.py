"""Pydantic models describing database tables.

A table description is static documentation of what a table holds.  The
fragment builder never reads it; it exists so applications can keep table
shapes next to their queries and derive row models from them::

    from fragql.schema import Schema, define_table

    users = define_table("users", {
        "id": Schema.default(Schema.Number),
        "email": Schema.String,
        "email_confirmed": Schema.Boolean,
        "profile": Schema.JSON(Schema.Object({"avatar": Schema.String})),
        "created_at": Schema.default(Schema.Date),
        "updated_at": Schema.nullable(Schema.Date),
        "role": Schema.Enum(["admin", "user"]),
    })

    UserRow = users.row_model()          # every column required
    record = users.new_row_record(data)  # columns with defaults may be left out
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, create_model

from fragql.compile.identifier import escape_identifier
from fragql.errors import InvalidIdentifierError, SchemaDefinitionError

logger = logging.getLogger(__name__)


class ColumnType(str, Enum):
    """Value kinds a column can hold."""

    ANY = "any"
    ARRAY = "array"
    BOOLEAN = "boolean"
    DATE = "date"
    ENUM = "enum"
    JSON = "json"
    NUMBER = "number"
    OBJECT = "object"
    STRING = "string"


class ColumnDescription(BaseModel):
    """Description of a single column.

    Attributes:
        type: The kind of value stored.
        subtype: Item type of an ``ARRAY`` or payload type of a ``JSON`` column.
        enum: Allowed values of an ``ENUM`` column.
        props: Property types of an ``OBJECT`` column.
        has_default: The database fills the column when an INSERT omits it.
        nullable: The column accepts ``NULL``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: ColumnType
    subtype: Optional[ColumnDescription] = None
    enum: Optional[tuple[str | int, ...]] = None
    props: Optional[dict[str, ColumnDescription]] = None
    has_default: bool = False
    nullable: bool = False

    def python_type(self) -> Any:
        """Return the Python annotation for values of this column.

        Dates are represented as ISO strings, numbers as ``int | float``.
        """
        base = self._base_python_type()
        return Optional[base] if self.nullable else base

    def _base_python_type(self) -> Any:
        if self.type is ColumnType.BOOLEAN:
            return bool
        if self.type is ColumnType.NUMBER:
            return int | float
        if self.type in (ColumnType.STRING, ColumnType.DATE):
            return str
        if self.type is ColumnType.ENUM:
            return Literal[self.enum] if self.enum else Any
        if self.type is ColumnType.ARRAY:
            return list[self.subtype.python_type() if self.subtype else Any]
        if self.type is ColumnType.JSON:
            return self.subtype.python_type() if self.subtype else Any
        if self.type is ColumnType.OBJECT:
            return dict[str, Any]
        return Any


class Schema:
    """Shorthands for building :class:`ColumnDescription` objects."""

    Any: ClassVar[ColumnDescription] = ColumnDescription(type=ColumnType.ANY)
    Boolean: ClassVar[ColumnDescription] = ColumnDescription(type=ColumnType.BOOLEAN)
    Date: ClassVar[ColumnDescription] = ColumnDescription(type=ColumnType.DATE)
    Number: ClassVar[ColumnDescription] = ColumnDescription(type=ColumnType.NUMBER)
    String: ClassVar[ColumnDescription] = ColumnDescription(type=ColumnType.STRING)

    @staticmethod
    def Array(subtype: ColumnDescription) -> ColumnDescription:  # noqa: N802
        return ColumnDescription(type=ColumnType.ARRAY, subtype=subtype)

    @staticmethod
    def Enum(values: Sequence[str | int]) -> ColumnDescription:  # noqa: N802
        if not values:
            raise SchemaDefinitionError("An enum column needs at least one value.")
        return ColumnDescription(type=ColumnType.ENUM, enum=tuple(values))

    @staticmethod
    def JSON(subtype: ColumnDescription) -> ColumnDescription:  # noqa: N802
        return ColumnDescription(type=ColumnType.JSON, subtype=subtype)

    @staticmethod
    def Object(props: Mapping[str, ColumnDescription]) -> ColumnDescription:  # noqa: N802
        return ColumnDescription(type=ColumnType.OBJECT, props=dict(props))

    @staticmethod
    def default(column: ColumnDescription) -> ColumnDescription:
        """Mark ``column`` as filled by the database when omitted."""
        return column.model_copy(update={"has_default": True})

    @staticmethod
    def nullable(column: ColumnDescription) -> ColumnDescription:
        """Mark ``column`` as nullable; a nullable column defaults to ``NULL``."""
        return column.model_copy(update={"has_default": True, "nullable": True})


class TableSchema(BaseModel):
    """A named table and its column descriptions.

    Attributes:
        name: Table name.
        columns: Column descriptions keyed by column name, in table order.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    columns: dict[str, ColumnDescription] = Field(default_factory=dict)

    @property
    def identifier(self) -> str:
        """The quoted table name, ready for ``sql.raw()``."""
        return escape_identifier(self.name)

    @property
    def column_names(self) -> list[str]:
        return list(self.columns)

    @property
    def mandatory_columns(self) -> list[str]:
        """Columns an INSERT must provide."""
        return [name for name, col in self.columns.items() if not col.has_default]

    @property
    def columns_with_defaults(self) -> list[str]:
        """Columns an INSERT may leave out."""
        return [name for name, col in self.columns.items() if col.has_default]

    def row_model(self) -> type[BaseModel]:
        """Return a pydantic model for a full row: every column is required."""
        return self._build_model(f"{_model_prefix(self.name)}Row", optional=frozenset())

    def new_row_model(self) -> type[BaseModel]:
        """Return a pydantic model for a row to insert.

        Columns with defaults are optional and stay unset when omitted.
        """
        return self._build_model(
            f"New{_model_prefix(self.name)}Row",
            optional=frozenset(self.columns_with_defaults),
        )

    def new_row_record(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Validate ``data`` against :meth:`new_row_model` and return a record.

        Omitted optional columns are left out of the result, so the record
        can go straight into :func:`~fragql.compile.spread.spread_insert`.

        Raises:
            pydantic.ValidationError: If ``data`` does not fit the table.
        """
        row = self.new_row_model().model_validate(dict(data))
        return row.model_dump(by_alias=True, exclude_unset=True)

    def _build_model(self, model_name: str, optional: frozenset[str]) -> type[BaseModel]:
        fields: dict[str, Any] = {}
        for index, (column, description) in enumerate(self.columns.items()):
            default = None if column in optional else ...
            field_name = column if _usable_field_name(column) else f"field_{index}"
            fields[field_name] = (
                description.python_type(),
                Field(default, alias=column),
            )
        return create_model(
            model_name,
            __config__=ConfigDict(extra="forbid", populate_by_name=True),
            **fields,
        )


def _model_prefix(table_name: str) -> str:
    return "".join(part.capitalize() for part in table_name.replace("-", "_").split("_") if part)


def _usable_field_name(column: str) -> bool:
    return (
        column.isidentifier()
        and not column.startswith(("_", "model_"))
        and not hasattr(BaseModel, column)
    )


class TableRegistry:
    """Registry of every table defined with :func:`define_table`."""

    _tables: ClassVar[dict[str, TableSchema]] = {}

    @classmethod
    def register(cls, table: TableSchema) -> TableSchema:
        """Add ``table`` to the registry.

        Raises:
            SchemaDefinitionError: If a table with the same name exists.
        """
        if table.name in cls._tables:
            raise SchemaDefinitionError(
                f"Table '{table.name}' is already defined.", table=table.name
            )
        cls._tables[table.name] = table
        return table

    @classmethod
    def get(cls, name: str) -> TableSchema | None:
        """Return the table registered as ``name``, or ``None``."""
        return cls._tables.get(name)

    @classmethod
    def all(cls) -> list[TableSchema]:
        """Return all registered tables in definition order."""
        return list(cls._tables.values())

    @classmethod
    def clear(cls) -> None:
        """Forget every registered table."""
        cls._tables.clear()


def define_table(
    table_name: str, columns: Mapping[str, ColumnDescription]
) -> TableSchema:
    """Describe a table and register it.

    Args:
        table_name: Name of the table.
        columns: Column descriptions keyed by column name.

    Returns:
        The registered :class:`TableSchema`.

    Raises:
        SchemaDefinitionError: If the table name is empty, a name contains a
            double quote, or the table is already defined.
    """
    if not table_name:
        raise SchemaDefinitionError("Table name must not be empty.")
    try:
        escape_identifier(table_name)
        for column in columns:
            escape_identifier(column)
    except InvalidIdentifierError as exc:
        raise SchemaDefinitionError(str(exc), table=table_name) from exc

    logger.debug("Defining schema for table %s: %s", table_name, list(columns))
    return TableRegistry.register(TableSchema(name=table_name, columns=dict(columns)))


def get_all_table_schemas() -> list[TableSchema]:
    """Return every table defined with :func:`define_table`."""
    return TableRegistry.all()
