"""Spread helpers: expand records into AND-chains, INSERT values and SET lists.

Every helper escapes column names with
:func:`~fragql.compile.identifier.escape_identifier` and binds values with
:func:`~fragql.compile.combinators.to_builder`, so a record value may be a
plain value (bound as ``$n``), ``None`` (bound as SQL ``NULL``) or a builder
such as ``raw("NOW()")`` (rendered in place, consuming no placeholder).

Columns whose value is :data:`UNSET` are left out of the fragment.

Usage::

    sql(["SELECT * FROM users WHERE ", ""], spread_and({"name": "Hugo", "age": 20}))
    # SELECT * FROM users WHERE ("name" = $1 AND "age" = $2)

    sql(["INSERT INTO users ", " RETURNING *"], spread_insert(row_1, row_2))
    sql(["UPDATE users SET ", " WHERE id = ", ""], spread_update(changes), user_id)
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Final

from fragql.compile.builder import SqlBuilder
from fragql.compile.combinators import join_sql, parenthesize, raw, to_builder, transform_sql
from fragql.compile.identifier import escape_identifier
from fragql.errors import ColumnMismatchError, EmptyRecordError, MissingColumnValueError

logger = logging.getLogger(__name__)

ValueRecord = Mapping[str, Any]


class _UnsetType:
    """Type of the :data:`UNSET` absence marker."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNSET"


#: Marks a record entry that should be omitted from the generated fragment.
#: ``None`` is not an absence marker: it is bound as SQL ``NULL``.
UNSET: Final = _UnsetType()


def filter_unset(record: ValueRecord) -> dict[str, Any]:
    """Return a copy of ``record`` without the entries set to :data:`UNSET`."""
    return {column: value for column, value in record.items() if value is not UNSET}


def extract_columns(records: Sequence[ValueRecord]) -> list[str]:
    """Return the column names shared by all ``records``.

    The first record (after dropping :data:`UNSET` entries) fixes the column
    set and its order.  Every later record must carry exactly those columns.

    Raises:
        EmptyRecordError: If there are no records or the first one has no
            columns left.
        ColumnMismatchError: If a record has a different number of columns.
        MissingColumnValueError: If a record of the right size lacks one of
            the reference columns.
    """
    if not records:
        raise EmptyRecordError("spread_insert")

    columns = list(filter_unset(records[0]))
    if not columns:
        raise EmptyRecordError("spread_insert")

    for row, record in enumerate(records[1:], start=1):
        present = filter_unset(record)
        if len(present) != len(columns):
            raise ColumnMismatchError(row, columns, list(present))
        for column in columns:
            if column not in present:
                raise MissingColumnValueError(row, column)

    return columns


def _assignments(record: ValueRecord, helper: str) -> list[SqlBuilder]:
    """Build one ``"column" = value`` fragment per non-UNSET entry."""
    column_values = filter_unset(record)
    if not column_values:
        raise EmptyRecordError(helper)
    return [
        join_sql([raw(escape_identifier(column)), to_builder(value)], " = ")
        for column, value in column_values.items()
    ]


def spread_and(record: ValueRecord) -> SqlBuilder:
    """Expand ``record`` into a parenthesized AND-chain of equality checks.

    Example::

        spread_and({"name": "John", "email": "john@example.com"})
        # ("name" = $1 AND "email" = $2)

    Raises:
        EmptyRecordError: If no column is left after dropping UNSET values.
        InvalidIdentifierError: If a column name contains a double quote.
    """
    return parenthesize(join_sql(_assignments(record, "spread_and"), " AND "))


def spread_insert(*records: ValueRecord) -> SqlBuilder:
    """Expand one or more same-shaped records into an INSERT column/VALUES list.

    Example::

        spread_insert({"name": "Hugo", "age": 20}, {"name": "Jon", "age": 25})
        # ("name", "age") VALUES ($1, $2), ($3, $4)

    Raises:
        EmptyRecordError: If no record or no column is given.
        ColumnMismatchError: If the records have different column counts.
        MissingColumnValueError: If a record lacks a value for a column.
        InvalidIdentifierError: If a column name contains a double quote.
    """
    columns = extract_columns(records)

    identifiers = [escape_identifier(column) for column in columns]
    prefix = f"({', '.join(identifiers)}) VALUES "

    rows = [
        parenthesize(join_sql([to_builder(record[column]) for column in columns], ", "))
        for record in records
    ]
    logger.debug("spread_insert: %d row(s) x %d column(s)", len(rows), len(columns))

    return transform_sql(join_sql(rows, ", "), lambda text: prefix + text)


def spread_update(record: ValueRecord) -> SqlBuilder:
    """Expand ``record`` into a comma-separated ``SET`` assignment list.

    Example::

        spread_update({"name": "John", "email": "john@example.com"})
        # "name" = $1, "email" = $2

    Raises:
        EmptyRecordError: If no column is left after dropping UNSET values.
        InvalidIdentifierError: If a column name contains a double quote.
    """
    return join_sql(_assignments(record, "spread_update"), ", ")
