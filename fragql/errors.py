"""Custom exception hierarchy for fragQL.

All public errors inherit from FragQLError so callers can catch the base
class for any fragQL-specific failure.  Every error is raised while a
fragment is being constructed (or an identifier escaped), never while the
final query text is assembled.
"""
from __future__ import annotations

from typing import Any


class FragQLError(Exception):
    """Base exception for all fragQL errors.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. ``INVALID_IDENTIFIER``).
        details: Extra context describing the offending input.
    """

    def __init__(
        self,
        message: str,
        code: str = "FRAGQL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response for API layers."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class InvalidIdentifierError(FragQLError):
    """Raised when a table or column name is empty or contains an embedded
    double quote.

    Args:
        identifier: The identifier as passed by the caller.
    """

    def __init__(self, identifier: str) -> None:
        super().__init__(
            f"Invalid identifier: {identifier}",
            code="INVALID_IDENTIFIER",
            details={"identifier": identifier},
        )
        self.identifier = identifier


class EmptyRecordError(FragQLError):
    """Raised when a spread helper has no columns left to render.

    Args:
        helper: Name of the spread helper that received the empty input.
    """

    def __init__(self, helper: str) -> None:
        super().__init__(
            f"{helper}() needs at least one column with a value.",
            code="EMPTY_RECORD",
            details={"helper": helper},
        )
        self.helper = helper


class RecordShapeError(FragQLError):
    """Base class for multi-row records that do not share one column set."""


class ColumnMismatchError(RecordShapeError):
    """Raised when a row has a different number of columns than the first row.

    Args:
        row: Zero-based index of the offending record.
        expected: Column names of the first record.
        actual: Column names of the offending record.
    """

    def __init__(self, row: int, expected: list[str], actual: list[str]) -> None:
        super().__init__(
            f"Record #{row} has {len(actual)} column(s) {actual}, "
            f"expected {len(expected)} column(s) {expected}.",
            code="COLUMN_MISMATCH",
            details={"row": row, "expected": expected, "actual": actual},
        )
        self.row = row
        self.expected = expected
        self.actual = actual


class MissingColumnValueError(RecordShapeError):
    """Raised when a row lacks a value for a column of the first row.

    Args:
        row: Zero-based index of the offending record.
        column: The column name that has no value in that record.
    """

    def __init__(self, row: int, column: str) -> None:
        super().__init__(
            f"Record #{row} has no value for column '{column}'.",
            code="MISSING_COLUMN_VALUE",
            details={"row": row, "column": column},
        )
        self.row = row
        self.column = column


class TemplateError(FragQLError):
    """Raised when template input cannot be split into text and values."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="TEMPLATE_ERROR")


class CompilationError(FragQLError):
    """Raised when a fragment cannot be rendered with the given arguments."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="COMPILATION_ERROR")


class SchemaDefinitionError(FragQLError):
    """Raised when a table description is misconfigured.

    Args:
        message: Human-readable description.
        table: Name of the table being defined.
    """

    def __init__(self, message: str, table: str | None = None) -> None:
        super().__init__(
            message,
            code="SCHEMA_DEFINITION",
            details={"table": table} if table is not None else {},
        )
        self.table = table
