"""Pure functions that create and combine :class:`SqlBuilder` nodes."""
from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

from fragql.compile.builder import (
    JoinedSql,
    ParamSql,
    RawSql,
    SqlBuilder,
    TransformedSql,
    is_sql_builder,
)

T = TypeVar("T")


def raw(text: str) -> SqlBuilder:
    """Inject ``text`` into the query as-is.

    Attention: this bypasses parametrization.  Only pass trusted SQL
    (keywords, function calls like ``NOW()``), never user input.
    """
    return RawSql(text)


def param(value: Any) -> SqlBuilder:
    """Bind ``value`` as a query parameter."""
    return ParamSql(value)


def to_builder(value: Any) -> SqlBuilder:
    """Return ``value`` unchanged if it is a builder, else bind it as a parameter."""
    if is_sql_builder(value):
        return value
    return param(value)


def join_sql(builders: Iterable[SqlBuilder], delimiter: str = "") -> SqlBuilder:
    """Concatenate ``builders`` in order, separated by ``delimiter``."""
    return JoinedSql(tuple(builders), delimiter)


def transform_sql(builder: SqlBuilder, transform: Callable[[str], str]) -> SqlBuilder:
    """Rewrite the rendered text of ``builder`` with ``transform``."""
    return TransformedSql(builder, transform)


def parenthesize(builder: SqlBuilder) -> SqlBuilder:
    """Wrap the rendered text of ``builder`` in parentheses."""
    return transform_sql(builder, lambda text: f"({text})")


def merge_lists(first: Sequence[T], second: Sequence[T]) -> list[T]:
    """Merge two lists, alternating between elements.

    The tail of the longer list is appended once the shorter one runs out::

        merge_lists([x1, x2, x3], [y1, y2]) == [x1, y1, x2, y2, x3]
    """
    result: list[T] = []
    for index in range(max(len(first), len(second))):
        if index < len(first):
            result.append(first[index])
        if index < len(second):
            result.append(second[index])
    return result
