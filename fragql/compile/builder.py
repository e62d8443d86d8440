"""The ``SqlBuilder`` sum type and its render entry point.

A builder is an immutable description of "some SQL text plus the values it
needs".  Placeholder numbers are not assigned when a builder is created;
they are assigned when it is rendered, from the ``next_param_id`` handed
down by the enclosing fragment.  That is what lets the same ``ParamSql``
node be spliced at any offset of any query.

Cases
-----
RawSql
    Fixed text, no values.
ParamSql
    One value, rendered as a single ``$n`` placeholder.
JoinedSql
    Ordered children, text joined by a delimiter.  The index passed to
    child *k* is the start index plus the value counts of children
    ``0..k-1``.
TransformedSql
    One child whose rendered text is rewritten by a function (used to add
    parentheses or a prefix); values pass through untouched.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fragql.compile.base import QueryConfig
from fragql.errors import CompilationError


class SqlBuilder(ABC):
    """Abstract base for every renderable SQL fragment.

    Subclasses are frozen dataclasses; ``build_fragment`` must be a pure
    function of ``next_param_id``.
    """

    @abstractmethod
    def build_fragment(self, next_param_id: int) -> QueryConfig:
        """Render this fragment.

        Args:
            next_param_id: Number to use for the first placeholder emitted.

        Returns:
            A fresh :class:`QueryConfig`; its placeholders are numbered
            ``next_param_id`` upwards, one per value.
        """


@dataclass(frozen=True)
class RawSql(SqlBuilder):
    """Text injected verbatim.  Never pass user input through this."""

    text: str

    def build_fragment(self, next_param_id: int) -> QueryConfig:
        return QueryConfig(text=self.text, values=[])


@dataclass(frozen=True)
class ParamSql(SqlBuilder):
    """A single bound value."""

    value: Any

    def build_fragment(self, next_param_id: int) -> QueryConfig:
        return QueryConfig(text=f"${next_param_id}", values=[self.value])


@dataclass(frozen=True)
class JoinedSql(SqlBuilder):
    """Children rendered left to right and joined with ``delimiter``."""

    parts: tuple[SqlBuilder, ...]
    delimiter: str = ""

    def build_fragment(self, next_param_id: int) -> QueryConfig:
        texts: list[str] = []
        values: list[Any] = []
        for part in self.parts:
            fragment = part.build_fragment(next_param_id + len(values))
            texts.append(fragment.text)
            values.extend(fragment.values)
        return QueryConfig(text=self.delimiter.join(texts), values=values)


@dataclass(frozen=True)
class TransformedSql(SqlBuilder):
    """A child whose rendered text is passed through ``transform``."""

    inner: SqlBuilder
    transform: Callable[[str], str]

    def build_fragment(self, next_param_id: int) -> QueryConfig:
        fragment = self.inner.build_fragment(next_param_id)
        return QueryConfig(text=self.transform(fragment.text), values=list(fragment.values))


def is_sql_builder(value: object) -> bool:
    """Return ``True`` when ``value`` is a :class:`SqlBuilder`."""
    return isinstance(value, SqlBuilder)


def render(builder: SqlBuilder, start_index: int) -> QueryConfig:
    """Render ``builder`` with its first placeholder numbered ``start_index``.

    Args:
        builder: The fragment tree to render.
        start_index: First placeholder number; must be a positive ``int``.

    Returns:
        The rendered :class:`QueryConfig`.

    Raises:
        CompilationError: If ``builder`` is not a :class:`SqlBuilder` or
            ``start_index`` is not a positive integer.
    """
    if not isinstance(builder, SqlBuilder):
        raise CompilationError(
            f"Expected a SqlBuilder, got {type(builder).__name__}."
        )
    # bool is an int subclass; reject it so `True` never means `$1`.
    if isinstance(start_index, bool) or not isinstance(start_index, int) or start_index < 1:
        raise CompilationError(
            f"Placeholder numbering must start at a positive integer, got {start_index!r}."
        )
    return builder.build_fragment(start_index)
