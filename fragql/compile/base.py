"""The query object produced by every render: ``QueryConfig``."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class QueryConfig:
    """Parameterized SQL text plus its positional bind values.

    Attributes:
        text: SQL text with PostgreSQL-style ``$1, $2, …`` placeholders.
        values: Bind values; ``values[0]`` belongs to the lowest placeholder.
    """

    text: str
    values: list[Any] = field(default_factory=list)

    def to_args(self) -> tuple[Any, ...]:
        """Return ``(text, *values)`` for drivers called as ``execute(query, *args)``.

        Example::

            rows = await connection.fetch(*query.to_args())
        """
        return (self.text, *self.values)
