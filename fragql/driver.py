"""Thin pass-through to an async PostgreSQL driver.

fragQL never opens connections or runs queries itself.  These helpers
only unpack a :class:`~fragql.compile.base.QueryConfig` into the
``method(query, *args)`` call convention of drivers that understand
``$1, $2, …`` placeholders, such as asyncpg's ``Connection`` and ``Pool``::

    import asyncpg
    from fragql import driver, sql

    pool = await asyncpg.create_pool(dsn)
    rows = await driver.fetch(pool, sql(["SELECT * FROM users WHERE id = ", ""], 1))
"""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from fragql.compile.base import QueryConfig


@runtime_checkable
class Queryable(Protocol):
    """Anything that runs ``$n``-parameterized SQL, e.g. an asyncpg pool."""

    async def execute(self, query: str, *args: Any) -> Any: ...

    async def fetch(self, query: str, *args: Any) -> list[Any]: ...

    async def fetchrow(self, query: str, *args: Any) -> Any: ...

    async def fetchval(self, query: str, *args: Any) -> Any: ...


async def execute(conn: Queryable, query: QueryConfig) -> Any:
    """Run ``query`` and return the driver's status result."""
    return await conn.execute(*query.to_args())


async def fetch(conn: Queryable, query: QueryConfig) -> list[Any]:
    """Run ``query`` and return all rows."""
    return await conn.fetch(*query.to_args())


async def fetch_row(conn: Queryable, query: QueryConfig) -> Any:
    """Run ``query`` and return the first row, or ``None``."""
    return await conn.fetchrow(*query.to_args())


async def fetch_value(conn: Queryable, query: QueryConfig) -> Any:
    """Run ``query`` and return the first column of the first row."""
    return await conn.fetchval(*query.to_args())
