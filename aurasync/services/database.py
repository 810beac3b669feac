"""Postgres access through an asyncpg connection pool.

One :class:`Database` is created in the app lifespan and stored on
``app.state.db``.  Route handlers receive it through the ``Db`` dependency
so tests can swap in a double without touching module state.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import asyncpg

from aurasync.config import Settings

logger = logging.getLogger("aurasync.db")


async def _init_connection(conn: asyncpg.Connection) -> None:
    # Decode json/jsonb columns into Python objects
    for typename in ("json", "jsonb"):
        await conn.set_type_codec(
            typename, encoder=json.dumps, decoder=json.loads, schema="pg_catalog"
        )


class Database:
    """Thin async wrapper around an ``asyncpg.Pool``."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    @classmethod
    async def connect(cls, settings: Settings) -> "Database":
        pool = await asyncpg.create_pool(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=30,
            init=_init_connection,
        )
        logger.info(
            "Database pool initialized (min=%d, max=%d)",
            settings.db_pool_min_size,
            settings.db_pool_max_size,
        )
        return cls(pool)

    async def close(self) -> None:
        await self._pool.close()
        logger.info("Database pool closed")

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[asyncpg.Connection, None]:
        """Acquire a connection and run everything inside one transaction.

        Usage::

            async with db.transaction() as conn:
                row = await conn.fetchrow("INSERT INTO ... RETURNING *", ...)
                await conn.execute("UPDATE ...", ...)
        """
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                yield conn

    async def execute(self, query: str, *args: Any) -> str:
        async with self._pool.acquire() as conn:
            return await conn.execute(query, *args)

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        async with self._pool.acquire() as conn:
            return await conn.fetch(query, *args)

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        async with self._pool.acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetchval(self, query: str, *args: Any) -> Any:
        async with self._pool.acquire() as conn:
            return await conn.fetchval(query, *args)
