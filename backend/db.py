"""
Database connection pool and connection manager.

All database access goes through conn().
Never use pool.acquire() directly outside this module.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager

import asyncpg

from backend.config import settings

pool: asyncpg.Pool | None = None


async def init_pool(dsn: str | None = None) -> None:
    """
    Initialize the connection pool.
    Called once at application startup.
    """
    global pool
    pool = await asyncpg.create_pool(
        dsn=dsn or settings.DATABASE_URL,
        min_size=settings.DB_POOL_MIN_SIZE,
        max_size=settings.DB_POOL_MAX_SIZE,
        command_timeout=60,
        init=_init_connection,
    )


async def close_pool() -> None:
    """
    Close the connection pool.
    Called at application shutdown.
    """
    global pool
    if pool is not None:
        await pool.close()
        pool = None


async def _init_connection(conn: asyncpg.Connection) -> None:
    """
    Initialize each new connection.
    JSONB and JSON decode to Python dict/list.
    """
    await conn.set_type_codec(
        "jsonb",
        encoder=json.dumps,
        decoder=json.loads,
        schema="pg_catalog",
    )
    await conn.set_type_codec(
        "json",
        encoder=json.dumps,
        decoder=json.loads,
        schema="pg_catalog",
    )


@asynccontextmanager
async def conn():
    """
    Acquire a database connection inside a transaction.

    Usage:
        async with conn() as c:
            row = await c.fetchrow("SELECT * FROM page_templates WHERE id = $1", template_id)

    Yields:
        asyncpg.Connection
    """
    if pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")

    async with pool.acquire() as connection:
        async with connection.transaction():
            yield connection
