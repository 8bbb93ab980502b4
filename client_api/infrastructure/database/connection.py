"""Async database connection management.

Provides async database connectivity using aiosqlite. The datetime
adapters are registered by ``client_api.database`` on import.
"""
import asyncio
import sqlite3
from pathlib import Path
from typing import Optional

import aiosqlite

from ... import database

# Global connection pool reference
_pool: Optional['AsyncConnectionPool'] = None


class AsyncConnectionPool:
    """Simple async connection pool for aiosqlite.

    At most ``max_connections`` connections are checked out at a time;
    ``acquire`` waits until one is released. Released connections are
    kept for reuse.
    """

    def __init__(self, db_path: Path, max_connections: int = 10):
        self.db_path = db_path
        self.max_connections = max_connections
        self._connections: list[aiosqlite.Connection] = []
        self._in_use: set[aiosqlite.Connection] = set()
        self._semaphore = asyncio.Semaphore(max_connections)
        self._lock = asyncio.Lock()

    @property
    def in_use(self) -> int:
        """Number of connections currently checked out."""
        return len(self._in_use)

    async def acquire(self) -> aiosqlite.Connection:
        """Acquire a connection, waiting while the pool is exhausted."""
        await self._semaphore.acquire()
        try:
            async with self._lock:
                if self._connections:
                    conn = self._connections.pop()
                    self._in_use.add(conn)
                    return conn

            conn = await aiosqlite.connect(
                self.db_path,
                detect_types=sqlite3.PARSE_DECLTYPES
            )
            conn.row_factory = aiosqlite.Row
            async with self._lock:
                self._in_use.add(conn)
            return conn
        except BaseException:
            self._semaphore.release()
            raise

    async def release(self, conn: aiosqlite.Connection) -> None:
        """Release a connection back to the pool.

        Connections this pool did not hand out are closed instead.
        """
        async with self._lock:
            if conn not in self._in_use:
                await conn.close()
                return
            self._in_use.discard(conn)
            self._connections.append(conn)
        self._semaphore.release()

    async def close_all(self) -> None:
        """Close all idle connections in the pool."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()


async def get_async_db() -> aiosqlite.Connection:
    """Get async database connection for the configured database file."""
    global _pool
    if _pool is None or _pool.db_path != database.DATABASE_PATH:
        if _pool is not None:
            await _pool.close_all()
        _pool = AsyncConnectionPool(database.DATABASE_PATH)
    return await _pool.acquire()


async def release_async_db(conn: aiosqlite.Connection) -> None:
    """Release async database connection back to pool."""
    if _pool:
        await _pool.release(conn)
    else:
        await conn.close()


async def init_async_db() -> None:
    """Initialize database schema using async connection."""
    conn = await get_async_db()
    try:
        for statement in database.SCHEMA:
            await conn.execute(statement)
        await conn.commit()
    finally:
        await release_async_db(conn)


async def close_async_db() -> None:
    """Close all async database connections."""
    global _pool
    if _pool:
        await _pool.close_all()
        _pool = None
