"""Async database infrastructure.

This module provides async database connectivity using aiosqlite.
"""
from .connection import (
    AsyncConnectionPool,
    get_async_db,
    release_async_db,
    init_async_db,
    close_async_db,
)

__all__ = [
    'AsyncConnectionPool',
    'get_async_db',
    'release_async_db',
    'init_async_db',
    'close_async_db',
]
