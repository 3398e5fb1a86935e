"""SQLite retry helpers for store database access."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import aiosqlite

from mangashelf.shared.constants import DB_RETRY_ATTEMPTS, DB_RETRY_BASE_DELAY

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_locked_error(exc: sqlite3.OperationalError) -> bool:
    return "database is locked" in str(exc).lower()


async def run_with_retry(operation: Callable[[], Awaitable[T]]) -> T:
    """
    Run a database operation, retrying while the database is locked.

    Args:
        operation: Zero-argument coroutine factory.

    Returns:
        Operation result.
    """
    for attempt in range(DB_RETRY_ATTEMPTS - 1):
        try:
            return await operation()
        except sqlite3.OperationalError as exc:
            if not is_locked_error(exc):
                raise
            logger.debug("Database locked, retry %d/%d", attempt + 1, DB_RETRY_ATTEMPTS)
            await asyncio.sleep(DB_RETRY_BASE_DELAY * (attempt + 1))
    return await operation()


async def execute_with_retry(
    db: aiosqlite.Connection, sql: str, params: tuple[Any, ...] | None = None
) -> aiosqlite.Cursor:
    """
    Execute a SQL statement with retries on database lock errors.

    Args:
        db: Open aiosqlite connection.
        sql: SQL statement to execute.
        params: SQL parameters.

    Returns:
        Cursor of the executed statement.
    """
    return await run_with_retry(lambda: db.execute(sql, params or ()))


async def executemany_with_retry(
    db: aiosqlite.Connection, sql: str, rows: list[tuple[Any, ...]]
) -> None:
    """
    Execute many SQL statements with retries on database lock errors.

    Args:
        db: Open aiosqlite connection.
        sql: SQL statement to execute.
        rows: SQL parameter rows.

    Returns:
        None.
    """
    cursor = await run_with_retry(lambda: db.executemany(sql, rows))
    await cursor.close()


async def commit_with_retry(db: aiosqlite.Connection) -> None:
    """
    Commit a transaction with retries on database lock errors.

    Args:
        db: Open aiosqlite connection.

    Returns:
        None.
    """
    await run_with_retry(db.commit)
