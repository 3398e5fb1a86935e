"""Serialized database write worker."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import Awaitable, Callable
from typing import Any

import aiosqlite

from mangashelf.store.retry import commit_with_retry

logger = logging.getLogger(__name__)

WriteJob = Callable[[aiosqlite.Connection], Awaitable[Any]]


class DatabaseWriter:
    """
    Serialize write transactions through a single async worker.

    Each submitted job runs alone inside one transaction. The transaction is
    committed when the job returns and rolled back when it raises, so readers
    on other connections see either none or all of a job's changes.
    """

    def __init__(self, db: aiosqlite.Connection) -> None:
        """
        Initialize the writer with an open database connection.

        Args:
            db: Open aiosqlite connection reserved for writes.
        """
        self._db = db
        self._queue: asyncio.Queue[tuple[WriteJob, asyncio.Future[Any]] | None] = (
            asyncio.Queue()
        )
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None

    async def start(self) -> None:
        """
        Start the background writer task.

        Returns:
            None.
        """
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def close(self) -> None:
        """
        Stop the background writer task after pending work completes.

        Returns:
            None.
        """
        if self._task is None:
            return
        await self._queue.put(None)
        await self._task
        self._task = None

    async def submit(self, job: WriteJob) -> Any:
        """
        Enqueue a write job and wait for its committed result.

        Args:
            job: Coroutine function receiving the write connection.

        Returns:
            Value returned by the job.
        """
        if self._task is None:
            raise RuntimeError("DatabaseWriter is not started")
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()
        await self._queue.put((job, future))
        return await future

    async def _run(self) -> None:
        """
        Execute queued write jobs sequentially.

        Returns:
            None.
        """
        while True:
            item = await self._queue.get()
            if item is None:
                break
            job, future = item
            try:
                result = await job(self._db)
                await commit_with_retry(self._db)
            except Exception as exc:
                try:
                    await self._db.rollback()
                except (sqlite3.Error, ValueError) as rollback_exc:
                    logger.error("Rollback after failed write failed: %s", rollback_exc)
                finally:
                    if not future.done():
                        future.set_exception(exc)
                continue
            if not future.done():
                future.set_result(result)
