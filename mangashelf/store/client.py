"""Local record store backed by SQLite."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import AsyncIterator, Iterator
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType

import aiosqlite

from mangashelf.errors import StoreError
from mangashelf.models import Manga
from mangashelf.shared.constants import DB_TIMEOUT_SECONDS
from mangashelf.shared.observers import ChangeBus
from mangashelf.store.operations import (
    count_mangas,
    count_published_before,
    fetch_all_mangas,
    fetch_favorites,
    fetch_manga,
    fetch_page,
    fetch_years,
    replace_manga,
    toggle_flag,
    upsert_mangas,
)
from mangashelf.store.schema import configure_connection, init_db
from mangashelf.store.writer import DatabaseWriter
from mangashelf.views.sorting import SortSpec

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """
    Re-raise SQLite failures as `StoreError`.

    Args:
        action: Short description used in the error message.

    Returns:
        Context manager.
    """
    try:
        yield
    except sqlite3.Error as exc:
        raise StoreError(f"{action} failed: {exc}") from exc


class MangaStore:
    """
    Authoritative local copy of the catalog keyed by id.

    Writes go through one serialized writer connection and are committed one
    job at a time. Reads use a second connection, so in WAL mode they only see
    committed state. Subscribers are notified after each commit.

    Args:
        db_path: SQLite database file.
    """

    def __init__(self, db_path: Path | str) -> None:
        """
        Initialize the store without opening connections.

        Args:
            db_path: SQLite database file.
        """
        self.db_path = Path(db_path)
        self._write_db: aiosqlite.Connection | None = None
        self._read_db: aiosqlite.Connection | None = None
        self._writer: DatabaseWriter | None = None
        self._bus = ChangeBus()

    async def open(self) -> MangaStore:
        """
        Open connections, create the schema and start the writer.

        Returns:
            The opened store.
        """
        if self._writer is not None:
            return self
        with storage_errors("Opening database"):
            self._write_db = await aiosqlite.connect(
                self.db_path, timeout=DB_TIMEOUT_SECONDS
            )
            await init_db(self._write_db)
            self._read_db = await aiosqlite.connect(
                self.db_path, timeout=DB_TIMEOUT_SECONDS
            )
            await configure_connection(self._read_db)
        self._writer = DatabaseWriter(self._write_db)
        await self._writer.start()
        logger.debug("Opened store at %s", self.db_path)
        return self

    async def close(self) -> None:
        """
        Drain pending writes and close both connections.

        Returns:
            None.
        """
        if self._writer is not None:
            await self._writer.close()
            self._writer = None
        if self._read_db is not None:
            await self._read_db.close()
            self._read_db = None
        if self._write_db is not None:
            await self._write_db.close()
            self._write_db = None

    async def __aenter__(self) -> MangaStore:
        return await self.open()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def _reader(self) -> aiosqlite.Connection:
        if self._read_db is None:
            raise RuntimeError("MangaStore is not open")
        return self._read_db

    @property
    def _write_queue(self) -> DatabaseWriter:
        if self._writer is None:
            raise RuntimeError("MangaStore is not open")
        return self._writer

    async def upsert_many(self, mangas: list[Manga]) -> None:
        """
        Insert or fully replace records in one transaction.

        The store applies the rows as given. Preserving local flags is the
        caller's job.

        Args:
            mangas: Records to store.

        Returns:
            None.
        """
        if not mangas:
            return

        async def job(db: aiosqlite.Connection) -> None:
            await upsert_mangas(db, mangas)

        with storage_errors("Upserting mangas"):
            await self._write_queue.submit(job)
        logger.debug("Upserted %d mangas", len(mangas))
        self._bus.publish(manga.id for manga in mangas)

    async def update(self, manga: Manga) -> None:
        """
        Replace a single row by id.

        Args:
            manga: Record carrying the new values.

        Returns:
            None.

        Raises:
            NotFound: No row has the record's id.
        """

        async def job(db: aiosqlite.Connection) -> None:
            await replace_manga(db, manga)

        with storage_errors("Updating manga"):
            await self._write_queue.submit(job)
        self._bus.publish([manga.id])

    async def toggle_favorite(self, manga_id: str) -> Manga:
        return await self._toggle(manga_id, "is_favorite")

    async def toggle_read(self, manga_id: str) -> Manga:
        return await self._toggle(manga_id, "is_read")

    async def _toggle(self, manga_id: str, column: str) -> Manga:
        async def job(db: aiosqlite.Connection) -> Manga:
            return await toggle_flag(db, manga_id, column)

        with storage_errors("Toggling flag"):
            manga = await self._write_queue.submit(job)
        self._bus.publish([manga_id])
        return manga

    async def get_all(self) -> list[Manga]:
        """
        Read every record ordered by publication time, then id.

        Returns:
            All stored records.
        """
        with storage_errors("Reading mangas"):
            return await fetch_all_mangas(self._reader)

    async def get_by_id(self, manga_id: str) -> Manga | None:
        with storage_errors("Reading manga"):
            return await fetch_manga(self._reader, manga_id)

    async def get_favorites(self) -> list[Manga]:
        with storage_errors("Reading favorites"):
            return await fetch_favorites(self._reader)

    async def get_page(self, spec: SortSpec, limit: int, offset: int) -> list[Manga]:
        """
        Read one sorted slice.

        Args:
            spec: Sort specification.
            limit: Maximum rows, zero or more.
            offset: Rows to skip, zero or more.

        Returns:
            Records in sort order; empty when offset is past the end.
        """
        if limit < 0 or offset < 0:
            raise ValueError("limit and offset must not be negative")
        if limit == 0:
            return []
        with storage_errors("Reading page"):
            return await fetch_page(self._reader, spec, limit, offset)

    async def count(self) -> int:
        with storage_errors("Counting mangas"):
            return await count_mangas(self._reader)

    async def count_published_before(self, epoch: int) -> int:
        with storage_errors("Counting mangas"):
            return await count_published_before(self._reader, epoch)

    async def get_years(self) -> list[int]:
        with storage_errors("Reading years"):
            return await fetch_years(self._reader)

    async def observe_by_id(self, manga_id: str) -> AsyncIterator[Manga | None]:
        """
        Stream the current row and every later change to it.

        Args:
            manga_id: Row id.

        Returns:
            Async iterator yielding the row, or None while it is absent.
        """
        queue = self._bus.subscribe()
        try:
            current = await self.get_by_id(manga_id)
            yield current
            while True:
                changed = await queue.get()
                if manga_id not in changed:
                    continue
                latest = await self.get_by_id(manga_id)
                if latest != current:
                    current = latest
                    yield current
        finally:
            self._bus.unsubscribe(queue)

    async def observe_favorites(self) -> AsyncIterator[list[Manga]]:
        """
        Stream the favorites list and every later change to it.

        Returns:
            Async iterator of favorite lists.
        """
        queue = self._bus.subscribe()
        try:
            current = await self.get_favorites()
            yield current
            while True:
                await queue.get()
                latest = await self.get_favorites()
                if latest != current:
                    current = latest
                    yield current
        finally:
            self._bus.unsubscribe(queue)
