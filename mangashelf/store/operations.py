"""Database read/write operations on the mangas table."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import aiosqlite

from mangashelf.errors import NotFound
from mangashelf.models import Manga
from mangashelf.shared.converters import to_bool_int
from mangashelf.store.retry import execute_with_retry, executemany_with_retry
from mangashelf.store.schema import (
    FLAG_COLUMNS,
    MANGA_SELECT,
    MANGA_UPDATE,
    MANGA_UPSERT,
)
from mangashelf.views.sorting import SortSpec, apply_sort

DEFAULT_ORDER = apply_sort(SortSpec.YEAR_ASC)


def manga_to_row(manga: Manga) -> tuple[Any, ...]:
    """
    Convert a record into a row tuple in column order.

    Args:
        manga: Record to convert.

    Returns:
        Row tuple matching `MANGA_COLUMNS`.
    """
    return (
        manga.id,
        manga.image_url,
        manga.title,
        manga.category,
        float(manga.score),
        int(manga.popularity),
        int(manga.published_at),
        to_bool_int(manga.is_favorite),
        to_bool_int(manga.is_read),
    )


def row_to_manga(row: Sequence[Any]) -> Manga:
    """
    Convert a row in column order into a record.

    Args:
        row: Row selected with `MANGA_SELECT`.

    Returns:
        Manga record.
    """
    return Manga(
        id=row[0],
        image_url=row[1],
        title=row[2],
        category=row[3],
        score=float(row[4]),
        popularity=int(row[5]),
        published_at=int(row[6]),
        is_favorite=bool(row[7]),
        is_read=bool(row[8]),
    )


async def fetch_mangas(
    db: aiosqlite.Connection, sql: str, params: tuple[Any, ...] = ()
) -> list[Manga]:
    """
    Run a select over the mangas table and map every row.

    Args:
        db: Database connection.
        sql: Query selecting `MANGA_COLUMNS` in order.
        params: Query parameters.

    Returns:
        Mapped records.
    """
    cursor = await db.execute(sql, params)
    rows = await cursor.fetchall()
    await cursor.close()
    return [row_to_manga(row) for row in rows]


async def fetch_scalar(
    db: aiosqlite.Connection, sql: str, params: tuple[Any, ...] = ()
) -> Any:
    cursor = await db.execute(sql, params)
    row = await cursor.fetchone()
    await cursor.close()
    return row[0] if row else None


async def fetch_all_mangas(db: aiosqlite.Connection) -> list[Manga]:
    return await fetch_mangas(db, f"{MANGA_SELECT}{DEFAULT_ORDER}")


async def fetch_manga(db: aiosqlite.Connection, manga_id: str) -> Manga | None:
    rows = await fetch_mangas(db, f"{MANGA_SELECT} WHERE id = ?", (manga_id,))
    return rows[0] if rows else None


async def fetch_favorites(db: aiosqlite.Connection) -> list[Manga]:
    return await fetch_mangas(
        db, f"{MANGA_SELECT} WHERE is_favorite = 1{DEFAULT_ORDER}"
    )


async def fetch_page(
    db: aiosqlite.Connection, spec: SortSpec, limit: int, offset: int
) -> list[Manga]:
    """
    Fetch one sorted slice of the table.

    Args:
        db: Database connection.
        spec: Sort specification.
        limit: Maximum rows.
        offset: Rows to skip.

    Returns:
        Records in sort order, empty when offset is past the end.
    """
    return await fetch_mangas(
        db, f"{MANGA_SELECT}{apply_sort(spec)} LIMIT ? OFFSET ?", (limit, offset)
    )


async def count_mangas(db: aiosqlite.Connection) -> int:
    return int(await fetch_scalar(db, "SELECT COUNT(*) FROM mangas") or 0)


async def count_published_before(db: aiosqlite.Connection, epoch: int) -> int:
    """
    Count rows published strictly before a timestamp.

    In year order this count is the position of the first row at or after
    the timestamp.

    Args:
        db: Database connection.
        epoch: Timestamp in whole epoch seconds.

    Returns:
        Row count.
    """
    value = await fetch_scalar(
        db, "SELECT COUNT(*) FROM mangas WHERE published_at < ?", (epoch,)
    )
    return int(value or 0)


async def fetch_years(db: aiosqlite.Connection) -> list[int]:
    """
    List the distinct UTC publication years present in the table.

    Args:
        db: Database connection.

    Returns:
        Sorted years.
    """
    cursor = await db.execute(
        """
        SELECT DISTINCT CAST(strftime('%Y', published_at, 'unixepoch') AS INTEGER)
            AS year
        FROM mangas
        ORDER BY year
        """
    )
    rows = await cursor.fetchall()
    await cursor.close()
    return [int(row[0]) for row in rows if row[0] is not None]


async def upsert_mangas(db: aiosqlite.Connection, mangas: list[Manga]) -> None:
    """
    Insert or fully replace records.

    Args:
        db: Write connection.
        mangas: Records to store.

    Returns:
        None.
    """
    if not mangas:
        return
    rows = [manga_to_row(manga) for manga in mangas]
    await executemany_with_retry(db, MANGA_UPSERT, rows)


async def replace_manga(db: aiosqlite.Connection, manga: Manga) -> None:
    """
    Replace an existing row by id.

    Args:
        db: Write connection.
        manga: Record carrying the new values.

    Returns:
        None.

    Raises:
        NotFound: No row has the record's id.
    """
    row = manga_to_row(manga)
    cursor = await execute_with_retry(db, MANGA_UPDATE, (*row[1:], row[0]))
    updated = cursor.rowcount
    await cursor.close()
    if updated == 0:
        raise NotFound(manga.id)


async def toggle_flag(db: aiosqlite.Connection, manga_id: str, column: str) -> Manga:
    """
    Flip one local flag in a single statement.

    Args:
        db: Write connection.
        manga_id: Row id.
        column: `is_favorite` or `is_read`.

    Returns:
        Row as written by this transaction.

    Raises:
        NotFound: No row has the id.
    """
    if column not in FLAG_COLUMNS:
        raise ValueError(f"Unsupported flag column: {column}")
    cursor = await execute_with_retry(
        db, f"UPDATE mangas SET {column} = 1 - {column} WHERE id = ?", (manga_id,)
    )
    updated = cursor.rowcount
    await cursor.close()
    if updated == 0:
        raise NotFound(manga_id)
    manga = await fetch_manga(db, manga_id)
    if manga is None:
        raise NotFound(manga_id)
    return manga
