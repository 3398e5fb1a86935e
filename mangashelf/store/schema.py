"""Database schema definitions and initialization."""

from __future__ import annotations

import aiosqlite

from mangashelf.shared.constants import DB_TIMEOUT_SECONDS
from mangashelf.store.retry import commit_with_retry, execute_with_retry

MANGA_COLUMNS = [
    "id",
    "image_url",
    "title",
    "category",
    "score",
    "popularity",
    "published_at",
    "is_favorite",
    "is_read",
]

MANGA_SELECT = f"SELECT {', '.join(MANGA_COLUMNS)} FROM mangas"

MANGA_UPSERT = f"""
INSERT INTO mangas ({", ".join(MANGA_COLUMNS)})
VALUES ({", ".join(["?"] * len(MANGA_COLUMNS))})
ON CONFLICT(id) DO UPDATE SET
{", ".join(f"{col}=excluded.{col}" for col in MANGA_COLUMNS[1:])}
"""

MANGA_UPDATE = f"""
UPDATE mangas SET
{", ".join(f"{col} = ?" for col in MANGA_COLUMNS[1:])}
WHERE id = ?
"""

FLAG_COLUMNS = frozenset({"is_favorite", "is_read"})


async def configure_connection(db: aiosqlite.Connection) -> None:
    """
    Apply per-connection pragmas.

    Args:
        db: Open aiosqlite connection.

    Returns:
        None.
    """
    await execute_with_retry(db, "PRAGMA synchronous=NORMAL;")
    await execute_with_retry(db, f"PRAGMA busy_timeout={DB_TIMEOUT_SECONDS * 1000};")


async def init_db(db: aiosqlite.Connection) -> None:
    """
    Initialize database schema and indexes.

    Args:
        db: Open aiosqlite connection.

    Returns:
        None.
    """
    await execute_with_retry(db, "PRAGMA journal_mode=WAL;")
    await configure_connection(db)

    await execute_with_retry(
        db,
        """
        CREATE TABLE IF NOT EXISTS mangas (
            id TEXT PRIMARY KEY,
            image_url TEXT NOT NULL,
            title TEXT NOT NULL,
            category TEXT NOT NULL,
            score REAL NOT NULL,
            popularity INTEGER NOT NULL,
            published_at INTEGER NOT NULL,
            is_favorite INTEGER NOT NULL DEFAULT 0,
            is_read INTEGER NOT NULL DEFAULT 0
        );
        """,
    )

    await execute_with_retry(
        db,
        "CREATE INDEX IF NOT EXISTS idx_mangas_published_id "
        "ON mangas(published_at, id);",
    )
    await execute_with_retry(
        db, "CREATE INDEX IF NOT EXISTS idx_mangas_score_id ON mangas(score, id);"
    )
    await execute_with_retry(
        db,
        "CREATE INDEX IF NOT EXISTS idx_mangas_popularity_id "
        "ON mangas(popularity, id);",
    )
    await execute_with_retry(
        db,
        "CREATE INDEX IF NOT EXISTS idx_mangas_favorite ON mangas(is_favorite);",
    )

    await commit_with_retry(db)
