"""Record store subpackage exports."""

from mangashelf.store.client import MangaStore, storage_errors
from mangashelf.store.operations import (
    count_mangas,
    count_published_before,
    fetch_all_mangas,
    fetch_favorites,
    fetch_manga,
    fetch_page,
    fetch_years,
    manga_to_row,
    replace_manga,
    row_to_manga,
    toggle_flag,
    upsert_mangas,
)
from mangashelf.store.retry import (
    commit_with_retry,
    execute_with_retry,
    executemany_with_retry,
    run_with_retry,
)
from mangashelf.store.schema import configure_connection, init_db
from mangashelf.store.writer import DatabaseWriter

__all__ = [
    "MangaStore",
    "DatabaseWriter",
    "storage_errors",
    "run_with_retry",
    "execute_with_retry",
    "executemany_with_retry",
    "commit_with_retry",
    "configure_connection",
    "init_db",
    "manga_to_row",
    "row_to_manga",
    "upsert_mangas",
    "replace_manga",
    "toggle_flag",
    "fetch_all_mangas",
    "fetch_manga",
    "fetch_favorites",
    "fetch_page",
    "fetch_years",
    "count_mangas",
    "count_published_before",
]
