"""Application facade wiring store, fetcher, reconciler and views."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, replace
from pathlib import Path
from types import TracebackType
from typing import assert_never

from mangashelf.models import Manga, MangaPage, MangaView
from mangashelf.remote.client import MangaAPIClient, MangaFetcher
from mangashelf.shared.constants import (
    FETCH_RETRIES,
    FETCH_TIMEOUT_SECONDS,
    MANGA_API_URL,
)
from mangashelf.shared.observers import StateHolder
from mangashelf.store.client import MangaStore
from mangashelf.sync.outcomes import (
    DatabaseOnly,
    Error,
    FetchOutcome,
    NetworkError,
    Success,
)
from mangashelf.sync.reconciler import NETWORK_ERROR_MESSAGE, Reconciler
from mangashelf.views.builder import ViewBuilder
from mangashelf.views.sorting import SortSpec


@dataclass(frozen=True)
class ShelfStatus:
    """
    User-facing sync state.

    Args:
        is_loading: A sync is running.
        error: Message to show when nothing cached can be displayed.
        is_offline: Showing cached data after a failed sync.
    """

    is_loading: bool = False
    error: str | None = None
    is_offline: bool = False


def apply_outcome(status: ShelfStatus, outcome: FetchOutcome) -> ShelfStatus:
    """
    Derive the status shown after a sync.

    Args:
        status: Status before the sync finished.
        outcome: Sync outcome.

    Returns:
        New status with loading cleared.
    """
    match outcome:
        case Success():
            return ShelfStatus()
        case DatabaseOnly():
            return ShelfStatus(is_offline=True)
        case NetworkError():
            return replace(status, is_loading=False, error=NETWORK_ERROR_MESSAGE)
        case Error(message=message):
            return replace(status, is_loading=False, error=message)
        case _:
            assert_never(outcome)


class MangaShelf:
    """
    Inbound interface for the CLI and HTTP layers.

    Args:
        store: Local record store.
        fetcher: Remote catalog source.
    """

    def __init__(self, store: MangaStore, fetcher: MangaFetcher) -> None:
        """
        Initialize the shelf around already constructed collaborators.

        Args:
            store: Local record store.
            fetcher: Remote catalog source.
        """
        self.store = store
        self.fetcher = fetcher
        self._reconciler = Reconciler(store, fetcher)
        self._views = ViewBuilder(store)
        self._status = StateHolder(ShelfStatus())
        self._owned_client: MangaAPIClient | None = None

    @classmethod
    async def open(
        cls,
        db_path: Path | str,
        fetcher: MangaFetcher | None = None,
        api_url: str = MANGA_API_URL,
        timeout: float = FETCH_TIMEOUT_SECONDS,
        retries: int = FETCH_RETRIES,
    ) -> MangaShelf:
        """
        Open the store and build a shelf, creating an HTTP fetcher if needed.

        Args:
            db_path: SQLite database file.
            fetcher: Optional fetcher; an API client is created when omitted.
            api_url: Catalog endpoint for the created client.
            timeout: HTTP timeout for the created client.
            retries: Retry count for the created client.

        Returns:
            Opened shelf.
        """
        store = await MangaStore(db_path).open()
        owned: MangaAPIClient | None = None
        if fetcher is None:
            owned = MangaAPIClient(url=api_url, timeout=timeout, retries=retries)
            fetcher = owned
        shelf = cls(store, fetcher)
        shelf._owned_client = owned
        return shelf

    async def close(self) -> None:
        if self._owned_client is not None:
            await self._owned_client.aclose()
            self._owned_client = None
        await self.store.close()

    async def __aenter__(self) -> MangaShelf:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def status(self) -> ShelfStatus:
        return self._status.value

    def observe_status(self) -> AsyncIterator[ShelfStatus]:
        return self._status.observe()

    async def sync(self) -> FetchOutcome:
        """
        Run or join a sync and update the status.

        Returns:
            Sync outcome.
        """
        self._status.set(replace(self._status.value, is_loading=True, error=None))
        outcome = await self._reconciler.sync()
        self._status.set(apply_outcome(self._status.value, outcome))
        return outcome

    async def toggle_favorite(self, manga_id: str) -> Manga:
        return await self.store.toggle_favorite(manga_id)

    async def toggle_read(self, manga_id: str) -> Manga:
        return await self.store.toggle_read(manga_id)

    async def get_by_id(self, manga_id: str) -> Manga | None:
        return await self.store.get_by_id(manga_id)

    def observe_by_id(self, manga_id: str) -> AsyncIterator[Manga | None]:
        return self.store.observe_by_id(manga_id)

    async def get_favorites(self) -> list[Manga]:
        return await self.store.get_favorites()

    def observe_favorites(self) -> AsyncIterator[list[Manga]]:
        return self.store.observe_favorites()

    async def build_view(self, spec: SortSpec = SortSpec.YEAR_ASC) -> MangaView:
        return await self._views.build_view(spec)

    async def build_page(
        self, spec: SortSpec, limit: int, offset: int = 0
    ) -> MangaPage:
        return await self._views.build_page(spec, limit, offset)

    async def available_years(self) -> list[int]:
        return await self._views.available_years()

    async def year_offset(self, year: int) -> int | None:
        return await self._views.year_offset(year)
