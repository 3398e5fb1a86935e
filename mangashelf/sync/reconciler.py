"""Merge remote catalog batches into the local store."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

from mangashelf.errors import (
    ConnectivityError,
    DecodeError,
    EmptyResponse,
    ProtocolError,
    StoreError,
)
from mangashelf.models import Manga
from mangashelf.remote.client import MangaFetcher
from mangashelf.store.client import MangaStore
from mangashelf.sync.outcomes import (
    DatabaseOnly,
    Error,
    FetchOutcome,
    NetworkError,
    Success,
)

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."


def merge_flags(cached: list[Manga], fresh: list[Manga]) -> list[Manga]:
    """
    Carry local flags from cached records onto freshly fetched ones.

    Fetched records with an id present in the cache take its `is_favorite`
    and `is_read`; all other fields come from the fetched record. Unknown ids
    get both flags cleared, whatever the remote sent.

    Args:
        cached: Store snapshot taken before the fetch.
        fresh: Records returned by the remote.

    Returns:
        Records ready to upsert, in remote order.
    """
    by_id = {manga.id: manga for manga in cached}
    merged: list[Manga] = []
    for manga in fresh:
        existing = by_id.get(manga.id)
        if existing is None:
            merged.append(replace(manga, is_favorite=False, is_read=False))
            continue
        merged.append(
            replace(
                manga,
                is_favorite=existing.is_favorite,
                is_read=existing.is_read,
            )
        )
    return merged


def classify_failure(exc: Exception, has_cache: bool) -> FetchOutcome:
    """
    Map a failed sync to an outcome.

    Any cached data wins over reporting the failure.

    Args:
        exc: Failure raised by the fetcher or the store.
        has_cache: Whether the store held records before the sync.

    Returns:
        Sync outcome.
    """
    if has_cache:
        return DatabaseOnly()
    if isinstance(exc, ConnectivityError):
        return NetworkError()
    if isinstance(exc, EmptyResponse):
        return Error("empty response")
    if isinstance(exc, ProtocolError):
        return Error(f"Server error: {exc.status_code}")
    if isinstance(exc, DecodeError):
        return Error(f"Malformed response: {exc}")
    if isinstance(exc, StoreError):
        return Error(f"Storage error: {exc}")
    return Error(f"Unknown error: {exc}")


class Reconciler:
    """
    Run offline-first syncs between a fetcher and a store.

    At most one sync runs at a time. Callers arriving while a sync is in
    flight await that sync and receive its outcome.

    Args:
        store: Local record store.
        fetcher: Remote catalog source.
    """

    def __init__(self, store: MangaStore, fetcher: MangaFetcher) -> None:
        """
        Initialize the reconciler.

        Args:
            store: Local record store.
            fetcher: Remote catalog source.
        """
        self._store = store
        self._fetcher = fetcher
        self._inflight: asyncio.Task[FetchOutcome] | None = None

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def sync(self) -> FetchOutcome:
        """
        Fetch the remote catalog and merge it, or join a running sync.

        Returns:
            Outcome of the sync; never raises for fetch or store failures.
        """
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.create_task(self._run())
        return await asyncio.shield(self._inflight)

    async def _run(self) -> FetchOutcome:
        try:
            cached = await self._store.get_all()
        except StoreError as exc:
            logger.error("Could not read local cache: %s", exc)
            return classify_failure(exc, has_cache=False)

        try:
            fresh = await self._fetcher.fetch_all()
            if not fresh:
                raise EmptyResponse("Remote returned no records")
            merged = merge_flags(cached, fresh)
            await self._store.upsert_many(merged)
        except Exception as exc:
            outcome = classify_failure(exc, has_cache=bool(cached))
            logger.warning(
                "Sync failed (%s: %s), outcome %s",
                type(exc).__name__,
                exc,
                type(outcome).__name__,
            )
            return outcome

        logger.info("Synced %d mangas (%d cached before)", len(merged), len(cached))
        return Success(count=len(merged))
