"""Shared fixtures for mangashelf tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Any

import pytest

from mangashelf.models import Manga
from mangashelf.shared.converters import year_start_epoch
from mangashelf.shelf import MangaShelf
from mangashelf.store import MangaStore


class FakeFetcher:
    """In-memory fetcher returning a fixed batch or raising a fixed error."""

    def __init__(
        self,
        result: list[Manga] | None = None,
        error: Exception | None = None,
        gated: bool = False,
    ) -> None:
        self.result = list(result or [])
        self.error = error
        self.calls = 0
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        if not gated:
            self.release.set()

    async def fetch_all(self) -> list[Manga]:
        self.calls += 1
        self.started.set()
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return list(self.result)


@pytest.fixture
def make_manga() -> Callable[..., Manga]:
    """Factory for records with sensible defaults."""

    def factory(manga_id: str, **overrides: Any) -> Manga:
        values: dict[str, Any] = {
            "id": manga_id,
            "image_url": f"https://img.example/{manga_id}.jpg",
            "title": f"Manga {manga_id}",
            "category": "Action",
            "score": 5.0,
            "popularity": 100,
            "published_at": year_start_epoch(2020),
        }
        values.update(overrides)
        return Manga(**values)

    return factory


@pytest.fixture
def fake_fetcher() -> type[FakeFetcher]:
    return FakeFetcher


@pytest.fixture
async def store(tmp_path) -> AsyncIterator[MangaStore]:
    """Open store on a temporary database file."""
    opened = await MangaStore(tmp_path / "shelf.sqlite").open()
    try:
        yield opened
    finally:
        await opened.close()


@pytest.fixture
async def shelf(store: MangaStore) -> MangaShelf:
    """Shelf over the temporary store with an empty fake fetcher."""
    return MangaShelf(store, FakeFetcher())
