"""Tests for the MangaShelf facade.

Tests cover:
- apply_outcome: status after each outcome
- MangaShelf.sync: status transitions and observation
- MangaShelf.open / close lifecycle
"""

from __future__ import annotations

import asyncio

import pytest

from mangashelf.errors import ConnectivityError, DecodeError
from mangashelf.shelf import MangaShelf, ShelfStatus, apply_outcome
from mangashelf.sync import (
    NETWORK_ERROR_MESSAGE,
    DatabaseOnly,
    Error,
    NetworkError,
    Success,
)


class TestApplyOutcome:
    """Tests for apply_outcome()."""

    loading = ShelfStatus(is_loading=True)

    @pytest.mark.parametrize(
        ("outcome", "expected"),
        [
            (Success(count=3), ShelfStatus()),
            (DatabaseOnly(), ShelfStatus(is_offline=True)),
            (NetworkError(), ShelfStatus(error=NETWORK_ERROR_MESSAGE)),
            (Error("Server error: 500"), ShelfStatus(error="Server error: 500")),
        ],
    )
    def test_status_after_outcome(self, outcome, expected):
        assert apply_outcome(self.loading, outcome) == expected

    def test_failure_keeps_offline_flag(self):
        status = ShelfStatus(is_loading=True, is_offline=True)

        updated = apply_outcome(status, Error("empty response"))

        assert updated == ShelfStatus(error="empty response", is_offline=True)


class TestShelfSync:
    """Tests for MangaShelf.sync() and status observation."""

    async def test_success_clears_status(self, store, make_manga, fake_fetcher):
        shelf = MangaShelf(store, fake_fetcher(result=[make_manga("1")]))

        outcome = await shelf.sync()

        assert outcome == Success(count=1)
        assert shelf.status == ShelfStatus()

    async def test_offline_status(self, store, make_manga, fake_fetcher):
        await store.upsert_many([make_manga("1")])
        shelf = MangaShelf(store, fake_fetcher(error=ConnectivityError("down")))

        await shelf.sync()

        assert shelf.status == ShelfStatus(is_offline=True)

    async def test_error_status(self, store, fake_fetcher):
        shelf = MangaShelf(store, fake_fetcher(error=DecodeError("garbage")))

        await shelf.sync()

        assert shelf.status.error == "Malformed response: garbage"
        assert shelf.status.is_loading is False

    async def test_next_sync_clears_previous_error(
        self, store, make_manga, fake_fetcher
    ):
        fetcher = fake_fetcher(error=ConnectivityError("down"))
        shelf = MangaShelf(store, fetcher)
        await shelf.sync()
        assert shelf.status.error == NETWORK_ERROR_MESSAGE

        fetcher.error = None
        fetcher.result = [make_manga("1")]
        await shelf.sync()

        assert shelf.status == ShelfStatus()

    async def test_observe_status_sequence(self, store, make_manga, fake_fetcher):
        fetcher = fake_fetcher(result=[make_manga("1")], gated=True)
        shelf = MangaShelf(store, fetcher)
        stream = shelf.observe_status()
        try:
            assert await anext(stream) == ShelfStatus()

            task = asyncio.create_task(shelf.sync())
            loading = await asyncio.wait_for(anext(stream), timeout=2)
            assert loading == ShelfStatus(is_loading=True)

            fetcher.release.set()
            done = await asyncio.wait_for(anext(stream), timeout=2)
            assert done == ShelfStatus()
            await task
        finally:
            await stream.aclose()

    async def test_toggles_pass_through(self, store, make_manga, shelf):
        await store.upsert_many([make_manga("1")])

        favorite = await shelf.toggle_favorite("1")
        read = await shelf.toggle_read("1")

        assert favorite.is_favorite is True
        assert read.is_read is True
        assert [m.id for m in await shelf.get_favorites()] == ["1"]


class TestShelfLifecycle:
    """Tests for MangaShelf.open() and close()."""

    async def test_open_with_injected_fetcher(
        self, tmp_path, make_manga, fake_fetcher
    ):
        path = tmp_path / "s.sqlite"
        fetcher = fake_fetcher(result=[make_manga("1")])

        async with await MangaShelf.open(path, fetcher=fetcher) as shelf:
            await shelf.sync()
            assert (await shelf.get_by_id("1")) is not None

        async with await MangaShelf.open(path, fetcher=fetcher) as again:
            assert await again.available_years() == [2020]

    async def test_open_creates_api_client(self, tmp_path):
        shelf = await MangaShelf.open(tmp_path / "c.sqlite", api_url="http://x.test")
        try:
            assert shelf.fetcher.url == "http://x.test"
        finally:
            await shelf.close()
