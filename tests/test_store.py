"""Tests for MangaStore.

Tests cover:
- upsert_many: insert, full row replace, atomic rollback on a bad row
- update: replace by id, NotFound for unknown ids
- toggles: atomic flips, NotFound
- reads: default order, favorites, paged reads, counts, years
- observation: live row and favorites streams
"""

from __future__ import annotations

import asyncio
from dataclasses import replace

import pytest

from mangashelf.errors import NotFound, StoreError
from mangashelf.shared.converters import year_start_epoch
from mangashelf.store import MangaStore
from mangashelf.views import SortSpec


class TestUpsertMany:
    """Tests for MangaStore.upsert_many()."""

    async def test_inserts_new_rows(self, store, make_manga):
        await store.upsert_many([make_manga("1"), make_manga("2")])

        rows = await store.get_all()
        assert [row.id for row in rows] == ["1", "2"]
        assert await store.count() == 2

    async def test_replaces_full_row_including_flags(self, store, make_manga):
        await store.upsert_many([make_manga("1", is_favorite=True, is_read=True)])
        await store.upsert_many([make_manga("1", title="Renamed", score=9.5)])

        row = await store.get_by_id("1")
        assert row.title == "Renamed"
        assert row.score == 9.5
        assert row.is_favorite is False
        assert row.is_read is False

    async def test_empty_batch_is_noop(self, store):
        await store.upsert_many([])
        assert await store.get_all() == []

    async def test_failed_batch_leaves_store_unchanged(self, store, make_manga):
        await store.upsert_many([make_manga("1", title="Original")])

        with pytest.raises(StoreError):
            await store.upsert_many(
                [make_manga("1", title="Changed"), make_manga("2", title=None)]
            )

        rows = await store.get_all()
        assert [(row.id, row.title) for row in rows] == [("1", "Original")]

    async def test_roundtrips_all_fields(self, store, make_manga):
        manga = make_manga(
            "x-1",
            image_url="https://img.example/x.png",
            title="Title",
            category="Drama",
            score=8.25,
            popularity=42,
            published_at=year_start_epoch(2019) + 3600,
            is_favorite=True,
            is_read=False,
        )
        await store.upsert_many([manga])
        assert await store.get_by_id("x-1") == manga


class TestUpdate:
    """Tests for MangaStore.update()."""

    async def test_replaces_existing_row(self, store, make_manga):
        original = make_manga("1")
        await store.upsert_many([original])

        await store.update(replace(original, is_read=True, title="Updated"))

        row = await store.get_by_id("1")
        assert row.is_read is True
        assert row.title == "Updated"

    async def test_missing_id_raises_not_found(self, store, make_manga):
        with pytest.raises(NotFound) as exc_info:
            await store.update(make_manga("ghost"))
        assert exc_info.value.manga_id == "ghost"
        assert await store.get_all() == []


class TestToggles:
    """Tests for MangaStore.toggle_favorite() and toggle_read()."""

    async def test_toggle_favorite_flips_and_returns_row(self, store, make_manga):
        await store.upsert_many([make_manga("1")])

        toggled = await store.toggle_favorite("1")

        assert toggled.is_favorite is True
        assert (await store.get_by_id("1")).is_favorite is True

    async def test_double_toggle_restores_value(self, store, make_manga):
        await store.upsert_many([make_manga("1", is_read=True)])

        await store.toggle_read("1")
        await store.toggle_read("1")

        assert (await store.get_by_id("1")).is_read is True

    async def test_toggle_only_touches_its_flag(self, store, make_manga):
        await store.upsert_many([make_manga("1", is_read=True)])

        toggled = await store.toggle_favorite("1")

        assert toggled.is_read is True
        assert toggled.title == "Manga 1"

    async def test_concurrent_toggles_do_not_lose_updates(self, store, make_manga):
        await store.upsert_many([make_manga("1")])

        await asyncio.gather(*(store.toggle_favorite("1") for _ in range(5)))

        assert (await store.get_by_id("1")).is_favorite is True

    async def test_missing_id_raises_not_found(self, store):
        with pytest.raises(NotFound):
            await store.toggle_favorite("missing")
        with pytest.raises(NotFound):
            await store.toggle_read("missing")


class TestReads:
    """Tests for MangaStore read accessors."""

    async def test_get_all_orders_by_published_then_id(self, store, make_manga):
        await store.upsert_many(
            [
                make_manga("c", published_at=year_start_epoch(2022)),
                make_manga("b", published_at=year_start_epoch(2020)),
                make_manga("a", published_at=year_start_epoch(2020)),
            ]
        )

        rows = await store.get_all()
        assert [row.id for row in rows] == ["a", "b", "c"]

    async def test_get_by_id_returns_none_when_absent(self, store):
        assert await store.get_by_id("nope") is None

    async def test_get_favorites_filters_flag(self, store, make_manga):
        await store.upsert_many(
            [
                make_manga("1", is_favorite=True),
                make_manga("2"),
                make_manga("3", is_favorite=True),
            ]
        )

        favorites = await store.get_favorites()
        assert [row.id for row in favorites] == ["1", "3"]

    async def test_get_page_sorts_and_slices(self, store, make_manga):
        await store.upsert_many(
            [
                make_manga("1", score=3.0),
                make_manga("2", score=9.0),
                make_manga("3", score=6.0),
            ]
        )

        page = await store.get_page(SortSpec.SCORE_DESC, limit=2, offset=1)
        assert [row.id for row in page] == ["3", "1"]

    async def test_get_page_offset_past_end_is_empty(self, store, make_manga):
        await store.upsert_many([make_manga("1")])

        assert await store.get_page(SortSpec.POPULARITY_ASC, 10, 50) == []

    async def test_get_page_zero_limit_is_empty(self, store, make_manga):
        await store.upsert_many([make_manga("1")])

        assert await store.get_page(SortSpec.YEAR_ASC, 0, 0) == []

    async def test_get_page_rejects_negative_values(self, store):
        with pytest.raises(ValueError):
            await store.get_page(SortSpec.YEAR_ASC, 10, -1)

    async def test_years_and_counts(self, store, make_manga):
        await store.upsert_many(
            [
                make_manga("1", published_at=year_start_epoch(2021) + 10),
                make_manga("2", published_at=year_start_epoch(2019)),
                make_manga("3", published_at=year_start_epoch(2021) + 99),
            ]
        )

        assert await store.get_years() == [2019, 2021]
        assert await store.count_published_before(year_start_epoch(2021)) == 1
        assert await store.count_published_before(year_start_epoch(2030)) == 3

    async def test_reopen_keeps_rows(self, tmp_path, make_manga):
        path = tmp_path / "persist.sqlite"
        async with MangaStore(path) as first:
            await first.upsert_many([make_manga("1", is_favorite=True)])

        async with MangaStore(path) as second:
            row = await second.get_by_id("1")

        assert row is not None
        assert row.is_favorite is True

    async def test_closed_store_refuses_reads(self, tmp_path):
        closed = MangaStore(tmp_path / "closed.sqlite")
        with pytest.raises(RuntimeError):
            await closed.get_all()


class TestObservation:
    """Tests for live observation streams."""

    async def test_observe_by_id_yields_current_then_changes(self, store, make_manga):
        await store.upsert_many([make_manga("1")])
        stream = store.observe_by_id("1")
        try:
            first = await anext(stream)
            assert first.is_favorite is False

            await store.toggle_favorite("1")
            second = await asyncio.wait_for(anext(stream), timeout=2)
            assert second.is_favorite is True
        finally:
            await stream.aclose()

    async def test_observe_by_id_ignores_other_rows(self, store, make_manga):
        await store.upsert_many([make_manga("1"), make_manga("2")])
        stream = store.observe_by_id("1")
        try:
            await anext(stream)
            await store.toggle_read("2")
            await store.toggle_read("1")

            changed = await asyncio.wait_for(anext(stream), timeout=2)
            assert changed.id == "1"
            assert changed.is_read is True
        finally:
            await stream.aclose()

    async def test_observe_by_id_sees_row_appear(self, store, make_manga):
        stream = store.observe_by_id("new")
        try:
            assert await anext(stream) is None
            await store.upsert_many([make_manga("new")])
            appeared = await asyncio.wait_for(anext(stream), timeout=2)
            assert appeared.id == "new"
        finally:
            await stream.aclose()

    async def test_observe_favorites_tracks_toggles(self, store, make_manga):
        await store.upsert_many([make_manga("1"), make_manga("2")])
        stream = store.observe_favorites()
        try:
            assert await anext(stream) == []

            await store.toggle_favorite("2")
            favorites = await asyncio.wait_for(anext(stream), timeout=2)
            assert [row.id for row in favorites] == ["2"]
        finally:
            await stream.aclose()
