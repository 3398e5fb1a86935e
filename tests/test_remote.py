"""Tests for the remote catalog client.

Tests cover:
- parse_catalog: field mapping, ignored remote flags, invalid payloads
- MangaAPIClient: retries, status handling and transport failures
"""

from __future__ import annotations

import json

import httpx
import pytest

from mangashelf.errors import ConnectivityError, DecodeError, ProtocolError
from mangashelf.remote import MangaAPIClient, parse_catalog
from mangashelf.shared.constants import MAX_PUBLISHED_EPOCH, MIN_PUBLISHED_EPOCH
from mangashelf.sync import DatabaseOnly, Reconciler

URL = "https://catalog.test/mangas"


def entry(**overrides):
    payload = {
        "id": "m-1",
        "image": "https://img.test/m-1.png",
        "score": 8.5,
        "popularity": 12,
        "title": "Blue Harbor",
        "publishedChapterDate": 1577836800,
        "category": "Seinen",
    }
    payload.update(overrides)
    return payload


def make_client(handler, retries=2):
    return MangaAPIClient(
        url=URL,
        timeout=5,
        retries=retries,
        retry_delay=0,
        transport=httpx.MockTransport(handler),
    )


class TestParseCatalog:
    """Tests for parse_catalog()."""

    def test_maps_fields(self):
        (manga,) = parse_catalog([entry()])

        assert manga.id == "m-1"
        assert manga.image_url == "https://img.test/m-1.png"
        assert manga.title == "Blue Harbor"
        assert manga.category == "Seinen"
        assert manga.score == 8.5
        assert manga.popularity == 12
        assert manga.published_at == 1577836800
        assert manga.year == 2020

    def test_ignores_remote_flags_and_extra_keys(self):
        (manga,) = parse_catalog(
            [entry(isFavorite=True, is_read=True, extra={"nested": 1})]
        )

        assert manga.is_favorite is False
        assert manga.is_read is False

    def test_integer_id_becomes_string(self):
        (manga,) = parse_catalog([entry(id=42)])

        assert manga.id == "42"

    def test_millisecond_timestamp_is_rejected(self):
        with pytest.raises(DecodeError, match="index 0"):
            parse_catalog([entry(publishedChapterDate=1_700_000_000_000)])

    def test_timestamp_bounds_follow_calendar_years(self):
        first, last = parse_catalog(
            [
                entry(id="first", publishedChapterDate=MIN_PUBLISHED_EPOCH),
                entry(id="last", publishedChapterDate=MAX_PUBLISHED_EPOCH),
            ]
        )

        assert first.year == 1
        assert last.year == 9999

    def test_null_payload_is_empty(self):
        assert parse_catalog(None) == []
        assert parse_catalog([]) == []

    def test_non_list_payload_is_rejected(self):
        with pytest.raises(DecodeError):
            parse_catalog({"data": [entry()]})

    @pytest.mark.parametrize(
        "bad",
        [
            entry(id=""),
            entry(score="high"),
            entry(score=float("nan")),
            entry(publishedChapterDate=MAX_PUBLISHED_EPOCH + 1),
            entry(publishedChapterDate=MIN_PUBLISHED_EPOCH - 1),
            {k: v for k, v in entry().items() if k != "title"},
            "not an object",
        ],
    )
    def test_invalid_entries_are_rejected(self, bad):
        with pytest.raises(DecodeError, match="index 1"):
            parse_catalog([entry(id="ok"), bad])


class TestMangaAPIClient:
    """Tests for MangaAPIClient.fetch_all()."""

    async def test_fetches_catalog(self):
        def handler(request):
            assert request.url == httpx.URL(URL)
            return httpx.Response(200, json=[entry(), entry(id="m-2")])

        async with make_client(handler) as client:
            mangas = await client.fetch_all()

        assert [m.id for m in mangas] == ["m-1", "m-2"]

    async def test_retries_transient_status(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503)
            return httpx.Response(200, json=[entry()])

        async with make_client(handler) as client:
            mangas = await client.fetch_all()

        assert len(calls) == 3
        assert len(mangas) == 1

    async def test_persistent_server_error_raises_protocol_error(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        async with make_client(handler, retries=1) as client:
            with pytest.raises(ProtocolError) as exc_info:
                await client.fetch_all()

        assert exc_info.value.status_code == 500
        assert len(calls) == 2

    async def test_client_error_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404)

        async with make_client(handler) as client:
            with pytest.raises(ProtocolError) as exc_info:
                await client.fetch_all()

        assert exc_info.value.status_code == 404
        assert len(calls) == 1

    async def test_connect_failure_raises_connectivity_error(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("Name or service not known", request=request)

        async with make_client(handler, retries=2) as client:
            with pytest.raises(ConnectivityError):
                await client.fetch_all()

        assert len(calls) == 3

    async def test_timeout_raises_connectivity_error(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with make_client(handler, retries=0) as client:
            with pytest.raises(ConnectivityError):
                await client.fetch_all()

    async def test_invalid_json_raises_decode_error(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>oops</html>")

        async with make_client(handler) as client:
            with pytest.raises(DecodeError):
                await client.fetch_all()

    async def test_non_finite_score_raises_decode_error(self):
        def handler(request):
            body = json.dumps([entry(score=float("inf"))])
            return httpx.Response(200, content=body.encode())

        async with make_client(handler) as client:
            with pytest.raises(DecodeError):
                await client.fetch_all()

    async def test_null_body_is_empty(self):
        def handler(request):
            return httpx.Response(200, content=b"null")

        async with make_client(handler) as client:
            assert await client.fetch_all() == []

    async def test_millisecond_timestamp_keeps_cache_usable(self, store, make_manga):
        await store.upsert_many([make_manga("m-1")])

        def handler(request):
            return httpx.Response(
                200, json=[entry(publishedChapterDate=1_700_000_000_000)]
            )

        async with make_client(handler) as client:
            outcome = await Reconciler(store, client).sync()

        assert outcome == DatabaseOnly()
        rows = await store.get_all()
        assert [row.year for row in rows] == [2020]
