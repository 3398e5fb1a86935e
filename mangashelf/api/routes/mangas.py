"""Manga route registration."""

from __future__ import annotations

from fastapi import APIRouter

from mangashelf.api.models import (
    MangaPageResponse,
    MangaRecord,
    MangaViewResponse,
    YearOffset,
)
from mangashelf.api.queries.mangas import (
    get_manga,
    get_view,
    get_year_offset,
    list_favorites,
    list_mangas,
    list_years,
    toggle_favorite,
    toggle_read,
)
from mangashelf.shared.constants import API_PREFIX

router = APIRouter(prefix=API_PREFIX, tags=["mangas"])

router.add_api_route(
    "/mangas",
    list_mangas,
    methods=["GET"],
    response_model=MangaPageResponse,
)
router.add_api_route(
    "/mangas/view",
    get_view,
    methods=["GET"],
    response_model=MangaViewResponse,
)
router.add_api_route(
    "/mangas/{manga_id}",
    get_manga,
    methods=["GET"],
    response_model=MangaRecord,
)
router.add_api_route(
    "/mangas/{manga_id}/favorite",
    toggle_favorite,
    methods=["POST"],
    response_model=MangaRecord,
)
router.add_api_route(
    "/mangas/{manga_id}/read",
    toggle_read,
    methods=["POST"],
    response_model=MangaRecord,
)
router.add_api_route(
    "/favorites",
    list_favorites,
    methods=["GET"],
    response_model=list[MangaRecord],
)
router.add_api_route(
    "/years",
    list_years,
    methods=["GET"],
    response_model=list[int],
)
router.add_api_route(
    "/years/{year}/offset",
    get_year_offset,
    methods=["GET"],
    response_model=YearOffset,
)
