"""Manga query handlers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Path, Query

from mangashelf.api.dependencies import get_shelf, get_sort
from mangashelf.api.models import (
    MangaPageResponse,
    MangaRecord,
    MangaViewResponse,
    YearOffset,
)
from mangashelf.errors import NotFound
from mangashelf.shared.constants import MAX_LIMIT, MAX_YEAR, MIN_YEAR, PAGE_SIZE
from mangashelf.shelf import MangaShelf
from mangashelf.views.sorting import SortSpec

ShelfDep = Annotated[MangaShelf, Depends(get_shelf)]
SortDep = Annotated[SortSpec, Depends(get_sort)]


async def list_mangas(
    shelf: ShelfDep,
    sort: SortDep,
    limit: int = Query(default=PAGE_SIZE, ge=1, le=MAX_LIMIT),
    offset: int = Query(default=0, ge=0),
) -> MangaPageResponse:
    """
    List one page of mangas.

    Args:
        shelf: Shelf facade.
        sort: Sort specification.
        limit: Page size.
        offset: Page offset.

    Returns:
        Paginated manga list.
    """
    page = await shelf.build_page(sort, limit, offset)
    return MangaPageResponse.from_page(page, sort.slug)


async def get_view(shelf: ShelfDep, sort: SortDep) -> MangaViewResponse:
    """
    Return the full ordered view.

    Args:
        shelf: Shelf facade.
        sort: Sort specification.

    Returns:
        Ordered view with year index.
    """
    view = await shelf.build_view(sort)
    return MangaViewResponse.from_view(view, sort.slug)


async def get_manga(shelf: ShelfDep, manga_id: str) -> MangaRecord:
    """
    Get one manga by id.

    Args:
        shelf: Shelf facade.
        manga_id: Manga identifier.

    Returns:
        Manga record.
    """
    manga = await shelf.get_by_id(manga_id)
    if manga is None:
        raise HTTPException(status_code=404, detail="Manga not found")
    return MangaRecord.from_manga(manga)


async def toggle_favorite(shelf: ShelfDep, manga_id: str) -> MangaRecord:
    try:
        manga = await shelf.toggle_favorite(manga_id)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail="Manga not found") from exc
    return MangaRecord.from_manga(manga)


async def toggle_read(shelf: ShelfDep, manga_id: str) -> MangaRecord:
    try:
        manga = await shelf.toggle_read(manga_id)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail="Manga not found") from exc
    return MangaRecord.from_manga(manga)


async def list_favorites(shelf: ShelfDep) -> list[MangaRecord]:
    favorites = await shelf.get_favorites()
    return [MangaRecord.from_manga(manga) for manga in favorites]


async def list_years(shelf: ShelfDep) -> list[int]:
    return await shelf.available_years()


async def get_year_offset(
    shelf: ShelfDep,
    year: Annotated[int, Path(ge=MIN_YEAR, le=MAX_YEAR - 1)],
) -> YearOffset:
    """
    Get the position of a year's first manga in year order.

    Args:
        shelf: Shelf facade.
        year: Calendar year.

    Returns:
        Year offset.
    """
    offset = await shelf.year_offset(year)
    if offset is None:
        raise HTTPException(status_code=404, detail="Year not found")
    return YearOffset(year=year, offset=offset)
