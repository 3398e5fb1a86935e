"""Sorted, year-bucketed projections of the catalog."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from mangashelf.models import Manga, MangaPage, MangaView, MangaWithYear
from mangashelf.shared.converters import year_start_epoch
from mangashelf.views.sorting import SortSpec, sort_mangas

if TYPE_CHECKING:
    from mangashelf.store.client import MangaStore


def with_years(mangas: Iterable[Manga]) -> list[MangaWithYear]:
    return [MangaWithYear.from_manga(manga) for manga in mangas]


def build_year_index(ordered: Sequence[MangaWithYear]) -> dict[int, int]:
    """
    Map each year to the position where it first appears.

    Args:
        ordered: Items in view order.

    Returns:
        Year to first 0-based position.
    """
    index: dict[int, int] = {}
    for position, item in enumerate(ordered):
        index.setdefault(item.year, position)
    return index


def build_view(items: Iterable[Manga], spec: SortSpec) -> MangaView:
    """
    Order records and attach years and, for year order, the year index.

    Args:
        items: Records to project.
        spec: Sort specification.

    Returns:
        Ordered view.
    """
    ordered = with_years(sort_mangas(items, spec))
    year_index = build_year_index(ordered) if spec is SortSpec.YEAR_ASC else {}
    return MangaView(ordered=ordered, year_index=year_index)


def find_first_index_for_year(
    items: Sequence[MangaWithYear], target_year: int
) -> int | None:
    """
    Find the first loaded position holding a given year.

    Args:
        items: Items already loaded, in view order.
        target_year: Year to locate.

    Returns:
        Position or None when the year is not loaded.
    """
    for position, item in enumerate(items):
        if item.year == target_year:
            return position
    return None


class ViewBuilder:
    """
    Build views and pages straight from the store.

    Args:
        store: Local record store.
    """

    def __init__(self, store: MangaStore) -> None:
        self._store = store

    async def build_view(self, spec: SortSpec) -> MangaView:
        return build_view(await self._store.get_all(), spec)

    async def build_page(self, spec: SortSpec, limit: int, offset: int) -> MangaPage:
        """
        Read one page without loading the rest of the table.

        One extra row is requested to tell whether another page follows.

        Args:
            spec: Sort specification.
            limit: Page size, at least 1.
            offset: Position of the first item, at least 0.

        Returns:
            Page of items.

        Raises:
            ValueError: limit or offset out of range.
        """
        if limit <= 0:
            raise ValueError("limit must be positive")
        if offset < 0:
            raise ValueError("offset must not be negative")
        rows = await self._store.get_page(spec, limit + 1, offset)
        return MangaPage(
            items=with_years(rows[:limit]),
            limit=limit,
            offset=offset,
            has_more=len(rows) > limit,
        )

    async def available_years(self) -> list[int]:
        return await self._store.get_years()

    async def year_offset(self, year: int) -> int | None:
        """
        Position of the first item of a year in year order.

        Args:
            year: Calendar year in UTC.

        Returns:
            Position or None when no item falls in that year.
        """
        start = await self._store.count_published_before(year_start_epoch(year))
        end = await self._store.count_published_before(year_start_epoch(year + 1))
        if end == start:
            return None
        return start
