"""Sort specifications shared by SQL paging and in-memory views."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from mangashelf.models import Manga


class SortSpec(Enum):
    """
    Supported catalog orderings.

    Every ordering breaks ties by id ascending so that paged reads and full
    views agree row for row.
    """

    YEAR_ASC = ("published_at", "ASC")
    SCORE_ASC = ("score", "ASC")
    SCORE_DESC = ("score", "DESC")
    POPULARITY_ASC = ("popularity", "ASC")
    POPULARITY_DESC = ("popularity", "DESC")

    def __init__(self, column: str, direction: str) -> None:
        self.column = column
        self.direction = direction

    @property
    def descending(self) -> bool:
        return self.direction == "DESC"

    @property
    def slug(self) -> str:
        return self.name.lower()


SORT_FIELDS = {
    "year": "published_at",
    "published_at": "published_at",
    "score": "score",
    "popularity": "popularity",
}


def parse_sort(sort: str | None) -> SortSpec:
    """
    Parse a sort string into a sort specification.

    Accepts `field`, `-field`, `field:desc` and enum slugs such as
    `score_desc`. An empty value means year order.

    Args:
        sort: Sort string.

    Returns:
        Matching sort specification.

    Raises:
        ValueError: Field or direction is not supported.
    """
    if not sort or not sort.strip():
        return SortSpec.YEAR_ASC
    part = sort.strip()
    try:
        return SortSpec[part.upper()]
    except KeyError:
        pass
    direction = "ASC"
    field = part
    if part.startswith("-"):
        field = part[1:]
        direction = "DESC"
    elif ":" in part:
        field, raw_dir = part.split(":", 1)
        direction = "DESC" if raw_dir.strip().lower() == "desc" else "ASC"
    column = SORT_FIELDS.get(field.strip().lower())
    if not column:
        raise ValueError(f"Unsupported sort field: {field}")
    for spec in SortSpec:
        if spec.column == column and spec.direction == direction:
            return spec
    raise ValueError(f"Unsupported sort direction for {field}: {direction.lower()}")


def apply_sort(spec: SortSpec) -> str:
    """
    Convert a sort specification into an ORDER BY clause.

    Args:
        spec: Sort specification.

    Returns:
        ORDER BY clause with the id tie-break.
    """
    return f" ORDER BY {spec.column} {spec.direction}, id ASC"


def sort_mangas(items: Iterable[Manga], spec: SortSpec) -> list[Manga]:
    """
    Order records in memory exactly as `apply_sort` orders them in SQL.

    Args:
        items: Records to order.
        spec: Sort specification.

    Returns:
        New ordered list.
    """
    by_id = sorted(items, key=lambda manga: manga.id)
    return sorted(
        by_id,
        key=lambda manga: getattr(manga, spec.column),
        reverse=spec.descending,
    )
