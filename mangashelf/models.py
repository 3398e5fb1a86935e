"""Core data models."""

from __future__ import annotations

from dataclasses import dataclass, field

from mangashelf.shared.converters import year_from_epoch


@dataclass(frozen=True)
class Manga:
    """
    Catalog record with remote-sourced metadata and local user flags.

    Args:
        id: Stable unique identifier.
        image_url: Cover image URL.
        title: Display title.
        category: Category label.
        score: Ranking score.
        popularity: Popularity rank.
        published_at: Publication timestamp in whole epoch seconds.
        is_favorite: Locally owned favorite flag.
        is_read: Locally owned read flag.
    """

    id: str
    image_url: str
    title: str
    category: str
    score: float
    popularity: int
    published_at: int
    is_favorite: bool = False
    is_read: bool = False

    @property
    def year(self) -> int:
        return year_from_epoch(self.published_at)


@dataclass(frozen=True)
class MangaWithYear:
    """
    Manga paired with its UTC publication year.
    """

    manga: Manga
    year: int

    @classmethod
    def from_manga(cls, manga: Manga) -> MangaWithYear:
        return cls(manga=manga, year=manga.year)


@dataclass(frozen=True)
class MangaView:
    """
    Fully ordered projection of the catalog.

    Args:
        ordered: Items in view order.
        year_index: First position of each year, populated for year order only.
    """

    ordered: list[MangaWithYear]
    year_index: dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class MangaPage:
    """
    One page of a sorted catalog read.

    Args:
        items: Items on this page.
        limit: Requested page size.
        offset: Position of the first item.
        has_more: Whether rows exist after this page.
    """

    items: list[MangaWithYear]
    limit: int
    offset: int
    has_more: bool

    @property
    def next_offset(self) -> int | None:
        if not self.has_more:
            return None
        return self.offset + len(self.items)
