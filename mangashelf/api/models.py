"""API response models."""

from __future__ import annotations

from pydantic import BaseModel

from mangashelf.models import Manga, MangaPage, MangaView, MangaWithYear
from mangashelf.shelf import ShelfStatus
from mangashelf.sync.outcomes import Error, FetchOutcome, Success, outcome_name


class MangaRecord(BaseModel):
    """
    Manga record.
    """

    id: str
    image_url: str
    title: str
    category: str
    score: float
    popularity: int
    published_at: int
    year: int
    is_favorite: bool
    is_read: bool

    @classmethod
    def from_manga(cls, manga: Manga) -> MangaRecord:
        return cls(
            id=manga.id,
            image_url=manga.image_url,
            title=manga.title,
            category=manga.category,
            score=manga.score,
            popularity=manga.popularity,
            published_at=manga.published_at,
            year=manga.year,
            is_favorite=manga.is_favorite,
            is_read=manga.is_read,
        )

    @classmethod
    def from_item(cls, item: MangaWithYear) -> MangaRecord:
        return cls.from_manga(item.manga)


class PageMeta(BaseModel):
    """
    Pagination metadata.
    """

    sort: str
    limit: int
    offset: int
    has_more: bool
    next_offset: int | None = None


class MangaPageResponse(BaseModel):
    """
    Paginated mangas response.
    """

    items: list[MangaRecord]
    page: PageMeta

    @classmethod
    def from_page(cls, page: MangaPage, sort: str) -> MangaPageResponse:
        return cls(
            items=[MangaRecord.from_item(item) for item in page.items],
            page=PageMeta(
                sort=sort,
                limit=page.limit,
                offset=page.offset,
                has_more=page.has_more,
                next_offset=page.next_offset,
            ),
        )


class MangaViewResponse(BaseModel):
    """
    Full ordered view with the year jump index.
    """

    sort: str
    items: list[MangaRecord]
    year_index: dict[int, int]

    @classmethod
    def from_view(cls, view: MangaView, sort: str) -> MangaViewResponse:
        return cls(
            sort=sort,
            items=[MangaRecord.from_item(item) for item in view.ordered],
            year_index=view.year_index,
        )


class StatusResponse(BaseModel):
    """
    Shelf sync status.
    """

    is_loading: bool
    error: str | None = None
    is_offline: bool

    @classmethod
    def from_status(cls, status: ShelfStatus) -> StatusResponse:
        return cls(
            is_loading=status.is_loading,
            error=status.error,
            is_offline=status.is_offline,
        )


class HealthResponse(BaseModel):
    """
    Service liveness with the size of the local catalog.
    """

    status: str
    mangas: int
    is_offline: bool


class SyncResponse(BaseModel):
    """
    Result of one sync request.
    """

    outcome: str
    count: int | None = None
    message: str | None = None
    status: StatusResponse

    @classmethod
    def from_outcome(cls, outcome: FetchOutcome, status: ShelfStatus) -> SyncResponse:
        return cls(
            outcome=outcome_name(outcome),
            count=outcome.count if isinstance(outcome, Success) else None,
            message=outcome.message if isinstance(outcome, Error) else None,
            status=StatusResponse.from_status(status),
        )


class YearOffset(BaseModel):
    """
    First position of a year in year order.
    """

    year: int
    offset: int
