"""Validation and mapping of remote catalog payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mangashelf.errors import DecodeError
from mangashelf.models import Manga
from mangashelf.shared.constants import MAX_PUBLISHED_EPOCH, MIN_PUBLISHED_EPOCH


class MangaPayload(BaseModel):
    """
    One catalog entry as served by the remote API.

    Local flags sent by the remote are ignored. Publication timestamps are
    whole seconds and must fall within calendar years 1 to 9999.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    image: str
    score: float = Field(allow_inf_nan=False)
    popularity: int
    title: str
    published_chapter_date: int = Field(
        alias="publishedChapterDate",
        ge=MIN_PUBLISHED_EPOCH,
        le=MAX_PUBLISHED_EPOCH,
    )
    category: str

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("id")
    @classmethod
    def require_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("id must not be empty")
        return value

    def to_manga(self) -> Manga:
        return Manga(
            id=self.id,
            image_url=self.image,
            title=self.title,
            category=self.category,
            score=self.score,
            popularity=self.popularity,
            published_at=self.published_chapter_date,
        )


def parse_catalog(payload: Any) -> list[Manga]:
    """
    Validate a decoded JSON body and build records.

    Args:
        payload: Decoded JSON value.

    Returns:
        Records in payload order; empty for a null or empty body.

    Raises:
        DecodeError: Body is not a list of valid catalog entries.
    """
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise DecodeError(f"Expected a JSON list, got {type(payload).__name__}")
    mangas: list[Manga] = []
    for index, entry in enumerate(payload):
        try:
            mangas.append(MangaPayload.model_validate(entry).to_manga())
        except ValidationError as exc:
            raise DecodeError(f"Invalid entry at index {index}: {exc}") from exc
    return mangas
