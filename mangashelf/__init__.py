"""Offline-first manga catalog with flag-preserving remote sync."""

from mangashelf.errors import (
    ConnectivityError,
    DecodeError,
    EmptyResponse,
    FetchError,
    MangaShelfError,
    NotFound,
    ProtocolError,
    StoreError,
)
from mangashelf.models import Manga, MangaPage, MangaView, MangaWithYear
from mangashelf.shelf import MangaShelf, ShelfStatus
from mangashelf.sync import (
    DatabaseOnly,
    Error,
    FetchOutcome,
    NetworkError,
    Success,
)
from mangashelf.views import SortSpec

__all__ = [
    "MangaShelf",
    "ShelfStatus",
    "Manga",
    "MangaWithYear",
    "MangaView",
    "MangaPage",
    "SortSpec",
    "FetchOutcome",
    "Success",
    "DatabaseOnly",
    "NetworkError",
    "Error",
    "MangaShelfError",
    "FetchError",
    "ConnectivityError",
    "ProtocolError",
    "DecodeError",
    "EmptyResponse",
    "StoreError",
    "NotFound",
]
