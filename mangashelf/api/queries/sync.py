"""Sync and status handlers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from mangashelf.api.dependencies import get_shelf
from mangashelf.api.models import HealthResponse, StatusResponse, SyncResponse
from mangashelf.shelf import MangaShelf


async def run_sync(shelf: Annotated[MangaShelf, Depends(get_shelf)]) -> SyncResponse:
    """
    Sync the remote catalog into the store.

    Args:
        shelf: Shelf facade.

    Returns:
        Outcome and resulting status.
    """
    outcome = await shelf.sync()
    return SyncResponse.from_outcome(outcome, shelf.status)


async def get_status(
    shelf: Annotated[MangaShelf, Depends(get_shelf)],
) -> StatusResponse:
    return StatusResponse.from_status(shelf.status)


async def get_health(
    shelf: Annotated[MangaShelf, Depends(get_shelf)],
) -> HealthResponse:
    """
    Report that the service is up and how many mangas are cached.

    Args:
        shelf: Shelf facade.

    Returns:
        Health payload.
    """
    return HealthResponse(
        status="ok",
        mangas=await shelf.store.count(),
        is_offline=shelf.status.is_offline,
    )
