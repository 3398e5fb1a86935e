"""Request dependencies for the HTTP API."""

from __future__ import annotations

from fastapi import HTTPException, Query, Request

from mangashelf.shelf import MangaShelf
from mangashelf.views.sorting import SortSpec, parse_sort


def get_shelf(request: Request) -> MangaShelf:
    """
    Provide the shelf opened for the application.

    Args:
        request: Incoming request.

    Returns:
        Shared shelf instance.
    """
    shelf = getattr(request.app.state, "shelf", None)
    if shelf is None:
        raise HTTPException(status_code=503, detail="Shelf is not ready")
    return shelf


def get_sort(
    sort: str | None = Query(
        default=None,
        description="year, score, popularity; prefix with - or suffix :desc",
    ),
) -> SortSpec:
    """
    Parse the sort query parameter.

    Args:
        sort: Raw sort string.

    Returns:
        Sort specification.
    """
    try:
        return parse_sort(sort)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
