"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from mangashelf.api.routes import register_routes
from mangashelf.shared.constants import API_PREFIX
from mangashelf.shared.db_path import resolve_db_path
from mangashelf.shelf import MangaShelf


class CacheControlMiddleware(BaseHTTPMiddleware):
    """
    Disable caching for API responses.
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith(API_PREFIX):
            response.headers["Cache-Control"] = "no-store"
        return response


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """
    Open a shelf for the application unless one was injected.

    Args:
        application: FastAPI application.

    Returns:
        Lifespan context.
    """
    if getattr(application.state, "shelf", None) is not None:
        yield
        return
    shelf = await MangaShelf.open(resolve_db_path())
    application.state.shelf = shelf
    try:
        yield
    finally:
        application.state.shelf = None
        await shelf.close()


def build_app(shelf: MangaShelf | None = None) -> FastAPI:
    """
    Build and configure the FastAPI application.

    Args:
        shelf: Optional already opened shelf; otherwise one is opened at startup.

    Returns:
        Configured FastAPI application.
    """
    application = FastAPI(title="MangaShelf API", version="1.0.0", lifespan=lifespan)
    application.state.shelf = shelf
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(CacheControlMiddleware)
    register_routes(application)
    return application
