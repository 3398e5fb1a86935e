"""Routers mounted by the API application."""

from __future__ import annotations

from fastapi import FastAPI

from mangashelf.api.routes import health, mangas, sync

ROUTERS = (health.router, sync.router, mangas.router)


def register_routes(app: FastAPI) -> None:
    for router in ROUTERS:
        app.include_router(router)
