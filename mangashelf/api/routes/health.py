"""Liveness route reporting catalog readiness."""

from __future__ import annotations

from fastapi import APIRouter

from mangashelf.api.models import HealthResponse
from mangashelf.api.queries.sync import get_health
from mangashelf.shared.constants import API_PREFIX

router = APIRouter(prefix=API_PREFIX, tags=["health"])

router.add_api_route(
    "/health",
    get_health,
    methods=["GET"],
    response_model=HealthResponse,
)
