"""Sync route registration."""

from __future__ import annotations

from fastapi import APIRouter

from mangashelf.api.models import StatusResponse, SyncResponse
from mangashelf.api.queries.sync import get_status, run_sync
from mangashelf.shared.constants import API_PREFIX

router = APIRouter(prefix=API_PREFIX, tags=["sync"])

router.add_api_route(
    "/sync",
    run_sync,
    methods=["POST"],
    response_model=SyncResponse,
)
router.add_api_route(
    "/status",
    get_status,
    methods=["GET"],
    response_model=StatusResponse,
)
