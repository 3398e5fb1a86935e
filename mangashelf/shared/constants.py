"""Shared constants used across mangashelf modules."""

from __future__ import annotations

import os
from datetime import UTC, datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_DB_NAME = "mangashelf.sqlite"

DB_PATH_ENV = "MANGASHELF_DB"
API_URL_ENV = "MANGASHELF_API_URL"

MANGA_API_URL = os.environ.get(API_URL_ENV, "https://www.jsonkeeper.com/b/KEJO")
FETCH_TIMEOUT_SECONDS = 20
FETCH_RETRIES = 2
RETRY_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

DB_TIMEOUT_SECONDS = 30
DB_RETRY_ATTEMPTS = 6
DB_RETRY_BASE_DELAY = 0.5

MIN_YEAR = 1
MAX_YEAR = 9999
MIN_PUBLISHED_EPOCH = int(datetime(MIN_YEAR, 1, 1, tzinfo=UTC).timestamp())
MAX_PUBLISHED_EPOCH = int(
    datetime(MAX_YEAR, 12, 31, 23, 59, 59, tzinfo=UTC).timestamp()
)

PAGE_SIZE = 20
MAX_LIMIT = 200
API_PREFIX = "/api"
