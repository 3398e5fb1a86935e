"""Database path resolution helpers shared by the CLI and the API."""

from __future__ import annotations

import os
from pathlib import Path

from mangashelf.shared.constants import DATA_DIR, DB_PATH_ENV, DEFAULT_DB_NAME


def resolve_db_path(db_name: str | None = None) -> Path:
    """
    Resolve the SQLite database location.

    An explicit name wins over the environment, which wins over the default
    file under the data directory. Bare names without a directory are placed
    under the data directory and get a `.sqlite` suffix.

    Args:
        db_name: Optional file name or path.

    Returns:
        Resolved database path with its parent directory created.
    """
    raw = db_name or os.environ.get(DB_PATH_ENV) or DEFAULT_DB_NAME
    candidate = Path(raw).expanduser()
    if candidate.parent == Path("."):
        name = candidate.name
        if not name.endswith(".sqlite"):
            name = f"{name}.sqlite"
        candidate = DATA_DIR / name
    candidate.parent.mkdir(parents=True, exist_ok=True)
    return candidate
