"""CLI entrypoint for API service."""

from __future__ import annotations

import os

import uvicorn

from mangashelf.api.app import build_app

app = build_app()


def main() -> None:
    """
    Run the FastAPI application with Uvicorn.

    Returns:
        None.
    """
    uvicorn.run(
        "mangashelf.api.main:app",
        host=os.environ.get("API_HOST", "127.0.0.1"),
        port=int(os.environ.get("API_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
