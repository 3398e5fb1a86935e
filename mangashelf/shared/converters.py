"""Shared conversion helpers for mangashelf modules."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any


def to_bool_int(value: Any) -> int:
    """
    Convert a truthy value to the 0/1 form stored in SQLite.

    Args:
        value: Input value.

    Returns:
        1 when value is truthy, otherwise 0.
    """
    return 1 if value else 0


def year_from_epoch(seconds: int) -> int:
    """
    Derive the UTC calendar year of an epoch timestamp.

    Args:
        seconds: Whole seconds since the Unix epoch.

    Returns:
        Calendar year in UTC.
    """
    return datetime.fromtimestamp(seconds, UTC).year


def year_start_epoch(year: int) -> int:
    """
    Build the epoch timestamp of January 1st 00:00 UTC for a year.

    Args:
        year: Calendar year.

    Returns:
        Whole seconds since the Unix epoch.
    """
    return int(datetime(year, 1, 1, tzinfo=UTC).timestamp())

