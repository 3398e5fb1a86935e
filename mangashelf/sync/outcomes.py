"""Sync outcome variants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import assert_never


@dataclass(frozen=True)
class Success:
    """
    Remote catalog fetched and merged into the store.

    Args:
        count: Number of merged records written.
    """

    count: int = 0


@dataclass(frozen=True)
class DatabaseOnly:
    """
    Remote unusable, stale local records are available.
    """


@dataclass(frozen=True)
class NetworkError:
    """
    Remote unreachable and nothing cached.
    """


@dataclass(frozen=True)
class Error:
    """
    Remote failed for a non-connectivity reason and nothing cached.

    Args:
        message: Human-readable failure description.
    """

    message: str


FetchOutcome = Success | DatabaseOnly | NetworkError | Error


def outcome_name(outcome: FetchOutcome) -> str:
    """
    Build a stable snake_case label for an outcome.

    Args:
        outcome: Sync outcome.

    Returns:
        Label such as `success` or `database_only`.
    """
    match outcome:
        case Success():
            return "success"
        case DatabaseOnly():
            return "database_only"
        case NetworkError():
            return "network_error"
        case Error():
            return "error"
        case _:
            assert_never(outcome)
