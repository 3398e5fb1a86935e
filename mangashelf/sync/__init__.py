"""Synchronization subpackage exports."""

from mangashelf.sync.outcomes import (
    DatabaseOnly,
    Error,
    FetchOutcome,
    NetworkError,
    Success,
    outcome_name,
)
from mangashelf.sync.reconciler import (
    NETWORK_ERROR_MESSAGE,
    Reconciler,
    classify_failure,
    merge_flags,
)

__all__ = [
    "FetchOutcome",
    "Success",
    "DatabaseOnly",
    "NetworkError",
    "Error",
    "outcome_name",
    "Reconciler",
    "merge_flags",
    "classify_failure",
    "NETWORK_ERROR_MESSAGE",
]
