"""Error types raised by the mangashelf fetcher and store.

Fetch and store failures are converted into a sync outcome at the reconciler
boundary. `NotFound` is the exception: toggling an id that is not stored is a
caller bug and propagates.
"""


class MangaShelfError(Exception):
    """Base exception for all mangashelf errors."""

    pass


class FetchError(MangaShelfError):
    """Remote catalog could not be retrieved."""

    pass


class ConnectivityError(FetchError):
    """No network, DNS failure, or connect/read timeout."""

    pass


class ProtocolError(FetchError):
    """Remote answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str | None = None) -> None:
        self.status_code = status_code
        super().__init__(message or f"HTTP {status_code}")


class DecodeError(FetchError):
    """Remote payload is not valid JSON or does not match the manga schema."""

    pass


class EmptyResponse(FetchError):
    """Remote answered successfully with no records."""

    pass


class StoreError(MangaShelfError):
    """Error during database operations."""

    pass


class NotFound(StoreError):
    """Row addressed by id does not exist."""

    def __init__(self, manga_id: str) -> None:
        self.manga_id = manga_id
        super().__init__(f"Manga not found: {manga_id}")
