"""Remote catalog API client implementation."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import Protocol

import httpx

from mangashelf.errors import ConnectivityError, DecodeError, ProtocolError
from mangashelf.models import Manga
from mangashelf.remote.transforms import parse_catalog
from mangashelf.shared.constants import (
    FETCH_RETRIES,
    FETCH_TIMEOUT_SECONDS,
    MANGA_API_URL,
    RETRY_STATUS_CODES,
)

logger = logging.getLogger(__name__)


class MangaFetcher(Protocol):
    """
    Source of the full remote catalog.
    """

    async def fetch_all(self) -> list[Manga]:
        """
        Retrieve the entire catalog in one call.

        Returns:
            All remote records, possibly empty.

        Raises:
            ConnectivityError: Network unreachable or timed out.
            ProtocolError: Remote answered with a non-2xx status.
            DecodeError: Payload is malformed.
        """
        ...


class MangaAPIClient:
    """
    HTTP client for the remote catalog endpoint.

    Args:
        url: Catalog endpoint URL.
        timeout: HTTP request timeout in seconds.
        retries: Extra attempts for transient failures.
        retry_delay: Base delay between attempts in seconds.
        transport: Optional httpx transport override.
    """

    def __init__(
        self,
        url: str = MANGA_API_URL,
        timeout: float = FETCH_TIMEOUT_SECONDS,
        retries: int = FETCH_RETRIES,
        retry_delay: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the API client.

        Args:
            url: Catalog endpoint URL.
            timeout: HTTP request timeout in seconds.
            retries: Extra attempts for transient failures.
            retry_delay: Base delay between attempts in seconds.
            transport: Optional httpx transport override.
        """
        self.url = url
        self.timeout = timeout
        self.retries = max(0, retries)
        self.retry_delay = retry_delay
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            transport=transport,
            follow_redirects=True,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> MangaAPIClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def fetch_all(self) -> list[Manga]:
        """
        Fetch and validate the full catalog.

        Returns:
            Records in payload order.

        Raises:
            ConnectivityError: Network unreachable or timed out after retries.
            ProtocolError: Non-2xx status after retries.
            DecodeError: Body is not valid catalog JSON.
        """
        response = await self._get()
        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodeError(f"Response is not valid JSON: {exc}") from exc
        mangas = parse_catalog(payload)
        logger.debug("Fetched %d mangas from %s", len(mangas), self.url)
        return mangas

    async def _get(self) -> httpx.Response:
        """
        Perform the GET request with retries for transient errors.

        Returns:
            Successful response.
        """
        for attempt in range(self.retries + 1):
            try:
                response = await self._client.get(self.url)
            except httpx.TransportError as exc:
                if attempt < self.retries:
                    logger.warning(
                        "Catalog request failed (%s), retry %d/%d",
                        type(exc).__name__,
                        attempt + 1,
                        self.retries,
                    )
                    await asyncio.sleep(self.retry_delay * (attempt + 1))
                    continue
                raise ConnectivityError(str(exc) or type(exc).__name__) from exc
            except httpx.DecodingError as exc:
                raise DecodeError(f"Response body could not be decoded: {exc}") from exc

            if response.is_success:
                return response

            if response.status_code in RETRY_STATUS_CODES and attempt < self.retries:
                logger.warning(
                    "Catalog request returned %d, retry %d/%d",
                    response.status_code,
                    attempt + 1,
                    self.retries,
                )
                await asyncio.sleep(self.retry_delay * (attempt + 1))
                continue

            raise ProtocolError(response.status_code)

        raise ConnectivityError("Catalog request was not attempted")

    async def aclose(self) -> None:
        """
        Close the underlying HTTP client.

        Returns:
            None.
        """
        await self._client.aclose()
