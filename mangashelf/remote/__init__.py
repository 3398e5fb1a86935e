"""Remote catalog integration utilities."""

from mangashelf.remote.client import MangaAPIClient, MangaFetcher
from mangashelf.remote.transforms import MangaPayload, parse_catalog

__all__ = ["MangaAPIClient", "MangaFetcher", "MangaPayload", "parse_catalog"]
