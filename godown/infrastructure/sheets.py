"""HTTP client for CSV exports of hosted spreadsheets."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SheetFetched:
    """Raw CSV text returned by the spreadsheet host."""

    url: str
    text: str


@dataclass(frozen=True, slots=True)
class SourceError:
    """A fetch that did not produce usable CSV text."""

    url: str
    reason: str


FetchResult = SheetFetched | SourceError


class SheetFetcher(Protocol):
    """Contract for anything able to retrieve spreadsheet exports."""

    async def fetch(self, url: str) -> FetchResult:
        """Fetch one export without raising for transport or HTTP failures."""


class SheetClient:
    """Fetches CSV exports over HTTP with a hard per-request deadline."""

    def __init__(
        self,
        *,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self._timeout = timeout
        self._transport = transport
        self._headers = {"Accept": "text/csv, text/plain;q=0.9, */*;q=0.1"}
        self._headers.update(headers or {})

    @property
    def timeout(self) -> float:
        return self._timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            headers=self._headers,
            follow_redirects=True,
        )

    async def _get(self, url: str) -> FetchResult:
        async with self._client() as client:
            response = await client.get(url)
        if not response.is_success:
            return SourceError(url=url, reason=f"HTTP {response.status_code}")
        return SheetFetched(url=url, text=response.text)

    async def fetch(self, url: str) -> FetchResult:
        try:
            return await asyncio.wait_for(self._get(url), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("Timed out after %.1fs fetching %s", self._timeout, url)
            return SourceError(url=url, reason=f"timed out after {self._timeout:g}s")
        except httpx.HTTPError as exc:
            logger.warning("Fetching %s failed: %s", url, exc)
            return SourceError(url=url, reason=f"{type(exc).__name__}: {exc}")


_client: SheetFetcher | None = None
_installed = False


def configure_sheet_client(client: SheetFetcher | None) -> None:
    """Install the fetcher used by the sales services (``None`` restores the default)."""

    global _client, _installed
    _client = client
    _installed = client is not None


def get_sheet_client(timeout: float = 15.0) -> SheetFetcher:
    """Return the installed fetcher, or a default HTTP client for ``timeout``."""

    global _client
    if _installed:
        return _client
    if not isinstance(_client, SheetClient) or _client.timeout != timeout:
        _client = SheetClient(timeout=timeout)
    return _client


__all__ = [
    "FetchResult",
    "SheetClient",
    "SheetFetched",
    "SheetFetcher",
    "SourceError",
    "configure_sheet_client",
    "get_sheet_client",
]
