"""Document fetching utilities."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from urllib.parse import urlparse

import httpx

from auslaw.config import Settings
from auslaw.errors import DocumentFetchError, DocumentFetchTimeoutError
from auslaw.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchedPage:
    """Fetched resource payload."""

    url: str
    content: bytes
    content_type: str | None


def validate_document_url(url: str) -> str:
    """Reject anything that is not an absolute http(s) URL."""

    parsed = urlparse(url or "")
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise DocumentFetchError(f"Malformed document URL: {url!r}", url=url)
    return url


class PageFetcher:
    """Fetch documents over HTTP.

    A fresh client is opened per call; nothing is shared between requests.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    async def fetch(self, url: str) -> FetchedPage:
        """Fetch a URL.

        Raises:
            DocumentFetchError: On a malformed URL, transport failure or non-2xx response.
        """

        validate_document_url(url)
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self._settings.fetch_timeout_s),
            headers={"User-Agent": self._settings.http_user_agent},
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            try:
                # httpx timeouts are per phase; this bounds the whole exchange.
                resp = await asyncio.wait_for(client.get(url), timeout=self._settings.fetch_timeout_s)
                resp.raise_for_status()
            except (httpx.TimeoutException, asyncio.TimeoutError) as e:
                logger.error("Document fetch timed out", extra={"url": url})
                raise DocumentFetchTimeoutError(
                    f"Fetching {url} timed out after {self._settings.fetch_timeout_s:g}s", url=url
                ) from e
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                logger.error("Document fetch failed", extra={"url": url, "status_code": status_code})
                raise DocumentFetchError(
                    f"Fetching {url} failed: HTTP {status_code}", url=url, status_code=status_code
                ) from e
            except (httpx.RequestError, httpx.InvalidURL) as e:
                logger.error(
                    "Document fetch failed",
                    extra={"url": url, "error_type": type(e).__name__, "error": str(e)},
                )
                raise DocumentFetchError(f"Fetching {url} failed: {e}", url=url) from e

        return FetchedPage(
            url=str(resp.url),
            content=resp.content,
            content_type=resp.headers.get("content-type"),
        )
