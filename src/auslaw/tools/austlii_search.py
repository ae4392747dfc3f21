"""AustLII index search.

Queries the AustLII `sinosrch.cgi` endpoint across all Australian databases, parses the ordered
result listing and keeps only primary sources (judgments or legislation) of the requested kind.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Literal
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup
from pydantic import ValidationError

from auslaw.config import Settings
from auslaw.errors import SearchTimeoutError, SearchTransportError
from auslaw.logging import get_logger
from auslaw.models.search import SearchOptions, SearchRecord
from auslaw.utils.citations import (
    extract_jurisdiction,
    find_neutral_citation,
    is_journal_url,
    looks_like_case_name,
    matches_document_kind,
)

logger = get_logger(__name__)

ResolvedSort = Literal["relevance", "date"]

# Jurisdiction option -> accepted jurisdiction codes extracted from the URL.
_JURISDICTION_ALIASES: dict[str, frozenset[str]] = {
    "federal": frozenset({"cth"}),
}
_MAJOR_JURISDICTIONS = frozenset({"cth", "vic"})


@dataclass(frozen=True)
class ListingEntry:
    """A raw `<li>` entry from the result listing."""

    title: str
    url: str
    summary: str | None = None


def resolve_sort_mode(query: str, sort_mode: str) -> ResolvedSort:
    """Map a requested sort mode to the index `view` directive.

    `auto` picks relevance ordering for case-name queries: date ordering would surface recent
    cases that merely cite the named case ahead of the case itself.
    """

    if sort_mode == "date":
        return "date"
    if sort_mode == "relevance":
        return "relevance"
    return "relevance" if looks_like_case_name(query) else "date"


def build_search_params(query: str, options: SearchOptions, *, meta: str = "/austlii") -> dict[str, str]:
    """Build `sinosrch.cgi` query parameters."""

    return {
        "method": "boolean",
        "query": query,
        "meta": meta,
        "results": str(options.limit),
        "view": resolve_sort_mode(query, options.sort_mode),
    }


def parse_listing(html: str, *, base_url: str) -> list[ListingEntry]:
    """Parse the ordered result listing into entries, in listing order.

    Relative links are made absolute against `base_url`. Entries without a title or link are
    skipped; a page without a listing yields an empty list.
    """

    soup = BeautifulSoup(html, "lxml")
    entries: list[ListingEntry] = []
    for li in soup.select("ol li"):
        link = li.find("a", href=True)
        if link is None:
            continue
        title = link.get_text(" ", strip=True)
        href = (link.get("href") or "").strip()
        if not title or not href:
            continue
        url = href if href.startswith(("http://", "https://")) else urljoin(base_url, href)

        small = li.find("small")
        summary = small.get_text(" ", strip=True) if small is not None else None
        entries.append(ListingEntry(title=title, url=url, summary=summary or None))
    return entries


def _jurisdiction_allowed(jurisdiction: str | None, wanted: str | None) -> bool:
    if wanted is None:
        return True
    if wanted == "other":
        return jurisdiction not in _MAJOR_JURISDICTIONS
    return jurisdiction in _JURISDICTION_ALIASES.get(wanted, frozenset({wanted}))


def build_records(
    entries: list[ListingEntry],
    options: SearchOptions,
    *,
    source_name: str,
) -> list[SearchRecord]:
    """Filter listing entries to primary sources and annotate them."""

    records: list[SearchRecord] = []
    dropped = 0
    for entry in entries:
        # Commentary is never a primary source, whatever kind was asked for.
        if is_journal_url(entry.url) or not matches_document_kind(entry.url, options.document_kind):
            dropped += 1
            continue

        jurisdiction = extract_jurisdiction(entry.url)
        if not _jurisdiction_allowed(jurisdiction, options.jurisdiction):
            dropped += 1
            continue

        citation = find_neutral_citation(entry.title)
        try:
            records.append(
                SearchRecord(
                    title=entry.title,
                    url=entry.url,
                    document_kind=options.document_kind,
                    neutral_citation=str(citation) if citation else None,
                    year=citation.year if citation else None,
                    jurisdiction=jurisdiction,
                    summary=entry.summary,
                    source_name=source_name,
                )
            )
        except ValidationError:
            dropped += 1
            continue

    if dropped:
        logger.debug("Dropped listing entries", extra={"dropped": dropped, "kept": len(records)})
    return records[: options.limit]


@dataclass(frozen=True)
class AustLiiSearchProvider:
    """AustLII index search provider.

    Notes:
        - One outbound request per search; no pagination and no retries.
        - A `transport` may be injected (e.g. `httpx.MockTransport`) for offline use.
    """

    base_url: str = "https://classic.austlii.edu.au"
    search_path: str = "/cgi-bin/sinosrch.cgi"
    meta: str = "/austlii"
    timeout_s: float = 15.0
    user_agent: str = "auslaw/0.1.0 (legal research tool)"
    source_name: str = "austlii"
    transport: httpx.AsyncBaseTransport | None = None

    @property
    def search_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.search_path}"

    async def search(self, query: str, options: SearchOptions) -> list[SearchRecord]:
        """Search the index.

        Args:
            query: Non-empty free-text query.
            options: Document kind, jurisdiction, limit and sort mode.

        Returns:
            Filtered records in listing order, at most `options.limit`.

        Raises:
            ValueError: If the query is blank.
            SearchTransportError: If the index cannot be reached or answers non-2xx.
        """

        if not query or not query.strip():
            raise ValueError("Query cannot be empty.")

        params = build_search_params(query, options, meta=self.meta)
        started = time.monotonic()

        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_s),
            headers={"User-Agent": self.user_agent},
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            try:
                # httpx timeouts are per phase; this bounds the whole exchange.
                resp = await asyncio.wait_for(client.get(self.search_url, params=params), timeout=self.timeout_s)
                resp.raise_for_status()
            except (httpx.TimeoutException, asyncio.TimeoutError) as e:
                logger.error(
                    "Index search timed out",
                    extra={"provider": self.source_name, "timeout_s": self.timeout_s},
                )
                raise SearchTimeoutError(f"AustLII search timed out after {self.timeout_s:g}s") from e
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                logger.error(
                    "Index search failed",
                    extra={"provider": self.source_name, "status_code": status_code},
                )
                raise SearchTransportError(
                    f"AustLII search failed: HTTP {status_code}", status_code=status_code
                ) from e
            except httpx.RequestError as e:
                logger.error(
                    "Index search failed",
                    extra={"provider": self.source_name, "error_type": type(e).__name__, "error": str(e)},
                )
                raise SearchTransportError(f"AustLII search failed: {e}") from e

        host = urlparse(self.search_url)
        entries = parse_listing(resp.text, base_url=f"{host.scheme}://{host.netloc}")
        records = build_records(entries, options, source_name=self.source_name)

        logger.info(
            "Index search ok",
            extra={
                "provider": self.source_name,
                "query_len": len(query),
                "document_kind": options.document_kind,
                "view": params["view"],
                "listing_count": len(entries),
                "result_count": len(records),
                "latency_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return records


def get_search_provider(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AustLiiSearchProvider:
    """Factory to create the index search provider from settings."""

    return AustLiiSearchProvider(
        base_url=settings.index_base_url,
        search_path=settings.index_search_path,
        meta=settings.index_meta,
        timeout_s=settings.search_timeout_s,
        user_agent=settings.http_user_agent,
        source_name=settings.source_name,
        transport=transport,
    )
