"""The two operations exposed to tool-dispatch layers: index search and document text fetch."""

from __future__ import annotations

from typing import Any

from auslaw.config import Settings, load_settings
from auslaw.logging import request_context
from auslaw.models.document import FetchedDocument
from auslaw.models.search import SearchOptions, SearchRecord
from auslaw.tools.austlii_search import get_search_provider
from auslaw.tools.document_fetcher import DocumentFetcher


async def search(
    query: str,
    options: SearchOptions | dict[str, Any],
    *,
    settings: Settings | None = None,
) -> list[SearchRecord]:
    """Search the legal index for cases or legislation.

    Args:
        query: Free-text or case-name query.
        options: `SearchOptions` or a mapping validated into one.
        settings: Optional settings; loaded from the environment when omitted.

    Returns:
        Primary-source records in listing order.
    """

    if not isinstance(options, SearchOptions):
        options = SearchOptions.model_validate(options)
    settings = settings or load_settings()
    with request_context(operation="search"):
        return await get_search_provider(settings).search(query, options)


async def fetch_document_text(url: str, *, settings: Settings | None = None) -> FetchedDocument:
    """Fetch a case or legislation URL and return normalized text."""

    settings = settings or load_settings()
    with request_context(operation="fetch_document_text"):
        return await DocumentFetcher(settings).fetch_document_text(url)
