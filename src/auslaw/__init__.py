"""auslaw: Australian case law and legislation search with OCR-aware document retrieval."""

from __future__ import annotations

from auslaw.errors import (
    AuslawError,
    DocumentFetchError,
    DocumentFetchTimeoutError,
    OcrError,
    OcrTimeoutError,
    SearchTimeoutError,
    SearchTransportError,
)
from auslaw.models import FetchedDocument, SearchOptions, SearchRecord
from auslaw.service import fetch_document_text, search

__all__ = [
    "AuslawError",
    "DocumentFetchError",
    "DocumentFetchTimeoutError",
    "FetchedDocument",
    "OcrError",
    "OcrTimeoutError",
    "SearchOptions",
    "SearchRecord",
    "SearchTimeoutError",
    "SearchTransportError",
    "fetch_document_text",
    "search",
]

__version__ = "0.1.0"
