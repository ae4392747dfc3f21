"""Pydantic models used across the project."""

from __future__ import annotations

from auslaw.models.document import ContentType, FetchedDocument
from auslaw.models.search import DocumentKind, JurisdictionFilter, SearchOptions, SearchRecord, SortMode

__all__ = [
    "ContentType",
    "DocumentKind",
    "FetchedDocument",
    "JurisdictionFilter",
    "SearchOptions",
    "SearchRecord",
    "SortMode",
]
