"""Search-related models."""

from __future__ import annotations

from typing import Literal
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

DocumentKind = Literal["case", "legislation"]
SortMode = Literal["relevance", "date", "auto"]
JurisdictionFilter = Literal["cth", "vic", "nsw", "qld", "sa", "wa", "tas", "nt", "act", "federal", "other"]


class SearchOptions(BaseModel):
    """Options for a single index search."""

    document_kind: DocumentKind
    jurisdiction: JurisdictionFilter | None = None
    limit: int = Field(default=10, ge=1, le=50)
    sort_mode: SortMode = "auto"


class SearchRecord(BaseModel):
    """One primary-source document matched in the index listing."""

    title: str = Field(min_length=1)
    url: str
    document_kind: DocumentKind
    neutral_citation: str | None = None
    year: str | None = None
    jurisdiction: str | None = None
    summary: str | None = None
    source_name: str

    @field_validator("url")
    @classmethod
    def _absolute_http_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"not an absolute http(s) url: {value!r}")
        return value
