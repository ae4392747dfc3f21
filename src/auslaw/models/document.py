"""Fetched document models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ContentType = Literal["html", "pdf"]


class FetchedDocument(BaseModel):
    """Normalized full text of a fetched case or piece of legislation."""

    text: str
    content_type: ContentType
    source_url: str
    ocr_used: bool = False
    metadata: dict[str, str] = Field(default_factory=dict)
