"""Search and document acquisition tools."""

from __future__ import annotations

from auslaw.tools.austlii_search import AustLiiSearchProvider, get_search_provider
from auslaw.tools.document_fetcher import DocumentFetcher, classify_content
from auslaw.tools.ocr import TesseractOcr, get_ocr_engine
from auslaw.tools.page_fetcher import FetchedPage, PageFetcher
from auslaw.tools.page_parser import PageParser, ParsedPage
from auslaw.tools.pdf_extractor import PdfExtractor, PdfText

__all__ = [
    "AustLiiSearchProvider",
    "DocumentFetcher",
    "FetchedPage",
    "PageFetcher",
    "PageParser",
    "ParsedPage",
    "PdfExtractor",
    "PdfText",
    "TesseractOcr",
    "classify_content",
    "get_ocr_engine",
    "get_search_provider",
]
