"""Document acquisition: fetch, classify, extract text, OCR when the text layer is too thin."""

from __future__ import annotations

import time
from urllib.parse import urlparse

import httpx

from auslaw.config import Settings
from auslaw.errors import OcrError
from auslaw.logging import get_logger
from auslaw.models.document import ContentType, FetchedDocument
from auslaw.tools.ocr import OcrEngine, get_ocr_engine, recognize_pages
from auslaw.tools.page_fetcher import FetchedPage, PageFetcher, validate_document_url
from auslaw.tools.page_parser import PageParser
from auslaw.tools.pdf_extractor import PdfExtractor, PdfText, significant_chars
from auslaw.utils.citations import find_neutral_citation

logger = get_logger(__name__)

_PDF_MAGIC = b"%PDF-"


def classify_content(url: str, content_type: str | None, content: bytes = b"") -> ContentType:
    """Classify a fetched resource as `pdf` or `html`."""

    if content_type and "pdf" in content_type.lower():
        return "pdf"
    if urlparse(url).path.lower().endswith(".pdf"):
        return "pdf"
    if content.lstrip()[:5] == _PDF_MAGIC:
        return "pdf"
    return "html"


class DocumentFetcher:
    """Turn a document URL into normalized text."""

    def __init__(
        self,
        settings: Settings,
        *,
        page_fetcher: PageFetcher | None = None,
        parser: PageParser | None = None,
        pdf_extractor: PdfExtractor | None = None,
        ocr_engine: OcrEngine | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._page_fetcher = page_fetcher or PageFetcher(settings, transport=transport)
        self._parser = parser or PageParser()
        self._pdf = pdf_extractor or PdfExtractor(dpi=settings.ocr_dpi)
        self._ocr = ocr_engine or get_ocr_engine(settings)

    async def fetch_document_text(self, url: str) -> FetchedDocument:
        """Fetch `url` and return its text.

        Raises:
            DocumentFetchError: Malformed URL, unreachable resource or non-2xx response.
            OcrError: The OCR fallback was needed and failed.
        """

        validate_document_url(url)
        started = time.monotonic()
        page = await self._page_fetcher.fetch(url)
        kind = classify_content(url, page.content_type, page.content)

        if kind == "pdf":
            doc = await self._from_pdf(url, page)
        else:
            doc = await self._from_html(url, page)

        logger.info(
            "Document fetch ok",
            extra={
                "url": url,
                "content_type": doc.content_type,
                "ocr_used": doc.ocr_used,
                "chars": len(doc.text),
                "latency_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return doc

    async def _from_html(self, url: str, page: FetchedPage) -> FetchedDocument:
        parsed = await self._parser.parse_html_async(url, page.content)
        metadata: dict[str, str] = {}
        if parsed.title:
            metadata["title"] = parsed.title
        _add_citation(metadata, parsed.text)
        return FetchedDocument(
            text=parsed.text,
            content_type="html",
            source_url=url,
            ocr_used=False,
            metadata=metadata,
        )

    async def _from_pdf(self, url: str, page: FetchedPage) -> FetchedDocument:
        pdf_text: PdfText | None
        try:
            pdf_text = await self._pdf.extract_text_async(page.content)
        except Exception as e:
            logger.warning("PDF text layer extraction failed for url=%s: %s", url, e)
            pdf_text = None

        text = pdf_text.text if pdf_text is not None else ""
        chars = significant_chars(text)
        metadata: dict[str, str] = {}
        if pdf_text is not None:
            metadata["pages"] = str(pdf_text.page_count)

        if chars >= self._settings.ocr_min_text_chars:
            metadata["extraction"] = "text-layer"
            _add_citation(metadata, text)
            return FetchedDocument(text=text, content_type="pdf", source_url=url, ocr_used=False, metadata=metadata)

        logger.info(
            "PDF text layer insufficient; running OCR",
            extra={"url": url, "chars": chars, "threshold": self._settings.ocr_min_text_chars},
        )
        try:
            images = await self._pdf.render_pages_async(page.content)
        except Exception as e:
            raise OcrError(f"Could not rasterize PDF for OCR: {e}") from e

        text = await recognize_pages(self._ocr, images)
        metadata["pages"] = str(len(images))
        metadata["extraction"] = "ocr"
        _add_citation(metadata, text)
        return FetchedDocument(text=text, content_type="pdf", source_url=url, ocr_used=True, metadata=metadata)


def _add_citation(metadata: dict[str, str], text: str) -> None:
    citation = find_neutral_citation(text)
    if citation is not None:
        metadata["citation"] = str(citation)
