"""Tests for document acquisition: classification, HTML/PDF paths and the OCR fallback."""

from __future__ import annotations

import asyncio
import threading
import time

import httpx
import pytest

from auslaw.config import Settings
from auslaw.errors import DocumentFetchError, DocumentFetchTimeoutError, OcrError
from auslaw.tools.document_fetcher import DocumentFetcher, classify_content
from auslaw.tools.page_fetcher import PageFetcher
from auslaw.tools.page_parser import PageParser, ParsedPage
from auslaw.tools.pdf_extractor import PdfText, significant_chars

CASE_URL = "https://www.austlii.edu.au/cgi-bin/viewdoc/au/cases/cth/HCA/1992/23.html"
PDF_URL = "https://eresources.hcourt.gov.au/downloadPdf/1992/HCA/23"

CASE_HTML = """
<html><head><title>Mabo v Queensland (No 2) [1992] HCA 23</title></head>
<body>
<h1>Mabo v Queensland (No 2) [1992] HCA 23; (1992) 175 CLR 1</h1>
<ol>
<li value="1"><p>The Meriam people have occupied the Murray Islands for generations.</p></li>
<li value="2"><p>The common law of this country recognizes a form of native title.</p></li>
</ol>
</body></html>
"""

LONG_TEXT = "The plaintiff claims damages for breach of contract arising from [2019] NSWSC 88. " * 5


class FakePdfExtractor:
    """Stands in for pdfplumber so tests need no real PDFs."""

    def __init__(self, pages: list[str] | None = None, *, images: int = 2, broken: bool = False) -> None:
        self.pages = pages or []
        self.images = images
        self.broken = broken
        self.rendered = 0

    async def extract_text_async(self, content: bytes) -> PdfText:
        if self.broken:
            raise ValueError("no /Root object")
        return PdfText(pages=self.pages)

    async def render_pages_async(self, content: bytes) -> list[bytes]:
        self.rendered += 1
        return [f"page-{i}".encode() for i in range(1, self.images + 1)]


class FakeOcr:
    """Returns canned text per page image."""

    def __init__(self, *, fail: bool = False, empty: bool = False) -> None:
        self.fail = fail
        self.empty = empty
        self.calls: list[bytes] = []

    async def recognize(self, image: bytes) -> str:
        self.calls.append(image)
        if self.fail:
            raise OcrError("OCR binary not found: tesseract")
        if self.empty:
            return "  \n"
        return f"Recognised text of {image.decode()} in [1985] HCA 12."


def _transport(content: bytes, content_type: str, status: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, content=content, headers={"content-type": content_type})

    return httpx.MockTransport(handler)


def _fetcher(transport: httpx.MockTransport, **kwargs) -> DocumentFetcher:
    return DocumentFetcher(Settings(), transport=transport, **kwargs)


def test_classify_content() -> None:
    """It should detect PDFs by declared type, URL suffix or magic bytes."""

    assert classify_content(CASE_URL, "text/html; charset=utf-8") == "html"
    assert classify_content(PDF_URL, "application/pdf") == "pdf"
    assert classify_content("https://example.org/act.PDF", None) == "pdf"
    assert classify_content(PDF_URL, "application/octet-stream", b"%PDF-1.7\n...") == "pdf"
    assert classify_content(PDF_URL, None, b"<html></html>") == "html"


def test_significant_chars_ignores_whitespace() -> None:
    """It should count only non-whitespace characters."""

    assert significant_chars(" a b\n\tc ") == 3
    assert significant_chars("") == 0


def test_html_document_keeps_paragraph_markers_and_citation() -> None:
    """It should return html text with markers and the inline citation as metadata."""

    doc = asyncio.run(_fetcher(_transport(CASE_HTML.encode(), "text/html")).fetch_document_text(CASE_URL))

    assert doc.content_type == "html"
    assert doc.source_url == CASE_URL
    assert doc.ocr_used is False
    assert "[1] The Meriam people" in doc.text
    assert doc.text.index("[1]") < doc.text.index("[2] The common law")
    assert doc.metadata["citation"] == "[1992] HCA 23"


def test_pdf_with_text_layer_skips_ocr() -> None:
    """It should use a substantial text layer directly."""

    pdf = FakePdfExtractor(pages=[LONG_TEXT, "Orders"])
    ocr = FakeOcr()
    doc = asyncio.run(
        _fetcher(_transport(b"%PDF-1.4", "application/pdf"), pdf_extractor=pdf, ocr_engine=ocr).fetch_document_text(
            PDF_URL
        )
    )

    assert doc.content_type == "pdf"
    assert doc.ocr_used is False
    assert doc.text.endswith("Orders")
    assert doc.metadata["extraction"] == "text-layer"
    assert doc.metadata["pages"] == "2"
    assert doc.metadata["citation"] == "[2019] NSWSC 88"
    assert pdf.rendered == 0
    assert ocr.calls == []


def test_pdf_with_thin_text_layer_uses_ocr() -> None:
    """It should OCR every page in order when the text layer is below the threshold."""

    pdf = FakePdfExtractor(pages=["  12  ", "", "\n"], images=3)
    ocr = FakeOcr()
    doc = asyncio.run(
        _fetcher(_transport(b"%PDF-1.4", "application/pdf"), pdf_extractor=pdf, ocr_engine=ocr).fetch_document_text(
            PDF_URL
        )
    )

    assert doc.ocr_used is True
    assert doc.content_type == "pdf"
    assert doc.text
    assert doc.text.index("page-1") < doc.text.index("page-2") < doc.text.index("page-3")
    assert ocr.calls == [b"page-1", b"page-2", b"page-3"]
    assert doc.metadata["extraction"] == "ocr"
    assert doc.metadata["citation"] == "[1985] HCA 12"


def test_ocr_threshold_is_configurable() -> None:
    """It should compare against the configured minimum instead of a fixed literal."""

    pdf = FakePdfExtractor(pages=["Short but complete order."])
    ocr = FakeOcr()
    fetcher = DocumentFetcher(
        Settings(ocr_min_text_chars=10),
        transport=_transport(b"%PDF-1.4", "application/pdf"),
        pdf_extractor=pdf,
        ocr_engine=ocr,
    )
    doc = asyncio.run(fetcher.fetch_document_text(PDF_URL))
    assert doc.ocr_used is False
    assert doc.text == "Short but complete order."


def test_unreadable_text_layer_falls_back_to_ocr() -> None:
    """It should treat a failing text-layer extraction as insufficient text."""

    pdf = FakePdfExtractor(broken=True)
    doc = asyncio.run(
        _fetcher(_transport(b"%PDF-1.4", "application/pdf"), pdf_extractor=pdf, ocr_engine=FakeOcr()).fetch_document_text(
            PDF_URL
        )
    )
    assert doc.ocr_used is True


def test_ocr_failure_is_surfaced() -> None:
    """It should raise OcrError rather than return empty text."""

    pdf = FakePdfExtractor(pages=[""])
    with pytest.raises(OcrError):
        asyncio.run(
            _fetcher(
                _transport(b"%PDF-1.4", "application/pdf"), pdf_extractor=pdf, ocr_engine=FakeOcr(fail=True)
            ).fetch_document_text(PDF_URL)
        )


def test_empty_ocr_output_is_an_error() -> None:
    """It should refuse to return an empty OCR result."""

    pdf = FakePdfExtractor(pages=[""])
    with pytest.raises(OcrError):
        asyncio.run(
            _fetcher(
                _transport(b"%PDF-1.4", "application/pdf"), pdf_extractor=pdf, ocr_engine=FakeOcr(empty=True)
            ).fetch_document_text(PDF_URL)
        )


def test_corrupt_pdf_raises_ocr_error() -> None:
    """It should report an OcrError when a corrupt PDF cannot be rasterized either."""

    with pytest.raises(OcrError):
        asyncio.run(
            _fetcher(_transport(b"this is not a pdf", "application/pdf"), ocr_engine=FakeOcr()).fetch_document_text(
                PDF_URL
            )
        )


def test_malformed_url_is_rejected() -> None:
    """It should reject non-absolute or non-http URLs without any request."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    fetcher = _fetcher(httpx.MockTransport(handler))
    for bad in ["", "not a url", "/au/cases/cth/HCA/1992/23.html", "ftp://example.org/a.pdf"]:
        with pytest.raises(DocumentFetchError):
            asyncio.run(fetcher.fetch_document_text(bad))


def test_non_success_status() -> None:
    """It should raise DocumentFetchError carrying the status code."""

    with pytest.raises(DocumentFetchError) as excinfo:
        asyncio.run(_fetcher(_transport(b"gone", "text/html", status=404)).fetch_document_text(CASE_URL))
    assert excinfo.value.status_code == 404
    assert excinfo.value.url == CASE_URL


def test_fetch_timeout() -> None:
    """It should raise the timeout variant of DocumentFetchError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(DocumentFetchTimeoutError):
        asyncio.run(_fetcher(httpx.MockTransport(handler)).fetch_document_text(CASE_URL))


def test_page_fetcher_returns_bytes_and_content_type() -> None:
    """It should return raw bytes and the declared content type."""

    fetcher = PageFetcher(Settings(), transport=_transport(b"%PDF-1.4", "application/pdf"))
    page = asyncio.run(fetcher.fetch(PDF_URL))
    assert page.content == b"%PDF-1.4"
    assert page.content_type == "application/pdf"
    assert page.url == PDF_URL


def test_fetch_deadline_covers_slow_body() -> None:
    """It should raise the timeout error when a body trickles in past the fetch timeout."""

    async def trickle():
        for _ in range(8):
            await asyncio.sleep(0.5)
            yield b"x"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=trickle(), headers={"content-type": "text/html"})

    fetcher = PageFetcher(Settings(fetch_timeout_s=1.0), transport=httpx.MockTransport(handler))
    started = time.monotonic()
    with pytest.raises(DocumentFetchTimeoutError):
        asyncio.run(fetcher.fetch(CASE_URL))
    assert time.monotonic() - started < 3.0


def test_html_is_parsed_off_the_event_loop_thread() -> None:
    """It should run HTML parsing in a worker thread."""

    threads: list[int] = []

    class RecordingParser(PageParser):
        def parse_html(self, url: str, html: str | bytes) -> ParsedPage:
            threads.append(threading.get_ident())
            return super().parse_html(url, html)

    fetcher = _fetcher(_transport(CASE_HTML.encode(), "text/html"), parser=RecordingParser())
    doc = asyncio.run(fetcher.fetch_document_text(CASE_URL))

    assert doc.metadata["citation"] == "[1992] HCA 23"
    assert threads and threads[0] != threading.get_ident()
