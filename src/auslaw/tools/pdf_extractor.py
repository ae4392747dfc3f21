"""PDF text-layer extraction and page rasterization (pdfplumber)."""

from __future__ import annotations

import asyncio
import io
import re
from dataclasses import dataclass

import pdfplumber

from auslaw.logging import get_logger

logger = get_logger(__name__)

_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class PdfText:
    """Text layer of a PDF, one entry per page."""

    pages: list[str]

    @property
    def text(self) -> str:
        return "\n\n".join(p.strip() for p in self.pages if p.strip())

    @property
    def page_count(self) -> int:
        return len(self.pages)


def significant_chars(text: str) -> int:
    """Count characters left after whitespace is removed."""

    return len(_WS_RE.sub("", text or ""))


class PdfExtractor:
    """Extract text layers and page images from in-memory PDFs."""

    def __init__(self, *, dpi: int = 300) -> None:
        self._dpi = dpi

    def extract_text(self, content: bytes) -> PdfText:
        """Extract each page's text layer. Image-only pages yield empty strings."""

        with pdfplumber.open(io.BytesIO(content)) as pdf:
            return PdfText(pages=[page.extract_text() or "" for page in pdf.pages])

    def render_pages(self, content: bytes) -> list[bytes]:
        """Rasterize every page to PNG bytes, in page order."""

        images: list[bytes] = []
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            for i, page in enumerate(pdf.pages, start=1):
                buf = io.BytesIO()
                page.to_image(resolution=self._dpi).original.save(buf, format="PNG")
                images.append(buf.getvalue())
                logger.debug("Rendered pdf page", extra={"page": i, "dpi": self._dpi, "bytes": buf.tell()})
        return images

    async def extract_text_async(self, content: bytes) -> PdfText:
        """Async variant of :meth:`extract_text`."""

        return await asyncio.to_thread(self.extract_text, content)

    async def render_pages_async(self, content: bytes) -> list[bytes]:
        """Async variant of :meth:`render_pages`."""

        return await asyncio.to_thread(self.render_pages, content)
