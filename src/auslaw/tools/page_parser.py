"""Page parsing utilities."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass

from bs4 import BeautifulSoup, NavigableString, Tag
from readability import Document

from auslaw.logging import get_logger

logger = get_logger(__name__)

# Attributes that carry a pinpoint paragraph number, in lookup order.
PARAGRAPH_NUMBER_ATTRS: tuple[str, ...] = ("data-paragraph-number", "data-para-num", "data-para")

_DROP_TAGS = ["script", "style", "noscript", "nav", "header", "footer"]
_BLOCK_TAGS = [
    "p", "div", "li", "ol", "ul", "dl", "dt", "dd", "br", "tr", "table", "blockquote", "pre",
    "section", "article", "h1", "h2", "h3", "h4", "h5", "h6",
]
_DIGITS_RE = re.compile(r"\d+")
_BARE_MARKER_RE = re.compile(r"^\[\d+\]$")
_INLINE_WS_RE = re.compile(r"[ \t\r\f\v\xa0]+")


@dataclass(frozen=True)
class ParsedPage:
    """Plain text rendering of an HTML document."""

    text: str
    title: str | None = None


def paragraph_number(el: Tag) -> str | None:
    """Return the pinpoint paragraph number annotated on `el`, if any."""

    for attr in PARAGRAPH_NUMBER_ATTRS:
        value = el.get(attr)
        if value:
            m = _DIGITS_RE.search(str(value))
            if m:
                return m.group(0)
    if el.name == "li":
        value = el.get("value")
        # Sub-lists inside a numbered paragraph are not pinpoint paragraphs.
        if value and str(value).strip().isdigit() and not _inside_numbered_paragraph(el):
            return str(value).strip()
    return None


def _inside_numbered_paragraph(el: Tag) -> bool:
    for parent in el.parents:
        if parent.name == "li" and str(parent.get("value") or "").strip().isdigit():
            return True
        if any(parent.get(attr) for attr in PARAGRAPH_NUMBER_ATTRS):
            return True
    return False


class PageParser:
    """Parse fetched HTML documents into plain text with `[N]` paragraph markers."""

    def parse_html(self, url: str, html: str | bytes) -> ParsedPage:
        """Render the document body as text, in document order."""

        soup = BeautifulSoup(html, "lxml")
        title = self._title(url, html, soup)

        for tag in soup(_DROP_TAGS):
            tag.decompose()

        markers = 0
        for el in soup.find_all(True):
            number = paragraph_number(el)
            if number is not None:
                el.insert(0, NavigableString(f"[{number}] "))
                markers += 1

        for el in soup.find_all(_BLOCK_TAGS):
            el.append(NavigableString("\n"))

        body = soup.body or soup
        text = self.normalize_text(body.get_text())

        logger.debug("Parsed html", extra={"url": url, "paragraph_markers": markers, "chars": len(text)})
        return ParsedPage(text=text, title=title)

    async def parse_html_async(self, url: str, html: str | bytes) -> ParsedPage:
        """Async variant of :meth:`parse_html`."""

        return await asyncio.to_thread(self.parse_html, url, html)

    @staticmethod
    def _title(url: str, html: str | bytes, soup: BeautifulSoup) -> str | None:
        try:
            title = Document(html).short_title() or None
        except Exception as e:
            logger.debug("Readability title extraction failed for url=%s: %s", url, e)
            title = None
        if title is None and soup.title is not None:
            title = soup.title.get_text(strip=True) or None
        return title

    @staticmethod
    def normalize_text(text: str) -> str:
        """Collapse inline whitespace, drop blank lines and keep `[N]` on its paragraph's line."""

        lines = [_INLINE_WS_RE.sub(" ", line).strip() for line in text.splitlines()]
        lines = [line for line in lines if line]

        out: list[str] = []
        pending_marker: str | None = None
        for line in lines:
            if pending_marker is not None:
                line = f"{pending_marker} {line}"
                pending_marker = None
            if _BARE_MARKER_RE.match(line):
                pending_marker = line
                continue
            out.append(line)
        if pending_marker is not None:
            out.append(pending_marker)
        return "\n".join(out)
