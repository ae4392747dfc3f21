"""Citation, jurisdiction and path pattern matching.

All pattern matching over titles, queries and URL paths goes through the named table below, so
each rule can be tested in isolation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlparse

JURISDICTION_CODES: tuple[str, ...] = ("cth", "vic", "nsw", "qld", "sa", "wa", "tas", "nt", "act")

PATTERNS: dict[str, re.Pattern[str]] = {
    # [2025] HCA 26
    "neutral_citation": re.compile(r"\[(?P<year>\d{4})\]\s*(?P<court>[A-Z]+)\s*(?P<number>\d+)"),
    # /au/cases/vic/VSC/2020/1.html, /au/legis/cth/consol_act/...
    "jurisdiction": re.compile(
        r"/au/(?:cases|legis)/(?P<code>" + "|".join(JURISDICTION_CODES) + r")/",
        re.IGNORECASE,
    ),
    # Smith v Jones, R v. Dudley
    "case_name": re.compile(r"\b[A-Z][\w'&.\-]*\s+v\.?\s+[A-Z][\w'&.\-]*"),
    "journal_path": re.compile(r"/journals/"),
    "case_path": re.compile(r"/cases/"),
    "legislation_path": re.compile(r"/legis/"),
}

_KIND_PATH_PATTERN = {
    "case": "case_path",
    "legislation": "legislation_path",
}


@dataclass(frozen=True)
class NeutralCitation:
    """A parsed medium-neutral citation."""

    year: str
    court: str
    number: str

    def __str__(self) -> str:
        return f"[{self.year}] {self.court} {self.number}"


def find_neutral_citation(text: str) -> NeutralCitation | None:
    """Return the first neutral citation found in `text`, if any."""

    m = PATTERNS["neutral_citation"].search(text or "")
    if m is None:
        return None
    return NeutralCitation(year=m.group("year"), court=m.group("court"), number=m.group("number"))


def extract_jurisdiction(url: str) -> str | None:
    """Return the lowercase jurisdiction code encoded in an index URL path."""

    m = PATTERNS["jurisdiction"].search(urlparse(url).path)
    return m.group("code").lower() if m else None


def looks_like_case_name(query: str) -> bool:
    """Whether `query` names a case, e.g. `Mabo v Queensland`."""

    return PATTERNS["case_name"].search(query or "") is not None


def is_journal_url(url: str) -> bool:
    """Whether the URL points into a journal/commentary database."""

    return PATTERNS["journal_path"].search(urlparse(url).path) is not None


def matches_document_kind(url: str, kind: str) -> bool:
    """Whether the URL path belongs to the database family for `kind`."""

    return PATTERNS[_KIND_PATH_PATTERN[kind]].search(urlparse(url).path) is not None
