"""Error kinds raised by the search and document acquisition pipelines.

All of them are terminal for the request that raised them; nothing here is retried internally.
"""

from __future__ import annotations


class AuslawError(RuntimeError):
    """Base class for auslaw errors."""


class SearchTransportError(AuslawError):
    """The legal index could not be reached or answered with a non-success status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def cause(self) -> BaseException | None:
        """Underlying transport exception, if any."""

        return self.__cause__


class SearchTimeoutError(SearchTransportError):
    pass


class DocumentFetchError(AuslawError):
    """A document URL was malformed, unreachable, or returned a non-success status."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DocumentFetchTimeoutError(DocumentFetchError):
    pass


class OcrError(AuslawError):
    """OCR fallback could not produce text (binary missing, recognition failed, bad input)."""


class OcrTimeoutError(OcrError):
    pass
