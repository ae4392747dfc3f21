"""Logging utilities."""

from __future__ import annotations

import contextlib
import contextvars
import logging
import uuid
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


_request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("auslaw_request_id", default="-")
_operation_var: contextvars.ContextVar[str] = contextvars.ContextVar("auslaw_operation", default="-")


class _ContextFilter(logging.Filter):
    """Inject request context into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.request_id = _request_id_var.get()  # type: ignore[attr-defined]
        record.operation = _operation_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def request_context(*, operation: str, request_id: str | None = None) -> Any:
    """Bind request context for structured logging.

    Each call to a produced operation gets its own id, so concurrent requests running on one
    event loop stay distinguishable in the log stream.

    Args:
        operation: Operation name, e.g. `search` or `fetch_document_text`.
        request_id: Optional identifier; a short random one is generated when omitted.
    """

    token_req = _request_id_var.set(request_id or uuid.uuid4().hex[:8])
    token_op = _operation_var.set(operation)
    try:
        yield
    finally:
        _request_id_var.reset(token_req)
        _operation_var.reset(token_op)


def current_request_id() -> str:
    """Return the request id bound in the current context."""

    return _request_id_var.get()


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Logging level name.
    """

    # stderr keeps stdout free for JSON output.
    handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_time=True, show_level=True)
    handler.addFilter(_ContextFilter())

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s req=%(request_id)s op=%(operation)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    # Avoid duplicate handlers if configure_logging is called multiple times
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(handler)
    else:
        for h in root.handlers:
            if isinstance(h, RichHandler):
                h.addFilter(_ContextFilter())
                h.setFormatter(formatter)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)
