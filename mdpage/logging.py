"""Logging utilities."""

from __future__ import annotations

import contextlib
import contextvars
import logging
from typing import Any

from rich.logging import RichHandler


_document_var: contextvars.ContextVar[str] = contextvars.ContextVar("mdpage_document", default="-")


class _ContextFilter(logging.Filter):
    """Inject the document being handled into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.document = _document_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def document_context(url: str) -> Any:
    """Temporarily bind the document URL for structured logging."""

    token = _document_var.set(url)
    try:
        yield
    finally:
        _document_var.reset(token)


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Logging level name.
    """

    handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
    handler.addFilter(_ContextFilter())
    formatter = logging.Formatter(fmt="doc=%(document)s %(name)s: %(message)s")
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    # create_app may run more than once per process (tests, reloader)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(handler)
    else:
        for h in root.handlers:
            if isinstance(h, RichHandler):
                if not any(isinstance(f, _ContextFilter) for f in h.filters):
                    h.addFilter(_ContextFilter())
                h.setFormatter(formatter)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)


def log_exception(logger: logging.Logger, msg: str, **context: Any) -> None:
    """Log the exception being handled with optional structured context."""

    if context:
        logger.exception("%s | context=%s", msg, context)
    else:
        logger.exception("%s", msg)
