"""Tests for logging setup."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from mdpage.logging import _ContextFilter, configure_logging


def test_configure_logging_is_idempotent() -> None:
    """It should keep one handler and one context filter across repeated calls."""

    configure_logging("WARNING")
    configure_logging("WARNING")
    configure_logging("WARNING")

    handlers = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
    assert len(handlers) == 1
    assert sum(isinstance(f, _ContextFilter) for f in handlers[0].filters) == 1
