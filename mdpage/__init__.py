"""Serve a Markdown document as a styled HTML page."""

from __future__ import annotations

from mdpage.errors import FetchError, HighlightError, MdpageError
from mdpage.loader import DocumentLoader
from mdpage.models import DocumentRequest, DocumentState, Failed, Loaded, Pending
from mdpage.renderer import DocumentRenderer, RenderedDocument

__all__ = [
    "DocumentLoader",
    "DocumentRenderer",
    "DocumentRequest",
    "DocumentState",
    "Failed",
    "FetchError",
    "HighlightError",
    "Loaded",
    "MdpageError",
    "Pending",
    "RenderedDocument",
]
