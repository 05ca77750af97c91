"""Shared fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from mdpage.config import PACKAGE_DIR, Settings
from mdpage.loader import DocumentLoader
from mdpage.renderer import DocumentRenderer

PAGES_DIR = PACKAGE_DIR / "pages"

Handler = Callable[[httpx.Request], httpx.Response]


class CountingTransport(httpx.MockTransport):
    """MockTransport that records every request it answers."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def serve_pages(pages_dir: Path) -> Handler:
    """Answer GET /pages/<name> from ``pages_dir``, 404 otherwise."""

    def handler(request: httpx.Request) -> httpx.Response:
        path = pages_dir / request.url.path.removeprefix("/pages/")
        if not path.is_file():
            return httpx.Response(404, text="not found")
        return httpx.Response(
            200,
            content=path.read_bytes(),
            headers={"content-type": "text/markdown; charset=utf-8"},
        )

    return handler


@pytest.fixture
def renderer() -> DocumentRenderer:
    return DocumentRenderer()


@pytest.fixture
def settings() -> Settings:
    return Settings(log_level="WARNING")


@pytest.fixture
def document_text() -> str:
    return (PAGES_DIR / "functional-programming.md").read_text(encoding="utf-8")


@pytest.fixture
def make_transport() -> Callable[[Handler], CountingTransport]:
    return CountingTransport


@pytest.fixture
def pages_transport() -> CountingTransport:
    return CountingTransport(serve_pages(PAGES_DIR))


@pytest.fixture
def make_loader() -> Callable[[Handler], tuple[DocumentLoader, CountingTransport]]:
    loaders: list[DocumentLoader] = []

    def _make(handler: Handler, **client_kwargs) -> tuple[DocumentLoader, CountingTransport]:
        transport = CountingTransport(handler)
        loader = DocumentLoader(httpx.Client(transport=transport, **client_kwargs))
        loaders.append(loader)
        return loader, transport

    yield _make
    for loader in loaders:
        loader.close()
