"""Tests for DocumentLoader."""

from __future__ import annotations

import asyncio
import threading

import httpx
import pytest

from mdpage.config import Settings
from mdpage.errors import FetchError
from mdpage.loader import DocumentLoader
from mdpage.models import DocumentRequest, Failed, Loaded, Pending

REQUEST = DocumentRequest(path="/pages/doc.md", base="http://docs.test")


def test_resolve_loads_content(make_loader) -> None:
    loader, transport = make_loader(lambda request: httpx.Response(200, text="# Hello"))

    assert loader.resolve(REQUEST) == Loaded("# Hello")
    assert str(transport.requests[0].url) == "http://docs.test/pages/doc.md"


def test_resolve_fetches_once_per_request(make_loader) -> None:
    """It should answer the second call from the cache."""

    loader, transport = make_loader(lambda request: httpx.Response(200, text="# Hello"))

    first = loader.resolve(REQUEST)
    second = loader.resolve(DocumentRequest(path="/pages/doc.md", base="http://docs.test"))

    assert first is second
    assert len(transport.requests) == 1


def test_distinct_requests_fetch_separately(make_loader) -> None:
    loader, transport = make_loader(lambda request: httpx.Response(200, text=request.url.path))

    loader.resolve(REQUEST)
    other = loader.resolve(DocumentRequest(path="/pages/other.md", base="http://docs.test"))

    assert other == Loaded("/pages/other.md")
    assert len(transport.requests) == 2


def test_server_error_is_failed(make_loader, caplog: pytest.LogCaptureFixture) -> None:
    """It should turn HTTP 500 into a logged Failed state."""

    loader, _ = make_loader(lambda request: httpx.Response(500, text="boom"))

    state = loader.resolve(REQUEST)

    assert isinstance(state, Failed)
    assert "500" in state.message
    assert state.error.status_code == 500
    assert "Failed to load document" in caplog.text


def test_failure_is_not_retried(make_loader) -> None:
    loader, transport = make_loader(lambda request: httpx.Response(503))

    loader.resolve(REQUEST)
    loader.resolve(REQUEST)

    assert len(transport.requests) == 1


def test_transport_error_keeps_cause(make_loader) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    loader, _ = make_loader(refuse)

    state = loader.resolve(REQUEST)

    assert isinstance(state, Failed)
    assert isinstance(state.error, FetchError)
    assert isinstance(state.error.cause, httpx.ConnectError)
    assert "connection refused" in state.message


def test_undecodable_body_is_failed(make_loader) -> None:
    loader, _ = make_loader(
        lambda request: httpx.Response(
            200,
            content=b"\xff\xfe\xfa",
            headers={"content-type": "text/markdown; charset=utf-8"},
        )
    )

    state = loader.resolve(REQUEST)

    assert isinstance(state, Failed)
    assert isinstance(state.error.cause, UnicodeDecodeError)


def test_non_2xx_status_is_not_success(make_loader) -> None:
    loader, _ = make_loader(lambda request: httpx.Response(304))

    assert isinstance(loader.resolve(REQUEST), Failed)


def test_peek_does_not_fetch(make_loader) -> None:
    loader, transport = make_loader(lambda request: httpx.Response(200, text="x"))

    assert loader.peek(REQUEST) == Pending()
    loader.resolve(REQUEST)
    assert loader.peek(REQUEST) == Loaded("x")
    assert len(transport.requests) == 1


def test_invalidate_forces_refetch(make_loader) -> None:
    loader, transport = make_loader(lambda request: httpx.Response(200, text="x"))

    loader.resolve(REQUEST)
    loader.invalidate(REQUEST)
    assert loader.peek(REQUEST) == Pending()
    loader.resolve(REQUEST)
    loader.invalidate()
    loader.resolve(REQUEST)

    assert len(transport.requests) == 3


def test_resolve_async_deduplicates_concurrent_calls(make_loader) -> None:
    loader, transport = make_loader(lambda request: httpx.Response(200, text="async"))

    async def _run():
        return await asyncio.gather(loader.resolve_async(REQUEST), loader.resolve_async(REQUEST))

    first, second = asyncio.run(_run())

    assert first == second == Loaded("async")
    assert len(transport.requests) == 1


def test_relative_request_uses_client_base_url(make_loader) -> None:
    loader, transport = make_loader(lambda request: httpx.Response(200, text="ok"), base_url="http://origin.test")

    assert loader.resolve(DocumentRequest(path="/pages/doc.md")) == Loaded("ok")
    assert str(transport.requests[0].url) == "http://origin.test/pages/doc.md"


def test_from_settings_sets_user_agent() -> None:
    loader = DocumentLoader.from_settings(Settings(http_user_agent="tester/1"))
    try:
        assert loader._client.headers["User-Agent"] == "tester/1"
    finally:
        loader.close()


def test_slow_request_does_not_block_others(make_loader) -> None:
    """It should fetch a second document while the first is still in flight."""

    started = threading.Event()
    release = threading.Event()

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "slow.test":
            started.set()
            release.wait(5)
        return httpx.Response(200, text=request.url.host)

    loader, _ = make_loader(handler)
    slow = DocumentRequest(path="/doc.md", base="http://slow.test")
    fast = DocumentRequest(path="/doc.md", base="http://fast.test")

    worker = threading.Thread(target=loader.resolve, args=(slow,))
    worker.start()
    try:
        assert started.wait(5)
        assert loader.resolve(fast) == Loaded("fast.test")
        assert loader.peek(slow) == Pending()
    finally:
        release.set()
        worker.join(5)

    assert loader.peek(slow) == Loaded("slow.test")


def test_from_settings_uses_configured_origin() -> None:
    loader = DocumentLoader.from_settings(Settings(port=8123))
    try:
        assert loader._client.base_url.host == "127.0.0.1"
        assert loader._client.base_url.port == 8123
    finally:
        loader.close()
