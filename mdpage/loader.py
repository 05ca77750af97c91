"""Document loading over HTTP."""

from __future__ import annotations

import asyncio
import threading

import httpx

from mdpage.config import Settings
from mdpage.errors import FetchError
from mdpage.logging import document_context, get_logger, log_exception
from mdpage.models import DocumentRequest, DocumentState, Failed, Loaded, Pending

logger = get_logger(__name__)


class DocumentLoader:
    """Fetch documents once and remember the outcome.

    Each distinct :class:`DocumentRequest` is retrieved at most once. The
    resulting :class:`Loaded` or :class:`Failed` state is kept until
    :meth:`invalidate` drops it; failures are not retried.
    """

    def __init__(self, client: httpx.Client) -> None:
        self._client = client
        self._states: dict[DocumentRequest, DocumentState] = {}
        # One lock per request being fetched; _lock only guards the dicts
        self._inflight: dict[DocumentRequest, threading.Lock] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> DocumentLoader:
        """Build a loader whose relative requests go to the configured origin."""

        client = httpx.Client(
            base_url=settings.document_base or f"http://127.0.0.1:{settings.port}",
            timeout=httpx.Timeout(settings.http_timeout_s),
            headers={"User-Agent": settings.http_user_agent},
            follow_redirects=True,
        )
        return cls(client)

    def peek(self, request: DocumentRequest) -> DocumentState:
        """Return the cached state without any I/O."""

        with self._lock:
            return self._states.get(request, Pending())

    def resolve(self, request: DocumentRequest) -> DocumentState:
        """Return the state for ``request``, fetching it on first use.

        Concurrent callers for the same request wait for the one fetch in
        flight; other requests are not held up by it.
        """

        with self._lock:
            state = self._states.get(request)
            if state is not None:
                return state
            fetch_lock = self._inflight.setdefault(request, threading.Lock())

        with fetch_lock:
            with self._lock:
                state = self._states.get(request)
            if state is None:
                state = self._load(request)
                with self._lock:
                    self._states[request] = state
                    self._inflight.pop(request, None)
            return state

    async def resolve_async(self, request: DocumentRequest) -> DocumentState:
        """Async variant of :meth:`resolve`."""

        return await asyncio.to_thread(self.resolve, request)

    def invalidate(self, request: DocumentRequest | None = None) -> None:
        """Forget one cached request, or all of them."""

        with self._lock:
            if request is None:
                self._states.clear()
            else:
                self._states.pop(request, None)

    def close(self) -> None:
        self._client.close()

    def _load(self, request: DocumentRequest) -> DocumentState:
        url = request.url
        with document_context(url):
            try:
                content = self._fetch(url)
            except FetchError as exc:
                log_exception(logger, "Failed to load document", url=url, status=exc.status_code)
                return Failed(exc)
            logger.info("Loaded document (%d chars)", len(content))
            return Loaded(content)

    def _fetch(self, url: str) -> str:
        logger.debug("GET %s", url)
        try:
            resp = self._client.get(url)
        except httpx.HTTPError as exc:
            raise FetchError(f"Could not retrieve {url}: {exc}", url=url) from exc

        if not resp.is_success:
            raise FetchError(
                f"Retrieving {url} failed with HTTP {resp.status_code}",
                url=url,
                status_code=resp.status_code,
            )

        try:
            return resp.content.decode(resp.encoding or "utf-8")
        except (LookupError, UnicodeDecodeError) as exc:
            raise FetchError(
                f"Could not decode {url} as {resp.encoding or 'utf-8'}: {exc}",
                url=url,
                status_code=resp.status_code,
            ) from exc
