"""Document request and load-state models."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from mdpage.errors import FetchError


@dataclass(frozen=True)
class DocumentRequest:
    """Identifies one document resource.

    ``base`` is an origin such as ``http://localhost:8000``. Leave it empty to
    resolve ``path`` against the HTTP client's own base URL.
    """

    path: str
    base: str = ""

    def __post_init__(self) -> None:
        if not self.path or any(ch.isspace() for ch in self.path):
            raise ValueError(f"invalid document path: {self.path!r}")
        try:
            path_url = httpx.URL(self.path)
        except httpx.InvalidURL as exc:
            raise ValueError(f"invalid document path: {self.path!r}") from exc
        if path_url.is_absolute_url and path_url.scheme not in ("http", "https"):
            raise ValueError(f"unsupported scheme in document path: {self.path!r}")

        if self.base:
            try:
                base_url = httpx.URL(self.base)
            except httpx.InvalidURL as exc:
                raise ValueError(f"invalid document base: {self.base!r}") from exc
            if base_url.scheme not in ("http", "https") or not base_url.host:
                raise ValueError(f"document base must be an http(s) origin: {self.base!r}")

    @property
    def url(self) -> str:
        if not self.base:
            return self.path
        # An absolute path URL wins over the base
        return str(httpx.URL(self.base).join(self.path))


@dataclass(frozen=True)
class Pending:
    """Not fetched yet."""


@dataclass(frozen=True)
class Loaded:
    content: str


@dataclass(frozen=True)
class Failed:
    error: FetchError

    @property
    def message(self) -> str:
        return self.error.message


DocumentState = Pending | Loaded | Failed
