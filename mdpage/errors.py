"""Error types."""

from __future__ import annotations


class MdpageError(Exception):
    """Base class for mdpage errors."""


class FetchError(MdpageError):
    """The document could not be retrieved.

    Raised for transport failures, non-2xx answers and bodies that do not
    decode. The original exception, if any, is chained and exposed as
    :attr:`cause`.
    """

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__


class HighlightError(MdpageError):
    """Pygments failed while colorizing a code block."""

    def __init__(self, language: str) -> None:
        super().__init__(f"highlighting failed for language {language!r}")
        self.language = language
