"""Heading anchors."""

from __future__ import annotations

import re
from dataclasses import replace

from markdown.extensions.toc import slugify as _md_slugify

from mdpage.nodes import Block, Heading, transform

DEFAULT_MAX_LENGTH = 64
_PUNCTUATION = re.compile(r"[^\w\s-]|_")


def slugify(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Turn heading text into an anchor id.

    ``"Hello, World!"`` becomes ``"hello-world"``. Text with nothing
    sluggable left becomes ``"section"``.
    """

    value = _md_slugify(_PUNCTUATION.sub(" ", text), "-")
    value = value[:max_length].strip("-")
    return value or "section"


class SlugRegistry:
    """Hand out unique slugs in claim order."""

    def __init__(self, max_length: int = DEFAULT_MAX_LENGTH) -> None:
        self.max_length = max_length
        self._seen: set[str] = set()

    def claim(self, text: str) -> str:
        base = slugify(text, self.max_length)
        candidate = base
        suffix = 2
        while candidate in self._seen:
            candidate = f"{base}-{suffix}"
            suffix += 1
        self._seen.add(candidate)
        return candidate


def assign_slugs(blocks: tuple[Block, ...], max_length: int = DEFAULT_MAX_LENGTH) -> tuple[Block, ...]:
    """Give every heading a unique slug, in document order."""

    registry = SlugRegistry(max_length)

    def _claim(block: Block) -> Block:
        if isinstance(block, Heading):
            return replace(block, slug=registry.claim(block.text))
        return block

    return transform(blocks, _claim)
