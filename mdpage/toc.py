"""Table of contents generation."""

from __future__ import annotations

import re
from collections.abc import Sequence

from mdpage.nodes import (
    Block,
    Heading,
    Paragraph,
    TableOfContents,
    Text,
    TocEntry,
    iter_blocks,
    iter_headings,
    transform,
)

# Headings that get a generated list right after them when no marker exists
CONTENTS_HEADING = re.compile(r"^(table[ -]of[ -])?contents?$", re.IGNORECASE)


def build_toc(headings: Sequence[Heading], min_level: int = 2, max_level: int = 6) -> tuple[TocEntry, ...]:
    """Nest headings by their raw level.

    A jump of more than one level (h2 followed by h4) is bridged with
    placeholder entries instead of being flattened.
    """

    eligible = [h for h in headings if min_level <= h.level <= max_level]
    entries, _ = _nest(eligible, 0, min_level)
    return entries


def _nest(headings: Sequence[Heading], start: int, level: int) -> tuple[tuple[TocEntry, ...], int]:
    entries: list[TocEntry] = []
    index = start
    while index < len(headings):
        heading = headings[index]
        if heading.level < level:
            break
        if heading.level == level:
            children, index = _nest(headings, index + 1, level + 1)
            entries.append(TocEntry(level=level, text=heading.text, slug=heading.slug, children=children))
        else:
            children, index = _nest(headings, index, level + 1)
            entries.append(TocEntry(level=level, text=None, slug=None, children=children))
    return tuple(entries), index


def insert_toc(blocks: tuple[Block, ...], min_level: int = 2, max_level: int = 6) -> tuple[Block, ...]:
    """Fill in the table of contents, if the document asks for one.

    The first ``TableOfContents`` marker gets every heading in the document;
    any later marker goes back to being a literal paragraph. Without a marker,
    a top-level "Contents" heading gets the list inserted after it.
    """

    markers = [b for b in iter_blocks(blocks) if isinstance(b, TableOfContents)]
    if markers:
        first = markers[0]
        entries = build_toc(list(iter_headings(blocks)), min_level, max_level)

        def _fill(block: Block) -> Block:
            if block is first:
                return TableOfContents(marker=first.marker, line=first.line, entries=entries)
            if isinstance(block, TableOfContents):
                return Paragraph((Text(block.marker),))
            return block

        return transform(blocks, _fill)

    for index, block in enumerate(blocks):
        if isinstance(block, Heading) and CONTENTS_HEADING.match(block.text):
            entries = build_toc(_after_section(blocks[index + 1:], block.level), min_level, max_level)
            toc = TableOfContents(marker=block.text, entries=entries)
            return blocks[:index + 1] + (toc,) + blocks[index + 1:]

    return blocks


def _after_section(blocks: tuple[Block, ...], level: int) -> list[Heading]:
    """Headings from the first one that closes the contents section onward."""

    following = list(iter_headings(blocks))
    for index, heading in enumerate(following):
        if heading.level <= level:
            return following[index:]
    return []
