"""Document tree produced by the parser.

All nodes are frozen dataclasses with tuple children. Transforms never
mutate a tree; they build a new one with :func:`transform`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, replace


# ---------------------------------------------------------------------------
# Inline nodes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class CodeSpan:
    literal: str


@dataclass(frozen=True)
class Emphasis:
    children: tuple[Inline, ...]
    strong: bool = False


@dataclass(frozen=True)
class Link:
    href: str
    children: tuple[Inline, ...]
    title: str | None = None


@dataclass(frozen=True)
class Image:
    src: str
    alt: str
    title: str | None = None


@dataclass(frozen=True)
class Break:
    hard: bool = False


Inline = Text | CodeSpan | Emphasis | Link | Image | Break


# ---------------------------------------------------------------------------
# Block nodes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Heading:
    level: int
    children: tuple[Inline, ...]
    text: str
    slug: str | None = None


@dataclass(frozen=True)
class Paragraph:
    children: tuple[Inline, ...]
    # Paragraphs inside tight list items render without <p>
    tight: bool = False


@dataclass(frozen=True)
class ListItem:
    children: tuple[Block, ...]


@dataclass(frozen=True)
class List:
    items: tuple[ListItem, ...]
    ordered: bool = False
    start: int = 1


@dataclass(frozen=True)
class CodeBlock:
    literal: str
    language: str | None = None


@dataclass(frozen=True)
class BlockQuote:
    children: tuple[Block, ...]


@dataclass(frozen=True)
class ThematicBreak:
    pass


@dataclass(frozen=True)
class TocEntry:
    """One table-of-contents line.

    ``text`` and ``slug`` are ``None`` for placeholders standing in for a
    skipped heading level.
    """

    level: int
    text: str | None
    slug: str | None
    children: tuple[TocEntry, ...] = ()


@dataclass(frozen=True)
class TableOfContents:
    marker: str
    line: int | None = None
    entries: tuple[TocEntry, ...] = ()


Block = Heading | Paragraph | List | ListItem | CodeBlock | BlockQuote | ThematicBreak | TableOfContents


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------

def transform(blocks: Iterable[Block], fn: Callable[[Block], Block]) -> tuple[Block, ...]:
    """Rebuild ``blocks`` bottom-up, passing every block through ``fn``.

    Container children are transformed before their container, so ``fn``
    sees leaves in document order.
    """

    out: list[Block] = []
    for block in blocks:
        match block:
            case List(items=items):
                block = replace(block, items=transform(items, fn))
            case ListItem(children=children) | BlockQuote(children=children):
                block = replace(block, children=transform(children, fn))
        out.append(fn(block))
    return tuple(out)


def iter_blocks(blocks: Iterable[Block]) -> Iterator[Block]:
    """Yield every block, containers before their children."""

    for block in blocks:
        yield block
        match block:
            case List(items=items):
                yield from iter_blocks(items)
            case ListItem(children=children) | BlockQuote(children=children):
                yield from iter_blocks(children)


def iter_headings(blocks: Iterable[Block]) -> Iterator[Heading]:
    for block in iter_blocks(blocks):
        if isinstance(block, Heading):
            yield block


def plain_text(nodes: Iterable[Inline]) -> str:
    """Flatten inline nodes to their visible text."""

    parts: list[str] = []
    for node in nodes:
        match node:
            case Text(text=text):
                parts.append(text)
            case CodeSpan(literal=literal):
                parts.append(literal)
            case Emphasis(children=children) | Link(children=children):
                parts.append(plain_text(children))
            case Image(alt=alt):
                parts.append(alt)
            case Break():
                parts.append(" ")
    return "".join(parts)
