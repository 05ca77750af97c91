"""Markdown document rendering."""

from __future__ import annotations

from dataclasses import dataclass

from markupsafe import Markup

from mdpage.config import Settings
from mdpage.highlight import CodeHighlighter
from mdpage.nodes import Block, Heading, iter_headings
from mdpage.parser import DocumentParser
from mdpage.slugs import DEFAULT_MAX_LENGTH, assign_slugs
from mdpage.toc import insert_toc
from mdpage.widgets import WidgetMapper


@dataclass(frozen=True)
class RenderedDocument:
    html: Markup
    title: str | None
    headings: tuple[Heading, ...]
    nodes: tuple[Block, ...]


class DocumentRenderer:
    """Turn Markdown text into HTML.

    Rendering is a pure function of the text: parse, slug the headings,
    fill in the table of contents, then map each node to a widget.
    """

    def __init__(
        self,
        highlighter: CodeHighlighter | None = None,
        *,
        toc_marker: str = "[TOC]",
        toc_min_level: int = 2,
        toc_max_level: int = 6,
        slug_max_length: int = DEFAULT_MAX_LENGTH,
        permalinks: bool = True,
    ) -> None:
        self.parser = DocumentParser(toc_marker)
        self.widgets = WidgetMapper(highlighter or CodeHighlighter(), permalinks=permalinks)
        self.toc_min_level = toc_min_level
        self.toc_max_level = toc_max_level
        self.slug_max_length = slug_max_length

    @classmethod
    def from_settings(cls, settings: Settings, highlighter: CodeHighlighter | None = None) -> DocumentRenderer:
        return cls(
            highlighter or CodeHighlighter(style=settings.highlight_style),
            toc_marker=settings.toc_marker,
            toc_min_level=settings.toc_min_level,
            toc_max_level=settings.toc_max_level,
            slug_max_length=settings.slug_max_length,
            permalinks=settings.heading_permalinks,
        )

    def render(self, content: str) -> RenderedDocument:
        nodes = self.parser.parse(content)
        nodes = assign_slugs(nodes, self.slug_max_length)
        nodes = insert_toc(nodes, self.toc_min_level, self.toc_max_level)

        headings = tuple(iter_headings(nodes))
        title = next((h.text for h in headings if h.level == 1), None)
        return RenderedDocument(html=self.widgets.render(nodes), title=title, headings=headings, nodes=nodes)
