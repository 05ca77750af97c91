"""Markdown text to document tree."""

from __future__ import annotations

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from mdpage.logging import get_logger, log_exception
from mdpage.nodes import (
    Block,
    BlockQuote,
    Break,
    CodeBlock,
    CodeSpan,
    Emphasis,
    Heading,
    Image,
    Inline,
    Link,
    List,
    ListItem,
    Paragraph,
    TableOfContents,
    Text,
    ThematicBreak,
    plain_text,
)

logger = get_logger(__name__)


class DocumentParser:
    """Parse CommonMark into :mod:`mdpage.nodes` blocks.

    Parsing never fails. Raw HTML is disabled, so tags in the source come
    out as literal text.
    """

    def __init__(self, toc_marker: str = "[TOC]") -> None:
        self.toc_marker = toc_marker
        self._md = MarkdownIt("commonmark", {"html": False})

    def parse(self, content: str) -> tuple[Block, ...]:
        try:
            root = SyntaxTreeNode(self._md.parse(content))
            blocks = tuple(self._block(node) for node in root.children)
        except Exception:
            log_exception(logger, "Markdown parsing failed, rendering source as text")
            blocks = (Paragraph((Text(content),)),)
        return blocks or (Paragraph(()),)

    def _block(self, node: SyntaxTreeNode) -> Block:
        match node.type:
            case "heading":
                children = self._inline_of(node)
                return Heading(level=int(node.tag[1:]), children=children, text=plain_text(children).strip())
            case "paragraph":
                children = self._inline_of(node)
                if plain_text(children).strip() == self.toc_marker:
                    return TableOfContents(marker=self.toc_marker, line=node.map[0] if node.map else None)
                return Paragraph(children, tight=node.hidden)
            case "bullet_list" | "ordered_list":
                items = tuple(
                    ListItem(tuple(self._block(child) for child in item.children))
                    for item in node.children
                )
                return List(
                    items=items,
                    ordered=node.type == "ordered_list",
                    start=int(node.attrs.get("start", 1)),
                )
            case "fence":
                info = node.info.strip()
                language = info.split(maxsplit=1)[0] if info else None
                return CodeBlock(literal=_strip_final_newline(node.content), language=language)
            case "code_block":
                return CodeBlock(literal=_strip_final_newline(node.content))
            case "blockquote":
                return BlockQuote(tuple(self._block(child) for child in node.children))
            case "hr":
                return ThematicBreak()
            case _:
                return Paragraph((Text(node.content),))

    def _inline_of(self, node: SyntaxTreeNode) -> tuple[Inline, ...]:
        if not node.children:
            return ()
        return tuple(self._inline(child) for child in node.children[0].children)

    def _inline(self, node: SyntaxTreeNode) -> Inline:
        match node.type:
            case "text":
                return Text(node.content)
            case "code_inline":
                return CodeSpan(node.content)
            case "em" | "strong":
                children = tuple(self._inline(child) for child in node.children)
                return Emphasis(children, strong=node.type == "strong")
            case "link":
                children = tuple(self._inline(child) for child in node.children)
                return Link(href=str(node.attrs.get("href", "")), children=children, title=_optional(node.attrs.get("title")))
            case "image":
                return Image(src=str(node.attrs.get("src", "")), alt=node.content, title=_optional(node.attrs.get("title")))
            case "softbreak":
                return Break()
            case "hardbreak":
                return Break(hard=True)
            case _:
                return Text(node.content)


def _strip_final_newline(text: str) -> str:
    return text[:-1] if text.endswith("\n") else text


def _optional(value: str | int | float | None) -> str | None:
    return None if value is None else str(value)
