"""Map document nodes to HTML widgets."""

from __future__ import annotations

from collections.abc import Iterable

from markupsafe import Markup

from mdpage.errors import HighlightError
from mdpage.highlight import CodeHighlighter
from mdpage.logging import get_logger
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
    TocEntry,
)

logger = get_logger(__name__)


class WidgetMapper:
    """Render a block tree to HTML, one widget per node."""

    def __init__(self, highlighter: CodeHighlighter, permalinks: bool = True) -> None:
        self.highlighter = highlighter
        self.permalinks = permalinks

    def render(self, blocks: Iterable[Block]) -> Markup:
        return Markup("\n").join(self.block(b) for b in blocks)

    def block(self, block: Block) -> Markup:
        match block:
            case Heading():
                return self._heading(block)
            case Paragraph(children=children, tight=tight):
                body = self.inline(children)
                return body if tight else Markup("<p>{}</p>").format(body)
            case List():
                return self._list(block)
            case ListItem(children=children):
                return Markup("<li>{}</li>").format(self.render(children))
            case CodeBlock():
                return self._code(block)
            case BlockQuote(children=children):
                return Markup("<blockquote>\n{}\n</blockquote>").format(self.render(children))
            case ThematicBreak():
                return Markup("<hr />")
            case TableOfContents(entries=entries):
                return Markup('<nav class="toc">{}</nav>').format(self._toc_list(entries))
            case _:
                raise TypeError(f"unsupported block node: {block!r}")

    def inline(self, nodes: Iterable[Inline]) -> Markup:
        return Markup("").join(self._inline(n) for n in nodes)

    def _inline(self, node: Inline) -> Markup:
        match node:
            case Text(text=text):
                return Markup.escape(text)
            case CodeSpan(literal=literal):
                return Markup("<code>{}</code>").format(literal)
            case Emphasis(children=children, strong=strong):
                tag = "strong" if strong else "em"
                return Markup("<{0}>{1}</{0}>").format(Markup(tag), self.inline(children))
            case Link(href=href, children=children, title=title):
                if title:
                    return Markup('<a href="{}" title="{}">{}</a>').format(href, title, self.inline(children))
                return Markup('<a href="{}">{}</a>').format(href, self.inline(children))
            case Image(src=src, alt=alt, title=title):
                if title:
                    return Markup('<img src="{}" alt="{}" title="{}" />').format(src, alt, title)
                return Markup('<img src="{}" alt="{}" />').format(src, alt)
            case Break(hard=hard):
                return Markup("<br />\n") if hard else Markup("\n")
            case _:
                raise TypeError(f"unsupported inline node: {node!r}")

    def _heading(self, heading: Heading) -> Markup:
        tag = Markup(f"h{heading.level}")
        body = self.inline(heading.children)
        if heading.slug is None:
            return Markup("<{0}>{1}</{0}>").format(tag, body)
        if self.permalinks:
            body += Markup('<a class="headerlink" href="#{}" title="Permanent link">&para;</a>').format(heading.slug)
        return Markup('<{0} id="{1}">{2}</{0}>').format(tag, heading.slug, body)

    def _list(self, node: List) -> Markup:
        items = Markup("\n").join(self.block(item) for item in node.items)
        if not node.ordered:
            return Markup("<ul>\n{}\n</ul>").format(items)
        if node.start != 1:
            return Markup('<ol start="{}">\n{}\n</ol>').format(node.start, items)
        return Markup("<ol>\n{}\n</ol>").format(items)

    def _code(self, node: CodeBlock) -> Markup:
        if node.language:
            try:
                highlighted = self.highlighter.highlight(node.literal, node.language)
            except HighlightError as exc:
                logger.warning("%s; rendering block as plain text", exc, exc_info=exc.__cause__)
                highlighted = None
            if highlighted is not None:
                return highlighted
            return Markup('<pre><code class="language-{}">{}</code></pre>').format(node.language, node.literal)
        return Markup("<pre><code>{}</code></pre>").format(node.literal)

    def _toc_list(self, entries: tuple[TocEntry, ...]) -> Markup:
        items = Markup("").join(self._toc_entry(entry) for entry in entries)
        return Markup("<ul>{}</ul>").format(items)

    def _toc_entry(self, entry: TocEntry) -> Markup:
        nested = self._toc_list(entry.children) if entry.children else Markup("")
        if entry.slug is None:
            return Markup("<li>{}</li>").format(nested)
        return Markup('<li><a href="#{}">{}</a>{}</li>').format(entry.slug, entry.text, nested)
