"""Pygments-backed code highlighting."""

from __future__ import annotations

from markupsafe import Markup
from pygments import highlight as _pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from mdpage.errors import HighlightError


class CodeHighlighter:
    """Colorize code blocks as HTML.

    Raises ``pygments.util.ClassNotFound`` at construction if ``style`` is
    not a Pygments style.
    """

    def __init__(self, style: str = "dracula", css_class: str = "highlight") -> None:
        self.style = style
        self.css_class = css_class
        self._formatter = HtmlFormatter(style=style, cssclass=css_class)

    def highlight(self, code: str, language: str) -> Markup | None:
        """Return highlighted HTML, or ``None`` for an unknown language."""

        try:
            lexer = get_lexer_by_name(language.lower())
        except ClassNotFound:
            return None
        except Exception as exc:
            raise HighlightError(language) from exc

        try:
            return Markup(_pygments_highlight(code, lexer, self._formatter))
        except Exception as exc:
            raise HighlightError(language) from exc

    def stylesheet(self) -> str:
        return self._formatter.get_style_defs(f".{self.css_class}")
