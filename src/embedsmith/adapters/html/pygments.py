"""Pygments integration helpers for HTML rendering."""

from __future__ import annotations

from pygments import highlight
from pygments.formatters import HtmlFormatter as PygmentsHtmlFormatter
from pygments.lexers import ClassNotFound, TextLexer, get_lexer_by_name


class PygmentsHtmlHighlighter:
    """Convert source code to highlighted HTML using Pygments."""

    def __init__(self, *, style: str = "default", cssclass: str = "highlight") -> None:
        self.style = style
        self.cssclass = cssclass

    def render(self, code: str, language: str) -> str:
        """Return the highlighted markup for ``code``."""
        try:
            lexer = get_lexer_by_name(language or "text")
        except ClassNotFound:
            lexer = TextLexer()
        formatter = PygmentsHtmlFormatter(
            style=self.style,
            cssclass=self.cssclass,
            wrapcode=True,
        )
        return highlight(code, lexer, formatter).rstrip("\n")
