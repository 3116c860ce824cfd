"""HTML rendering adapters."""

from .formatter import TEMPLATE_DIR, HtmlFormatter
from .pygments import PygmentsHtmlHighlighter


__all__ = ["TEMPLATE_DIR", "HtmlFormatter", "PygmentsHtmlHighlighter"]
