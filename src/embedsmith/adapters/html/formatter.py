"""Render HTML fragments (code blocks, images, tables, errors) from partials."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, Template, select_autoescape

from .pygments import PygmentsHtmlHighlighter


TEMPLATE_DIR = Path(__file__).resolve().parent / "partials"


class HtmlFormatter:
    """Render HTML partials with Jinja2, escaping every interpolated value."""

    def __init__(
        self,
        template_dir: Path = TEMPLATE_DIR,
        *,
        highlight: bool = False,
        plaintext_language: str = "plaintext",
        style: str = "default",
    ) -> None:
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html"], default_for_string=True),
            keep_trailing_newline=False,
        )
        self._template_names = {
            path.stem: path.name for path in sorted(template_dir.glob("*.html"))
        }
        self.templates: dict[str, Template] = {}
        self.highlight = highlight
        self.plaintext_language = plaintext_language
        self._pygments = PygmentsHtmlHighlighter(style=style) if highlight else None

    def _get_template(self, key: str) -> Template:
        """Return a cached template instance loading it on demand."""
        template = self.templates.get(key)
        if template is not None:
            return template
        template_name = self._template_names.get(key)
        if template_name is None:
            raise KeyError(key)
        template = self.env.get_template(template_name)
        self.templates[key] = template
        return template

    def codeblock(self, code: str, language: str = "") -> str:
        """Render a source block; the plaintext language yields a plain block."""
        language = (language or "").strip().lower()
        if language == self.plaintext_language:
            language = ""
        if self._pygments is not None:
            return self._get_template("codeblock_pygments").render(
                code=self._pygments.render(code, language),
                language=language,
            )
        return self._get_template("codeblock").render(code=code, language=language)

    def image(self, src: str, alt: str = "") -> str:
        return self._get_template("image").render(src=src, alt=alt)

    def table(self, rows: Sequence[Sequence[str]], header: Sequence[str] = ()) -> str:
        """Render rows as an HTML table with an optional header row."""
        return self._get_template("table").render(
            header=list(header),
            rows=[list(row) for row in rows],
        )

    def error(self, message: str) -> str:
        """Render the inline notice shown in place of an unresolved command."""
        return self._get_template("error").render(message=message)


__all__ = ["TEMPLATE_DIR", "HtmlFormatter"]
