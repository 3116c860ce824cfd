"""Python-Markdown integration for embedding commands."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from markdown import Markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor


if TYPE_CHECKING:  # pragma: no cover - typing only
    from embedsmith.api.session import EmbedSession
    from embedsmith.core.commands import CommandEngine, MacroDefinition
    from embedsmith.core.context import EmbedContext


DEFAULT_MARKDOWN_EXTENSIONS = [
    "attr_list",
    "fenced_code",
    "tables",
]


class _EmbedPreprocessor(Preprocessor):
    """Expand commands before block parsing and stash the produced fragments."""

    def __init__(
        self,
        md: Markdown,
        engine: CommandEngine,
        context: EmbedContext,
        source: str | None = None,
    ) -> None:
        super().__init__(md)
        self.engine = engine
        self.context = context
        self.source = source

    def _stash(self, fragment: str) -> str:
        return self.md.htmlStash.store(fragment)

    def run(self, lines: list[str]) -> list[str]:
        text = "\n".join(lines)
        expanded = self.engine.expand(text, self.context, source=self.source, wrap=self._stash)
        return expanded.split("\n")


class EmbedExtension(Extension):
    """Register the command preprocessor bound to an engine and a context."""

    def __init__(
        self,
        *,
        engine: CommandEngine,
        context: EmbedContext,
        source: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.engine = engine
        self.context = context
        self.source = source
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        md.preprocessors.register(
            _EmbedPreprocessor(md, self.engine, self.context, self.source),
            "embedsmith_commands",
            priority=25,
        )


class MarkdownReprocessor:
    """Reprocess embedded text by rendering it again through the session."""

    def __init__(self, session: EmbedSession, *, document: str | None = None) -> None:
        self.session = session
        self.document = document

    def __call__(
        self,
        text: str,
        definitions: Mapping[str, MacroDefinition],
        *,
        strip: bool = True,
    ) -> str:
        html = self.session.render(text, document=self.document, definitions=definitions)
        return html.strip() if strip else html


class ExpandingReprocessor:
    """Reprocess embedded text by expanding its commands without Markdown."""

    def __init__(self, session: EmbedSession, *, document: str | None = None) -> None:
        self.session = session
        self.document = document

    def __call__(
        self,
        text: str,
        definitions: Mapping[str, MacroDefinition],
        *,
        strip: bool = True,
    ) -> str:
        expanded = self.session.expand(text, document=self.document, definitions=definitions)
        return expanded.strip() if strip else expanded


__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "EmbedExtension",
    "ExpandingReprocessor",
    "MarkdownReprocessor",
]
