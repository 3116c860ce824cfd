"""Processing sessions tying configuration, state and handlers together."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
import os
from pathlib import Path

from markdown import Markdown

from embedsmith.adapters.handlers import embed as embed_handlers
from embedsmith.adapters.html import HtmlFormatter
from embedsmith.adapters.markdown import (
    DEFAULT_MARKDOWN_EXTENSIONS,
    EmbedExtension,
    ExpandingReprocessor,
    MarkdownReprocessor,
)
from embedsmith.adapters.transformers import ConverterRegistry, registry as default_converters
from embedsmith.core.commands import CommandEngine, MacroDefinition, extract_definitions
from embedsmith.core.config import EmbedConfig
from embedsmith.core.context import EmbedContext, EvaluationState
from embedsmith.core.diagnostics import DiagnosticEmitter, LoggingEmitter


logger = logging.getLogger(__name__)


def build_engine() -> CommandEngine:
    """Return an engine with every built-in command registered."""
    engine = CommandEngine()
    engine.collect_from(embed_handlers)
    return engine


class EmbedSession:
    """Render documents whose insertion commands are resolved against one site.

    A session owns the evaluation state shared by every document it renders,
    so that a literate script changing during a full pass is reported once
    through :attr:`state` regardless of which document embedded it.
    """

    def __init__(
        self,
        config: EmbedConfig,
        *,
        emitter: DiagnosticEmitter | None = None,
        formatter: HtmlFormatter | None = None,
        converters: ConverterRegistry | None = None,
        engine: CommandEngine | None = None,
        state: EvaluationState | None = None,
        markdown: bool = True,
        markdown_extensions: Iterable[str] | None = None,
    ) -> None:
        self.config = config
        self.emitter = emitter or LoggingEmitter()
        self.formatter = formatter or HtmlFormatter(
            highlight=config.highlight,
            plaintext_language=config.plaintext_language,
        )
        self.converters = converters or default_converters.copy()
        self.engine = engine or build_engine()
        self.state = state or EvaluationState(full_pass=config.full_pass)
        self.markdown = markdown
        self.markdown_extensions = list(
            DEFAULT_MARKDOWN_EXTENSIONS if markdown_extensions is None else markdown_extensions
        )
        self.definitions: dict[str, MacroDefinition] = {}

    def define(self, name: str, body: str, nargs: int = 0) -> MacroDefinition:
        """Register a macro available to every document of the session."""
        definition = MacroDefinition(name=name, nargs=nargs, body=body)
        self.definitions[name] = definition
        return definition

    def context(
        self,
        *,
        document: str | None = None,
        definitions: Mapping[str, MacroDefinition] | None = None,
    ) -> EmbedContext:
        """Build the context handed to command handlers for a document."""
        reprocessor_cls = MarkdownReprocessor if self.markdown else ExpandingReprocessor
        merged = dict(self.definitions)
        merged.update(definitions or {})
        return EmbedContext(
            config=self.config,
            formatter=self.formatter,
            converters=self.converters,
            reprocessor=reprocessor_cls(self, document=document),
            state=self.state,
            emitter=self.emitter,
            document=document,
            definitions=merged,
        )

    def expand(
        self,
        text: str,
        *,
        document: str | None = None,
        definitions: Mapping[str, MacroDefinition] | None = None,
    ) -> str:
        """Replace the commands in ``text`` with fragments, leaving other markup alone."""
        body, declared = extract_definitions(text)
        context = self.context(document=document, definitions={**(definitions or {}), **declared})
        return self.engine.expand(body, context, source=document)

    def render(
        self,
        text: str,
        *,
        document: str | None = None,
        definitions: Mapping[str, MacroDefinition] | None = None,
    ) -> str:
        """Expand the commands in ``text`` and convert the result to HTML."""
        if not self.markdown:
            return self.expand(text, document=document, definitions=definitions)
        body, declared = extract_definitions(text)
        context = self.context(document=document, definitions={**(definitions or {}), **declared})
        processor = Markdown(
            extensions=[
                *self.markdown_extensions,
                EmbedExtension(engine=self.engine, context=context, source=document),
            ]
        )
        return processor.convert(body)

    def document_name(self, path: Path | str) -> str:
        """Return the site-relative name of a page, or its file name outside the site."""
        source = Path(os.path.normpath(Path(path).absolute()))
        try:
            return source.relative_to(self.config.site_root).as_posix()
        except ValueError:
            return source.name

    def render_file(self, path: Path | str, *, document: str | None = None) -> str:
        """Render a Markdown file; ``document`` defaults to :meth:`document_name`."""
        source = Path(path)
        logger.debug("Rendering %s", source)
        text = source.read_text(encoding=self.config.encoding)
        return self.render(text, document=document or self.document_name(source))


__all__ = ["EmbedSession", "build_engine"]
