"""Context objects threaded through every command handler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .config import EmbedConfig
from .diagnostics import DiagnosticEmitter, NullEmitter


if TYPE_CHECKING:  # pragma: no cover - typing only
    from embedsmith.adapters.html.formatter import HtmlFormatter
    from embedsmith.adapters.transformers import ConverterRegistry

    from .commands import MacroDefinition
    from .reprocess import Reprocessor


@dataclass(slots=True)
class EvaluationState:
    """Mutable state owned by a processing session."""

    full_pass: bool = True
    needs_reevaluation: bool = False
    reevaluation_sources: list[str] = field(default_factory=list)

    def request_reevaluation(self, reference: str) -> bool:
        """Flag the session for re-evaluation; only honoured during full passes."""
        if not self.full_pass:
            return False
        self.needs_reevaluation = True
        self.reevaluation_sources.append(reference)
        return True

    def reset(self) -> None:
        self.needs_reevaluation = False
        self.reevaluation_sources.clear()


@dataclass(slots=True)
class EmbedContext:
    """Everything a command handler needs to resolve and render a reference."""

    config: EmbedConfig
    formatter: HtmlFormatter
    converters: ConverterRegistry
    reprocessor: Reprocessor
    state: EvaluationState = field(default_factory=EvaluationState)
    emitter: DiagnosticEmitter = field(default_factory=NullEmitter)
    document: str | None = None
    definitions: dict[str, MacroDefinition] = field(default_factory=dict)


__all__ = ["EmbedContext", "EvaluationState"]
