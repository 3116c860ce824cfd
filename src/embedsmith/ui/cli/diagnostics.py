"""Emitter feeding engine diagnostics into the CLI render summary."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from embedsmith.core.diagnostics import format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


class CliEmitter:
    """Print warnings on stderr and tally embedding events for the summary.

    Every warning raised by the engine stands for a command replaced by an
    inline error notice, so warnings are counted as unresolved commands.
    """

    def __init__(self, state: CLIState | None = None) -> None:
        self._state = state or get_cli_state()
        self.debug_enabled = self._state.show_tracebacks

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self._state.summary.unresolved += 1
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        summary = self._state.summary
        reference = str(payload.get("reference", ""))
        if name == "artifact_match":
            summary.artifacts.append(str(payload.get("path", "")))
        elif name == "literate_converted":
            summary.literate[reference] = bool(payload.get("changed"))
        elif name == "reevaluation_requested":
            summary.reevaluation.append(reference)

        message = format_event_message(name, payload)
        if message:
            render_message("info", message)


__all__ = ["CliEmitter"]
