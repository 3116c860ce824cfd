"""Per-invocation CLI state: verbosity, consoles and the render summary."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import TYPE_CHECKING

import click

from embedsmith.core.exceptions import EmbedError, exception_hint


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "RenderSummary",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]


@dataclass(slots=True)
class RenderSummary:
    """What the engine reported while a document was rendered."""

    artifacts: list[str] = field(default_factory=list)
    literate: dict[str, bool] = field(default_factory=dict)
    reevaluation: list[str] = field(default_factory=list)
    unresolved: int = 0

    def describe(self) -> str:
        changed = sum(1 for flag in self.literate.values() if flag)
        parts = [
            f"{len(self.artifacts)} plot(s) embedded",
            f"{len(self.literate)} literate script(s) converted ({changed} changed)",
            f"{self.unresolved} unresolved command(s)",
        ]
        return ", ".join(parts)


@dataclass(slots=True)
class CLIState:
    """Options shared by the commands of one CLI invocation."""

    verbosity: int = 0
    show_tracebacks: bool = False
    summary: RenderSummary = field(default_factory=RenderSummary)
    _console: Console | None = field(default=None, init=False, repr=False)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        """Return a stdout console bound to the current ``sys.stdout``."""
        from rich.console import Console

        if self._console is None or self._console.file is not sys.stdout:
            self._console = Console(file=sys.stdout)
        return self._console

    @property
    def err_console(self) -> Console:
        """Return a stderr console bound to the current ``sys.stderr``."""
        from rich.console import Console

        if self._err_console is None or self._err_console.file is not sys.stderr:
            self._err_console = Console(file=sys.stderr, highlight=False)
        return self._err_console


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("embedsmith_cli_state", default=None)


def get_cli_state(*, create: bool = True) -> CLIState:
    """Return the state of the running command.

    The state lives on the click context object while a command runs and is
    mirrored in a context variable so ``main()`` can still reach it once the
    click context has been torn down.
    """
    ctx = click.get_current_context(silent=True)
    if ctx is not None:
        state = ctx.find_object(CLIState)
        if state is None and create:
            state = ctx.ensure_object(CLIState)
        if state is not None:
            _STATE_VAR.set(state)
            return state

    state = _STATE_VAR.get()
    if state is None:
        if not create:
            raise RuntimeError("CLI state is not initialised for this context.")
        state = CLIState()
        _STATE_VAR.set(state)
    return state


def set_cli_state(*, verbosity: int = 0, debug: bool = False) -> CLIState:
    """Start a fresh state for the running command."""
    state = CLIState(verbosity=max(0, verbosity), show_tracebacks=debug)
    ctx = click.get_current_context(silent=True)
    if ctx is not None:
        ctx.obj = state
    _STATE_VAR.set(state)
    return state


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Print a message on stderr; ``info`` messages need ``-v``."""
    state = get_cli_state()

    if level == "info":
        if state.verbosity >= 1:
            state.err_console.log(message)
        return

    from rich.text import Text

    style = "red" if level == "error" else "yellow"
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))

    if exception is not None and state.verbosity >= 1:
        details: list[str] = []
        reference = exception.reference if isinstance(exception, EmbedError) else None
        if reference and reference not in message:
            details.append(f"reference: {reference}")
        hint = exception_hint(exception)
        if hint and hint not in message:
            details.append(f"cause: {hint}")
        if state.verbosity >= 2:
            details.append(f"type: {type(exception).__name__}")
        if details:
            text.append("\n  " + "\n  ".join(details), style=style)

    state.err_console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether full tracebacks should be displayed."""
    try:
        return get_cli_state(create=False).show_tracebacks
    except RuntimeError:
        return False
