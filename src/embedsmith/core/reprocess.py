"""Feed freshly embedded text back through the document processor."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .commands import MacroDefinition
    from .context import EmbedContext


@runtime_checkable
class Reprocessor(Protocol):
    """Callback expanding the commands found in a block of embedded text.

    Implementations only process ``text``; the command that produced it is
    never resolved again. ``strip=False`` keeps leading and trailing
    whitespace, which literate content relies on.
    """

    def __call__(
        self,
        text: str,
        definitions: Mapping[str, MacroDefinition],
        *,
        strip: bool = True,
    ) -> str: ...


def reprocess(text: str, context: EmbedContext, *, strip: bool = True) -> str:
    """Hand ``text`` to the session reprocessor with the known macro definitions."""
    return context.reprocessor(text, context.definitions, strip=strip)


__all__ = ["Reprocessor", "reprocess"]
