"""Exception hierarchy for reference resolution and embedding failures."""

from __future__ import annotations


class EmbedError(RuntimeError):
    """Base exception for failures turned into inline error fragments."""

    def __init__(self, message: str, *, reference: str | None = None) -> None:
        super().__init__(message)
        self.reference = reference


class ReferenceNotFoundError(EmbedError):
    """Raised when a referenced script, output, result or asset is absent."""


class MissingOutputDirectoryError(EmbedError):
    """Raised when the output directory associated with a script does not exist."""


class NoMatchingArtifactError(EmbedError):
    """Raised when an output directory holds no file matching the name and extensions."""


class ReadFailureError(EmbedError):
    """Raised when a resolved file cannot be read."""


class ConversionError(EmbedError):
    """Raised when an external converter fails to produce its output."""


class CommandError(ValueError):
    """Raised when a command invocation does not match its declaration."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "CommandError",
    "ConversionError",
    "EmbedError",
    "MissingOutputDirectoryError",
    "NoMatchingArtifactError",
    "ReadFailureError",
    "ReferenceNotFoundError",
    "exception_hint",
    "exception_messages",
]
