"""Explicit success/failure values passed between embedding stages."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from .exceptions import EmbedError


T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome wrapping a value."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def map(self, func: Callable[[T], U]) -> Ok[U]:
        return Ok(func(self.value))

    def then(self, func: Callable[[T], Result[U]]) -> Result[U]:
        return func(self.value)

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err:
    """Failed outcome carrying the error that would otherwise be raised."""

    error: EmbedError

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return str(self.error)

    def map(self, func: Callable[[object], object]) -> Err:
        return self

    def then(self, func: Callable[[object], object]) -> Err:
        return self

    def unwrap(self) -> object:
        raise self.error


Result = Ok[T] | Err


def capture(func: Callable[[], T], *, reference: str | None = None) -> Result[T]:
    """Run ``func`` and turn an :class:`EmbedError` into an :class:`Err`."""
    try:
        return Ok(func())
    except EmbedError as exc:
        if exc.reference is None:
            exc.reference = reference
        return Err(exc)


__all__ = ["Err", "Ok", "Result", "capture"]
