"""Primitives shared by converter strategies."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol


class ConverterStrategy(Protocol):
    """Protocol implemented by concrete converter strategies."""

    def __call__(self, source: Path | str, **options: Any) -> Any: ...


@dataclass(frozen=True, slots=True)
class LiterateResult:
    """Outcome of a literate conversion.

    An empty ``path`` means the literate script could not be found.
    """

    path: str
    changed: bool = False

    @property
    def found(self) -> bool:
        return bool(self.path)


__all__ = ["ConverterStrategy", "LiterateResult"]
