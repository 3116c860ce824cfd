"""Converter registry exposing the tabular and literate conversions."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from embedsmith.core.exceptions import ConversionError

from .base import ConverterStrategy, LiterateResult
from .literate import LiterateStrategy, literate_to_markdown
from .tables import TableStrategy


class ConverterRegistry:
    """Registry storing converter strategies."""

    def __init__(self) -> None:
        self._strategies: dict[str, ConverterStrategy] = {}

    def register(self, name: str, strategy: ConverterStrategy) -> None:
        """Register a converter strategy under a unique name."""
        self._strategies[name] = strategy

    def get(self, name: str) -> ConverterStrategy:
        """Return a registered converter strategy or raise a conversion error."""
        try:
            return self._strategies[name]
        except KeyError as exc:
            raise ConversionError(f"No converter registered for '{name}'") from exc

    def is_registered(self, name: str) -> bool:
        """Return True when a converter has been registered under the given name."""
        return name in self._strategies

    def convert(self, name: str, source: Path | str, **options: Any) -> Any:
        """Execute a converter strategy with the provided arguments."""
        strategy = self.get(name)
        return strategy(source, **options)

    def copy(self) -> ConverterRegistry:
        """Return an independent registry holding the same strategies."""
        clone = ConverterRegistry()
        clone._strategies.update(self._strategies)
        return clone


registry = ConverterRegistry()

# Built-in strategies
registry.register("table", TableStrategy())
registry.register("literate", LiterateStrategy())


def has_converter(name: str) -> bool:
    """Return True when a converter strategy is currently registered."""
    return registry.is_registered(name)


__all__ = [
    "ConverterRegistry",
    "ConverterStrategy",
    "LiterateResult",
    "LiterateStrategy",
    "TableStrategy",
    "has_converter",
    "literate_to_markdown",
    "registry",
]
