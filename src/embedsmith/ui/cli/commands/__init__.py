"""CLI command implementations."""

from .render import render
from .resolve import resolve


__all__ = ["render", "resolve"]
