"""Command handlers exposed to the embedding engine."""

from . import embed


__all__ = ["embed"]
