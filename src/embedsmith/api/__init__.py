"""Public entry points for embedding references in documents."""

from .session import EmbedSession, build_engine


__all__ = ["EmbedSession", "build_engine"]
