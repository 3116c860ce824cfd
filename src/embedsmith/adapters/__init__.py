"""Adapters binding the core engine to HTML, Markdown and file converters."""
