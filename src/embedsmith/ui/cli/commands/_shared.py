"""Helpers shared by CLI commands."""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError
import typer

from embedsmith.core.config import EmbedConfig, load_config

from ..state import emit_error


def build_config(
    site_root: Path | None,
    config_path: Path | None,
    *,
    highlight: bool | None = None,
) -> EmbedConfig:
    """Load the configuration or exit with a readable message."""
    try:
        return load_config(config_path, site_root=site_root, highlight=highlight)
    except ValidationError as exc:
        missing = any(error.get("loc") == ("site_root",) for error in exc.errors())
        if missing:
            emit_error(
                "No site root given; use --site-root, a configuration file "
                "or EMBEDSMITH_SITE_ROOT."
            )
        else:
            emit_error("Invalid configuration.", exception=exc)
        raise typer.Exit(code=1) from exc
    except (OSError, ValueError) as exc:
        emit_error(f"Unable to load configuration: {exc}", exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["build_config"]
