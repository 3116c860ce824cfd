"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


SITE_PANEL = "Site"
OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"

SiteRootOption = Annotated[
    Path | None,
    typer.Option(
        "--site-root",
        "-s",
        help="Root of the generated site; defaults to the configuration or EMBEDSMITH_SITE_ROOT.",
        file_okay=False,
        dir_okay=True,
        rich_help_panel=SITE_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML file holding the embedding configuration.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        rich_help_panel=SITE_PANEL,
    ),
]

DocumentOption = Annotated[
    str | None,
    typer.Option(
        "--document",
        "-d",
        help="Site-relative path of the document, used by './' references.",
        rich_help_panel=SITE_PANEL,
    ),
]

OutputPathOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Write the rendered fragment to this file instead of stdout.",
        dir_okay=False,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

NoMarkdownOption = Annotated[
    bool,
    typer.Option(
        "--no-markdown",
        help="Only expand commands; leave the remaining markup untouched.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

HighlightOption = Annotated[
    bool | None,
    typer.Option(
        "--highlight/--no-highlight",
        help="Highlight code blocks with Pygments.",
        show_default=False,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
