"""Implementation of the ``embedsmith render`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from embedsmith.api.session import EmbedSession

from .._options import (
    ConfigOption,
    DebugOption,
    DocumentOption,
    HighlightOption,
    NoMarkdownOption,
    OutputPathOption,
    SiteRootOption,
    VerboseOption,
)
from ..diagnostics import CliEmitter
from ..state import emit_error, emit_warning, set_cli_state
from ._shared import build_config


def render(
    document_path: Annotated[
        Path,
        typer.Argument(
            metavar="DOCUMENT",
            help="Markdown document containing insertion commands.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    site_root: SiteRootOption = None,
    config_path: ConfigOption = None,
    document: DocumentOption = None,
    output: OutputPathOption = None,
    no_markdown: NoMarkdownOption = False,
    highlight: HighlightOption = None,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Resolve the insertion commands of a document and print the result."""
    state = set_cli_state(verbosity=verbose, debug=debug)
    config = build_config(site_root, config_path, highlight=highlight)
    session = EmbedSession(
        config,
        emitter=CliEmitter(state),
        markdown=not no_markdown,
    )

    try:
        text = document_path.read_text(encoding=config.encoding)
    except (OSError, UnicodeDecodeError) as exc:
        emit_error(f"Unable to read '{document_path}': {exc}", exception=exc)
        raise typer.Exit(code=1) from exc

    rendered = session.render(text, document=document or session.document_name(document_path))

    summary = state.summary
    if summary.reevaluation:
        sources = ", ".join(summary.reevaluation)
        emit_warning(f"Re-evaluation requested by changed literate scripts: {sources}")
    if verbose:
        state.err_console.log(f"{document_path}: {summary.describe()}")

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(rendered, encoding=config.encoding)
        if verbose:
            state.err_console.log(f"Wrote {output}")
        return

    typer.echo(rendered)


__all__ = ["render"]
