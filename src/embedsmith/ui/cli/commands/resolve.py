"""Implementation of the ``embedsmith resolve`` command."""

from __future__ import annotations

from typing import Annotated

import typer

from embedsmith.core.exceptions import EmbedError
from embedsmith.core.paths import code_paths, resolve_reference
from embedsmith.core.results import Ok

from .._options import ConfigOption, DebugOption, DocumentOption, SiteRootOption, VerboseOption
from ..state import emit_error, get_cli_state, set_cli_state
from ._shared import build_config


def resolve(
    reference: Annotated[
        str,
        typer.Argument(metavar="REFERENCE", help="Virtual path as written in a command."),
    ],
    site_root: SiteRootOption = None,
    config_path: ConfigOption = None,
    document: DocumentOption = None,
    language: Annotated[
        str | None,
        typer.Option("--language", "-l", help="Language hint used to guess the extension."),
    ] = None,
    code: Annotated[
        bool,
        typer.Option("--code", help="Also look into the 'output' directory beside the file."),
    ] = False,
    paths: Annotated[
        bool,
        typer.Option("--paths", help="Show the script, output and result paths instead."),
    ] = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Show where a reference points to on disk."""
    set_cli_state(verbosity=verbose, debug=debug)
    config = build_config(site_root, config_path)

    if paths:
        from rich.table import Table

        try:
            bundle = code_paths(reference, config, document=document)
        except EmbedError as exc:
            emit_error(str(exc), exception=exc)
            raise typer.Exit(code=1) from exc
        table = Table(show_header=True, header_style="bold")
        table.add_column("Role")
        table.add_column("Path")
        table.add_column("Exists")
        for role, path in (
            ("script", bundle.script_path),
            ("output dir", bundle.out_dir),
            ("output", bundle.out_path),
            ("result", bundle.res_path),
        ):
            table.add_row(role, str(path), "yes" if path.exists() else "no")
        get_cli_state().console.print(table)
        return

    result = resolve_reference(
        reference, config, language=language, document=document, code=code
    )
    if not isinstance(result, Ok):
        emit_error(result.message, exception=result.error)
        raise typer.Exit(code=1)
    typer.echo(f"{result.value.path}\t{result.value.site_path}")


__all__ = ["resolve"]
