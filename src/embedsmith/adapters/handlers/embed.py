"""Handlers embedding scripts, generated output, figures, tables and literate files.

Every strategy returns a :class:`~embedsmith.core.results.Result`. The command
handlers at the bottom of the module are the only place where an ``Err`` is
turned into an inline error fragment, so an unresolved reference never stops
the rest of the document from rendering.
"""

from __future__ import annotations

import logging
from pathlib import Path
import posixpath

from embedsmith.core.artifacts import FIGURE_EXTENSIONS, IMAGE_EXTENSIONS, locate_artifact
from embedsmith.core.commands import CommandInvocation, handles
from embedsmith.core.context import EmbedContext
from embedsmith.core.exceptions import EmbedError, ReadFailureError, ReferenceNotFoundError
from embedsmith.core.paths import code_paths, parse_reference, resolve_reference, system_path
from embedsmith.core.qualifiers import Language, Plot, parse_qualifier
from embedsmith.core.reprocess import reprocess
from embedsmith.core.results import Err, Ok, Result, capture


logger = logging.getLogger(__name__)


def read_text(path: Path, context: EmbedContext, *, reference: str) -> Result[str]:
    """Read a resolved file, turning I/O failures into an ``Err``."""
    try:
        return Ok(path.read_text(encoding=context.config.encoding))
    except (OSError, UnicodeDecodeError) as exc:
        return Err(
            ReadFailureError(f"Unable to read '{reference}': {exc}", reference=reference)
        )


def render_result(
    result: Result[str],
    context: EmbedContext,
    invocation: CommandInvocation | None = None,
) -> str:
    """Return the fragment of a successful result or an inline error notice."""
    if isinstance(result, Ok):
        return result.value
    where = f"{invocation.location}: " if invocation is not None else ""
    context.emitter.warning(f"{where}{result.message}", result.error)
    return context.formatter.error(result.message)


def append_result(output: str, result: str, sentinel: str = "nothing") -> str:
    """Append a result to an output, separated by a single newline when needed."""
    if result == sentinel:
        return output
    if output and not output.endswith("\n"):
        output += "\n"
    return output + result


# --------------------------------------------------------------------- strategies


def embed_code(reference: str, language: str, context: EmbedContext) -> Result[str]:
    """Insert the referenced script as a source block in ``language``."""
    return (
        resolve_reference(
            reference,
            context.config,
            language=language,
            document=context.document,
            code=True,
        )
        .then(lambda resolved: read_text(resolved.path, context, reference=reference))
        .map(lambda code: context.formatter.codeblock(code, language))
    )


def embed_plot(reference: str, plot_id: str, context: EmbedContext) -> Result[str]:
    """Insert the image generated by a script, selected by its optional id."""
    try:
        paths = code_paths(reference, context.config, document=context.document)
    except EmbedError as exc:
        return Err(exc)
    result = locate_artifact(
        paths.out_dir,
        paths.stem,
        plot_id,
        IMAGE_EXTENSIONS,
        config=context.config,
        reference=reference,
    )
    if isinstance(result, Ok):
        context.emitter.event(
            "artifact_match", {"reference": reference, "path": result.value.site_path}
        )
    return result.map(lambda match: context.formatter.image(match.site_path))


def embed_output(
    reference: str,
    context: EmbedContext,
    *,
    label: str | None = None,
    reprocess_output: bool = False,
    include_result: bool = False,
) -> Result[str]:
    """Insert the recorded output of a script.

    ``include_result`` appends the content of the result file unless it is the
    "nothing" sentinel; ``reprocess_output`` expands the output as markup
    instead of showing it verbatim. The two modes are exclusive.
    """
    if reprocess_output and include_result:
        raise ValueError("Output cannot be both reprocessed and shown with its result")

    label = label or reference
    try:
        paths = code_paths(reference, context.config, document=context.document)
    except EmbedError as exc:
        return Err(exc)

    if not paths.out_path.is_file():
        return Err(
            ReferenceNotFoundError(
                f"`{label}`: could not find the relevant output file.", reference=reference
            )
        )
    output = read_text(paths.out_path, context, reference=reference)
    if not isinstance(output, Ok):
        return output
    text = output.value

    if include_result:
        if not paths.res_path.is_file():
            return Err(
                ReferenceNotFoundError(
                    f"`{label}`: could not find the relevant result file.", reference=reference
                )
            )
        result = read_text(paths.res_path, context, reference=reference)
        if not isinstance(result, Ok):
            return result
        text = append_result(text, result.value, context.config.no_result_sentinel)

    if reprocess_output:
        return capture(lambda: reprocess(text, context), reference=reference)
    return Ok(context.formatter.codeblock(text))


def embed_text(reference: str, context: EmbedContext) -> Result[str]:
    """Insert the referenced file and expand the markup it contains."""
    return (
        resolve_reference(reference, context.config, document=context.document, code=True)
        .then(lambda resolved: read_text(resolved.path, context, reference=reference))
        .then(lambda text: capture(lambda: reprocess(text, context), reference=reference))
    )


def _output_sibling(stem_path: str, extension: str, context: EmbedContext) -> str | None:
    """Return ``<parent>/output/<name><ext>`` unless the parent already is ``output``."""
    parent, name = posixpath.split(stem_path)
    if posixpath.basename(parent) == context.config.output_dirname:
        return None
    return posixpath.join(parent, context.config.output_dirname, name + extension)


def embed_figure(alt: str, reference: str, context: EmbedContext) -> Result[str]:
    """Insert an image, guessing its extension and looking in ``output`` as a fallback."""
    try:
        path = parse_reference(reference, context.config, document=context.document, code=True)
    except EmbedError as exc:
        return Err(exc)

    stem_path, extension = posixpath.splitext(path)
    candidates = (extension,) if extension else FIGURE_EXTENSIONS

    for ext in candidates:
        candidate = stem_path + ext
        if system_path(candidate, context.config).is_file():
            return Ok(context.formatter.image(candidate, alt))

    for ext in candidates:
        candidate = _output_sibling(stem_path, ext, context)
        if candidate is None:
            break
        if system_path(candidate, context.config).is_file():
            return Ok(context.formatter.image(candidate, alt))

    return Err(ReferenceNotFoundError(f"Image matching '{path}' not found.", reference=reference))


def embed_table(header: str, reference: str, context: EmbedContext) -> Result[str]:
    """Insert a CSV table, looking in the ``output`` sibling when it is not found."""
    try:
        path = parse_reference(reference, context.config, document=context.document)
    except EmbedError as exc:
        return Err(exc)

    stem_path, extension = posixpath.splitext(path)
    candidates = [path]
    sibling = _output_sibling(stem_path, extension, context)
    if sibling is not None:
        candidates.append(sibling)

    for candidate in candidates:
        location = system_path(candidate, context.config)
        if location.is_file():
            return capture(
                lambda: context.converters.convert(
                    "table",
                    location,
                    header=header,
                    formatter=context.formatter,
                    encoding=context.config.encoding,
                ),
                reference=reference,
            )

    return Err(ReferenceNotFoundError(f"Table matching '{path}' not found.", reference=reference))


def embed_literate(reference: str, context: EmbedContext) -> Result[str]:
    """Convert a literate script to Markdown and expand it, keeping its layout."""
    config = context.config
    try:
        converted = context.converters.convert(
            "literate",
            reference,
            literate_dir=config.literate_dir,
            output_dir=config.literate_output_dir,
            extension=config.script_extension,
            encoding=config.encoding,
        )
    except EmbedError as exc:
        exc.reference = exc.reference or reference
        return Err(exc)

    if not converted.found:
        return Err(
            ReferenceNotFoundError(
                f"Literate file matching '{reference}' not found.", reference=reference
            )
        )

    context.emitter.event(
        "literate_converted", {"reference": reference, "changed": converted.changed}
    )
    if converted.changed and context.state.request_reevaluation(reference):
        context.emitter.event("reevaluation_requested", {"reference": reference})

    return read_text(Path(converted.path), context, reference=reference).then(
        lambda text: capture(lambda: reprocess(text, context, strip=False), reference=reference)
    )


def dispatch(qualifier: str, reference: str, context: EmbedContext) -> Result[str]:
    """Route ``\\insert`` to the plot or code strategy according to its qualifier."""
    parsed = parse_qualifier(qualifier)
    logger.debug("Dispatching '%s' as %r", reference, parsed)
    if isinstance(parsed, Plot):
        return embed_plot(reference, parsed.id, context)
    assert isinstance(parsed, Language)
    return embed_code(reference, parsed.name, context)


# ----------------------------------------------------------------------- commands


@handles("insert", arity=2)
def handle_insert(invocation: CommandInvocation, context: EmbedContext) -> str:
    """Insert a script as code (`{lang}`) or one of its plots (`{plot[:id]}`)."""
    return render_result(
        dispatch(invocation.argument(0), invocation.argument(1), context), context, invocation
    )


@handles("textinsert", arity=1)
def handle_textinsert(invocation: CommandInvocation, context: EmbedContext) -> str:
    """Insert a file and expand the markup it contains."""
    return render_result(embed_text(invocation.argument(0), context), context, invocation)


@handles("output", arity=1)
def handle_output(invocation: CommandInvocation, context: EmbedContext) -> str:
    """Insert the recorded output of a script as a plain block."""
    result = embed_output(invocation.argument(0), context, label=invocation.snippet)
    return render_result(result, context, invocation)


@handles("textoutput", arity=1)
def handle_textoutput(invocation: CommandInvocation, context: EmbedContext) -> str:
    """Insert the recorded output of a script and expand it as markup."""
    result = embed_output(
        invocation.argument(0), context, label=invocation.snippet, reprocess_output=True
    )
    return render_result(result, context, invocation)


@handles("show", arity=1)
def handle_show(invocation: CommandInvocation, context: EmbedContext) -> str:
    """Insert the recorded output of a script followed by its result."""
    result = embed_output(
        invocation.argument(0), context, label=invocation.snippet, include_result=True
    )
    return render_result(result, context, invocation)


@handles("figalt", arity=2)
def handle_figalt(invocation: CommandInvocation, context: EmbedContext) -> str:
    """Insert an image with an alternative text."""
    result = embed_figure(invocation.argument(0), invocation.argument(1), context)
    return render_result(result, context, invocation)


@handles("tableinput", arity=2)
def handle_tableinput(invocation: CommandInvocation, context: EmbedContext) -> str:
    """Insert a CSV file as a table with the given header."""
    result = embed_table(invocation.argument(0), invocation.argument(1), context)
    return render_result(result, context, invocation)


@handles("literate", arity=1)
def handle_literate(invocation: CommandInvocation, context: EmbedContext) -> str:
    """Insert a literate script converted to markup."""
    return render_result(embed_literate(invocation.argument(0), context), context, invocation)


__all__ = [
    "append_result",
    "dispatch",
    "embed_code",
    "embed_figure",
    "embed_literate",
    "embed_output",
    "embed_plot",
    "embed_table",
    "embed_text",
    "handle_figalt",
    "handle_insert",
    "handle_literate",
    "handle_output",
    "handle_show",
    "handle_tableinput",
    "handle_textinsert",
    "handle_textoutput",
    "read_text",
    "render_result",
]
