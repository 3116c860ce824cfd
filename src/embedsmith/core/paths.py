"""Reference path resolution.

Authors name scripts and resources with virtual, Unix-style paths that do not
reliably carry an extension. Three anchoring forms are understood:

`/a/b`
: anchored at the site root.

`./a/b`
: relative to the assets folder mirroring the current document, so that
  `./ex1` referenced from `blog/post.md` points to `<assets>/blog/post/ex1`
  (`<assets>/blog/post/code/ex1` in code mode).

`a/b`
: anchored at the assets root.

Resolution is a pure path computation plus existence checks. Ambiguity is
settled by a fixed fallback order, never by an error.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import logging
import os
from pathlib import Path, PurePosixPath

from .config import EmbedConfig
from .exceptions import ReferenceNotFoundError
from .results import Err, Ok, Result


logger = logging.getLogger(__name__)


LANGUAGE_EXTENSIONS: dict[str, str] = {
    "ada": ".ada",
    "bash": ".sh",
    "c": ".c",
    "c++": ".cpp",
    "cpp": ".cpp",
    "css": ".css",
    "fortran": ".f90",
    "go": ".go",
    "haskell": ".hs",
    "html": ".html",
    "java": ".java",
    "javascript": ".js",
    "js": ".js",
    "json": ".json",
    "julia": ".jl",
    "julia-repl": ".jl",
    "kotlin": ".kt",
    "latex": ".tex",
    "lua": ".lua",
    "markdown": ".md",
    "matlab": ".m",
    "ocaml": ".ml",
    "perl": ".pl",
    "php": ".php",
    "python": ".py",
    "r": ".r",
    "ruby": ".rb",
    "rust": ".rs",
    "scala": ".scala",
    "shell": ".sh",
    "sql": ".sql",
    "swift": ".swift",
    "tex": ".tex",
    "toml": ".toml",
    "typescript": ".ts",
    "yaml": ".yml",
}


@dataclass(frozen=True, slots=True)
class ResolvedReference:
    """Concrete file found for a virtual reference."""

    reference: str
    path: Path
    site_path: str

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def extension(self) -> str:
        return self.path.suffix


@dataclass(frozen=True, slots=True)
class CodePaths:
    """Real paths associated with a script reference."""

    script_dir: Path
    script_path: Path
    script_name: str
    stem: str
    out_dir: Path
    out_path: Path
    res_path: Path


def normalise_reference(reference: str) -> str:
    """Return the reference in forward-slash form without surrounding blanks."""
    return reference.strip().replace("\\", "/")


def language_extension(language: str | None, config: EmbedConfig) -> str | None:
    """Return the file extension implied by a language name, if any."""
    if not language:
        return None
    key = language.strip().lower()
    return config.language_extensions.get(key) or LANGUAGE_EXTENSIONS.get(key)


def site_path(path: Path, config: EmbedConfig) -> str:
    """Express ``path`` relative to the site root in forward-slash form."""
    absolute = Path(os.path.normpath(path.absolute()))
    try:
        relative = absolute.relative_to(config.site_root)
    except ValueError:
        relative = Path(os.path.relpath(absolute, config.site_root))
    return "/" + relative.as_posix()


def system_path(site_relative: str, config: EmbedConfig) -> Path:
    """Map a site-relative path back onto the filesystem."""
    parts = [part for part in site_relative.split("/") if part]
    return config.site_root.joinpath(*parts)


def _unnamed(reference: str) -> ReferenceNotFoundError:
    return ReferenceNotFoundError(
        f"The reference '{reference}' does not name a file.", reference=reference
    )


def reference_location(
    reference: str,
    config: EmbedConfig,
    *,
    document: str | None = None,
    code: bool = False,
) -> Path:
    """Compute the real location a reference points to, without checking it exists."""
    rpath = normalise_reference(reference)
    if rpath.startswith("/"):
        base = config.site_root
        remainder = rpath[1:]
    elif rpath.startswith("./"):
        if not document:
            raise ReferenceNotFoundError(
                f"The reference '{reference}' is relative to the current document "
                "but no document is being processed.",
                reference=reference,
            )
        document_dir = PurePosixPath(normalise_reference(document).lstrip("/")).with_suffix("")
        base = config.assets_root.joinpath(*document_dir.parts)
        if code:
            base = base / config.code_dirname
        remainder = rpath[2:]
    else:
        base = config.assets_root
        remainder = rpath
    parts = [part for part in remainder.split("/") if part]
    return Path(os.path.normpath(base.joinpath(*parts)))


def parse_reference(
    reference: str,
    config: EmbedConfig,
    *,
    document: str | None = None,
    code: bool = False,
) -> str:
    """Return the site-relative form of a reference."""
    return site_path(reference_location(reference, config, document=document, code=code), config)


def _candidates(
    location: Path, extension: str | None, config: EmbedConfig, *, code: bool
) -> Iterator[Path]:
    primary = [location]
    if extension and not location.suffix:
        primary.append(location.with_name(location.name + extension))
    yield from primary
    if code and location.parent.name != config.output_dirname:
        for candidate in primary:
            yield candidate.parent / config.output_dirname / candidate.name


def resolve_reference(
    reference: str,
    config: EmbedConfig,
    *,
    language: str | None = None,
    document: str | None = None,
    code: bool = False,
) -> Result[ResolvedReference]:
    """Find the file a reference designates.

    The literal location is tried first, then the location with the extension
    implied by ``language`` when the reference has none. In code mode the same
    candidates are finally looked up inside the ``output`` directory beside
    the referenced file.
    """
    try:
        location = reference_location(reference, config, document=document, code=code)
    except ReferenceNotFoundError as exc:
        return Err(exc)
    if not location.name:
        return Err(_unnamed(reference))

    extension = language_extension(language, config)
    for candidate in _candidates(location, extension, config, code=code):
        if candidate.is_file():
            logger.debug("Resolved '%s' to %s", reference, candidate)
            return Ok(
                ResolvedReference(
                    reference=reference,
                    path=candidate,
                    site_path=site_path(candidate, config),
                )
            )

    return Err(
        ReferenceNotFoundError(
            "Couldn't find a file when trying to resolve an input request "
            f"with relative path: '{reference}'.",
            reference=reference,
        )
    )


def code_paths(
    reference: str,
    config: EmbedConfig,
    *,
    document: str | None = None,
) -> CodePaths:
    """Derive the script, output and result paths for a script reference."""
    script_path = reference_location(reference, config, document=document, code=True)
    if not script_path.name:
        raise _unnamed(reference)
    if not script_path.suffix:
        script_path = script_path.with_name(script_path.name + config.script_extension)
    script_dir = script_path.parent
    stem = script_path.stem
    out_dir = script_dir / config.output_dirname
    return CodePaths(
        script_dir=script_dir,
        script_path=script_path,
        script_name=script_path.name,
        stem=stem,
        out_dir=out_dir,
        out_path=out_dir / f"{stem}.out",
        res_path=out_dir / f"{stem}.res",
    )


__all__ = [
    "LANGUAGE_EXTENSIONS",
    "CodePaths",
    "ResolvedReference",
    "code_paths",
    "language_extension",
    "normalise_reference",
    "parse_reference",
    "reference_location",
    "resolve_reference",
    "site_path",
    "system_path",
]
