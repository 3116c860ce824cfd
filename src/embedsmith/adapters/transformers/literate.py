"""Convert literate scripts into Markdown.

A literate script interleaves prose and code. Lines starting with ``# `` (or a
lone ``#``) hold Markdown prose, every other line is code. Consecutive code
lines are grouped into fenced blocks. The following markers are understood:

``# %%``, ``#-``, ``#+``
: close the current code block, so that two adjacent chunks stay separate.

``#md <line>``
: line meant for the Markdown output only; the prefix is dropped and the rest
  is processed as usual.

``#nb``, ``#py`` prefixes and a trailing ``#src``
: lines meant for other outputs, dropped here.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
from pathlib import Path, PurePosixPath
from typing import Any

from embedsmith.core.exceptions import ConversionError, ReadFailureError

from .base import LiterateResult


logger = logging.getLogger(__name__)

_SEPARATORS = ("# %%", "#-", "#+")
_DROPPED_PREFIXES = ("#nb", "#py")


def _flush_code(blocks: list[str], code: list[str], language: str) -> None:
    while code and not code[0].strip():
        code.pop(0)
    while code and not code[-1].strip():
        code.pop()
    if code:
        blocks.append(f"```{language}\n" + "\n".join(code) + "\n```")
    code.clear()


def _flush_prose(blocks: list[str], prose: list[str]) -> None:
    text = "\n".join(prose).strip("\n")
    if text:
        blocks.append(text)
    prose.clear()


def literate_to_markdown(lines: Iterable[str], *, language: str = "python") -> str:
    """Return the Markdown rendering of a literate script."""
    blocks: list[str] = []
    prose: list[str] = []
    code: list[str] = []

    for raw in lines:
        line = raw.rstrip("\r\n")
        stripped = line.rstrip()
        if stripped.endswith("#src"):
            continue
        if stripped.startswith(_DROPPED_PREFIXES):
            continue
        if stripped.startswith("#md"):
            line = line[3:].removeprefix(" ")
            stripped = line.rstrip()

        if stripped.startswith(_SEPARATORS):
            _flush_prose(blocks, prose)
            _flush_code(blocks, code, language)
            continue

        if stripped == "#" or line.startswith("# "):
            if code and any(part.strip() for part in code):
                _flush_code(blocks, code, language)
            code.clear()
            prose.append(line[2:] if line.startswith("# ") else "")
            continue

        if not stripped and not code:
            prose.append("")
            continue

        if prose:
            _flush_prose(blocks, prose)
        code.append(line)

    _flush_prose(blocks, prose)
    _flush_code(blocks, code, language)
    return "\n\n".join(blocks) + "\n"


class LiterateStrategy:
    """Convert a literate script found under ``literate_dir`` into Markdown."""

    def __init__(self, *, language: str = "python") -> None:
        self.language = language

    def __call__(
        self,
        source: Path | str,
        *,
        literate_dir: Path,
        output_dir: Path,
        extension: str = ".py",
        encoding: str = "utf-8",
        **_: Any,
    ) -> LiterateResult:
        reference = PurePosixPath(str(source).strip().replace("\\", "/").lstrip("/"))
        if not reference.name:
            return LiterateResult(path="")
        if not reference.suffix:
            reference = reference.with_name(reference.name + extension)
        script = literate_dir.joinpath(*reference.parts)
        if not script.is_file():
            logger.debug("Literate script %s not found", script)
            return LiterateResult(path="")

        try:
            content = script.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise ReadFailureError(f"Unable to read literate script '{reference}': {exc}") from exc

        target_dir = output_dir.joinpath(*reference.parent.parts)
        stem = reference.stem
        snapshot = target_dir / f"{stem}_script{reference.suffix}"
        markdown_path = target_dir / f"{stem}.md"
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            previous = snapshot.read_text(encoding=encoding) if snapshot.is_file() else None
            changed = previous != content
            if changed or not markdown_path.is_file():
                markdown_path.write_text(
                    literate_to_markdown(content.splitlines(), language=self.language),
                    encoding=encoding,
                )
                snapshot.write_text(content, encoding=encoding)
        except (OSError, UnicodeError) as exc:
            raise ConversionError(
                f"Unable to convert literate script '{reference}' into {target_dir}: {exc}"
            ) from exc
        return LiterateResult(path=str(markdown_path), changed=changed)


__all__ = ["LiterateStrategy", "literate_to_markdown"]
