"""Locate generated artifacts inside a script's output directory."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging
import os
from pathlib import Path

from .config import EmbedConfig
from .exceptions import MissingOutputDirectoryError, NoMatchingArtifactError
from .paths import site_path
from .results import Err, Ok, Result


logger = logging.getLogger(__name__)


IMAGE_EXTENSIONS: frozenset[str] = frozenset({".gif", ".jpg", ".jpeg", ".png", ".svg"})
"""Extensions accepted when looking for a generated plot."""

FIGURE_EXTENSIONS: tuple[str, ...] = (".png", ".jpeg", ".jpg", ".svg", ".gif")
"""Order in which extensions are guessed for figures referenced without one."""


@dataclass(frozen=True, slots=True)
class ArtifactMatch:
    """A generated file matching the requested name and extension."""

    name: str
    extension: str
    site_path: str


def locate_artifact(
    output_dir: Path,
    base_name: str,
    suffix: str,
    allowed_extensions: Iterable[str],
    *,
    config: EmbedConfig,
    reference: str,
) -> Result[ArtifactMatch]:
    """Return the first file named ``base_name + suffix`` with an allowed extension.

    The output directory is walked recursively in the order the filesystem
    yields entries. When several files match, which one is returned is not
    specified.
    """
    if not output_dir.is_dir():
        return Err(
            MissingOutputDirectoryError(
                f"Couldn't find an output directory associated with '{reference}' "
                "when trying to input a plot.",
                reference=reference,
            )
        )

    allowed = {extension.lower() for extension in allowed_extensions}
    target = base_name + suffix
    for root, _dirs, files in os.walk(output_dir):
        for filename in files:
            name, extension = os.path.splitext(filename)
            lowered = extension.lower()
            if name == target and lowered in allowed:
                matched = Path(root) / filename
                match = ArtifactMatch(
                    name=name,
                    extension=lowered,
                    site_path=site_path(matched, config),
                )
                logger.debug("Matched artifact %s for '%s'", match.site_path, reference)
                return Ok(match)

    return Err(
        NoMatchingArtifactError(
            "Couldn't find a relevant image when trying to input a plot "
            f"relative to '{reference}'.",
            reference=reference,
        )
    )


__all__ = ["FIGURE_EXTENSIONS", "IMAGE_EXTENSIONS", "ArtifactMatch", "locate_artifact"]
