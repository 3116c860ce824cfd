"""Resolve insertion commands into HTML fragments pulled from site artifacts."""

from __future__ import annotations

from embedsmith.api import EmbedSession, build_engine
from embedsmith.core.artifacts import IMAGE_EXTENSIONS, ArtifactMatch, locate_artifact
from embedsmith.core.commands import (
    CommandEngine,
    CommandInvocation,
    MacroDefinition,
    handles,
    scan_commands,
)
from embedsmith.core.config import EmbedConfig, load_config
from embedsmith.core.context import EmbedContext, EvaluationState
from embedsmith.core.exceptions import (
    ConversionError,
    EmbedError,
    MissingOutputDirectoryError,
    NoMatchingArtifactError,
    ReadFailureError,
    ReferenceNotFoundError,
)
from embedsmith.core.paths import CodePaths, code_paths, resolve_reference
from embedsmith.core.qualifiers import Language, Plot, parse_qualifier
from embedsmith.core.results import Err, Ok
from embedsmith.version import get_version


__version__ = get_version()

__all__ = [
    "IMAGE_EXTENSIONS",
    "ArtifactMatch",
    "CodePaths",
    "CommandEngine",
    "CommandInvocation",
    "ConversionError",
    "EmbedConfig",
    "EmbedContext",
    "EmbedError",
    "EmbedSession",
    "Err",
    "EvaluationState",
    "Language",
    "MacroDefinition",
    "MissingOutputDirectoryError",
    "NoMatchingArtifactError",
    "Ok",
    "Plot",
    "ReadFailureError",
    "ReferenceNotFoundError",
    "__version__",
    "build_engine",
    "code_paths",
    "handles",
    "load_config",
    "locate_artifact",
    "parse_qualifier",
    "resolve_reference",
    "scan_commands",
]
