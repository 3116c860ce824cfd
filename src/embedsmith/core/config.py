"""Configuration models used by the embedding engine.

EmbedConfig

`site_root` (`Path`)
: Absolute root of the generated site. Every artifact path handed to the
  formatter is expressed relative to it.

`assets_dir` (`Path | None`)
: Root used for bare references such as `scripts/ex1`. Defaults to
  `<site_root>/assets`.

`literate_dir` (`Path | None`)
: Folder holding literate scripts referenced by `\\literate{...}`. Defaults to
  `<site_root>/_literate`.

`literate_output_dir` (`Path | None`)
: Folder receiving the Markdown produced from literate scripts. Defaults to
  `<assets_dir>/literate`.

`output_dirname` (`str`)
: Name of the directory beside a script that holds its generated output.

`code_dirname` (`str`)
: Directory inserted after the document component of `./` references in code
  mode.

`script_extension` (`str`)
: Extension appended to script references given without one.

`language_extensions` (`dict[str, str]`)
: Extra language to extension mappings merged over the built-in table.

`plaintext_language` (`str`)
: Qualifier producing a language-less code block.

`no_result_sentinel` (`str`)
: Result file content meaning "no value to show".

`highlight` (`bool`)
: Highlight code blocks with Pygments instead of leaving it to the browser.

`full_pass` (`bool`)
: Whether the session performs full evaluation passes; changed literate
  scripts only request re-evaluation during such passes.

`encoding` (`str`)
: Encoding used to read every embedded file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
import yaml


SITE_ROOT_ENV = "EMBEDSMITH_SITE_ROOT"


class EmbedConfig(BaseModel):
    """Site layout and embedding options shared by every command."""

    model_config = ConfigDict(extra="forbid")

    site_root: Path
    assets_dir: Path | None = None
    literate_dir: Path | None = None
    literate_output_dir: Path | None = None
    output_dirname: str = "output"
    code_dirname: str = "code"
    script_extension: str = ".py"
    language_extensions: dict[str, str] = Field(default_factory=dict)
    plaintext_language: str = "plaintext"
    no_result_sentinel: str = "nothing"
    highlight: bool = False
    full_pass: bool = True
    encoding: str = "utf-8"

    @field_validator("script_extension")
    @classmethod
    def _dotted_extension(cls, value: str) -> str:
        value = value.strip()
        if value and not value.startswith("."):
            value = f".{value}"
        return value

    @field_validator("language_extensions")
    @classmethod
    def _normalise_languages(cls, value: dict[str, str]) -> dict[str, str]:
        normalised: dict[str, str] = {}
        for language, extension in value.items():
            extension = extension.strip()
            if extension and not extension.startswith("."):
                extension = f".{extension}"
            normalised[language.strip().lower()] = extension
        return normalised

    @model_validator(mode="after")
    def derive_directories(self) -> EmbedConfig:
        """Populate derived directories from the site root."""
        self.site_root = Path(os.path.normpath(self.site_root.expanduser().absolute()))
        if self.assets_dir is None:
            self.assets_dir = self.site_root / "assets"
        elif not self.assets_dir.is_absolute():
            self.assets_dir = self.site_root / self.assets_dir
        if self.literate_dir is None:
            self.literate_dir = self.site_root / "_literate"
        elif not self.literate_dir.is_absolute():
            self.literate_dir = self.site_root / self.literate_dir
        if self.literate_output_dir is None:
            self.literate_output_dir = self.assets_dir / "literate"
        elif not self.literate_output_dir.is_absolute():
            self.literate_output_dir = self.site_root / self.literate_output_dir
        return self

    @property
    def assets_root(self) -> Path:
        """Return the assets directory, always populated after validation."""
        assert self.assets_dir is not None
        return self.assets_dir


def load_config(path: Path | str | None = None, **overrides: Any) -> EmbedConfig:
    """Build a configuration from an optional YAML file and keyword overrides.

    The file may either hold the options at its top level or nest them under an
    ``embedsmith`` key so the settings can live inside a larger site file. The
    ``EMBEDSMITH_SITE_ROOT`` environment variable provides the site root when
    neither the file nor the overrides define one.
    """
    data: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        payload = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        if not isinstance(payload, dict):
            raise ValueError(f"Configuration file '{config_path}' must contain a mapping.")
        section = payload.get("embedsmith", payload)
        if not isinstance(section, dict):
            raise ValueError(f"The 'embedsmith' section of '{config_path}' must be a mapping.")
        data.update(section)
        site_root = data.get("site_root")
        if site_root is not None and not Path(site_root).is_absolute():
            data["site_root"] = config_path.parent / site_root

    data.update({key: value for key, value in overrides.items() if value is not None})
    if "site_root" not in data:
        env_root = os.environ.get(SITE_ROOT_ENV)
        if env_root:
            data["site_root"] = env_root
    return EmbedConfig.model_validate(data)


__all__ = ["SITE_ROOT_ENV", "EmbedConfig", "load_config"]
