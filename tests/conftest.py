from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from embedsmith.api import EmbedSession
from embedsmith.core.config import EmbedConfig


class RecordingEmitter:
    def __init__(self, *, debug_enabled: bool = False) -> None:
        self.debug_enabled = debug_enabled
        self.warnings: list[tuple[str, BaseException | None]] = []
        self.errors: list[tuple[str, BaseException | None]] = []
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append((message, exc))

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.errors.append((message, exc))

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def site(tmp_path: Path) -> Path:
    root = tmp_path / "site"
    (root / "scripts").mkdir(parents=True)
    return root


@pytest.fixture
def scripts(site: Path) -> Path:
    return site / "scripts"


@pytest.fixture
def config(site: Path) -> EmbedConfig:
    return EmbedConfig(site_root=site, assets_dir=Path("scripts"))


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


@pytest.fixture
def session(config: EmbedConfig, emitter: RecordingEmitter) -> EmbedSession:
    return EmbedSession(config, emitter=emitter, markdown=False)


@pytest.fixture
def md_session(config: EmbedConfig, emitter: RecordingEmitter) -> EmbedSession:
    return EmbedSession(config, emitter=emitter)
