from pathlib import Path

from conftest import write
import pytest
from typer.testing import CliRunner

from embedsmith.api import EmbedSession
from embedsmith.core.config import SITE_ROOT_ENV, load_config
from embedsmith.ui.cli import app
from embedsmith.ui.cli.diagnostics import CliEmitter
from embedsmith.ui.cli.state import CLIState


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_render_without_markdown(runner: CliRunner, tmp_path: Path) -> None:
    site = tmp_path / "site"
    write(site / "assets" / "output" / "ex.out", "42")
    page = write(tmp_path / "page.md", "Result: \\output{ex}\n")

    result = runner.invoke(app, ["render", str(page), "--site-root", str(site), "--no-markdown"])

    assert result.exit_code == 0, result.output
    assert 'Result: <pre><code class="plaintext">42</code></pre>' in result.stdout


def test_render_writes_output_file(runner: CliRunner, tmp_path: Path) -> None:
    site = tmp_path / "site"
    write(site / "assets" / "ex.py", "print(1)")
    page = write(tmp_path / "page.md", "\\insert{python}{ex}\n")
    target = tmp_path / "out" / "page.html"

    result = runner.invoke(
        app, ["render", str(page), "--site-root", str(site), "--output", str(target)]
    )

    assert result.exit_code == 0, result.output
    assert '<code class="language-python">print(1)</code>' in target.read_text(encoding="utf-8")


def test_render_requires_site_root(
    runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv(SITE_ROOT_ENV, raising=False)
    page = write(tmp_path / "page.md", "text\n")

    result = runner.invoke(app, ["render", str(page)])

    assert result.exit_code == 1


def test_resolve_uses_language_extension(runner: CliRunner, tmp_path: Path) -> None:
    site = tmp_path / "site"
    write(site / "assets" / "scripts" / "ex1.jl", "1")

    result = runner.invoke(
        app, ["resolve", "scripts/ex1", "--site-root", str(site), "--language", "julia"]
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.strip().endswith("\t/assets/scripts/ex1.jl")


def test_resolve_missing_reference_fails(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(app, ["resolve", "nope", "--site-root", str(tmp_path)])

    assert result.exit_code == 1


def test_cli_emitter_tallies_render_summary(tmp_path: Path) -> None:
    site = tmp_path / "site"
    write(site / "assets" / "output" / "ex2.png", "")
    state = CLIState()
    session = EmbedSession(load_config(site_root=site), emitter=CliEmitter(state))

    session.expand("\\insert{plot}{ex2} \\output{missing}")

    summary = state.summary
    assert summary.artifacts == ["/assets/output/ex2.png"]
    assert summary.unresolved == 1
    assert summary.describe() == (
        "1 plot(s) embedded, 0 literate script(s) converted (0 changed), "
        "1 unresolved command(s)"
    )
