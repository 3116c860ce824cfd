from pathlib import Path

from bs4 import BeautifulSoup
from conftest import RecordingEmitter, write
import pytest

from embedsmith.api import EmbedSession
from embedsmith.adapters.handlers.embed import append_result, embed_output
from embedsmith.core.exceptions import MissingOutputDirectoryError, ReferenceNotFoundError


def _soup(fragment: str) -> BeautifulSoup:
    return BeautifulSoup(fragment, "html.parser")


def test_insert_language_embeds_source(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "ex1.jl", "println(1)")

    fragment = session.expand("\\insert{julia}{ex1}")

    code = _soup(fragment).select_one("pre > code")
    assert code is not None
    assert code["class"] == ["language-julia"]
    assert code.get_text() == "println(1)"


def test_insert_plaintext_embeds_plain_block(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "notes.txt", "a < b")

    fragment = session.expand("\\insert{plaintext}{notes.txt}")

    assert fragment == '<pre><code class="plaintext">a &lt; b</code></pre>'


def test_insert_plot_with_id(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "output" / "ex2.png", "")
    write(scripts / "output" / "ex24.png", "")

    fragment = session.expand("\\insert{plot:4}{ex2}")

    image = _soup(fragment).find("img")
    assert image is not None
    assert image["src"] == "/scripts/output/ex24.png"


def test_insert_plot_without_output_directory(
    session: EmbedSession, emitter: RecordingEmitter
) -> None:
    fragment = session.expand("before \\insert{plot}{missing} after")

    error = _soup(fragment).select_one("span.embed-error")
    assert error is not None
    assert "'missing'" in error.get_text()
    assert fragment.startswith("before ")
    assert fragment.endswith(" after")
    message, exc = emitter.warnings[-1]
    assert message.startswith("<string>:1:8: ")
    assert isinstance(exc, MissingOutputDirectoryError)


def test_insert_missing_script_is_inline_error(session: EmbedSession) -> None:
    fragment = session.expand("\\insert{python}{absent}")

    assert "absent" in _soup(fragment).get_text()


def test_plot_match_is_reported(
    session: EmbedSession, emitter: RecordingEmitter, scripts: Path
) -> None:
    write(scripts / "output" / "ex2.svg", "")

    session.expand("\\insert{plot}{ex2}")

    assert ("artifact_match", {"reference": "ex2", "path": "/scripts/output/ex2.svg"}) in (
        emitter.events
    )


def test_output_embeds_plain_block(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "output" / "ex3.out", "42")

    assert session.expand("\\output{ex3}") == '<pre><code class="plaintext">42</code></pre>'


def test_output_missing_file_names_the_command(session: EmbedSession) -> None:
    fragment = session.expand("\\output{ex3}")

    assert "`\\output{ex3}`: could not find the relevant output file." in (
        _soup(fragment).get_text()
    )


def test_show_skips_nothing_result(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "output" / "ex3.out", "42")
    write(scripts / "output" / "ex3.res", "nothing")

    code = _soup(session.expand("\\show{ex3}")).select_one("code")

    assert code is not None
    assert code.get_text() == "42"


def test_show_appends_result_on_new_line(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "output" / "ex4.out", "x=")
    write(scripts / "output" / "ex4.res", "1")

    code = _soup(session.expand("\\show{ex4}")).select_one("code")

    assert code is not None
    assert code.get_text() == "x=\n1"


def test_show_requires_result_file(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "output" / "ex5.out", "x")

    fragment = session.expand("\\show{ex5}")

    assert "could not find the relevant result file" in _soup(fragment).get_text()


@pytest.mark.parametrize(
    ("output", "result", "expected"),
    [
        ("x=", "1", "x=\n1"),
        ("x=\n", "1", "x=\n1"),
        ("", "1", "1"),
        ("x", "nothing", "x"),
        ("", "nothing", ""),
        ("x", "nothing\n", "x\nnothing\n"),
    ],
)
def test_append_result_separator(output: str, result: str, expected: str) -> None:
    assert append_result(output, result) == expected


def test_textoutput_reprocesses_output(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "helper.jl", "f(x) = x")
    write(scripts / "output" / "gen.out", "Generated:\n\\insert{julia}{helper}\n")

    fragment = session.expand("\\textoutput{gen}")

    assert fragment.startswith("Generated:\n")
    assert '<code class="language-julia">f(x) = x</code>' in fragment
    assert not fragment.endswith("\n")


def test_output_modes_are_exclusive(session: EmbedSession) -> None:
    with pytest.raises(ValueError, match="both"):
        embed_output("ex", session.context(), reprocess_output=True, include_result=True)


def test_textinsert_reprocesses_content(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "ex1.jl", "println(1)")
    write(scripts / "intro.md", "  Intro \\insert{julia}{ex1}  \n")

    fragment = session.expand("\\textinsert{intro.md}")

    assert fragment == 'Intro <pre><code class="language-julia">println(1)</code></pre>'


def test_figalt_falls_back_to_output_directory(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "pics" / "output" / "cat.png", "")

    image = _soup(session.expand("\\figalt{a cat}{pics/cat}")).find("img")

    assert image is not None
    assert image["alt"] == "a cat"
    assert image["src"] == "/scripts/pics/output/cat.png"


def test_figalt_prefers_literal_location(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "pics" / "cat.gif", "")
    write(scripts / "pics" / "output" / "cat.png", "")

    image = _soup(session.expand("\\figalt{cat}{pics/cat}")).find("img")

    assert image is not None
    assert image["src"] == "/scripts/pics/cat.gif"


def test_figalt_guesses_extensions_in_order(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "pics" / "cat.svg", "")
    write(scripts / "pics" / "cat.jpeg", "")

    image = _soup(session.expand("\\figalt{cat}{pics/cat}")).find("img")

    assert image is not None
    assert image["src"] == "/scripts/pics/cat.jpeg"


def test_figalt_uses_given_extension_only(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "pics" / "cat.png", "")

    fragment = session.expand("\\figalt{cat}{pics/cat.svg}")

    assert "Image matching '/scripts/pics/cat.svg' not found." in _soup(fragment).get_text()


def test_figalt_skips_fallback_inside_output(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "output" / "output" / "cat.png", "")

    fragment = session.expand("\\figalt{cat}{output/cat}")

    assert _soup(fragment).find("img") is None
    assert "not found" in _soup(fragment).get_text()


def test_tableinput_uses_first_row_as_header(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "output" / "data.csv", "a,b\n1,2\n3,4\n")

    soup = _soup(session.expand("\\tableinput{}{data.csv}"))

    assert [th.get_text() for th in soup.select("thead th")] == ["a", "b"]
    assert [[td.get_text() for td in tr.select("td")] for tr in soup.select("tbody tr")] == [
        ["1", "2"],
        ["3", "4"],
    ]


def test_tableinput_with_explicit_header(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "data.csv", "1,2\n3,4\n")

    soup = _soup(session.expand("\\tableinput{x, y}{data.csv}"))

    assert [th.get_text() for th in soup.select("thead th")] == ["x", "y"]
    assert len(soup.select("tbody tr")) == 2


def test_tableinput_missing_file(session: EmbedSession) -> None:
    fragment = session.expand("\\tableinput{}{nope.csv}")

    assert "Table matching '/scripts/nope.csv' not found." in _soup(fragment).get_text()


def test_tableinput_ragged_rows_are_reported(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "data.csv", "a,b\n1,2,3\n")

    fragment = session.expand("\\tableinput{}{data.csv}")

    assert "Row 1" in _soup(fragment).get_text()


def test_commands_resolve_in_document_order(
    session: EmbedSession, emitter: RecordingEmitter
) -> None:
    session.expand("\\output{first}\n\\show{second}")

    messages = [message for message, _ in emitter.warnings]
    assert len(messages) == 2
    assert "first" in messages[0]
    assert "second" in messages[1]


def test_tableinput_prefers_literal_location(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "data.csv", "a\nliteral\n")
    write(scripts / "output" / "data.csv", "a\ngenerated\n")

    soup = _soup(session.expand("\\tableinput{}{data.csv}"))

    assert [td.get_text() for td in soup.select("tbody td")] == ["literal"]


def test_tableinput_skips_fallback_inside_output(session: EmbedSession, scripts: Path) -> None:
    write(scripts / "output" / "output" / "data.csv", "a\n1\n")

    fragment = session.expand("\\tableinput{}{output/data.csv}")

    assert _soup(fragment).find("table") is None
    assert "Table matching '/scripts/output/data.csv' not found." in _soup(fragment).get_text()


@pytest.mark.parametrize("qualifier", ["plot", "julia"])
def test_reference_without_file_name_is_inline_error(
    session: EmbedSession, emitter: RecordingEmitter, qualifier: str
) -> None:
    reference = "/" + "/".join([".."] * 40)

    fragment = session.expand(f"x \\insert{{{qualifier}}}{{{reference}}} y")

    assert fragment.startswith("x <p>")
    assert fragment.endswith(" y")
    assert "does not name a file" in _soup(fragment).get_text()
    assert isinstance(emitter.warnings[-1][1], ReferenceNotFoundError)
