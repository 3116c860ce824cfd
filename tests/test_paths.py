from pathlib import Path

from conftest import write
import pytest

from embedsmith.core.config import EmbedConfig
from embedsmith.core.exceptions import ReferenceNotFoundError
from embedsmith.core.paths import (
    code_paths,
    language_extension,
    parse_reference,
    resolve_reference,
    site_path,
)
from embedsmith.core.results import Err, Ok


def test_language_hint_appends_extension(config: EmbedConfig, scripts: Path) -> None:
    target = write(scripts / "ex1.jl", "println(1)")

    result = resolve_reference("ex1", config, language="julia")

    assert isinstance(result, Ok)
    assert result.value.path == target
    assert result.value.site_path == "/scripts/ex1.jl"
    assert result.value.stem == "ex1"
    assert result.value.extension == ".jl"


def test_literal_path_is_preferred_over_guessed_extension(
    config: EmbedConfig, scripts: Path
) -> None:
    literal = write(scripts / "data", "raw")
    write(scripts / "data.jl", "guessed")

    result = resolve_reference("data", config, language="julia")

    assert result.unwrap().path == literal


def test_extension_not_appended_when_reference_has_one(config: EmbedConfig, scripts: Path) -> None:
    write(scripts / "ex1.txt.jl", "")

    result = resolve_reference("ex1.txt", config, language="julia")

    assert isinstance(result, Err)


def test_missing_reference_is_an_error_value(config: EmbedConfig) -> None:
    result = resolve_reference("nowhere", config, language="python")

    assert isinstance(result, Err)
    assert isinstance(result.error, ReferenceNotFoundError)
    assert result.error.reference == "nowhere"
    assert "nowhere" in result.message


def test_leading_slash_is_anchored_at_site_root(config: EmbedConfig, site: Path) -> None:
    target = write(site / "static" / "notes.txt", "hi")

    result = resolve_reference("/static/notes.txt", config)

    assert result.unwrap().path == target
    assert result.unwrap().site_path == "/static/notes.txt"


def test_dot_reference_is_relative_to_document(config: EmbedConfig, scripts: Path) -> None:
    target = write(scripts / "blog" / "post" / "snippet.py", "")

    result = resolve_reference("./snippet.py", config, document="blog/post.md")

    assert result.unwrap().path == target


def test_dot_reference_in_code_mode_uses_code_directory(config: EmbedConfig, scripts: Path) -> None:
    target = write(scripts / "blog" / "post" / "code" / "ex.py", "")

    result = resolve_reference("./ex.py", config, document="blog/post.md", code=True)

    assert result.unwrap().path == target


def test_dot_reference_without_document_fails(config: EmbedConfig) -> None:
    result = resolve_reference("./ex.py", config)

    assert isinstance(result, Err)
    assert "no document" in result.message


def test_code_mode_falls_back_to_output_directory(config: EmbedConfig, scripts: Path) -> None:
    target = write(scripts / "output" / "fig.png", "")

    assert isinstance(resolve_reference("fig.png", config), Err)
    assert resolve_reference("fig.png", config, code=True).unwrap().path == target


def test_backslashes_are_normalised(config: EmbedConfig, scripts: Path) -> None:
    target = write(scripts / "sub" / "ex.py", "")

    assert resolve_reference("sub\\ex.py", config).unwrap().path == target


def test_code_paths_follow_output_convention(config: EmbedConfig, scripts: Path) -> None:
    paths = code_paths("sub/ex1", config)

    assert paths.script_path == scripts / "sub" / "ex1.py"
    assert paths.script_name == "ex1.py"
    assert paths.stem == "ex1"
    assert paths.out_dir == scripts / "sub" / "output"
    assert paths.out_path == scripts / "sub" / "output" / "ex1.out"
    assert paths.res_path == scripts / "sub" / "output" / "ex1.res"


def test_code_paths_keep_explicit_extension(config: EmbedConfig, scripts: Path) -> None:
    paths = code_paths("ex1.jl", config)

    assert paths.script_path == scripts / "ex1.jl"
    assert paths.out_path == scripts / "output" / "ex1.out"


def test_configured_language_extensions(site: Path) -> None:
    config = EmbedConfig(site_root=site, language_extensions={"Zig": "zig"})

    assert language_extension("zig", config) == ".zig"
    assert language_extension("julia", config) == ".jl"
    assert language_extension("plaintext", config) is None
    assert language_extension(None, config) is None


def test_parse_reference_is_site_relative(config: EmbedConfig) -> None:
    assert parse_reference("pics/cat", config) == "/scripts/pics/cat"
    assert parse_reference("/pics/cat", config) == "/pics/cat"
    assert (
        parse_reference("./cat", config, document="blog/post.md", code=True)
        == "/scripts/blog/post/code/cat"
    )


def test_site_path_uses_forward_slashes(config: EmbedConfig, site: Path) -> None:
    assert site_path(site / "a" / "b" / "c.png", config) == "/a/b/c.png"


@pytest.mark.parametrize("reference", ["../outside.txt", "/../outside.txt"])
def test_references_are_not_confined_to_the_site(
    config: EmbedConfig, site: Path, reference: str
) -> None:
    write(site / "outside.txt", "")
    write(site.parent / "outside.txt", "")

    result = resolve_reference(reference, config)

    assert isinstance(result, Ok)
