import logging

import pytest

from embedsmith.adapters.transformers import ConverterRegistry, has_converter
from embedsmith.core.diagnostics import LoggingEmitter, NullEmitter, format_event_message
from embedsmith.core.exceptions import (
    ConversionError,
    EmbedError,
    ReferenceNotFoundError,
    exception_hint,
)
from embedsmith.core.results import Err, Ok, capture


def test_ok_chains_values() -> None:
    result = Ok(2).map(lambda value: value + 1).then(lambda value: Ok(value * 2))

    assert result == Ok(6)
    assert result.ok


def test_err_short_circuits() -> None:
    error = ReferenceNotFoundError("gone", reference="ex")
    result = Err(error).map(lambda value: pytest.fail("should not run"))

    assert result.message == "gone"
    assert not result.ok
    with pytest.raises(ReferenceNotFoundError):
        result.unwrap()


def test_capture_records_reference() -> None:
    def boom() -> str:
        raise EmbedError("broken")

    result = capture(boom, reference="ex1")

    assert isinstance(result, Err)
    assert result.error.reference == "ex1"


def test_capture_lets_other_errors_through() -> None:
    def boom() -> str:
        raise KeyError("x")

    with pytest.raises(KeyError):
        capture(boom)


def test_exception_hint_follows_causes() -> None:
    try:
        try:
            raise OSError("disk full")
        except OSError as exc:
            raise ConversionError("conversion failed") from exc
    except ConversionError as exc:
        assert exception_hint(exc) == "disk full"


def test_registry_copy_is_independent() -> None:
    registry = ConverterRegistry()
    registry.register("upper", lambda source, **_: str(source).upper())
    clone = registry.copy()
    clone.register("lower", lambda source, **_: str(source).lower())

    assert clone.convert("upper", "a") == "A"
    assert not registry.is_registered("lower")
    with pytest.raises(ConversionError, match="lower"):
        registry.get("lower")


def test_builtin_converters_are_registered() -> None:
    assert has_converter("table")
    assert has_converter("literate")


def test_null_emitter_ignores_everything() -> None:
    emitter = NullEmitter()

    emitter.warning("w")
    emitter.error("e")
    emitter.event("artifact_match", {})


def test_logging_emitter_formats_known_events(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(logger_obj=logging.getLogger("embedsmith.test"))

    with caplog.at_level(logging.INFO, logger="embedsmith.test"):
        emitter.event("artifact_match", {"reference": "ex2", "path": "/scripts/output/ex2.png"})
        emitter.warning("careful")

    assert "Embedding /scripts/output/ex2.png for 'ex2'" in caplog.text
    assert "careful" in caplog.text


def test_unknown_events_have_no_summary() -> None:
    assert format_event_message("something_else", {}) is None
