"""Tests for settings loading and structured logging."""

from __future__ import annotations

import io

import orjson
import pytest

from byethrow.logger import (
    BoundLogger,
    ConsoleRenderer,
    JsonRenderer,
    NoOpRenderer,
    configure_logging,
    get_logger,
)
from byethrow.settings import clear_settings_cache, get_settings


def test_settings_defaults() -> None:
    settings = get_settings()

    assert settings.log_level == "INFO"
    assert settings.log_format == "console"
    assert settings.forbid_nested is False


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BYETHROW_LOG_LEVEL", "debug")
    monkeypatch.setenv("BYETHROW_LOG_FORMAT", "json")
    clear_settings_cache()

    settings = get_settings()
    assert settings.log_level == "DEBUG"
    assert settings.log_format == "json"


def test_settings_cached() -> None:
    assert get_settings() is get_settings()


def test_configure_logging_formats() -> None:
    assert isinstance(configure_logging(format="console"), ConsoleRenderer)
    assert isinstance(configure_logging(format="json"), JsonRenderer)
    assert isinstance(configure_logging(format="none"), NoOpRenderer)
    with pytest.raises(ValueError):
        configure_logging(format="xml")


def test_level_threshold() -> None:
    buffer = io.StringIO()
    configure_logging(format="console", level="WARNING", output=buffer)
    log = get_logger("test")

    log.info("hidden")
    log.warning("shown", attempt=2)

    output = buffer.getvalue()
    assert "hidden" not in output
    assert "[warning] shown" in output
    assert "attempt=2" in output
    assert "logger=test" in output


def test_error_level() -> None:
    buffer = io.StringIO()
    configure_logging(format="json", level="ERROR", output=buffer)
    log = get_logger("test")

    log.warning("below threshold")
    log.error("conversion failed", code="E1")

    entry = orjson.loads(buffer.getvalue())
    assert entry["event"] == "conversion failed"
    assert entry["level"] == "error"
    assert entry["code"] == "E1"


def test_json_renderer() -> None:
    buffer = io.StringIO()
    configure_logging(format="json", level="DEBUG", output=buffer)

    get_logger("svc").bind(request_id="abc").debug("parsed", fields=3)

    entry = orjson.loads(buffer.getvalue())
    assert entry["event"] == "parsed"
    assert entry["level"] == "debug"
    assert entry["request_id"] == "abc"
    assert entry["fields"] == 3
    assert entry["logger"] == "svc"


def test_bind_and_unbind_are_immutable() -> None:
    base = BoundLogger(context={"a": 1})
    bound = base.bind(b=2)

    assert base.context == {"a": 1}
    assert bound.context == {"a": 1, "b": 2}
    assert bound.unbind("a").context == {"b": 2}


def test_scope_adds_context() -> None:
    buffer = io.StringIO()
    configure_logging(format="console", level="INFO", output=buffer)
    log = get_logger()

    with log.scope(batch="b1"):
        log.info("inside")
    log.info("outside")

    inside, outside = buffer.getvalue().splitlines()
    assert "batch=b1" in inside
    assert "batch=b1" not in outside


def test_environment_drives_default_logging(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("BYETHROW_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("BYETHROW_LOG_FORMAT", "json")
    clear_settings_cache()

    get_logger("env").debug("visible")

    assert orjson.loads(capsys.readouterr().out)["event"] == "visible"
