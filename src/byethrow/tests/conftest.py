"""Shared fixtures: isolate settings and logging between tests."""

from __future__ import annotations

import io
from collections.abc import Iterator

import pytest

from byethrow.logger import configure_logging, reset_logging
from byethrow.settings import clear_settings_cache


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop BYETHROW_* overrides and cached settings around each test."""
    for var in ("BYETHROW_LOG_LEVEL", "BYETHROW_LOG_FORMAT", "BYETHROW_FORBID_NESTED"):
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    reset_logging()
    yield
    clear_settings_cache()
    reset_logging()


@pytest.fixture
def log_output() -> io.StringIO:
    """Capture DEBUG console logs."""
    buffer = io.StringIO()
    configure_logging(format="console", level="DEBUG", output=buffer)
    return buffer
