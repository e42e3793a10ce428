"""Structured logging with bound context.

The library only logs at its edges (adapters converting exceptions, rejected
validation, unwraps and assertions that raise), always at DEBUG. Applications
opt in with ``configure_logging``:

    >>> from byethrow.logger import configure_logging, get_logger
    >>> configure_logging(format="console", level="DEBUG")
    >>> log = get_logger("billing")
    >>> log.info("invoice parsed", invoice_id=42)
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol, TextIO, Union, runtime_checkable

from .settings import get_settings

JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list[Any], dict[str, Any]]
JsonDict = dict[str, Any]

# Context var for scoped context (persists across async calls)
_log_context: ContextVar[JsonDict] = ContextVar("byethrow_log_context", default={})


@dataclass(slots=True)
class LogEntry:
    """A single rendered log line with its merged context."""

    timestamp: float
    level: str
    event: str
    context: JsonDict

    @property
    def ts_iso(self) -> str:
        return datetime.fromtimestamp(self.timestamp, tz=UTC).isoformat()

    @property
    def ts_human(self) -> str:
        """HH:MM:SS.mmm"""
        return datetime.fromtimestamp(self.timestamp, tz=UTC).strftime("%H:%M:%S.%f")[:-3]


@runtime_checkable
class LogRenderer(Protocol):
    """Protocol for log output renderers."""

    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True)
class BoundLogger:
    """Structured logger with bound context. bind() returns a new logger with merged context."""

    context: JsonDict = field(default_factory=dict)
    _renderer: LogRenderer | None = None
    _level: int | None = None

    def bind(self, **kw: JsonValue) -> BoundLogger:
        return BoundLogger(context={**self.context, **kw}, _renderer=self._renderer, _level=self._level)

    def unbind(self, *keys: str) -> BoundLogger:
        return BoundLogger(context={k: v for k, v in self.context.items() if k not in keys},
                           _renderer=self._renderer, _level=self._level)

    def _log(self, level: int, event: str, **kw: JsonValue) -> None:
        if level < (self._level if self._level is not None else _get_level()):
            return
        merged = {**_log_context.get(), **self.context, **kw}
        (self._renderer or _get_renderer()).render(LogEntry(time.time(), logging.getLevelName(level).lower(), event, merged))

    def debug(self, event: str, **kw: JsonValue) -> None: self._log(logging.DEBUG, event, **kw)
    def info(self, event: str, **kw: JsonValue) -> None: self._log(logging.INFO, event, **kw)
    def warning(self, event: str, **kw: JsonValue) -> None: self._log(logging.WARNING, event, **kw)
    def error(self, event: str, **kw: JsonValue) -> None: self._log(logging.ERROR, event, **kw)

    def scope(self, **kw: JsonValue) -> LogScope:
        """Scoped context: every log call inside the ``with`` block carries ``kw``."""
        return LogScope(kw)


class LogScope:
    """Context manager for scoped log context."""

    __slots__ = ("_ctx", "_token")

    def __init__(self, ctx: JsonDict) -> None:
        self._ctx, self._token = ctx, None

    def __enter__(self) -> None:
        self._token = _log_context.set({**_log_context.get(), **self._ctx})

    def __exit__(self, *_: object) -> None:
        if self._token is not None:
            _log_context.reset(self._token)


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


def _format_value(value: object) -> str:
    return f'"{value}"' if isinstance(value, str) and " " in value else str(value)


@dataclass(slots=True)
class ConsoleRenderer:
    """Human-readable output. Format: timestamp [level] event key=value ..."""

    output: TextIO = field(default_factory=lambda: sys.stderr)
    show_timestamp: bool = True

    def render(self, entry: LogEntry) -> None:
        parts = [entry.ts_human] if self.show_timestamp else []
        parts += [f"[{entry.level}]", entry.event]
        parts += [f"{k}={_format_value(v)}" for k, v in sorted(entry.context.items()) if k != "exc_info"]
        print(" ".join(parts), file=self.output)
        if "exc_info" in entry.context:
            print(entry.context["exc_info"], file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """JSON Lines output for log aggregation."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        import orjson
        print(orjson.dumps({"timestamp": entry.ts_iso, "level": entry.level, "event": entry.event,
                            **entry.context}, option=orjson.OPT_NON_STR_KEYS, default=repr).decode(),
              file=self.output)


@dataclass(slots=True)
class NoOpRenderer:
    """Silent renderer."""

    def render(self, entry: LogEntry) -> None:
        pass


# ─────────────────────────────────────────────────────────────────────────────
# Global Configuration
# ─────────────────────────────────────────────────────────────────────────────


_renderer: LogRenderer | None = None
_level: int | None = None


def _make_renderer(format: str, output: TextIO | None) -> LogRenderer:  # noqa: A002
    match format:
        case "console": return ConsoleRenderer(output=output or sys.stderr)
        case "json": return JsonRenderer(output=output or sys.stdout)
        case "none": return NoOpRenderer()
        case _: raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")


def configure_logging(
    format: str | None = None,  # noqa: A002 - matches stdlib naming
    level: str | None = None,
    *,
    output: TextIO | None = None,
) -> LogRenderer:
    """Configure library logging. Unset arguments fall back to BYETHROW_LOG_* settings."""
    global _renderer, _level
    settings = get_settings()
    _level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    _renderer = _make_renderer(format or settings.log_format, output)
    return _renderer


def reset_logging() -> None:
    """Drop explicit configuration; settings are consulted again on next use."""
    global _renderer, _level
    _renderer, _level = None, None


def get_logger(name: str | None = None, **initial_context: JsonValue) -> BoundLogger:
    """Get a structured logger. Name is added to context as 'logger'."""
    return BoundLogger(context={**initial_context, **({"logger": name} if name else {})})


def _get_level() -> int:
    return _level if _level is not None else getattr(logging, get_settings().log_level, logging.INFO)


def _get_renderer() -> LogRenderer:
    global _renderer
    if _renderer is None:
        _renderer = _make_renderer(get_settings().log_format, None)
    return _renderer
