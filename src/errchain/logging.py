"""Structured logging for the library's own diagnostics.

The only producer is the capture boundary (attempt/catching), which reports
each captured fault at debug level. Output is key=value lines for a terminal or
JSON Lines for aggregation.

Quick Start:
    >>> from errchain.logging import configure_logging, get_logger
    >>> configure_logging(format="console", level="DEBUG")
    >>> get_logger("billing").debug("fault captured", context="Can't save invoice", fault_type="OSError")

Until configure_logging() is called, level, format and colors come from the
ERRCHAIN_LOG_* settings.
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol, TextIO, runtime_checkable

import orjson

from .settings import get_settings

JsonDict = dict[str, Any]


# ─────────────────────────────────────────────────────────────────────────────
# Logger
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class BoundLogger:
    """Logger carrying fixed key/value context; bind() returns a new one.

    Example:
        >>> get_logger("errchain.capture").bind(component="importer").debug("fault captured")
    """

    context: JsonDict = field(default_factory=dict)
    _renderer: LogRenderer | None = None
    _level: int = logging.DEBUG

    def bind(self, **kw: Any) -> BoundLogger:
        return BoundLogger(context={**self.context, **kw}, _renderer=self._renderer, _level=self._level)

    def is_enabled_for(self, level: int) -> bool:
        return level >= self._level

    def debug(self, event: str, **kw: Any) -> None:
        if not self.is_enabled_for(logging.DEBUG):
            return
        entry = LogEntry(timestamp=time.time(), level="debug", event=event, context={**self.context, **kw})
        (self._renderer or _get_renderer()).render(entry)


@dataclass(slots=True, frozen=True)
class LogEntry:
    timestamp: float
    level: str
    event: str
    context: JsonDict

    def _utc(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=UTC)

    @property
    def iso_time(self) -> str:
        return self._utc().isoformat()

    @property
    def clock_time(self) -> str:
        """HH:MM:SS.mmm"""
        return self._utc().strftime("%H:%M:%S.%f")[:-3]


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class LogRenderer(Protocol):
    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """One line per entry: time [level] event key=value ...

    Colors follow the stream's TTY status unless forced.
    """

    output: TextIO = field(default_factory=lambda: sys.stderr)
    colors: bool | None = None

    def __post_init__(self) -> None:
        if self.colors is None:
            self.colors = bool(getattr(self.output, "isatty", None) and self.output.isatty())

    def render(self, entry: LogEntry) -> None:
        paint = _paint if self.colors else _plain
        fields = " ".join(f"{paint('cyan', key)}={_console_value(value, paint)}" for key, value in sorted(entry.context.items()))
        line = f"{paint('dim', entry.clock_time)} {paint('dim', f'[{entry.level}]')} {paint('bold', entry.event)}"
        print(f"{line} {fields}" if fields else line, file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """JSON Lines, one object per entry."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        record = {"timestamp": entry.iso_time, "level": entry.level, "event": entry.event, **entry.context}
        print(orjson.dumps(record, default=str, option=orjson.OPT_NON_STR_KEYS).decode(), file=self.output)


@dataclass(slots=True)
class NoOpRenderer:
    """Drops every entry."""

    def render(self, entry: LogEntry) -> None:
        pass


# ─────────────────────────────────────────────────────────────────────────────
# Global Configuration
# ─────────────────────────────────────────────────────────────────────────────


_renderer: ContextVar[LogRenderer | None] = ContextVar("errchain_log_renderer", default=None)
_level: ContextVar[int | None] = ContextVar("errchain_log_level", default=None)


def configure_logging(
    format: str | None = None,  # noqa: A002
    level: str | None = None,
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> LogRenderer:
    """Install the renderer and minimum level used by get_logger().

    Args:
        format: "console", "json" or "none". Defaults to ERRCHAIN_LOG_FORMAT.
        level: Minimum level name. Defaults to the effective settings level.
        output: Target stream (console: stderr, json: stdout).
        colors: Force console colors on/off; None follows settings, then TTY.
    """
    settings = get_settings()
    format = format or settings.logging.format
    renderer: LogRenderer
    if format == "console":
        renderer = ConsoleRenderer(output=output or sys.stderr, colors=settings.logging.colors if colors is None else colors)
    elif format == "json":
        renderer = JsonRenderer(output=output or sys.stdout)
    elif format == "none":
        renderer = NoOpRenderer()
    else:
        raise ValueError(f"Unknown log format {format!r}; expected 'console', 'json' or 'none'")

    _level.set(_level_number(level or settings.effective_log_level))
    _renderer.set(renderer)
    return renderer


def reset_logging() -> None:
    """Forget the configured renderer and level; settings apply again on next use."""
    _renderer.set(None)
    _level.set(None)


def get_logger(name: str | None = None, **initial_context: Any) -> BoundLogger:
    ctx = {"logger": name, **initial_context} if name else dict(initial_context)
    level = _level.get()
    if level is None:
        level = _level_number(get_settings().effective_log_level)
    return BoundLogger(context=ctx, _level=level)


def _get_renderer() -> LogRenderer:
    return _renderer.get() or configure_logging()


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


_ANSI = {"reset": "\033[0m", "bold": "\033[1m", "dim": "\033[2m", "yellow": "\033[33m", "blue": "\033[34m", "cyan": "\033[36m"}


def _level_number(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.WARNING


def _paint(color: str, text: str) -> str:
    return f"{_ANSI[color]}{text}{_ANSI['reset']}"


def _plain(color: str, text: str) -> str:
    return text


def _console_value(value: object, paint: Any) -> str:
    if isinstance(value, str):
        return paint("yellow", f'"{value}"')
    if isinstance(value, bool):
        return paint("blue", str(value).lower())
    if isinstance(value, (int, float)):
        return paint("blue", str(value))
    return repr(value)
