"""Tests for structured logging."""

from __future__ import annotations

import io
import logging

import orjson
import pytest

from errchain.logging import (
    BoundLogger,
    ConsoleRenderer,
    JsonRenderer,
    NoOpRenderer,
    configure_logging,
    get_logger,
    reset_logging,
)
from errchain.settings import clear_settings_cache


@pytest.fixture(autouse=True)
def clean_logging() -> object:
    clear_settings_cache()
    reset_logging()
    yield
    reset_logging()
    clear_settings_cache()


def test_json_renderer_output() -> None:
    buf = io.StringIO()
    configure_logging(format="json", level="DEBUG", output=buf)

    get_logger("billing", region="eu").debug("invoice saved", invoice_id=7)

    entry = orjson.loads(buf.getvalue())
    assert entry["event"] == "invoice saved"
    assert entry["level"] == "debug"
    assert entry["logger"] == "billing"
    assert entry["region"] == "eu"
    assert entry["invoice_id"] == 7
    assert "timestamp" in entry


def test_debug_hidden_above_debug_level() -> None:
    buf = io.StringIO()
    configure_logging(format="json", level="INFO", output=buf)

    get_logger("svc").debug("hidden")

    assert buf.getvalue() == ""


def test_level_defaults_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ERRCHAIN_LOG_LEVEL", "ERROR")
    clear_settings_cache()

    log = get_logger("svc")

    assert log.is_enabled_for(logging.ERROR)
    assert not log.is_enabled_for(logging.WARNING)
    assert not log.is_enabled_for(logging.DEBUG)


def test_debug_mode_enables_debug(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ERRCHAIN_DEBUG", "true")
    clear_settings_cache()

    assert get_logger().is_enabled_for(logging.DEBUG)


def test_bind_is_immutable() -> None:
    base = BoundLogger(context={"service": "api"})
    child = base.bind(user_id=42)

    assert base.context == {"service": "api"}
    assert child.context == {"service": "api", "user_id": 42}


def test_console_renderer_without_colors() -> None:
    buf = io.StringIO()
    configure_logging(format="console", level="DEBUG", output=buf, colors=False)

    get_logger("svc").debug("retrying", attempt=2, fatal=False)

    line = buf.getvalue().strip()
    assert "[debug] retrying" in line
    assert "attempt=2" in line
    assert "fatal=false" in line
    assert 'logger="svc"' in line
    assert "\033[" not in line


def test_configure_logging_renderers() -> None:
    assert isinstance(configure_logging(format="json"), JsonRenderer)
    assert isinstance(configure_logging(format="console", colors=False), ConsoleRenderer)
    assert isinstance(configure_logging(format="none"), NoOpRenderer)
    with pytest.raises(ValueError):
        configure_logging(format="xml")
