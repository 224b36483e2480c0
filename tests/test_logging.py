from __future__ import annotations

import logging

import pytest

from seerengine.boot.logging import configure_logging, resolve_level


@pytest.mark.parametrize(
    "value, expected",
    [
        ("debug", logging.DEBUG),
        ("WARNING", logging.WARNING),
        (" error ", logging.ERROR),
        ("15", 15),
        (30, 30),
        ("", logging.INFO),
        (None, logging.INFO),
        ("chatty", logging.INFO),
    ],
)
def test_resolve_level(value, expected: int) -> None:
    assert resolve_level(value) == expected


def test_resolve_level_custom_default() -> None:
    assert resolve_level(None, logging.ERROR) == logging.ERROR


def test_explicit_level_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    assert configure_logging(level="debug", default="WARNING") == logging.DEBUG
    assert logging.getLogger().level == logging.DEBUG


def test_environment_beats_settings_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "warning")
    assert configure_logging(default="DEBUG") == logging.WARNING


def test_settings_default_used_without_environment() -> None:
    assert configure_logging(default="ERROR") == logging.ERROR
    assert configure_logging() == logging.INFO


def test_basic_config_kwargs_forwarded() -> None:
    configure_logging(level="INFO", format="%(levelname)s:%(message)s")
    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert handlers[0].formatter._fmt == "%(levelname)s:%(message)s"
