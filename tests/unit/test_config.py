"""Tests for environment-driven logging configuration."""

from __future__ import annotations

import logging

import pytest

from porthsim.core.config import (
    PORTHSIM_LOG_VAR,
    LogLevel,
    configure_logging,
    get_log_level,
    parse_log_level,
)


class TestParseLogLevel:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, LogLevel.INFO),
            ("", LogLevel.INFO),
            ("debug", LogLevel.DEBUG),
            ("TRACE", LogLevel.TRACE),
            ("warn", LogLevel.WARNING),
            (" Warning ", LogLevel.WARNING),
            ("off", LogLevel.OFF),
        ],
    )
    def test_values(self, value: str | None, expected: LogLevel) -> None:
        assert parse_log_level(value) == expected

    def test_unknown_value_defaults_with_warning(self, caplog) -> None:
        caplog.set_level(logging.WARNING, logger="porthsim.core.config")
        assert parse_log_level("chatty") == LogLevel.INFO
        assert any("Unknown log level 'chatty'" in r.getMessage() for r in caplog.records)


class TestEnvironment:
    def test_reads_env_var(self, monkeypatch) -> None:
        monkeypatch.setenv(PORTHSIM_LOG_VAR, "error")
        assert get_log_level() == LogLevel.ERROR

    def test_missing_env_var(self, monkeypatch) -> None:
        monkeypatch.delenv(PORTHSIM_LOG_VAR, raising=False)
        assert get_log_level() == LogLevel.INFO

    def test_configure_sets_package_level(self, monkeypatch) -> None:
        monkeypatch.setenv(PORTHSIM_LOG_VAR, "debug")
        assert configure_logging() == LogLevel.DEBUG
        assert logging.getLogger("porthsim").level == logging.DEBUG

    def test_explicit_level_overrides_env(self, monkeypatch) -> None:
        monkeypatch.setenv(PORTHSIM_LOG_VAR, "debug")
        assert configure_logging("off") == LogLevel.OFF
        assert logging.getLogger("porthsim").level > logging.CRITICAL
