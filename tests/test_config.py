# tests/test_config.py
"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from pullpay.config import resolve_reset_rule, get_settings
from pullpay.errors import ConfigError


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in (
            "PULLPAY_RESET_RULE",
            "PULLPAY_LEDGER_PATH",
            "PULLPAY_LOG_LEVEL",
            "PULLPAY_HOST",
            "PULLPAY_PORT",
        ):
            monkeypatch.delenv(name, raising=False)
        s = get_settings()
        assert s.reset_rule == "reaches"
        assert s.ledger_path is None
        assert s.log_level == "INFO"
        assert (s.host, s.port) == ("127.0.0.1", 8000)

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("PULLPAY_RESET_RULE", " Contained ")
        monkeypatch.setenv("PULLPAY_LEDGER_PATH", "/tmp/x.jsonl")
        monkeypatch.setenv("PULLPAY_LOG_LEVEL", "debug")
        monkeypatch.setenv("PULLPAY_PORT", "9001")
        s = get_settings()
        assert s.reset_rule == "contained"
        assert s.ledger_path == "/tmp/x.jsonl"
        assert s.log_level == "DEBUG"
        assert s.port == 9001

    def test_unknown_reset_rule(self, monkeypatch):
        monkeypatch.setenv("PULLPAY_RESET_RULE", "wallclock")
        with pytest.raises(ConfigError):
            resolve_reset_rule()
        with pytest.raises(ConfigError):
            get_settings()

    def test_explicit_rule_overrides_environment(self, monkeypatch):
        monkeypatch.setenv("PULLPAY_RESET_RULE", "wallclock")
        assert resolve_reset_rule("contained") == "contained"

    def test_explicit_unknown_rule(self):
        with pytest.raises(ConfigError):
            resolve_reset_rule("sometimes")
