# pullpay/config.py
"""
Centralized configuration with environment variable fallbacks.

The gate itself takes no configuration beyond its arguments; these settings
drive the boundary (script runner, CLI, HTTP service).
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .allowance import RESET_RULES, ResetRule
from .errors import ConfigError


def resolve_reset_rule(explicit: str | None = None) -> ResetRule:
    """Explicit rule if given, else PULLPAY_RESET_RULE; ConfigError if unknown."""
    raw = explicit if explicit is not None else os.getenv("PULLPAY_RESET_RULE", "reaches")
    rule = raw.strip().lower()
    if rule not in RESET_RULES:
        raise ConfigError(f"reset rule must be one of {RESET_RULES}, got {rule!r}")
    return rule  # type: ignore[return-value]


def get_ledger_path() -> str | None:
    """Ledger path from environment; None disables recording."""
    return os.getenv("PULLPAY_LEDGER_PATH") or None


@dataclass(frozen=True)
class Settings:
    reset_rule: ResetRule = "reaches"
    ledger_path: str | None = None
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000


def get_settings() -> Settings:
    """Get settings from environment. Raises ConfigError on an unknown reset rule."""
    return Settings(
        reset_rule=resolve_reset_rule(),
        ledger_path=get_ledger_path(),
        log_level=os.getenv("PULLPAY_LOG_LEVEL", "INFO").upper(),
        host=os.getenv("PULLPAY_HOST", "127.0.0.1"),
        port=int(os.getenv("PULLPAY_PORT", "8000")),
    )
