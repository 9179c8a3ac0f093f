# pullpay/errors.py
"""
Rejection taxonomy with structured codes.

Error codes follow the pattern: {category}:{specific_code}

Categories:
- decode: Untrusted input did not decode into the expected shape
- sig: Required signer missing from the transaction
- amount: Declared amount out of range
- allowance: Period allowance exhausted
- payment: Declared charge not backed by an actual transfer
- update: Invalid replacement parameters
- config: Boundary misconfigured; evaluation fails closed
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from .types import Verdict


class ErrorCategory(str, Enum):
    DECODE = "decode"
    SIG = "sig"
    AMOUNT = "amount"
    ALLOWANCE = "allowance"
    PAYMENT = "payment"
    UPDATE = "update"
    CONFIG = "config"


class ErrorCode:
    OK = "ok"

    DECODE_MALFORMED = "decode:malformed"
    DECODE_UNKNOWN_ACTION = "decode:unknown_action"

    SIG_MISSING = "sig:missing"

    AMOUNT_NON_POSITIVE = "amount:non_positive"

    ALLOWANCE_EXCEEDED = "allowance:exceeded"

    PAYMENT_INSUFFICIENT = "payment:insufficient"

    UPDATE_NEGATIVE_PARAM = "update:negative_param"

    CONFIG_INVALID = "config:invalid"


def category_of(code: str) -> ErrorCategory | None:
    """Category of a rejection code; None for the accept code."""
    if ":" not in code:
        return None
    return ErrorCategory(code.split(":")[0])


def accept(reason: str) -> Verdict:
    return Verdict(True, reason, ErrorCode.OK)


def reject(code: str, reason: str) -> Verdict:
    return Verdict(False, reason, code)


class DecodeError(ValueError):
    """Raised when untrusted input cannot be decoded."""

    def __init__(self, what: str, message: str, **details: Any):
        super().__init__(f"{what}: {message}")
        self.what = what
        self.details = details

    def to_verdict(self) -> Verdict:
        return reject(ErrorCode.DECODE_MALFORMED, f"decode: malformed {self.what}")


class ConfigError(ValueError):
    """Raised when boundary settings are invalid."""

    def to_verdict(self) -> Verdict:
        return reject(ErrorCode.CONFIG_INVALID, f"config: {self}")


class ScriptFailure(Exception):
    """Raised at the host boundary when the transaction must be rejected."""

    def __init__(self, verdict: Verdict):
        super().__init__(verdict.reason)
        self.verdict = verdict

    @property
    def code(self) -> str:
        return self.verdict.code
