# pullpay/__init__.py
"""
pullpay - Authorization gate for recurring pull-payment subscriptions.

A subscriber deposits funds and lets a merchant pull up to a limit per period.
The gate decides whether one requested action may proceed, given the current
State Record and the facts of the enclosing transaction.

Quick Start:
    from pullpay import Charge, TxContext, validate

    verdict = validate(state, Charge(50), ctx)
    if not verdict.allow:
        print(verdict.code, verdict.reason)
"""

from __future__ import annotations

from .allowance import remaining_allowance, reset_reached
from .codec import decode_action, decode_context, decode_state
from .errors import DecodeError, ErrorCode, ScriptFailure
from .gate import validate
from .script import evaluate, run
from .types import (
    Address,
    Cancel,
    Charge,
    SubscriptionAction,
    SubscriptionState,
    TopUp,
    TxContext,
    TxOut,
    Update,
    Verdict,
)
from .value import pub_key_address, signed_by, value_paid_to

__all__ = [
    # Model
    "SubscriptionState",
    "SubscriptionAction",
    "Charge",
    "Cancel",
    "TopUp",
    "Update",
    "Address",
    "TxOut",
    "TxContext",
    "Verdict",
    # Gate
    "validate",
    "remaining_allowance",
    "reset_reached",
    "value_paid_to",
    "pub_key_address",
    "signed_by",
    # Boundary
    "decode_state",
    "decode_action",
    "decode_context",
    "evaluate",
    "run",
    "DecodeError",
    "ScriptFailure",
    "ErrorCode",
]
