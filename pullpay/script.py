"""
Host boundary for the subscription gate.

Decodes the three untrusted inputs, runs the pure gate and signals the result
the way a ledger host expects: return (unit-accept) or raise. Logging and
optional audit recording happen here, never inside the checks.
"""

from __future__ import annotations

import logging

from .allowance import ResetRule
from .codec import RawInput, decode_action, decode_context, decode_state
from .config import resolve_reset_rule
from .errors import ConfigError, DecodeError, ScriptFailure, category_of
from .gate import validate
from .ledger import AppendOnlyLedger
from .types import Verdict

logger = logging.getLogger(__name__)


def _category(code: str) -> str | None:
    category = category_of(code)
    return category.value if category else None


def evaluate(
    state_raw: RawInput,
    action_raw: RawInput,
    context_raw: RawInput,
    *,
    reset_rule: ResetRule | None = None,
    ledger: AppendOnlyLedger | None = None,
) -> Verdict:
    """
    Decode and validate. Malformed input yields a reject verdict.

    Args:
        state_raw: Encoded State Record
        action_raw: Encoded Action Request
        context_raw: Encoded Transaction Context
        reset_rule: Period-reset rule; PULLPAY_RESET_RULE when omitted. An
            unknown rule yields a config:invalid reject
        ledger: Optional audit ledger; only decoded evaluations are recorded

    Returns:
        Verdict from the gate, or a decode:malformed / config:invalid reject
    """
    try:
        rule = resolve_reset_rule(reset_rule)
    except ConfigError as e:
        logger.error("config_invalid", extra={"error": str(e)})
        return e.to_verdict()

    try:
        state = decode_state(state_raw)
        action = decode_action(action_raw)
        ctx = decode_context(context_raw)
    except DecodeError as e:
        verdict = e.to_verdict()
        logger.warning(
            "decode_failed",
            extra={"input": e.what, "error": str(e), "category": _category(verdict.code)},
        )
        return verdict

    verdict = validate(state, action, ctx, reset_rule=rule)

    logger.info(
        "verdict",
        extra={
            "action": type(action).__name__,
            "allow": verdict.allow,
            "code": verdict.code,
            "category": _category(verdict.code),
            "reset_rule": rule,
        },
    )

    if ledger is not None:
        ledger.append(state, action, ctx, verdict, reset_rule=rule)

    return verdict


def run(
    state_raw: RawInput,
    action_raw: RawInput,
    context_raw: RawInput,
    *,
    reset_rule: ResetRule | None = None,
    ledger: AppendOnlyLedger | None = None,
) -> None:
    """Return on accept; raise ScriptFailure on any reject."""
    verdict = evaluate(state_raw, action_raw, context_raw, reset_rule=reset_rule, ledger=ledger)
    if not verdict.allow:
        raise ScriptFailure(verdict)
