from __future__ import annotations

from .allowance import ResetRule, remaining_allowance
from .errors import ErrorCode, accept, reject
from .types import (
    Cancel,
    Charge,
    SubscriptionAction,
    SubscriptionState,
    TopUp,
    TxContext,
    Update,
    Verdict,
)
from .value import signed_by, value_paid_to


def _charge(state: SubscriptionState, action: Charge, ctx: TxContext, rule: ResetRule) -> Verdict:
    amt = action.amount
    if amt <= 0:
        return reject(ErrorCode.AMOUNT_NON_POSITIVE, "charge: positive amount required")
    if not signed_by(ctx, state.merchant):
        return reject(ErrorCode.SIG_MISSING, "charge: merchant signature required")
    if amt > remaining_allowance(ctx, state, rule):
        return reject(
            ErrorCode.ALLOWANCE_EXCEEDED, "charge: amount exceeds remaining allowance for period"
        )
    if value_paid_to(ctx, state.merchant) < amt:
        return reject(ErrorCode.PAYMENT_INSUFFICIENT, "charge: merchant not paid enough")
    # The successor record's spent_in_period is not checked here.
    return accept("charge: allowed")


def _cancel(state: SubscriptionState, ctx: TxContext) -> Verdict:
    if not signed_by(ctx, state.subscriber):
        return reject(ErrorCode.SIG_MISSING, "cancel: subscriber signature required")
    return accept("cancel: allowed")


def _top_up(state: SubscriptionState, action: TopUp, ctx: TxContext) -> Verdict:
    if not signed_by(ctx, state.subscriber):
        return reject(ErrorCode.SIG_MISSING, "topup: subscriber signature required")
    if action.amount <= 0:
        return reject(ErrorCode.AMOUNT_NON_POSITIVE, "topup: positive topup required")
    # The declared amount is not matched against any incoming value.
    return accept("topup: allowed")


def _update(state: SubscriptionState, action: Update, ctx: TxContext) -> Verdict:
    if not signed_by(ctx, state.subscriber):
        return reject(ErrorCode.SIG_MISSING, "update: subscriber signature required")
    if action.new_limit < 0:
        return reject(ErrorCode.UPDATE_NEGATIVE_PARAM, "update: newLimit non-negative")
    if action.new_period < 0:
        return reject(ErrorCode.UPDATE_NEGATIVE_PARAM, "update: newPeriod non-negative")
    if action.new_reset_at < 0:
        return reject(ErrorCode.UPDATE_NEGATIVE_PARAM, "update: newResetAt non-negative")
    return accept("update: allowed")


def validate(
    state: SubscriptionState,
    action: SubscriptionAction,
    ctx: TxContext,
    *,
    reset_rule: ResetRule = "reaches",
) -> Verdict:
    """
    Pure function. No IO. Never constructs the successor state.

    Returns an accepting Verdict, or the first failed check as a reject.
    """
    if isinstance(action, Charge):
        return _charge(state, action, ctx, reset_rule)
    if isinstance(action, Cancel):
        return _cancel(state, ctx)
    if isinstance(action, TopUp):
        return _top_up(state, action, ctx)
    if isinstance(action, Update):
        return _update(state, action, ctx)
    return reject(ErrorCode.DECODE_UNKNOWN_ACTION, f"Unknown action: {type(action).__name__}")
