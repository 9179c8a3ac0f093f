from __future__ import annotations

from typing import Literal

from .interval import contains, from_, is_empty, reaches
from .types import SubscriptionState, TxContext

ResetRule = Literal["reaches", "contained"]

RESET_RULES: tuple[str, ...] = ("reaches", "contained")


def reset_reached(ctx: TxContext, reset_at: int, rule: ResetRule = "reaches") -> bool:
    """
    Whether the period reset falls within this transaction.

    "reaches":   the validity range admits some time >= reset_at.
    "contained": the whole validity range lies at or after reset_at.
    An empty validity range never reaches the reset.
    """
    vr = ctx.valid_range
    if is_empty(vr):
        return False
    if rule == "contained":
        return contains(from_(reset_at), vr)
    if rule == "reaches":
        return reaches(vr, reset_at)
    raise ValueError(f"Unknown reset rule: {rule}")


def remaining_allowance(
    ctx: TxContext, state: SubscriptionState, rule: ResetRule = "reaches"
) -> int:
    # Not clamped: spent > limit yields a negative allowance.
    if reset_reached(ctx, state.reset_at, rule):
        return state.limit
    return state.limit - state.spent_in_period
