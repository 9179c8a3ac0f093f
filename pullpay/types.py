from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Union

from .interval import Interval, always

# Hex-encoded public key hash (the identity a signature is checked against).
PubKeyHash = str

# currency symbol (hex) -> token name (hex) -> quantity
Value = Mapping[str, Mapping[str, int]]


@dataclass(frozen=True)
class SubscriptionState:
    """
    State Record attached to the subscription's ledger position.
    Built off-chain when the subscription is opened; the gate only reads it.
    """
    subscriber: PubKeyHash
    merchant: PubKeyHash
    period: int            # billing cycle length; carried, not enforced
    limit: int             # max base-asset amount per period
    spent_in_period: int   # amount already pulled this period
    reset_at: int          # POSIX ms at which the period ends


# --- Action Request variants -------------------------------------------------


@dataclass(frozen=True)
class Charge:
    """Merchant pulls `amount` from the subscription."""
    amount: int


@dataclass(frozen=True)
class Cancel:
    """Subscriber closes the subscription."""


@dataclass(frozen=True)
class TopUp:
    """Subscriber declares `amount` being added to the held balance."""
    amount: int


@dataclass(frozen=True)
class Update:
    """Subscriber replaces the period parameters."""
    new_limit: int
    new_period: int
    new_reset_at: int


SubscriptionAction = Union[Charge, Cancel, TopUp, Update]


# --- Transaction Context -----------------------------------------------------


@dataclass(frozen=True)
class PubKeyCredential:
    pkh: PubKeyHash


@dataclass(frozen=True)
class ScriptCredential:
    script_hash: str


Credential = Union[PubKeyCredential, ScriptCredential]


@dataclass(frozen=True)
class StakingCredential:
    credential: Credential


@dataclass(frozen=True)
class Address:
    payment: Credential
    staking: StakingCredential | None = None


@dataclass(frozen=True)
class TxOut:
    address: Address
    value: Value


@dataclass(frozen=True)
class TxContext:
    """
    Read-only facts about the enclosing transaction, supplied by the host.
    """
    signatories: frozenset[PubKeyHash] = frozenset()
    outputs: tuple[TxOut, ...] = ()
    valid_range: Interval = field(default_factory=always)


@dataclass(frozen=True)
class Verdict:
    allow: bool
    reason: str
    code: str = "ok"
