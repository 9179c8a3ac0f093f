"""
Value lookups over transaction outputs and signatories.
"""
from __future__ import annotations

from .types import Address, PubKeyCredential, PubKeyHash, TxContext, Value

# The base asset: empty currency symbol, empty token name.
BASE_SYMBOL = ""
BASE_TOKEN = ""


def value_of(value: Value, symbol: str, token: str) -> int:
    return value.get(symbol, {}).get(token, 0)


def base_amount(value: Value) -> int:
    return value_of(value, BASE_SYMBOL, BASE_TOKEN)


def pub_key_address(pkh: PubKeyHash) -> Address:
    """Plain-signature address: key payment credential, no staking part."""
    return Address(PubKeyCredential(pkh), None)


def value_paid_to(ctx: TxContext, pkh: PubKeyHash) -> int:
    """Sum of the base asset sent to the plain address of `pkh`."""
    target = pub_key_address(pkh)
    return sum(base_amount(o.value) for o in ctx.outputs if o.address == target)


def signed_by(ctx: TxContext, pkh: PubKeyHash) -> bool:
    return pkh in ctx.signatories
