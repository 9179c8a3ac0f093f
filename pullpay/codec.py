"""
Strict decoding of untrusted inputs into gate types.

State Record and Action Request arrive in the ledger's detailed data schema
(`{"constructor": n, "fields": [...]}` with `{"int": n}` / `{"bytes": hex}`
leaves). The Transaction Context arrives as a named JSON object.

Every decoder fails closed: anything that does not match the expected shape
exactly raises DecodeError before a single check runs.
"""
from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    model_validator,
)

from .errors import DecodeError
from .interval import Bound, Interval
from .types import (
    Address,
    Cancel,
    Charge,
    Credential,
    PubKeyCredential,
    ScriptCredential,
    StakingCredential,
    SubscriptionAction,
    SubscriptionState,
    TopUp,
    TxContext,
    TxOut,
    Update,
)

HEX_PATTERN = r"^([0-9a-fA-F]{2})*$"

HexStr = Annotated[StrictStr, Field(pattern=HEX_PATTERN)]

_WIRE = ConfigDict(extra="forbid", frozen=True)

RawInput = Union[bytes, bytearray, str, dict]


# =============================================================================
# WIRE MODELS
# =============================================================================


class IntData(BaseModel):
    model_config = _WIRE
    value: StrictInt = Field(alias="int")


class BytesData(BaseModel):
    model_config = _WIRE
    value: HexStr = Field(alias="bytes")


class ConstrData(BaseModel):
    model_config = _WIRE
    constructor: StrictInt = Field(ge=0)
    fields: list[Union[IntData, BytesData, ConstrData]]


ConstrData.model_rebuild()


class CredentialModel(BaseModel):
    model_config = _WIRE
    pubkey: Optional[HexStr] = None
    script: Optional[HexStr] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> CredentialModel:
        if (self.pubkey is None) == (self.script is None):
            raise ValueError("credential must have exactly one of 'pubkey' or 'script'")
        return self


class AddressModel(BaseModel):
    model_config = _WIRE
    payment: CredentialModel
    staking: Optional[CredentialModel] = None


class TxOutModel(BaseModel):
    model_config = _WIRE
    address: AddressModel
    value: dict[HexStr, dict[HexStr, StrictInt]]


class BoundModel(BaseModel):
    model_config = _WIRE
    kind: Literal["neg_inf", "finite", "pos_inf"]
    time: Optional[StrictInt] = None
    closed: StrictBool = True

    @model_validator(mode="after")
    def _time_matches_kind(self) -> BoundModel:
        if (self.kind == "finite") != (self.time is not None):
            raise ValueError("'time' is required for finite bounds and forbidden otherwise")
        return self


class IntervalModel(BaseModel):
    model_config = _WIRE
    lower: BoundModel
    upper: BoundModel


class TxContextModel(BaseModel):
    model_config = _WIRE
    signatories: list[HexStr] = Field(default_factory=list)
    outputs: list[TxOutModel] = Field(default_factory=list)
    valid_range: IntervalModel


# =============================================================================
# HELPERS
# =============================================================================


def _parse(model: type[BaseModel], raw: RawInput, what: str) -> Any:
    try:
        if isinstance(raw, (bytes, bytearray, str)):
            return model.model_validate_json(raw)
        return model.model_validate(raw)
    except ValidationError as e:
        raise DecodeError(what, f"{e.error_count()} validation error(s)", errors=e.errors()) from e
    except ValueError as e:
        raise DecodeError(what, str(e)) from e


def _fields(c: ConstrData, expected: tuple[type, ...], what: str) -> list[Any]:
    if len(c.fields) != len(expected):
        raise DecodeError(
            what,
            f"constructor {c.constructor} expects {len(expected)} fields, got {len(c.fields)}",
        )
    out: list[Any] = []
    for i, (f, kind) in enumerate(zip(c.fields, expected)):
        if not isinstance(f, kind):
            raise DecodeError(what, f"field {i} must be {kind.__name__}")
        out.append(f.value.lower() if isinstance(f, BytesData) else f.value)
    return out


def _credential(m: CredentialModel) -> Credential:
    if m.pubkey is not None:
        return PubKeyCredential(m.pubkey.lower())
    assert m.script is not None
    return ScriptCredential(m.script.lower())


def _bound(m: BoundModel) -> Bound:
    return Bound(m.kind, m.time, m.closed)


# =============================================================================
# DECODERS
# =============================================================================


def decode_state(raw: RawInput) -> SubscriptionState:
    c = _parse(ConstrData, raw, "state")
    if c.constructor != 0:
        raise DecodeError("state", f"unexpected constructor {c.constructor}")
    subscriber, merchant, period, limit, spent, reset_at = _fields(
        c, (BytesData, BytesData, IntData, IntData, IntData, IntData), "state"
    )
    return SubscriptionState(
        subscriber=subscriber,
        merchant=merchant,
        period=period,
        limit=limit,
        spent_in_period=spent,
        reset_at=reset_at,
    )


def decode_action(raw: RawInput) -> SubscriptionAction:
    c = _parse(ConstrData, raw, "action")
    if c.constructor == 0:
        (amount,) = _fields(c, (IntData,), "action")
        return Charge(amount)
    if c.constructor == 1:
        _fields(c, (), "action")
        return Cancel()
    if c.constructor == 2:
        (amount,) = _fields(c, (IntData,), "action")
        return TopUp(amount)
    if c.constructor == 3:
        new_limit, new_period, new_reset_at = _fields(c, (IntData, IntData, IntData), "action")
        return Update(new_limit, new_period, new_reset_at)
    raise DecodeError("action", f"unexpected constructor {c.constructor}")


def decode_context(raw: RawInput) -> TxContext:
    m = _parse(TxContextModel, raw, "context")
    outputs = tuple(
        TxOut(
            address=Address(
                _credential(o.address.payment),
                StakingCredential(_credential(o.address.staking))
                if o.address.staking is not None
                else None,
            ),
            value={s.lower(): {t.lower(): q for t, q in toks.items()} for s, toks in o.value.items()},
        )
        for o in m.outputs
    )
    return TxContext(
        signatories=frozenset(s.lower() for s in m.signatories),
        outputs=outputs,
        valid_range=Interval(_bound(m.valid_range.lower), _bound(m.valid_range.upper)),
    )


# =============================================================================
# ENCODERS (off-chain tooling and tests)
# =============================================================================


def _int(n: int) -> dict[str, Any]:
    return {"int": n}


def _bytes(h: str) -> dict[str, Any]:
    return {"bytes": h}


def encode_state(state: SubscriptionState) -> dict[str, Any]:
    return {
        "constructor": 0,
        "fields": [
            _bytes(state.subscriber),
            _bytes(state.merchant),
            _int(state.period),
            _int(state.limit),
            _int(state.spent_in_period),
            _int(state.reset_at),
        ],
    }


def encode_action(action: SubscriptionAction) -> dict[str, Any]:
    if isinstance(action, Charge):
        return {"constructor": 0, "fields": [_int(action.amount)]}
    if isinstance(action, Cancel):
        return {"constructor": 1, "fields": []}
    if isinstance(action, TopUp):
        return {"constructor": 2, "fields": [_int(action.amount)]}
    if isinstance(action, Update):
        return {
            "constructor": 3,
            "fields": [_int(action.new_limit), _int(action.new_period), _int(action.new_reset_at)],
        }
    raise TypeError(f"Not a subscription action: {type(action).__name__}")


def _encode_credential(c: Credential) -> dict[str, Any]:
    if isinstance(c, PubKeyCredential):
        return {"pubkey": c.pkh}
    return {"script": c.script_hash}


def _encode_bound(b: Bound) -> dict[str, Any]:
    return {"kind": b.kind, "time": b.time, "closed": b.closed}


def encode_context(ctx: TxContext) -> dict[str, Any]:
    return {
        "signatories": sorted(ctx.signatories),
        "outputs": [
            {
                "address": {
                    "payment": _encode_credential(o.address.payment),
                    "staking": _encode_credential(o.address.staking.credential)
                    if o.address.staking is not None
                    else None,
                },
                "value": {s: dict(toks) for s, toks in o.value.items()},
            }
            for o in ctx.outputs
        ],
        "valid_range": {
            "lower": _encode_bound(ctx.valid_range.lower),
            "upper": _encode_bound(ctx.valid_range.upper),
        },
    }
