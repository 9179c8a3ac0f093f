"""
Ledger verification by replay.

Beyond the hash chain, every entry is re-derived from its own payload: the
stored digests must match the encoded inputs, and decoding those inputs and
running the gate again under the recorded reset rule must reproduce the
recorded verdict.
"""
from __future__ import annotations

import json
from typing import Any, Iterator

from .codec import decode_action, decode_context, decode_state
from .errors import DecodeError
from .gate import validate
from .ledger import GENESIS_HASH, digest
from .types import Verdict


def iter_ledger(path: str) -> Iterator[dict]:
    with open(path, "rb") as f:
        for line in f:
            if line.strip():
                yield json.loads(line.decode("utf-8"))


def replay_entry(entry: dict[str, Any]) -> Verdict:
    """Re-run the gate on an entry's recorded inputs."""
    payload = entry["payload"]
    return validate(
        decode_state(payload["state"]),
        decode_action(payload["action"]),
        decode_context(payload["context"]),
        reset_rule=payload["reset_rule"],
    )


def _check_entry(i: int, entry: dict[str, Any], prev: str) -> str | None:
    if entry.get("idx") != i:
        return f"Entry {i}: index {entry.get('idx')!r} out of sequence"
    if entry["prev_entry_hash"] != prev:
        return f"Entry {i}: prev mismatch"

    core = dict(entry)
    stored = core.pop("entry_hash")
    if digest(core) != stored:
        return f"Entry {i}: entry hash mismatch"

    payload = entry["payload"]
    for field in ("state", "action", "context"):
        if digest(payload[field]) != entry[f"{field}_hash"]:
            return f"Entry {i}: {field} hash mismatch"

    recorded = payload["verdict"]
    if (entry["allow"], entry["code"]) != (recorded["allow"], recorded["code"]):
        return f"Entry {i}: verdict summary disagrees with payload"

    try:
        verdict = replay_entry(entry)
    except DecodeError as e:
        return f"Entry {i}: recorded inputs do not decode ({e})"
    if (verdict.allow, verdict.code, verdict.reason) != (
        recorded["allow"],
        recorded["code"],
        recorded["reason"],
    ):
        return f"Entry {i}: replayed verdict {verdict.code!r} differs from recorded {recorded['code']!r}"
    return None


def verify_ledger(path: str) -> tuple[bool, str]:
    prev = GENESIS_HASH
    for i, entry in enumerate(iter_ledger(path)):
        try:
            problem = _check_entry(i, entry, prev)
        except (KeyError, TypeError, ValueError) as e:
            problem = f"Entry {i}: malformed entry ({e!r})"
        if problem:
            return False, problem
        prev = entry["entry_hash"]
    return True, "OK"
