"""
Audit trail of gate verdicts.

One JSON line per evaluated action. Each entry stores the encoded state,
action and context together with their digests and the verdict, and is
chained to the previous entry by `prev_entry_hash`.
"""
from __future__ import annotations

import hashlib
import json
import os
import threading
import time
from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Mapping

from .codec import encode_action, encode_context, encode_state
from .types import SubscriptionAction, SubscriptionState, TxContext, Verdict

GENESIS_HASH = "0" * 64


def digest(doc: Any) -> str:
    """SHA-256 of the sorted, compact JSON form of an encoded document."""
    raw = json.dumps(doc, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class LedgerEntry:
    idx: int
    ts_utc: str
    state_hash: str
    action_hash: str
    context_hash: str
    allow: bool
    code: str
    prev_entry_hash: str
    entry_hash: str
    payload: Mapping[str, Any]


class AppendOnlyLedger:
    """
    Append-only verdict log.

    The tail (entry count, last hash) is read from disk once per instance and
    then tracked in memory, so one process should own a ledger file. Appends
    to the same path are serialized across instances.
    """

    _locks: ClassVar[dict[str, threading.Lock]] = {}
    _locks_guard: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, path: str):
        self.path = path
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with self._locks_guard:
            self._lock = self._locks.setdefault(os.path.abspath(path), threading.Lock())
        self._tail: tuple[int, str] | None = None

    def _now_utc_iso(self) -> str:
        return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())

    def _scan_tail(self) -> tuple[int, str]:
        if not os.path.exists(self.path):
            return 0, GENESIS_HASH
        count = 0
        last = None
        with open(self.path, "rb") as f:
            for line in f:
                if line.strip():
                    count += 1
                    last = line
        if last is None:
            return 0, GENESIS_HASH
        return count, json.loads(last.decode("utf-8"))["entry_hash"]

    def append(
        self,
        state: SubscriptionState,
        action: SubscriptionAction,
        ctx: TxContext,
        verdict: Verdict,
        reset_rule: str,
    ) -> LedgerEntry:
        state_doc = encode_state(state)
        action_doc = encode_action(action)
        ctx_doc = encode_context(ctx)

        with self._lock:
            if self._tail is None:
                self._tail = self._scan_tail()
            idx, prev = self._tail

            entry_core = {
                "idx": idx,
                "ts_utc": self._now_utc_iso(),
                "state_hash": digest(state_doc),
                "action_hash": digest(action_doc),
                "context_hash": digest(ctx_doc),
                "allow": verdict.allow,
                "code": verdict.code,
                "prev_entry_hash": prev,
                "payload": {
                    "state": state_doc,
                    "action": action_doc,
                    "context": ctx_doc,
                    "verdict": asdict(verdict),
                    "reset_rule": reset_rule,
                },
            }
            entry_hash = digest(entry_core)

            with open(self.path, "ab") as f:
                f.write(json.dumps({**entry_core, "entry_hash": entry_hash}).encode("utf-8") + b"\n")
            self._tail = (idx + 1, entry_hash)

        return LedgerEntry(entry_hash=entry_hash, **entry_core)
