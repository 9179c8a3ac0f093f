# pullpay/cli.py
"""
CLI for the subscription gate.

Commands:
- evaluate: Decode state/action/context files and print the verdict
- verify-ledger: Check the audit ledger and replay its verdicts
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict

from .allowance import RESET_RULES
from .config import get_ledger_path, resolve_reset_rule
from .errors import ConfigError
from .ledger import AppendOnlyLedger
from .replay import verify_ledger
from .script import evaluate


def _read(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def cmd_evaluate(args) -> int:
    """Evaluate one action and print the verdict."""
    ledger_path = args.ledger or get_ledger_path()
    ledger = AppendOnlyLedger(ledger_path) if ledger_path else None

    verdict = evaluate(
        _read(args.state),
        _read(args.action),
        _read(args.context),
        reset_rule=args.reset_rule,
        ledger=ledger,
    )
    print(json.dumps(asdict(verdict), ensure_ascii=False, indent=2))
    return 0 if verdict.allow else 1


def cmd_verify_ledger(args) -> int:
    """Verify ledger chain, digests and replayed verdicts."""
    ok, msg = verify_ledger(args.path)
    print(msg)
    return 0 if ok else 1


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="pullpay", description="Pull-payment subscription gate")
    sub = ap.add_subparsers(dest="cmd", required=True)

    # evaluate
    p_eval = sub.add_parser("evaluate", help="Evaluate an action against a state")
    p_eval.add_argument("--state", required=True, help="State Record JSON file")
    p_eval.add_argument("--action", required=True, help="Action Request JSON file")
    p_eval.add_argument("--context", required=True, help="Transaction Context JSON file")
    p_eval.add_argument("--ledger", help="Append the verdict to this JSONL ledger")
    p_eval.add_argument("--reset-rule", choices=RESET_RULES, help="Period-reset rule")

    # verify-ledger
    p_ver = sub.add_parser("verify-ledger", help="Verify ledger chain and replay its verdicts")
    p_ver.add_argument("path", help="Ledger JSONL file")

    args = ap.parse_args(argv)
    if args.cmd == "evaluate":
        try:
            args.reset_rule = resolve_reset_rule(args.reset_rule)
        except ConfigError as e:
            ap.error(str(e))

    logging.basicConfig(
        level=os.getenv("PULLPAY_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if args.cmd == "evaluate":
        return cmd_evaluate(args)
    return cmd_verify_ledger(args)


if __name__ == "__main__":
    sys.exit(main())
