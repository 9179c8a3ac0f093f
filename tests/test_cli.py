# tests/test_cli.py
"""
CLI commands.
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from pullpay.cli import main

SUBSCRIBER = "aa" * 28
MERCHANT = "bb" * 28


@pytest.fixture
def inputs(tmp_path: Path) -> dict[str, Path]:
    docs = {
        "state": {
            "constructor": 0,
            "fields": [
                {"bytes": SUBSCRIBER},
                {"bytes": MERCHANT},
                {"int": 1000},
                {"int": 100},
                {"int": 0},
                {"int": 10_000},
            ],
        },
        "cancel": {"constructor": 1, "fields": []},
        "context": {
            "signatories": [SUBSCRIBER],
            "valid_range": {
                "lower": {"kind": "finite", "time": 0},
                "upper": {"kind": "finite", "time": 5_000},
            },
        },
    }
    paths = {}
    for name, doc in docs.items():
        p = tmp_path / f"{name}.json"
        p.write_text(json.dumps(doc))
        paths[name] = p
    return paths


def eval_args(inputs: dict[str, Path], action: Path) -> list[str]:
    return [
        "evaluate",
        "--state", str(inputs["state"]),
        "--action", str(action),
        "--context", str(inputs["context"]),
    ]


class TestEvaluateCommand:
    def test_accept_exit_zero(self, inputs, capsys):
        assert main(eval_args(inputs, inputs["cancel"])) == 0
        out = json.loads(capsys.readouterr().out)
        assert out == {"allow": True, "reason": "cancel: allowed", "code": "ok"}

    def test_reject_exit_one(self, inputs, tmp_path: Path, capsys):
        charge = tmp_path / "charge.json"
        charge.write_text(json.dumps({"constructor": 0, "fields": [{"int": 5}]}))
        assert main(eval_args(inputs, charge)) == 1
        out = json.loads(capsys.readouterr().out)
        assert out["code"] == "sig:missing"

    def test_malformed_file_rejects(self, inputs, tmp_path: Path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text("not json")
        assert main(eval_args(inputs, bad)) == 1
        assert json.loads(capsys.readouterr().out)["code"] == "decode:malformed"

    def test_ledger_then_verify(self, inputs, tmp_path: Path, capsys):
        ledger = tmp_path / "audit.jsonl"
        main(eval_args(inputs, inputs["cancel"]) + ["--ledger", str(ledger)])
        main(eval_args(inputs, inputs["cancel"]) + ["--ledger", str(ledger)])
        capsys.readouterr()

        assert main(["verify-ledger", str(ledger)]) == 0
        assert capsys.readouterr().out.strip() == "OK"

    def test_ledger_path_from_environment(self, inputs, tmp_path: Path, monkeypatch):
        ledger = tmp_path / "env.jsonl"
        monkeypatch.setenv("PULLPAY_LEDGER_PATH", str(ledger))
        main(eval_args(inputs, inputs["cancel"]))
        assert ledger.exists()

    def test_invalid_reset_rule_in_environment_is_usage_error(self, inputs, monkeypatch, capsys):
        monkeypatch.setenv("PULLPAY_RESET_RULE", "bogus")
        with pytest.raises(SystemExit) as exc:
            main(eval_args(inputs, inputs["cancel"]))
        assert exc.value.code == 2
        assert "reset rule" in capsys.readouterr().err

    def test_invalid_reset_rule_rejected_by_parser(self, inputs):
        with pytest.raises(SystemExit):
            main(eval_args(inputs, inputs["cancel"]) + ["--reset-rule", "never"])


class TestVerifyLedgerCommand:
    def test_broken_chain_exit_one(self, tmp_path: Path, capsys):
        path = tmp_path / "audit.jsonl"
        path.write_text(json.dumps({"prev_entry_hash": "1" * 64, "entry_hash": "x"}) + "\n")
        assert main(["verify-ledger", str(path)]) == 1
        assert capsys.readouterr().out.startswith("Entry 0:")
