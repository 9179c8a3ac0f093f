# tests/test_server.py
"""
HTTP pre-flight service.
"""
from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from pullpay.replay import verify_ledger
from pullpay.server import app

SUBSCRIBER = "aa" * 28
MERCHANT = "bb" * 28
RESET_AT = 1_700_000_000_000


def body(amount: int = 50, paid: int = 50, **overrides) -> dict:
    doc = {
        "state": {
            "constructor": 0,
            "fields": [
                {"bytes": SUBSCRIBER},
                {"bytes": MERCHANT},
                {"int": 1000},
                {"int": 100},
                {"int": 40},
                {"int": RESET_AT},
            ],
        },
        "action": {"constructor": 0, "fields": [{"int": amount}]},
        "context": {
            "signatories": [MERCHANT],
            "outputs": [
                {"address": {"payment": {"pubkey": MERCHANT}}, "value": {"": {"": paid}}}
            ],
            "valid_range": {
                "lower": {"kind": "finite", "time": RESET_AT - 10},
                "upper": {"kind": "finite", "time": RESET_AT + 10},
            },
        },
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def client(monkeypatch) -> TestClient:
    monkeypatch.delenv("PULLPAY_LEDGER_PATH", raising=False)
    monkeypatch.delenv("PULLPAY_RESET_RULE", raising=False)
    return TestClient(app)


class TestServer:
    def test_health(self, client: TestClient):
        assert client.get("/health").json() == {"status": "ok"}

    def test_accept(self, client: TestClient):
        resp = client.post("/evaluate", json=body())
        assert resp.status_code == 200
        assert resp.json() == {"allow": True, "reason": "charge: allowed", "code": "ok"}

    def test_reset_rule_in_request(self, client: TestClient):
        """Straddling validity range: 'contained' keeps the spent amount."""
        resp = client.post("/evaluate", json=body(amount=100, paid=100, reset_rule="contained"))
        assert resp.json()["code"] == "allowance:exceeded"
        resp = client.post("/evaluate", json=body(amount=100, paid=100))
        assert resp.json()["allow"] is True

    def test_malformed_document_is_a_verdict(self, client: TestClient):
        resp = client.post("/evaluate", json=body(action={"constructor": 0, "fields": [{"int": "5"}]}))
        assert resp.status_code == 200
        assert resp.json()["code"] == "decode:malformed"

    def test_non_object_document_is_client_error(self, client: TestClient):
        resp = client.post("/evaluate", json=body(state=[1, 2, 3]))
        assert resp.status_code == 422

    def test_records_to_configured_ledger(self, client: TestClient, tmp_path: Path, monkeypatch):
        ledger = tmp_path / "srv.jsonl"
        monkeypatch.setenv("PULLPAY_LEDGER_PATH", str(ledger))
        client.post("/evaluate", json=body())
        assert len(ledger.read_text().splitlines()) == 1

    def test_unknown_env_rule_is_a_verdict(self, client: TestClient, monkeypatch):
        monkeypatch.setenv("PULLPAY_RESET_RULE", "bogus")
        resp = client.post("/evaluate", json=body())
        assert resp.status_code == 200
        assert resp.json()["code"] == "config:invalid"

    def test_ledger_shared_across_requests(self, client: TestClient, tmp_path: Path, monkeypatch):
        ledger = tmp_path / "shared.jsonl"
        monkeypatch.setenv("PULLPAY_LEDGER_PATH", str(ledger))
        for _ in range(3):
            client.post("/evaluate", json=body())
        assert verify_ledger(str(ledger)) == (True, "OK")
