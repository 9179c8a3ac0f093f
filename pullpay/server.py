# pullpay/server.py
"""
Pull-payment pre-flight service - FastAPI Server

Lets off-chain tooling ask for a verdict before submitting a transaction.
Documents that parse as JSON objects but do not decode are answered with a
reject verdict, never a 500.

Run: python -m pullpay.server
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Optional

import uvicorn
from fastapi import FastAPI
from pydantic import BaseModel

from .allowance import ResetRule
from .config import get_ledger_path, get_settings
from .ledger import AppendOnlyLedger
from .script import evaluate

logger = logging.getLogger(__name__)

# =============================================================================
# APP CONFIGURATION
# =============================================================================

app = FastAPI(
    title="pullpay",
    description="Authorization gate for pull-payment subscriptions",
    version="1.0.0",
)


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================


class EvaluateRequest(BaseModel):
    state: dict[str, Any]
    action: dict[str, Any]
    context: dict[str, Any]
    reset_rule: Optional[ResetRule] = None


class VerdictResponse(BaseModel):
    allow: bool
    reason: str
    code: str


# =============================================================================
# ENDPOINTS
# =============================================================================


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@lru_cache(maxsize=None)
def _ledger_for(path: str) -> AppendOnlyLedger:
    # One instance per path keeps the tail in memory across requests.
    return AppendOnlyLedger(path)


@app.post("/evaluate", response_model=VerdictResponse)
def evaluate_endpoint(request: EvaluateRequest) -> VerdictResponse:
    """
    Evaluate one action. Inputs use the same JSON shapes as the CLI files.

    Plain def: ledger appends are blocking file I/O, so FastAPI runs this in
    its threadpool; the ledger serializes concurrent appends.
    """
    ledger_path = get_ledger_path()
    ledger = _ledger_for(ledger_path) if ledger_path else None
    verdict = evaluate(
        request.state,
        request.action,
        request.context,
        reset_rule=request.reset_rule,
        ledger=ledger,
    )
    return VerdictResponse(allow=verdict.allow, reason=verdict.reason, code=verdict.code)


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    logger.info("server_start", extra={"host": settings.host, "port": settings.port})
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
