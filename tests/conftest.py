"""
Pytest fixtures for Tip Reconciler tests: payload builders and mock HTTP clients.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import base58
import httpx
import pytest

from tip_reconciler.ledger.models import MEMO_PROGRAM_ID, WSOL_MINT

BOT = "BotWa11et1111111111111111111111111111111111"
POOL = "PooL222222222222222222222222222222222222222"
TIP_ACCOUNT = "96gYZGLnJYVFmbjzopPSU6QiEV5fGqZNyN9nmNhvrZU5"
SIG_A = "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnbJLgp8uirBgmQpjKhoR4tjF3ZpRzrFmBV6UjKdiSZkQUW"
SIG_B = "3xTzWkAfsH6kqD9oGmUe2fyLr4nLvvS8bT9cJgN1pQwRy7Zk4aHbMx2dVuEoFiCsNtLe5WqYgPjKrU8mB1nZcXa"

MEMO_B58 = base58.b58encode(b"arb:ok").decode("ascii")


def rpc_tx(
    *,
    pre_wsol: int | None = 1_000_000_000,
    post_wsol: int | None = 1_800_000_000,
    pre_sol: int = 5_000_000_000,
    post_sol: int = 4_990_000_000,
    memo: str | None = "arb:ok",
    block_time: int | None = 1700000000,
    signature: str = SIG_A,
) -> dict[str, Any]:
    """getTransaction(jsonParsed) result with one fee-payer WSOL account at index 2."""
    def balance(amount: int) -> dict[str, Any]:
        return {
            "accountIndex": 2,
            "mint": WSOL_MINT,
            "owner": BOT,
            "uiTokenAmount": {"amount": str(amount), "decimals": 9},
        }

    instructions: list[dict[str, Any]] = [
        {
            "program": "system",
            "programId": "11111111111111111111111111111111",
            "parsed": {"type": "transfer", "info": {"source": BOT, "destination": TIP_ACCOUNT, "lamports": 10_000_000}},
        },
    ]
    if memo is not None:
        instructions.append({"program": "spl-memo", "programId": MEMO_PROGRAM_ID, "parsed": memo})
    return {
        "blockTime": block_time,
        "slot": 250_000_000,
        "meta": {
            "err": None,
            "preBalances": [pre_sol, 2_039_280, 2_039_280],
            "postBalances": [post_sol, 2_039_280, 2_039_280],
            "preTokenBalances": [balance(pre_wsol)] if pre_wsol is not None else [],
            "postTokenBalances": [balance(post_wsol)] if post_wsol is not None else [],
            "innerInstructions": [],
        },
        "transaction": {
            "signatures": [signature],
            "message": {
                "accountKeys": [
                    {"pubkey": BOT, "signer": True, "writable": True},
                    {"pubkey": POOL, "signer": False, "writable": True},
                    {"pubkey": "WsoLAcct33333333333333333333333333333333333", "signer": False, "writable": True},
                ],
                "instructions": instructions,
            },
        },
    }


def helius_tx(
    *,
    wsol_in: float = 2.0,
    wsol_out: float = 1.2,
    tip_lamports: int = 10_000_000,
    memo_data: str | None = MEMO_B58,
    signature: str = SIG_A,
) -> dict[str, Any]:
    """Helius enhanced transaction record."""
    token_transfers = []
    if wsol_out:
        token_transfers.append({"fromUserAccount": BOT, "toUserAccount": POOL, "mint": WSOL_MINT, "tokenAmount": wsol_out})
    if wsol_in:
        token_transfers.append({"fromUserAccount": POOL, "toUserAccount": BOT, "mint": WSOL_MINT, "tokenAmount": wsol_in})
    instructions = []
    if memo_data is not None:
        instructions.append({"programId": MEMO_PROGRAM_ID, "data": memo_data, "accounts": []})
    return {
        "signature": signature,
        "timestamp": 1700000000,
        "feePayer": BOT,
        "tokenTransfers": token_transfers,
        "nativeTransfers": [
            {"fromUserAccount": BOT, "toUserAccount": TIP_ACCOUNT, "amount": tip_lamports},
            {"fromUserAccount": POOL, "toUserAccount": BOT, "amount": 5},
        ],
        "instructions": instructions,
    }


@pytest.fixture
def make_client():
    """
    Build an httpx.Client backed by handler(request) -> Response.
    Returns (client, seen_requests).
    """
    clients: list[httpx.Client] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> tuple[httpx.Client, list[httpx.Request]]:
        seen: list[httpx.Request] = []

        def _recording(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        client = httpx.Client(transport=httpx.MockTransport(_recording))
        clients.append(client)
        return client, seen

    yield _make
    for c in clients:
        c.close()


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content)
