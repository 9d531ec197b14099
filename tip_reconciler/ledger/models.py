"""
Data models for on-chain transaction data.

RawTransactionPayload is the tagged union handed from fetcher to
normalizer; CanonicalTransactionRecord is the backend-independent shape
everything downstream works with.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

LAMPORTS_PER_SOL = 1_000_000_000
WSOL_MINT = "So11111111111111111111111111111111111111112"
MEMO_PROGRAM_ID = "MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr"


class Backend(str, Enum):
    LEDGER_RPC = "rpc"
    """Solana JSON-RPC getTransaction, jsonParsed encoding."""
    INDEXER = "helius"
    """Helius enhanced transactions API (/v0/transactions)."""


@dataclass(frozen=True)
class RawTransactionPayload:
    """Upstream record as returned by one backend; only the normalizer reads data."""

    backend: Backend
    signature: str
    data: dict[str, Any]


@dataclass(frozen=True)
class TokenBalanceDelta:
    mint: str
    owner: str
    delta: float
    """UI amount (decimals applied); positive = received."""


@dataclass(frozen=True)
class NativeTransfer:
    from_account: str
    to_account: str
    amount_lamports: int


@dataclass
class CanonicalTransactionRecord:
    """
    One transaction reduced to what profit accounting needs.

    token_balance_deltas only holds WSOL movements owned by the fee payer.
    """

    signature: str
    fee_payer: str
    backend: Backend
    block_timestamp: int | None = None
    """Unix seconds; None when the upstream did not report it."""
    token_balance_deltas: list[TokenBalanceDelta] = field(default_factory=list)
    native_transfers: list[NativeTransfer] = field(default_factory=list)
    tip_lamports: int = 0
    memo_text: str | None = None
    memo_raw: str | None = None

    @property
    def total_wsol_in(self) -> float:
        return sum(d.delta for d in self.token_balance_deltas if d.delta > 0)

    @property
    def total_wsol_out(self) -> float:
        return sum(-d.delta for d in self.token_balance_deltas if d.delta < 0)

    @property
    def tip(self) -> float:
        """Tip in SOL."""
        return self.tip_lamports / LAMPORTS_PER_SOL

    @property
    def memo(self) -> str:
        """Decoded memo, else the raw encoded data, else empty."""
        if self.memo_text is not None:
            return self.memo_text
        return self.memo_raw or ""
