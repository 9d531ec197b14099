"""
On-chain side: fetch transactions from RPC or Helius and normalize them.
"""

from tip_reconciler.ledger.fetcher import (
    IndexerFetcher,
    LedgerRpcFetcher,
    TransactionFetcher,
    build_fetcher,
    is_report_artifact,
    pace,
)
from tip_reconciler.ledger.models import Backend, CanonicalTransactionRecord, RawTransactionPayload
from tip_reconciler.ledger.normalizer import normalize

__all__ = [
    "Backend",
    "CanonicalTransactionRecord",
    "IndexerFetcher",
    "LedgerRpcFetcher",
    "RawTransactionPayload",
    "TransactionFetcher",
    "build_fetcher",
    "is_report_artifact",
    "normalize",
    "pace",
]
