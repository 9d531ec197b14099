"""
Reconciler: join the signature list with bot telemetry and on-chain outcomes.

For each signature, in list order:
  telemetry lookup -> fetch -> normalize -> metrics -> ReconciledRow

Every signature that is not a report artifact yields exactly one row.
found is True only when a canonical record was produced; rows for
failed or missing transactions are kept with metrics=None.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from tip_reconciler.analytics.metrics import FinancialMetrics, metrics_for_backend
from tip_reconciler.core.exceptions import MalformedPayload
from tip_reconciler.ledger.fetcher import TransactionFetcher, is_report_artifact, pace
from tip_reconciler.ledger.models import CanonicalTransactionRecord, RawTransactionPayload
from tip_reconciler.ledger.normalizer import normalize
from tip_reconciler.recon_logging import bind_signature, get_logger
from tip_reconciler.telemetry.models import TelemetryEntry

logger = get_logger(__name__)

UNKNOWN = "unknown"


@dataclass(frozen=True)
class ReconciledRow:
    signature: str
    type: str
    region: str
    time_spent_ms: int | None
    quote_time_ms: int | None
    found: bool
    block_timestamp: int | None = None
    memo: str = ""
    metrics: FinancialMetrics | None = None

    @classmethod
    def from_telemetry(cls, signature: str, entry: TelemetryEntry | None, **kwargs: Any) -> "ReconciledRow":
        """Row with telemetry fields filled in, or unknown/absent defaults."""
        if entry is None:
            return cls(signature=signature, type=UNKNOWN, region=UNKNOWN, time_spent_ms=None, quote_time_ms=None, **kwargs)
        return cls(
            signature=signature,
            type=entry.type.value,
            region=entry.region,
            time_spent_ms=entry.time_spent_ms,
            quote_time_ms=entry.quote_time_ms,
            **kwargs,
        )


def select_signatures(signatures: Sequence[str]) -> list[str]:
    """Drop report artifacts (region names, section headers, empties); keep order and duplicates."""
    kept: list[str] = []
    for sig in signatures:
        if is_report_artifact(sig):
            logger.info("signature_rejected_report_artifact", value=sig)
            continue
        kept.append(sig.strip())
    return kept


def reconcile_telemetry_only(
    signatures: Sequence[str],
    telemetry: Mapping[str, TelemetryEntry],
) -> list[ReconciledRow]:
    """Log-only join (no chain data): found means the signature appears in the logs."""
    return [
        ReconciledRow.from_telemetry(sig, telemetry.get(sig), found=sig in telemetry)
        for sig in select_signatures(signatures)
    ]


class Reconciler:
    """
    Sequential fetch-and-join driver.

    pace() runs between consecutive signatures, never before the first or
    after the last.
    """

    def __init__(
        self,
        fetcher: TransactionFetcher,
        *,
        pacing_sec: float = 0.05,
        sleep: Callable[[float], None] = time.sleep,
        normalizer: Callable[[RawTransactionPayload], CanonicalTransactionRecord] = normalize,
    ) -> None:
        self._fetcher = fetcher
        self._pacing_sec = pacing_sec
        self._sleep = sleep
        self._normalize = normalizer

    def reconcile(
        self,
        signatures: Sequence[str],
        telemetry: Mapping[str, TelemetryEntry],
    ) -> list[ReconciledRow]:
        selected = select_signatures(signatures)
        total = len(selected)
        rows: list[ReconciledRow] = []
        for i, sig in enumerate(selected):
            rows.append(self.reconcile_one(sig, telemetry.get(sig)))
            logger.info("reconcile_progress", processed=i + 1, total=total)
            if i + 1 < total:
                pace(self._pacing_sec, self._sleep)
        found = sum(1 for r in rows if r.found)
        logger.info("reconcile_done", total=total, found=found, missing=total - found)
        return rows

    def reconcile_one(self, signature: str, entry: TelemetryEntry | None) -> ReconciledRow:
        log = bind_signature(signature, backend=self._fetcher.backend.value)
        try:
            record = self._fetch_record(signature)
        except MalformedPayload as e:
            log.warning("normalize_malformed_payload", error=str(e))
            record = None
        except Exception as e:
            log.exception("reconcile_item_error", error=str(e))
            record = None

        if record is None:
            return ReconciledRow.from_telemetry(signature, entry, found=False)

        metrics = metrics_for_backend(record.backend, record.total_wsol_in, record.total_wsol_out, record.tip)
        log.info(
            "transaction_reconciled",
            total_wsol_in=record.total_wsol_in,
            total_wsol_out=record.total_wsol_out,
            tip=record.tip,
            memo=record.memo,
        )
        return ReconciledRow.from_telemetry(
            signature,
            entry,
            found=True,
            block_timestamp=record.block_timestamp,
            memo=record.memo,
            metrics=metrics,
        )

    def _fetch_record(self, signature: str) -> CanonicalTransactionRecord | None:
        payload = self._fetcher.fetch(signature)
        if payload is None:
            return None
        return self._normalize(payload)
