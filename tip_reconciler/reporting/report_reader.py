"""
Read a previously written report back as reconciliation input.

Returns the Transaction Hash column in file order, statistics rows
included; those come back as values like "Statistics:" or "tokyo" and are
dropped later by is_report_artifact(). Rows with a known type also yield a
TelemetryEntry, so a log-only report can be re-run against chain data
without the bot log it was built from.
"""

from __future__ import annotations

import csv
from pathlib import Path

from tip_reconciler.recon_logging import get_logger
from tip_reconciler.telemetry.models import TelemetryEntry, TelemetryMap, TxType

logger = get_logger(__name__)

HASH_COLUMN = "Transaction Hash"
_TX_TYPES = {t.value: t for t in TxType}


def _int_or_none(val: str | None) -> int | None:
    if val is None or not val.strip():
        return None
    try:
        return int(float(val))
    except ValueError:
        return None


def load_report(path: Path | str) -> tuple[list[str], TelemetryMap]:
    path = Path(path)
    signatures: list[str] = []
    telemetry = TelemetryMap()
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            sig = (row.get(HASH_COLUMN) or "").strip()
            if not sig:
                continue
            signatures.append(sig)
            tx_type = _TX_TYPES.get((row.get("Type") or "").strip())
            if tx_type is None:
                continue
            telemetry.record(
                TelemetryEntry(
                    signature=sig,
                    region=(row.get("Region") or "").strip(),
                    type=tx_type,
                    time_spent_ms=_int_or_none(row.get("Time Spent (ms)")),
                    quote_time_ms=_int_or_none(row.get("Quote Time (ms)")),
                )
            )
    logger.info("report_loaded", path=str(path), values=len(signatures), telemetry=len(telemetry))
    return signatures, telemetry
