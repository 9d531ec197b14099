"""
End-to-end runs: inputs -> reconciled rows -> stats -> CSV report.

run_log_analysis     signatures + bot log, no chain data (found = seen in log)
run_reconciliation   signatures + bot log (or a previous report) + chain data

Input files are checked before anything is read or written; a missing one
raises RequiredFileMissing and no report is created.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import httpx

from tip_reconciler.analytics.aggregate import AggregateStats, build_aggregate_stats
from tip_reconciler.analytics.reconciler import ReconciledRow, Reconciler, reconcile_telemetry_only
from tip_reconciler.config.settings import Settings, get_settings
from tip_reconciler.core.exceptions import RequiredFileMissing
from tip_reconciler.ledger.fetcher import build_fetcher, open_client
from tip_reconciler.recon_logging import get_logger
from tip_reconciler.reporting import load_report, write_report
from tip_reconciler.telemetry.log_parser import parse_log_file
from tip_reconciler.telemetry.models import TelemetryMap
from tip_reconciler.telemetry.signatures import load_signatures

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunSummary:
    signature_count: int
    """Signatures read from the input, before artifact filtering."""
    rows: list[ReconciledRow]
    stats: AggregateStats | None
    output_path: Path

    @property
    def found_count(self) -> int:
        return sum(1 for r in self.rows if r.found)

    @property
    def nothing_to_reconcile(self) -> bool:
        return not self.rows


def require_file(path: Path | str | None, role: str) -> Path:
    if path is None:
        raise RequiredFileMissing("<not given>", role)
    path = Path(path)
    if not path.is_file():
        raise RequiredFileMissing(path, role)
    return path


def _finish(signature_count: int, rows: list[ReconciledRow], output_path: Path | str) -> RunSummary:
    stats = build_aggregate_stats(rows)
    out = write_report(output_path, rows, stats)
    summary = RunSummary(signature_count=signature_count, rows=rows, stats=stats, output_path=out)
    if summary.nothing_to_reconcile:
        logger.warning("nothing_to_reconcile", signatures=signature_count)
    logger.info(
        "run_complete",
        signatures=signature_count,
        rows=len(rows),
        found=summary.found_count,
        output=str(out),
    )
    return summary


def run_log_analysis(
    signatures_path: Path | str,
    log_path: Path | str,
    output_path: Path | str,
) -> RunSummary:
    sig_file = require_file(signatures_path, "signatures")
    log_file = require_file(log_path, "log")

    signatures = load_signatures(sig_file)
    telemetry = parse_log_file(log_file)
    rows = reconcile_telemetry_only(signatures, telemetry)
    return _finish(len(signatures), rows, output_path)


def run_reconciliation(
    output_path: Path | str,
    *,
    signatures_path: Path | str | None = None,
    log_path: Path | str | None = None,
    report_path: Path | str | None = None,
    settings: Settings | None = None,
    client: httpx.Client | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RunSummary:
    """
    Fetch chain data for every signature and join it with telemetry.

    Inputs are either signatures_path + log_path, or report_path (a report
    written by an earlier run). client is injectable for tests; by default
    one is opened from settings and closed at the end.
    """
    if report_path is not None:
        signatures, telemetry = load_report(require_file(report_path, "report"))
    else:
        sig_file = require_file(signatures_path, "signatures")
        log_file = require_file(log_path, "log")
        signatures = load_signatures(sig_file)
        telemetry = parse_log_file(log_file)

    settings = settings or get_settings()
    if client is not None:
        rows = _reconcile(signatures, telemetry, settings, client, sleep)
    else:
        with open_client(settings) as own_client:
            rows = _reconcile(signatures, telemetry, settings, own_client, sleep)
    return _finish(len(signatures), rows, output_path)


def _reconcile(
    signatures: list[str],
    telemetry: TelemetryMap,
    settings: Settings,
    client: httpx.Client,
    sleep: Callable[[float], None],
) -> list[ReconciledRow]:
    fetcher = build_fetcher(settings, client)
    reconciler = Reconciler(fetcher, pacing_sec=settings.pacing_sec, sleep=sleep)
    return reconciler.reconcile(signatures, telemetry)
