"""
CSV report: one row per reconciled signature, then aggregate sections.

Layout:
    <header>
    <row per signature>
    (blank)
    Statistics:
    Average Time Spent (ms),<mean>
    Average Quote Time (ms),<mean>
    (blank)
    Transactions by Type:
    <type>,<count>
    (blank)
    Transactions by Region:
    <region>,<count>

The sections are omitted entirely when no row was found. Absent values are
written as empty fields.
"""

from __future__ import annotations

import csv
from email.utils import formatdate
from pathlib import Path

from tip_reconciler.analytics.aggregate import AggregateStats
from tip_reconciler.analytics.reconciler import ReconciledRow
from tip_reconciler.recon_logging import get_logger

logger = get_logger(__name__)

COLUMNS = [
    "Transaction Hash",
    "Type",
    "Region",
    "Time Spent (ms)",
    "Quote Time (ms)",
    "Found",
    "Block Date",
    "Total WSOL In",
    "Total WSOL Out",
    "Tip",
    "Bot Fee",
    "Tip %",
    "Bot %",
    "Profit",
    "Profit in $",
    "Bot Memo",
]

# report column -> FinancialMetrics field
METRIC_COLUMNS = {
    "Total WSOL In": "total_wsol_in",
    "Total WSOL Out": "total_wsol_out",
    "Tip": "tip",
    "Bot Fee": "bot_fee",
    "Tip %": "tip_percentage",
    "Bot %": "fixed_fee_percentage",
    "Profit": "profit",
    "Profit in $": "profit_in_quote_currency",
}

STATISTICS_HEADER = "Statistics:"
BY_TYPE_HEADER = "Transactions by Type:"
BY_REGION_HEADER = "Transactions by Region:"


def format_block_date(timestamp: int | None) -> str:
    """Unix seconds as an RFC 1123 GMT date, e.g. 'Tue, 14 Nov 2023 22:13:20 GMT'."""
    if timestamp is None:
        return ""
    return formatdate(timestamp, usegmt=True)


def _opt(value: int | None) -> str:
    return "" if value is None else str(value)


def _average(value: float | None) -> str:
    return "" if value is None else f"{value:.2f}"


def row_to_record(row: ReconciledRow) -> list[str]:
    rendered = row.metrics.render() if row.metrics is not None else {}
    values = {
        "Transaction Hash": row.signature,
        "Type": row.type,
        "Region": row.region,
        "Time Spent (ms)": _opt(row.time_spent_ms),
        "Quote Time (ms)": _opt(row.quote_time_ms),
        "Found": "true" if row.found else "false",
        "Block Date": format_block_date(row.block_timestamp),
        "Bot Memo": row.memo,
    }
    for column, fieldname in METRIC_COLUMNS.items():
        values[column] = rendered.get(fieldname, "")
    return [values[c] for c in COLUMNS]


def stats_sections(stats: AggregateStats) -> list[list[str]]:
    out: list[list[str]] = [
        [],
        [STATISTICS_HEADER],
        ["Average Time Spent (ms)", _average(stats.average_time_spent_ms)],
        ["Average Quote Time (ms)", _average(stats.average_quote_time_ms)],
        [],
        [BY_TYPE_HEADER],
    ]
    out.extend([t, str(n)] for t, n in stats.counts_by_type.items())
    out.append([])
    out.append([BY_REGION_HEADER])
    out.extend([r, str(n)] for r, n in stats.counts_by_region.items())
    return out


def write_report(path: Path | str, rows: list[ReconciledRow], stats: AggregateStats | None) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(COLUMNS)
        for row in rows:
            w.writerow(row_to_record(row))
        if stats is not None:
            w.writerows(stats_sections(stats))
    logger.info("report_written", path=str(path), rows=len(rows), has_statistics=stats is not None)
    return path
