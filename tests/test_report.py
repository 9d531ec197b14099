"""
Tests for the CSV report writer and reader (reporting).
"""

from __future__ import annotations

import csv

from tip_reconciler.analytics.aggregate import build_aggregate_stats
from tip_reconciler.analytics.metrics import calculate_metrics
from tip_reconciler.analytics.reconciler import ReconciledRow, Reconciler
from tip_reconciler.ledger.models import Backend
from tip_reconciler.reporting import COLUMNS, load_report, write_report
from tip_reconciler.reporting.report_writer import format_block_date
from tip_reconciler.telemetry.models import TxType

FOUND = ReconciledRow(
    signature="S1",
    type="static",
    region="tokyo",
    time_spent_ms=400,
    quote_time_ms=90,
    found=True,
    block_timestamp=1700000000,
    memo="arb:ok",
    metrics=calculate_metrics(2.0, 1.2, 0.01),
)
MISSING = ReconciledRow(signature="S2", type="unknown", region="unknown", time_spent_ms=None, quote_time_ms=None, found=False)
SPAM = ReconciledRow(signature="S3", type="spam", region="spam", time_spent_ms=None, quote_time_ms=None, found=True)


def _read_rows(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


def test_block_date_format():
    assert format_block_date(1700000000) == "Tue, 14 Nov 2023 22:13:20 GMT"
    assert format_block_date(None) == ""


def test_rows_and_sections(tmp_path):
    rows = [FOUND, MISSING, SPAM]
    path = write_report(tmp_path / "out.csv", rows, build_aggregate_stats(rows))
    lines = _read_rows(path)

    assert lines[0] == COLUMNS
    first = dict(zip(COLUMNS, lines[1]))
    assert first["Profit"] == "0.800000000"
    assert first["Profit in $"] == "$24.00"
    assert first["Bot Fee"] == "0.001000000"
    assert first["Found"] == "true"
    assert first["Block Date"] == "Tue, 14 Nov 2023 22:13:20 GMT"
    assert first["Bot Memo"] == "arb:ok"

    missing = dict(zip(COLUMNS, lines[2]))
    assert missing["Time Spent (ms)"] == ""
    assert missing["Profit"] == ""
    assert missing["Found"] == "false"

    rest = lines[4:]
    assert rest[0] == []
    assert rest[1] == ["Statistics:"]
    assert rest[2] == ["Average Time Spent (ms)", "400.00"]
    assert rest[3] == ["Average Quote Time (ms)", "90.00"]
    assert rest[5] == ["Transactions by Type:"]
    assert rest[6:8] == [["static", "1"], ["spam", "1"]]
    assert rest[9] == ["Transactions by Region:"]
    assert rest[10:] == [["tokyo", "1"], ["spam", "1"]]


def test_no_found_rows_no_sections(tmp_path):
    path = write_report(tmp_path / "out.csv", [MISSING], build_aggregate_stats([MISSING]))
    lines = _read_rows(path)
    assert len(lines) == 2
    text = path.read_text(encoding="utf-8")
    assert "Statistics" not in text
    assert "None" not in text and "nan" not in text


def test_report_round_trip_feeds_reconciler(tmp_path):
    rows = [FOUND, MISSING, SPAM]
    path = write_report(tmp_path / "analysis.csv", rows, build_aggregate_stats(rows))

    signatures, telemetry = load_report(path)

    # section rows come back as values and are rejected downstream
    assert signatures[:3] == ["S1", "S2", "S3"]
    assert "Statistics:" in signatures
    assert set(telemetry) == {"S1", "S3"}
    assert telemetry["S1"].type is TxType.STATIC
    assert telemetry["S1"].time_spent_ms == 400
    assert telemetry["S3"].region == "spam"

    class NothingFound:
        backend = Backend.LEDGER_RPC

        def fetch(self, signature):
            return None

    rerun = Reconciler(NothingFound(), pacing_sec=0).reconcile(signatures, telemetry)
    assert [r.signature for r in rerun] == ["S1", "S2", "S3"]


def test_reads_stage_one_header(tmp_path):
    path = tmp_path / "transaction_analysis.csv"
    path.write_text(
        "Transaction Hash,Type,Region,Time Spent (ms),Quote Time (ms)\n"
        "S1,dynamic,amsterdam,120,30\n"
        "\nStatistics:\nAverage Time Spent (ms),120.00\n",
        encoding="utf-8",
    )
    signatures, telemetry = load_report(path)
    assert signatures == ["S1", "Statistics:", "Average Time Spent (ms)"]
    assert telemetry["S1"].region == "amsterdam"
    assert telemetry["S1"].quote_time_ms == 30
