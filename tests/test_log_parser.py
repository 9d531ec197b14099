"""
Tests for the bot log parser (telemetry.log_parser).
"""

from __future__ import annotations

from tip_reconciler.telemetry.log_parser import LogParser, parse_log_file, parse_log_lines, strip_ansi
from tip_reconciler.telemetry.models import TxType

TIME_LINE = "Total time spent: 412ms. Jupiter quote time: 96ms"


def test_tip_line_uses_last_time_info():
    entries = parse_log_lines([
        TIME_LINE,
        "Sent static tip transaction to region tokyo: SIG1",
    ])
    e = entries["SIG1"]
    assert e.region == "tokyo"
    assert e.type is TxType.STATIC
    assert e.time_spent_ms == 412
    assert e.quote_time_ms == 96


def test_tip_line_before_any_time_info_is_dropped():
    parser = LogParser()
    entries = parser.parse(["Sent static tip transaction to region tokyo: SIG1"])
    assert "SIG1" not in entries
    assert parser.dropped_tip_lines == 1


def test_spam_line_without_time_info_is_recorded():
    entries = parse_log_lines(["Sent spam transaction through RPC 3: SPAM1"])
    e = entries["SPAM1"]
    assert e.type is TxType.SPAM
    assert e.region == "spam"
    assert e.time_spent_ms is None
    assert e.quote_time_ms is None


def test_spam_region_ignores_preceding_region_context():
    entries = parse_log_lines([
        TIME_LINE,
        "Sent dynamic tip transaction to region frankfurt: SIG1",
        "Sent spam transaction through RPC 1: SPAM1",
    ])
    assert entries["SPAM1"].region == "spam"
    assert entries["SPAM1"].time_spent_ms == 412
    assert entries["SIG1"].region == "frankfurt"


def test_later_line_for_same_signature_wins():
    entries = parse_log_lines([
        TIME_LINE,
        "Sent static tip transaction to region tokyo: SIG1",
        "Total time spent: 700ms. Jupiter quote time: 150ms",
        "Sent dynamic tip transaction to region ny: SIG1",
    ])
    assert len(entries) == 1
    e = entries["SIG1"]
    assert e.region == "ny"
    assert e.type is TxType.DYNAMIC
    assert e.time_spent_ms == 700
    assert e.quote_time_ms == 150


def test_time_info_persists_across_unrelated_lines():
    entries = parse_log_lines([
        TIME_LINE,
        "Fetching quote...",
        "random noise",
        "Sent static tip transaction to region slc: SIG1",
        "Sent static tip transaction to region amsterdam: SIG2",
    ])
    assert entries["SIG1"].time_spent_ms == 412
    assert entries["SIG2"].time_spent_ms == 412


def test_ansi_color_codes_are_stripped():
    colored = "\x1b[32mSent static tip transaction to region \x1b[1mtokyo\x1b[0m: SIG1\x1b[0m"
    pasted = "[32mTotal time spent: [33m15ms[0m. Jupiter quote time: 5ms"
    assert strip_ansi(pasted) == "Total time spent: 15ms. Jupiter quote time: 5ms"
    entries = parse_log_lines([pasted, colored])
    assert entries["SIG1"].region == "tokyo"
    assert entries["SIG1"].time_spent_ms == 15


def test_unmatched_lines_ignored():
    assert parse_log_lines(["", "hello", "Sent tip to nowhere"]) == {}


def test_parse_log_file(tmp_path):
    path = tmp_path / "paste.txt"
    path.write_text(
        "\n".join([
            TIME_LINE,
            "Sent static tip transaction to region tokyo: SIG1",
            "Sent spam transaction through RPC 2: SPAM1",
        ]),
        encoding="utf-8",
    )
    entries = parse_log_file(path)
    assert list(entries) == ["SIG1", "SPAM1"]


def test_zero_ms_timing_is_absent():
    entries = parse_log_lines([
        "Total time spent: 0ms. Jupiter quote time: 88ms",
        "Sent dynamic tip transaction to region ny: SIG1",
        "Total time spent: 310ms. Jupiter quote time: 0ms",
        "Sent spam transaction through RPC 2: SPAM1",
    ])
    assert (entries["SIG1"].time_spent_ms, entries["SIG1"].quote_time_ms) == (None, 88)
    assert (entries["SPAM1"].time_spent_ms, entries["SPAM1"].quote_time_ms) == (310, None)


def test_zero_ms_timing_stays_out_of_averages():
    from tip_reconciler.analytics.aggregate import build_aggregate_stats
    from tip_reconciler.analytics.reconciler import reconcile_telemetry_only

    entries = parse_log_lines([
        "Total time spent: 0ms. Jupiter quote time: 0ms",
        "Sent static tip transaction to region tokyo: SIG1",
        "Total time spent: 400ms. Jupiter quote time: 100ms",
        "Sent static tip transaction to region tokyo: SIG2",
    ])
    stats = build_aggregate_stats(reconcile_telemetry_only(["SIG1", "SIG2"], entries))
    assert stats.average_time_spent_ms == 400
    assert stats.average_quote_time_ms == 100
