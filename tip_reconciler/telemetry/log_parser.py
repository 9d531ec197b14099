"""
Bot log parser — free-text execution logs to per-signature telemetry.

Single left-to-right pass. The only state carried between lines is the
most recent "Total time spent" record, which stays in effect until the
next one replaces it. Three sentence shapes are recognized:

    Total time spent: 412ms. Jupiter quote time: 96ms
    Sent static tip transaction to region tokyo: <signature>
    Sent spam transaction through RPC 2: <signature>

Everything else is ignored. Terminal color codes are stripped first.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from tip_reconciler.recon_logging import get_logger
from tip_reconciler.telemetry.models import SPAM_REGION, TelemetryEntry, TelemetryMap, TxType

logger = get_logger(__name__)

# ESC[...m sequences, and the bare "[32m" remnants left when logs are pasted
# from a terminal without the escape byte.
ANSI_COLOR_RE = re.compile(r"\x1b?\[[0-9;]*m")
TIME_INFO_RE = re.compile(r"Total time spent: (\d+)ms\. Jupiter quote time: (\d+)ms")
TIP_TX_RE = re.compile(r"Sent (static|dynamic) tip transaction to region ([a-z]+): ([A-Za-z0-9]+)")
SPAM_TX_RE = re.compile(r"Sent spam transaction through RPC \d+: ([A-Za-z0-9]+)")


@dataclass(frozen=True)
class TimeInfo:
    time_spent_ms: int | None
    quote_time_ms: int | None


def _timing_ms(text: str) -> int | None:
    """A 0ms timing means the bot did not measure it; report it as absent."""
    return int(text) or None


def strip_ansi(line: str) -> str:
    return ANSI_COLOR_RE.sub("", line)


class LogParser:
    """
    Stateful scanner; feed lines with feed() or parse a whole iterable.

    Tip lines seen before any time line are dropped. Spam lines are always
    recorded, with timings only when a time line has been seen.
    """

    def __init__(self) -> None:
        self.last_time_info: TimeInfo | None = None
        self.entries = TelemetryMap()
        self.dropped_tip_lines = 0

    def feed(self, line: str) -> TelemetryEntry | None:
        """Process one line; return the entry it produced, if any."""
        clean = strip_ansi(line)

        m = TIME_INFO_RE.search(clean)
        if m:
            self.last_time_info = TimeInfo(_timing_ms(m.group(1)), _timing_ms(m.group(2)))
            return None

        m = TIP_TX_RE.search(clean)
        if m:
            if self.last_time_info is None:
                self.dropped_tip_lines += 1
                logger.debug("log_tip_line_without_time_info", signature=m.group(3))
                return None
            entry = TelemetryEntry(
                signature=m.group(3),
                region=m.group(2),
                type=TxType(m.group(1)),
                time_spent_ms=self.last_time_info.time_spent_ms,
                quote_time_ms=self.last_time_info.quote_time_ms,
            )
            self._record(entry)
            return entry

        m = SPAM_TX_RE.search(clean)
        if m:
            info = self.last_time_info
            entry = TelemetryEntry(
                signature=m.group(1),
                region=SPAM_REGION,
                type=TxType.SPAM,
                time_spent_ms=info.time_spent_ms if info else None,
                quote_time_ms=info.quote_time_ms if info else None,
            )
            self._record(entry)
            return entry

        return None

    def _record(self, entry: TelemetryEntry) -> None:
        if self.entries.record(entry) is not None:
            logger.debug("log_entry_replaced", signature=entry.signature, type=entry.type.value)

    def parse(self, lines: Iterable[str]) -> TelemetryMap:
        for line in lines:
            self.feed(line)
        return self.entries


def parse_log_lines(lines: Iterable[str]) -> TelemetryMap:
    """Parse an iterable of log lines into signature -> TelemetryEntry."""
    return LogParser().parse(lines)


def parse_log_file(path: Path | str) -> TelemetryMap:
    """Stream a log file line by line; undecodable bytes are replaced."""
    path = Path(path)
    parser = LogParser()
    with open(path, encoding="utf-8", errors="replace") as f:
        entries = parser.parse(f)
    logger.info(
        "log_file_parsed",
        path=str(path),
        entries=len(entries),
        dropped_tip_lines=parser.dropped_tip_lines,
    )
    return entries
