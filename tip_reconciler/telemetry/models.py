"""
Data models for bot telemetry parsed from execution logs.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TxType(str, Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"
    SPAM = "spam"


SPAM_REGION = "spam"


@dataclass(frozen=True)
class TelemetryEntry:
    """Timing and routing recorded by the bot for one submitted transaction."""

    signature: str
    region: str
    """Jito block-engine region; always "spam" for spam transactions."""
    type: TxType
    time_spent_ms: int | None = None
    quote_time_ms: int | None = None


class TelemetryMap(dict):
    """
    signature -> TelemetryEntry, last write wins.

    A later log line for the same signature replaces the earlier entry.
    The key keeps its first-seen position in iteration order.
    """

    def record(self, entry: TelemetryEntry) -> TelemetryEntry | None:
        """Store entry; return the entry it replaced, if any."""
        previous = self.get(entry.signature)
        self[entry.signature] = entry
        return previous
