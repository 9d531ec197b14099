"""
Aggregate statistics over found rows.

AggregateStatsBuilder folds rows one at a time; finalize() returns an
immutable AggregateStats, or None when no found row was added.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from tip_reconciler.analytics.reconciler import ReconciledRow


@dataclass(frozen=True)
class AggregateStats:
    found_count: int
    counts_by_type: dict[str, int]
    """In first-seen order."""
    counts_by_region: dict[str, int]
    average_time_spent_ms: float | None
    """Mean over rows that have a value; None when no row has one."""
    average_quote_time_ms: float | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "found_count": self.found_count,
            "counts_by_type": dict(self.counts_by_type),
            "counts_by_region": dict(self.counts_by_region),
            "average_time_spent_ms": self.average_time_spent_ms,
            "average_quote_time_ms": self.average_quote_time_ms,
        }


@dataclass
class _Mean:
    total: float = 0.0
    count: int = 0

    def add(self, value: float | None) -> None:
        if value is None:
            return
        self.total += value
        self.count += 1

    def value(self) -> float | None:
        return self.total / self.count if self.count else None


@dataclass
class AggregateStatsBuilder:
    found_count: int = 0
    by_type: Counter = field(default_factory=Counter)
    by_region: Counter = field(default_factory=Counter)
    time_spent: _Mean = field(default_factory=_Mean)
    quote_time: _Mean = field(default_factory=_Mean)

    def add(self, row: ReconciledRow) -> "AggregateStatsBuilder":
        """Fold one row in; rows with found=False are ignored."""
        if not row.found:
            return self
        self.found_count += 1
        self.by_type[row.type] += 1
        self.by_region[row.region] += 1
        self.time_spent.add(row.time_spent_ms)
        self.quote_time.add(row.quote_time_ms)
        return self

    def add_all(self, rows: Iterable[ReconciledRow]) -> "AggregateStatsBuilder":
        for row in rows:
            self.add(row)
        return self

    def finalize(self) -> AggregateStats | None:
        if self.found_count == 0:
            return None
        return AggregateStats(
            found_count=self.found_count,
            counts_by_type=dict(self.by_type),
            counts_by_region=dict(self.by_region),
            average_time_spent_ms=self.time_spent.value(),
            average_quote_time_ms=self.quote_time.value(),
        )


def build_aggregate_stats(rows: Iterable[ReconciledRow]) -> AggregateStats | None:
    return AggregateStatsBuilder().add_all(rows).finalize()
