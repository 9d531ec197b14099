"""
Bot-side telemetry: execution log parsing and signature list loading.
"""

from tip_reconciler.telemetry.log_parser import LogParser, parse_log_file, parse_log_lines
from tip_reconciler.telemetry.models import TelemetryEntry, TelemetryMap, TxType
from tip_reconciler.telemetry.signatures import load_signatures, parse_signatures

__all__ = [
    "LogParser",
    "TelemetryEntry",
    "TelemetryMap",
    "TxType",
    "load_signatures",
    "parse_log_file",
    "parse_log_lines",
    "parse_signatures",
]
