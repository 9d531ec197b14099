"""
CSV report writing and reading.
"""

from tip_reconciler.reporting.report_reader import load_report
from tip_reconciler.reporting.report_writer import COLUMNS, write_report

__all__ = ["COLUMNS", "load_report", "write_report"]
