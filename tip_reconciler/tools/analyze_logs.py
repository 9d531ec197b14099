"""
Log-only analysis: which signatures show up in the bot log, with timing and region.

No chain data is fetched. The report it writes can later be fed to
reconcile_transactions --from-report.

Usage:
  python -m tip_reconciler.tools.analyze_logs --signatures _signatures.json --log paste.txt
"""

from __future__ import annotations

import argparse

from tip_reconciler.analytics.pipeline import run_log_analysis
from tip_reconciler.core.exceptions import RequiredFileMissing
from tip_reconciler.recon_logging import LOG_FORMATS, configure_logging, get_logger

logger = get_logger(__name__)

DEFAULT_SIGNATURES = "_signatures.json"
DEFAULT_LOG = "paste.txt"
DEFAULT_OUTPUT = "transaction_analysis.csv"


def _log(msg: str) -> None:
    print(f"[analyze_logs] {msg}")


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Match a signature list against bot execution logs")
    ap.add_argument("--signatures", default=DEFAULT_SIGNATURES, help="JSON array or brace list of signatures")
    ap.add_argument("--log", default=DEFAULT_LOG, help="Bot console log text")
    ap.add_argument("--output", default=DEFAULT_OUTPUT, help="CSV report path")
    ap.add_argument("--log-format", choices=LOG_FORMATS, help="json or console (default from LOG_FORMAT)")
    args = ap.parse_args(argv)
    if args.log_format:
        configure_logging(fmt=args.log_format)

    try:
        summary = run_log_analysis(args.signatures, args.log, args.output)
    except RequiredFileMissing as e:
        logger.error("required_file_missing", path=str(e.path), role=e.role)
        _log(f"ERROR: {e}")
        return 1

    _log(f"total signatures: {summary.signature_count}")
    _log(f"found in logs: {summary.found_count}")
    _log(f"output saved to: {summary.output_path}")
    if summary.nothing_to_reconcile:
        _log("WARNING: no signatures to analyze")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
