"""
Reconcile bot telemetry with on-chain outcomes and write the profit report.

Inputs: a signature list plus the bot log, or --from-report with a CSV
written by analyze_logs (or by an earlier run of this tool).

Backend: --backend rpc (getTransaction) or helius (enhanced transactions
API); defaults come from RECON_BACKEND / HELIUS_API_KEY / SOLANA_RPC_URL.

Usage:
  python -m tip_reconciler.tools.reconcile_transactions --signatures _signatures.json --log paste.txt
  python -m tip_reconciler.tools.reconcile_transactions --from-report transaction_analysis.csv --backend helius
"""

from __future__ import annotations

import argparse
import dataclasses

from tip_reconciler.analytics.pipeline import run_reconciliation
from tip_reconciler.config.env import BACKENDS, mask_api_key
from tip_reconciler.config.settings import get_settings
from tip_reconciler.core.exceptions import RequiredFileMissing
from tip_reconciler.recon_logging import LOG_FORMATS, configure_logging, get_logger

logger = get_logger(__name__)

DEFAULT_OUTPUT = "output.csv"


def _log(msg: str) -> None:
    print(f"[reconcile] {msg}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Reconcile bot logs with on-chain transaction data")
    ap.add_argument("--signatures", help="JSON array or brace list of signatures")
    ap.add_argument("--log", help="Bot console log text")
    ap.add_argument("--from-report", dest="report", help="Read signatures and telemetry from a previous report CSV")
    ap.add_argument("--output", default=DEFAULT_OUTPUT, help="CSV report path")
    ap.add_argument("--backend", choices=BACKENDS, help="Transaction source (default from env)")
    ap.add_argument("--pacing-ms", type=int, help="Delay between fetches in ms (default from env, 50)")
    ap.add_argument("--commitment", help="RPC commitment level (rpc backend)")
    ap.add_argument("--log-format", choices=LOG_FORMATS, help="json or console (default from LOG_FORMAT)")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_format:
        configure_logging(fmt=args.log_format)
    if args.report is None and (args.signatures is None or args.log is None):
        _log("ERROR: give --signatures and --log, or --from-report")
        return 2

    settings = get_settings()
    overrides = {
        "backend": args.backend,
        "pacing_ms": args.pacing_ms,
        "commitment": args.commitment,
    }
    settings = dataclasses.replace(settings, **{k: v for k, v in overrides.items() if v is not None})
    _log(
        f"backend={settings.backend} | rpc={mask_api_key(settings.rpc_url)} | pacing={settings.pacing_ms}ms"
    )

    try:
        summary = run_reconciliation(
            args.output,
            signatures_path=args.signatures,
            log_path=args.log,
            report_path=args.report,
            settings=settings,
        )
    except RequiredFileMissing as e:
        logger.error("required_file_missing", path=str(e.path), role=e.role)
        _log(f"ERROR: {e}")
        return 1
    except ValueError as e:
        # bad backend configuration, e.g. helius without an API key
        logger.error("config_error", error=str(e))
        _log(f"ERROR: {e}")
        return 1

    _log(f"signatures: {summary.signature_count} | rows: {len(summary.rows)} | found on-chain: {summary.found_count}")
    _log(f"output saved to: {summary.output_path}")
    if summary.nothing_to_reconcile:
        _log("WARNING: nothing to reconcile")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
