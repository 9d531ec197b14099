"""
Main entrypoint: full reconciliation run (bot logs + on-chain data -> CSV report).

Same as python -m tip_reconciler.tools.reconcile_transactions; see --help.

Env: RECON_BACKEND, HELIUS_API_KEY, SOLANA_RPC_URL, RECON_PACING_MS, LOG_LEVEL, LOG_FORMAT.
"""

from tip_reconciler.tools.reconcile_transactions import main

if __name__ == "__main__":
    raise SystemExit(main())
