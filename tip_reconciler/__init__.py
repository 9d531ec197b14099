"""
Tip Reconciler — arbitrage bot telemetry vs. on-chain outcome reconciliation.

Parses the bot's execution logs (timing and Jito region per transaction),
fetches the same transactions from a Solana RPC node or the Helius indexer,
and writes per-transaction profit rows plus aggregate statistics as CSV.
"""

__version__ = "0.1.0"
