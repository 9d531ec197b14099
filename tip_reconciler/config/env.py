"""
Environment variable loading for Tip Reconciler.

- RECON_BACKEND: rpc | helius (default: helius when HELIUS_API_KEY is set, else rpc)
- HELIUS_API_KEY: Helius API key (indexer backend; RPC URL fallback)
- HELIUS_API_URL: Helius REST base URL (default https://api.helius.xyz)
- SOLANA_RPC_URL: RPC endpoint for the ledger backend
- RECON_COMMITMENT: commitment level for getTransaction (default confirmed)
- RECON_PACING_MS: delay between consecutive fetches (default 50)
- RECON_REQUEST_TIMEOUT_SEC: HTTP timeout per request (default 30)
- Loads .env from the working directory and the project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root: config is tip_reconciler/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

BACKEND_RPC = "rpc"
BACKEND_HELIUS = "helius"
BACKENDS = (BACKEND_RPC, BACKEND_HELIUS)

MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"
HELIUS_API_URL = "https://api.helius.xyz"

DEFAULT_COMMITMENT = "confirmed"
DEFAULT_PACING_MS = 50
DEFAULT_REQUEST_TIMEOUT_SEC = 30.0


def load_recon_env() -> None:
    """Load .env from cwd, then project root. Safe to call multiple times."""
    from dotenv import load_dotenv

    load_dotenv()
    load_dotenv(_ENV_PATH)


def get_helius_api_key() -> str:
    load_recon_env()
    return (os.getenv("HELIUS_API_KEY") or "").strip()


def get_helius_api_url() -> str:
    load_recon_env()
    return ((os.getenv("HELIUS_API_URL") or "").strip() or HELIUS_API_URL).rstrip("/")


def get_solana_rpc_url() -> str:
    """
    Resolve Solana RPC URL from env.
    Order: SOLANA_RPC_URL > HELIUS_API_KEY (mainnet) > public mainnet-beta.
    """
    load_recon_env()
    url = (os.getenv("SOLANA_RPC_URL") or "").strip()
    if url:
        return url
    key = get_helius_api_key()
    if key:
        return HELIUS_MAINNET_URL_TEMPLATE.format(key=key)
    return MAINNET_RPC_URL


def get_fetch_backend() -> str:
    """Return RECON_BACKEND (rpc | helius); unknown values fall back to the default."""
    load_recon_env()
    raw = (os.getenv("RECON_BACKEND") or "").strip().lower()
    if raw in BACKENDS:
        return raw
    return BACKEND_HELIUS if get_helius_api_key() else BACKEND_RPC


def get_commitment() -> str:
    load_recon_env()
    return (os.getenv("RECON_COMMITMENT") or "").strip() or DEFAULT_COMMITMENT


def get_pacing_ms() -> int:
    load_recon_env()
    raw = (os.getenv("RECON_PACING_MS") or "").strip()
    try:
        return max(0, int(raw)) if raw else DEFAULT_PACING_MS
    except ValueError:
        return DEFAULT_PACING_MS


def get_request_timeout_sec() -> float:
    load_recon_env()
    raw = (os.getenv("RECON_REQUEST_TIMEOUT_SEC") or "").strip()
    try:
        return float(raw) if raw else DEFAULT_REQUEST_TIMEOUT_SEC
    except ValueError:
        return DEFAULT_REQUEST_TIMEOUT_SEC


def mask_api_key(url: str) -> str:
    """Hide the api-key query value before a URL reaches the logs."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url
