"""
Application settings.

Collects the env getters into one frozen Settings object so the pipeline
and CLI read configuration once per run. CLI flags override via
dataclasses.replace().
"""

from __future__ import annotations

from dataclasses import dataclass

from tip_reconciler.config.env import (
    get_commitment,
    get_fetch_backend,
    get_helius_api_key,
    get_helius_api_url,
    get_pacing_ms,
    get_request_timeout_sec,
    get_solana_rpc_url,
)


@dataclass(frozen=True)
class Settings:
    backend: str
    """rpc | helius."""
    rpc_url: str
    helius_api_key: str
    helius_api_url: str
    commitment: str
    pacing_ms: int
    """Delay inserted between consecutive transaction fetches."""
    request_timeout_sec: float

    @property
    def pacing_sec(self) -> float:
        return self.pacing_ms / 1000.0


def get_settings() -> Settings:
    """Return the current settings, read from env (.env loaded first)."""
    return Settings(
        backend=get_fetch_backend(),
        rpc_url=get_solana_rpc_url(),
        helius_api_key=get_helius_api_key(),
        helius_api_url=get_helius_api_url(),
        commitment=get_commitment(),
        pacing_ms=get_pacing_ms(),
        request_timeout_sec=get_request_timeout_sec(),
    )
