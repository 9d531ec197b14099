"""
Transaction fetcher — one signature in, one raw upstream payload out.

Two interchangeable backends with the same contract:
  LedgerRpcFetcher  JSON-RPC getTransaction (jsonParsed, configured commitment)
  IndexerFetcher    Helius POST /v0/transactions with a one-element batch

fetch() never raises transport errors: network failures, HTTP errors,
undecodable bodies and RPC error objects are logged and reported as None
("not found") for that signature only. Values that are recycled report
artifacts (region names, section headers) are rejected before any request.

Calls are sequential; pace() is the courtesy delay the caller inserts
between consecutive fetches. No retries, no backoff.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import httpx

from tip_reconciler.config.env import BACKEND_HELIUS, BACKEND_RPC, mask_api_key
from tip_reconciler.config.settings import Settings
from tip_reconciler.core.exceptions import TransportFailure
from tip_reconciler.ledger.models import Backend, RawTransactionPayload
from tip_reconciler.recon_logging import get_logger

logger = get_logger(__name__)

# Jito block-engine regions the bot logs; they show up as values when a
# "Transactions by Region" section is read back as input.
REGION_NAMES = frozenset({"tokyo", "amsterdam", "frankfurt", "slc", "ny"})
# Type and region labels the report itself writes in its count sections.
REPORT_LABEL_VALUES = frozenset({"spam", "unknown", "static", "dynamic"})
SECTION_HEADER_PHRASES = (
    "Statistics",
    "Transactions by Type",
    "Transactions by Region",
    "Average",
)

# JSON-RPC request id counter
_request_id = 0


def _next_id() -> int:
    global _request_id
    _request_id += 1
    return _request_id


def is_report_artifact(value: str | None) -> bool:
    """
    True when value cannot be a transaction signature: empty, a region name,
    or text from a report section header / statistics row.
    """
    if value is None:
        return True
    token = value.strip()
    if not token:
        return True
    if token in REGION_NAMES or token in REPORT_LABEL_VALUES:
        return True
    return any(phrase in token for phrase in SECTION_HEADER_PHRASES)


def pace(interval_sec: float, sleep: Callable[[float], None] = time.sleep) -> None:
    """Block for interval_sec between two fetches; zero or negative is a no-op."""
    if interval_sec > 0:
        sleep(interval_sec)


class TransactionFetcher:
    """Base fetcher; subclasses implement _request() for one backend."""

    backend: Backend

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def fetch(self, signature: str) -> RawTransactionPayload | None:
        """Return the raw payload for signature, or None when not found / failed."""
        if is_report_artifact(signature):
            logger.info("fetch_skipped_report_artifact", value=signature)
            return None
        try:
            data = self._request(signature)
        except TransportFailure as e:
            logger.warning(
                "fetch_transport_failure",
                signature=signature,
                backend=self.backend.value,
                error=str(e),
            )
            return None
        if not data:
            logger.warning("fetch_not_found", signature=signature, backend=self.backend.value)
            return None
        return RawTransactionPayload(backend=self.backend, signature=signature, data=data)

    def _request(self, signature: str) -> dict[str, Any] | None:
        raise NotImplementedError

    def _post_json(self, url: str, body: dict[str, Any]) -> Any:
        try:
            r = self._client.post(url, json=body)
            r.raise_for_status()
            return r.json()
        except httpx.HTTPError as e:
            raise TransportFailure(f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise TransportFailure(f"invalid JSON body: {e}") from e


class LedgerRpcFetcher(TransactionFetcher):
    backend = Backend.LEDGER_RPC

    def __init__(self, client: httpx.Client, rpc_url: str, *, commitment: str = "confirmed") -> None:
        super().__init__(client)
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        self._rpc_url = rpc_url
        self._commitment = commitment

    def build_body(self, signature: str) -> dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": _next_id(),
            "method": "getTransaction",
            "params": [
                signature,
                {
                    "encoding": "jsonParsed",
                    "commitment": self._commitment,
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        }

    def _request(self, signature: str) -> dict[str, Any] | None:
        data = self._post_json(self._rpc_url, self.build_body(signature))
        if not isinstance(data, dict):
            raise TransportFailure(f"unexpected RPC response type: {type(data).__name__}")
        err = data.get("error")
        if err:
            raise TransportFailure(f"RPC error: {err}")
        result = data.get("result")
        return result if isinstance(result, dict) else None


class IndexerFetcher(TransactionFetcher):
    backend = Backend.INDEXER

    def __init__(self, client: httpx.Client, api_key: str, *, api_url: str = "https://api.helius.xyz") -> None:
        super().__init__(client)
        if not api_key.strip():
            raise ValueError("HELIUS_API_KEY is required for the helius backend")
        self._url = f"{api_url.rstrip('/')}/v0/transactions/?api-key={api_key}"

    def _request(self, signature: str) -> dict[str, Any] | None:
        data = self._post_json(self._url, {"transactions": [signature]})
        if not isinstance(data, list):
            raise TransportFailure(f"unexpected indexer response type: {type(data).__name__}")
        first = data[0] if data else None
        return first if isinstance(first, dict) else None


def open_client(settings: Settings) -> httpx.Client:
    """HTTP client for one run; caller closes it (use as a context manager)."""
    return httpx.Client(timeout=httpx.Timeout(settings.request_timeout_sec))


def build_fetcher(settings: Settings, client: httpx.Client) -> TransactionFetcher:
    """Fetcher for settings.backend (rpc | helius)."""
    if settings.backend == BACKEND_HELIUS:
        logger.info("fetcher_backend", backend=BACKEND_HELIUS, url=mask_api_key(settings.helius_api_url))
        return IndexerFetcher(client, settings.helius_api_key, api_url=settings.helius_api_url)
    if settings.backend == BACKEND_RPC:
        logger.info("fetcher_backend", backend=BACKEND_RPC, url=mask_api_key(settings.rpc_url))
        return LedgerRpcFetcher(client, settings.rpc_url, commitment=settings.commitment)
    raise ValueError(f"unknown backend: {settings.backend!r}")
