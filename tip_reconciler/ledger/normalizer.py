"""
Transaction normalizer — either backend's raw payload to CanonicalTransactionRecord.

Two named normalizers, one per Backend, registered in NORMALIZERS:

  normalize_ledger_rpc  getTransaction result (jsonParsed). Fee payer is the
                        first account key; WSOL movement comes from pre/post
                        token balances; tip is the fee payer's native balance
                        change.
  normalize_indexer     Helius enhanced transaction. Fee payer is feePayer;
                        WSOL movement comes from tokenTransfers; tip is the sum
                        of nativeTransfers sent by the fee payer.

Missing required fields raise MalformedPayload. Missing optional fields
(memo, transfer lists) produce empty defaults. Memo decoding never aborts.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import base58

from tip_reconciler.core.exceptions import MalformedPayload, MemoDecodeFailure
from tip_reconciler.ledger.models import (
    MEMO_PROGRAM_ID,
    WSOL_MINT,
    Backend,
    CanonicalTransactionRecord,
    NativeTransfer,
    RawTransactionPayload,
    TokenBalanceDelta,
)
from tip_reconciler.recon_logging import get_logger

logger = get_logger(__name__)

SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"


def decode_memo(data: str) -> str:
    """Decode base58 memo instruction data to UTF-8 text. Raises MemoDecodeFailure."""
    try:
        return base58.b58decode(data).decode("utf-8")
    except ValueError as e:
        raise MemoDecodeFailure(f"could not decode memo data: {e}") from e


def extract_memo(instructions: list[dict[str, Any]], signature: str = "") -> tuple[str | None, str | None]:
    """
    Return (memo_text, memo_raw) from the first memo-program instruction.

    jsonParsed RPC already carries the text in "parsed"; otherwise "data" is
    base58. On decode failure memo_text is None and memo_raw keeps the data.
    """
    for ix in instructions:
        if not isinstance(ix, dict) or ix.get("programId") != MEMO_PROGRAM_ID:
            continue
        parsed = ix.get("parsed")
        if isinstance(parsed, str):
            return parsed, None
        data = ix.get("data")
        if not data:
            return None, None
        if not isinstance(data, str):
            logger.warning("memo_data_not_string", signature=signature, data_type=type(data).__name__)
            return None, str(data)
        try:
            return decode_memo(data), data
        except MemoDecodeFailure as e:
            logger.warning("memo_decode_failed", signature=signature, error=str(e))
            return None, data
    return None, None


def _require(container: dict[str, Any] | None, key: str, what: str) -> Any:
    if not isinstance(container, dict) or container.get(key) is None:
        raise MalformedPayload(f"missing {what}")
    return container[key]


def _account_keys(message: dict[str, Any]) -> list[str]:
    """accountKeys as base58 strings (plain list or jsonParsed {pubkey} objects)."""
    out: list[str] = []
    for k in message.get("accountKeys") or []:
        if isinstance(k, str):
            out.append(k)
        elif isinstance(k, dict) and k.get("pubkey"):
            out.append(str(k["pubkey"]))
    return out


def _raw_amount(balance: dict[str, Any]) -> tuple[int, int]:
    """(raw integer amount, decimals) from a token balance entry."""
    ui = balance.get("uiTokenAmount") or {}
    try:
        return int(ui.get("amount") or 0), int(ui.get("decimals") or 0)
    except (TypeError, ValueError) as e:
        raise MalformedPayload(f"bad uiTokenAmount: {ui!r}") from e


def _wsol_balances_by_index(balances: list[dict[str, Any]], owner: str) -> dict[int, tuple[int, int]]:
    out: dict[int, tuple[int, int]] = {}
    for b in balances:
        if not isinstance(b, dict):
            continue
        if b.get("mint") != WSOL_MINT or b.get("owner") != owner:
            continue
        idx = b.get("accountIndex")
        if idx is None:
            continue
        out[int(idx)] = _raw_amount(b)
    return out


def _rpc_token_deltas(meta: dict[str, Any], fee_payer: str) -> list[TokenBalanceDelta]:
    """
    WSOL deltas for fee-payer-owned accounts, paired by accountIndex.

    An account opened or closed inside the transaction only appears on one
    side; the other side counts as zero.
    """
    pre = _wsol_balances_by_index(meta.get("preTokenBalances") or [], fee_payer)
    post = _wsol_balances_by_index(meta.get("postTokenBalances") or [], fee_payer)
    deltas: list[TokenBalanceDelta] = []
    for idx in sorted(set(pre) | set(post)):
        pre_amount, pre_dec = pre.get(idx, (0, 0))
        post_amount, post_dec = post.get(idx, (0, 0))
        decimals = post_dec or pre_dec
        raw_delta = post_amount - pre_amount
        if raw_delta == 0:
            continue
        deltas.append(
            TokenBalanceDelta(mint=WSOL_MINT, owner=fee_payer, delta=raw_delta / 10**decimals)
        )
    return deltas


def _rpc_native_transfers(instructions: list[dict[str, Any]]) -> list[NativeTransfer]:
    out: list[NativeTransfer] = []
    for ix in instructions:
        if ix.get("programId") != SYSTEM_PROGRAM_ID:
            continue
        parsed = ix.get("parsed")
        if not isinstance(parsed, dict) or parsed.get("type") not in ("transfer", "transferWithSeed"):
            continue
        info = parsed.get("info") or {}
        src = info.get("source") or ""
        dst = info.get("destination") or ""
        if src and dst:
            out.append(NativeTransfer(src, dst, int(info.get("lamports") or 0)))
    return out


def normalize_ledger_rpc(payload: RawTransactionPayload) -> CanonicalTransactionRecord:
    raw = payload.data
    tx_obj = _require(raw, "transaction", "transaction")
    message = _require(tx_obj, "message", "transaction.message")
    meta = _require(raw, "meta", "meta")
    account_keys = _account_keys(message)
    if not account_keys:
        raise MalformedPayload("missing transaction.message.accountKeys")
    pre_balances = _require(meta, "preBalances", "meta.preBalances")
    post_balances = _require(meta, "postBalances", "meta.postBalances")
    if not pre_balances or not post_balances:
        raise MalformedPayload("empty native balance lists")

    fee_payer = account_keys[0]
    instructions = [ix for ix in message.get("instructions") or [] if isinstance(ix, dict)]
    inner: list[dict[str, Any]] = []
    for block in meta.get("innerInstructions") or []:
        inner.extend(ix for ix in block.get("instructions") or [] if isinstance(ix, dict))

    memo_text, memo_raw = extract_memo(instructions, payload.signature)
    sigs = tx_obj.get("signatures") or []

    return CanonicalTransactionRecord(
        signature=sigs[0] if sigs else payload.signature,
        fee_payer=fee_payer,
        backend=Backend.LEDGER_RPC,
        block_timestamp=raw.get("blockTime"),
        token_balance_deltas=_rpc_token_deltas(meta, fee_payer),
        native_transfers=_rpc_native_transfers(instructions + inner),
        tip_lamports=abs(int(pre_balances[0]) - int(post_balances[0])),
        memo_text=memo_text,
        memo_raw=memo_raw,
    )


def normalize_indexer(payload: RawTransactionPayload) -> CanonicalTransactionRecord:
    raw = payload.data
    fee_payer = _require(raw, "feePayer", "feePayer")

    deltas: list[TokenBalanceDelta] = []
    for transfer in raw.get("tokenTransfers") or []:
        if transfer.get("mint") != WSOL_MINT:
            continue
        amount = float(transfer.get("tokenAmount") or 0)
        # a self-transfer counts on both sides
        if transfer.get("toUserAccount") == fee_payer:
            deltas.append(TokenBalanceDelta(WSOL_MINT, fee_payer, amount))
        if transfer.get("fromUserAccount") == fee_payer:
            deltas.append(TokenBalanceDelta(WSOL_MINT, fee_payer, -amount))
        logger.debug(
            "wsol_transfer",
            signature=payload.signature,
            direction="out" if transfer.get("fromUserAccount") == fee_payer else "in",
            amount=amount,
        )

    native: list[NativeTransfer] = []
    for t in raw.get("nativeTransfers") or []:
        native.append(
            NativeTransfer(
                from_account=t.get("fromUserAccount") or "",
                to_account=t.get("toUserAccount") or "",
                amount_lamports=int(t.get("amount") or 0),
            )
        )
    tip_lamports = sum(t.amount_lamports for t in native if t.from_account == fee_payer)

    memo_text, memo_raw = extract_memo(raw.get("instructions") or [], payload.signature)

    return CanonicalTransactionRecord(
        signature=raw.get("signature") or payload.signature,
        fee_payer=fee_payer,
        backend=Backend.INDEXER,
        block_timestamp=raw.get("timestamp"),
        token_balance_deltas=deltas,
        native_transfers=native,
        tip_lamports=tip_lamports,
        memo_text=memo_text,
        memo_raw=memo_raw,
    )


NORMALIZERS: dict[Backend, Callable[[RawTransactionPayload], CanonicalTransactionRecord]] = {
    Backend.LEDGER_RPC: normalize_ledger_rpc,
    Backend.INDEXER: normalize_indexer,
}


def normalize(payload: RawTransactionPayload) -> CanonicalTransactionRecord:
    """Dispatch on payload.backend. Raises MalformedPayload."""
    if not isinstance(payload.data, dict):
        raise MalformedPayload(f"payload is {type(payload.data).__name__}, expected object")
    try:
        return NORMALIZERS[payload.backend](payload)
    except (AttributeError, TypeError, ValueError) as e:
        # wrong types inside otherwise present fields
        raise MalformedPayload(f"unexpected payload shape: {e}") from e
