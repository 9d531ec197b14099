"""
Financial metrics for one reconciled transaction.

Pure functions of (total WSOL in, total WSOL out, tip). Price and the bot's
fee share are fixed business constants, not live quotes.

Tip percentage with zero WSOL in is backend-specific and kept that way:
  guarded_tip_percentage    0.0        (ledger RPC backend)
  unguarded_tip_percentage  inf / nan  (Helius indexer backend)
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from tip_reconciler.ledger.models import Backend

BOT_FEE_RATE = 0.1
FIXED_FEE_PERCENTAGE = 1.5
SOL_USD_PRICE = 30.0

TOKEN_DECIMALS = 9
PERCENT_DECIMALS = 2
CURRENCY_MARKER = "$"


def guarded_tip_percentage(tip: float, total_in: float) -> float:
    if total_in > 0:
        return tip / total_in * 100
    return 0.0


def unguarded_tip_percentage(tip: float, total_in: float) -> float:
    """Plain tip / total_in * 100; division by zero gives inf (nan for 0/0)."""
    if total_in == 0:
        if tip == 0:
            return math.nan
        return math.copysign(math.inf, tip)
    return tip / total_in * 100


TipPercentagePolicy = Callable[[float, float], float]

TIP_PERCENTAGE_POLICIES: dict[Backend, TipPercentagePolicy] = {
    Backend.LEDGER_RPC: guarded_tip_percentage,
    Backend.INDEXER: unguarded_tip_percentage,
}


def format_token(value: float | None) -> str:
    return _fixed(value, TOKEN_DECIMALS)


def format_percentage(value: float | None) -> str:
    return _fixed(value, PERCENT_DECIMALS)


def format_quote_currency(value: float | None) -> str:
    text = _fixed(value, PERCENT_DECIMALS)
    return f"{CURRENCY_MARKER}{text}" if text else ""


def _fixed(value: float | None, decimals: int) -> str:
    """Fixed-point text; None and non-finite values render as empty."""
    if value is None or not math.isfinite(value):
        return ""
    return f"{value:.{decimals}f}"


@dataclass(frozen=True)
class FinancialMetrics:
    total_wsol_in: float
    total_wsol_out: float
    tip: float
    """SOL paid out by the fee payer (Jito tip)."""
    bot_fee: float
    tip_percentage: float
    """May be non-finite for the indexer backend when total_wsol_in is 0."""
    fixed_fee_percentage: float
    profit: float
    profit_in_quote_currency: float

    def render(self) -> dict[str, str]:
        """Report strings keyed by field name."""
        return {
            "total_wsol_in": format_token(self.total_wsol_in),
            "total_wsol_out": format_token(self.total_wsol_out),
            "tip": format_token(self.tip),
            "bot_fee": format_token(self.bot_fee),
            "tip_percentage": format_percentage(self.tip_percentage),
            "fixed_fee_percentage": format_percentage(self.fixed_fee_percentage),
            "profit": format_token(self.profit),
            "profit_in_quote_currency": format_quote_currency(self.profit_in_quote_currency),
        }


def calculate_metrics(
    total_wsol_in: float,
    total_wsol_out: float,
    tip: float,
    *,
    tip_percentage: TipPercentagePolicy = guarded_tip_percentage,
) -> FinancialMetrics:
    profit = total_wsol_in - total_wsol_out
    return FinancialMetrics(
        total_wsol_in=total_wsol_in,
        total_wsol_out=total_wsol_out,
        tip=tip,
        bot_fee=tip * BOT_FEE_RATE,
        tip_percentage=tip_percentage(tip, total_wsol_in),
        fixed_fee_percentage=FIXED_FEE_PERCENTAGE,
        profit=profit,
        profit_in_quote_currency=profit * SOL_USD_PRICE,
    )


def metrics_for_backend(backend: Backend, total_wsol_in: float, total_wsol_out: float, tip: float) -> FinancialMetrics:
    """calculate_metrics with the tip percentage policy of the backend the data came from."""
    return calculate_metrics(
        total_wsol_in,
        total_wsol_out,
        tip,
        tip_percentage=TIP_PERCENTAGE_POLICIES[backend],
    )
