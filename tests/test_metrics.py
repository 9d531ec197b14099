"""
Tests for financial metrics (analytics.metrics).
"""

from __future__ import annotations

import math

import pytest

from tip_reconciler.analytics.metrics import (
    FIXED_FEE_PERCENTAGE,
    calculate_metrics,
    format_quote_currency,
    format_token,
    guarded_tip_percentage,
    metrics_for_backend,
    unguarded_tip_percentage,
)
from tip_reconciler.ledger.models import Backend


def test_profit_fee_and_quote_currency():
    m = calculate_metrics(2.0, 1.2, 0.01)
    out = m.render()
    assert out["profit"] == "0.800000000"
    assert out["profit_in_quote_currency"] == "$24.00"
    assert out["bot_fee"] == "0.001000000"
    assert out["total_wsol_in"] == "2.000000000"
    assert out["total_wsol_out"] == "1.200000000"
    assert out["tip"] == "0.010000000"
    assert out["tip_percentage"] == "0.50"
    assert out["fixed_fee_percentage"] == "1.50"


def test_fixed_fee_is_constant():
    assert calculate_metrics(0, 0, 0).fixed_fee_percentage == FIXED_FEE_PERCENTAGE == 1.5
    assert calculate_metrics(100, 3, 7).fixed_fee_percentage == 1.5


def test_negative_profit_renders_with_marker():
    out = calculate_metrics(1.0, 1.5, 0.0).render()
    assert out["profit"] == "-0.500000000"
    assert out["profit_in_quote_currency"] == "$-15.00"


def test_guarded_zero_inflow_is_zero():
    assert guarded_tip_percentage(0.01, 0) == 0.0
    m = metrics_for_backend(Backend.LEDGER_RPC, 0, 0, 0.01)
    assert m.tip_percentage == 0.0
    assert m.render()["tip_percentage"] == "0.00"


def test_unguarded_zero_inflow_is_non_finite():
    assert math.isinf(unguarded_tip_percentage(0.01, 0))
    assert math.isnan(unguarded_tip_percentage(0.0, 0))
    m = metrics_for_backend(Backend.INDEXER, 0, 0, 0.01)
    assert not math.isfinite(m.tip_percentage)
    # non-finite never reaches the report as a literal token
    assert m.render()["tip_percentage"] == ""


def test_policies_agree_when_inflow_positive():
    assert guarded_tip_percentage(0.02, 4.0) == pytest.approx(unguarded_tip_percentage(0.02, 4.0)) == pytest.approx(0.5)


def test_formatters_absent_values_are_empty():
    assert format_token(None) == ""
    assert format_quote_currency(None) == ""
    assert format_token(float("nan")) == ""
