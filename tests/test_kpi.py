"""
Tests for KPI utilities over projection frames.
"""

import numpy as np
import pandas as pd
import pytest
from sampolio.core.entities import Debt
from sampolio.core.results import to_frame
from sampolio.kpi import (
    debt_free_month,
    interest_paid_cum,
    liquidity_runway,
    max_drawdown,
    payoff_month,
    savings_rate,
)
from sampolio.strategies import amortize_debt


def _cash_frame():
    index = pd.period_range("2024-01", periods=4, freq="M")
    return pd.DataFrame(
        {
            "total_income": [3000.0, 3000.0, 0.0, 3000.0],
            "total_expenses": [2000.0, 1000.0, 1000.0, 0.0],
            "ending_balance": [4000.0, 6000.0, 5000.0, 8000.0],
        },
        index=index,
    )


class TestCashKpis:
    def test_liquidity_runway(self):
        runway = liquidity_runway(_cash_frame(), lookback_months=2)
        assert runway.iloc[0] == pytest.approx(2.0)
        assert runway.iloc[1] == pytest.approx(4.0)
        assert runway.iloc[2] == pytest.approx(5.0)
        assert runway.name == "liquidity_runway_months"

    def test_runway_without_outflows_is_infinite(self):
        df = _cash_frame().assign(total_expenses=0.0)
        assert np.isinf(liquidity_runway(df)).all()

    def test_savings_rate(self):
        rate = savings_rate(_cash_frame())
        assert rate.iloc[0] == pytest.approx(1 / 3)
        assert np.isnan(rate.iloc[2])
        assert rate.iloc[3] == pytest.approx(1.0)

    def test_max_drawdown(self):
        drawdown = max_drawdown(_cash_frame()["ending_balance"])
        assert drawdown.iloc[0] == pytest.approx(-1 / 6)
        per_column = max_drawdown(_cash_frame())
        assert per_column["total_expenses"] == pytest.approx(-1.0)


class TestDebtKpis:
    def _schedule(self):
        debt = Debt("car", 12_000.0, "2024-01", annual_rate=0.12, term_months=12)
        return to_frame(amortize_debt(debt, end_month="2024-12"))

    def test_interest_paid_cum(self):
        df = self._schedule()
        cum = interest_paid_cum(df)
        assert cum.iloc[0] == pytest.approx(120.0)
        assert cum.iloc[-1] == pytest.approx(df["interest_paid"].sum())
        missing = interest_paid_cum(df.drop(columns=["interest_paid"]))
        assert (missing == 0.0).all()

    def test_payoff_month(self):
        assert payoff_month(self._schedule()) == "2024-12"
        assert payoff_month(self._schedule().iloc[:6]) is None


def test_debt_free_month():
    index = pd.period_range("2024-01", periods=5, freq="M")
    df = pd.DataFrame({"debts_total": [300.0, 0.0, 100.0, 0.0, 0.0]}, index=index)
    assert debt_free_month(df) == "2024-04"
    assert debt_free_month(df.iloc[:3]) is None
    clear = pd.DataFrame({"debts_total": [0.0, 0.0]}, index=index[:2])
    assert debt_free_month(clear) == "2024-01"
