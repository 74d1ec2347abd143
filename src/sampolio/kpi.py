"""
KPI calculation utilities for projection analysis.

This module provides standalone functions for computing key performance indicators
from projection frames (see ``sampolio.core.results.to_frame``). All functions
operate on DataFrames indexed by monthly periods and return pandas objects or
scalars.
"""

from __future__ import annotations

import numpy as np
import pandas as pd


def liquidity_runway(
    df: pd.DataFrame,
    lookback_months: int = 6,
    essential_share: float = 1.0,
    cash_col: str = "ending_balance",
    outflows_col: str = "total_expenses",
) -> pd.Series:
    """
    Calculate liquidity runway in months.

    Liquidity runway = cash / rolling_average(essential_outflows, lookback_months)

    Args:
        df: Cash projection frame
        lookback_months: Number of months to look back for essential outflows
        essential_share: Share of outflows considered essential (default 1.0)
        cash_col: Column name for cash balance
        outflows_col: Column name for outflows

    Returns:
        Series with liquidity runway in months per row
    """
    cash = df[cash_col]
    essential_outflows = df[outflows_col] * essential_share
    rolling_avg_outflows = essential_outflows.rolling(
        window=lookback_months, min_periods=1
    ).mean()

    with np.errstate(divide="ignore", invalid="ignore"):
        runway = np.where(
            rolling_avg_outflows > 0,
            cash / rolling_avg_outflows,
            np.inf,  # Infinite runway if no essential outflows
        )

    return pd.Series(runway, index=df.index, name="liquidity_runway_months")


def max_drawdown(series_or_df: pd.Series | pd.DataFrame) -> pd.Series:
    """
    Calculate maximum drawdown from peak.

    For a Series, returns the maximum drawdown.
    For a DataFrame, returns maximum drawdown per numeric column.
    Drawdowns are relative to the running peak and only defined where the
    peak is positive.

    Args:
        series_or_df: Series or DataFrame with values to analyze

    Returns:
        Series with maximum drawdown values (<= 0)
    """

    def _drawdown(values: pd.Series) -> float:
        running_max = values.expanding().max()
        with np.errstate(divide="ignore", invalid="ignore"):
            drawdown = np.where(
                running_max > 0, (values - running_max) / running_max, 0.0
            )
        return float(np.min(drawdown)) if len(drawdown) else 0.0

    if isinstance(series_or_df, pd.Series):
        return pd.Series(
            [_drawdown(series_or_df)],
            index=[series_or_df.name or "value"],
            name="max_drawdown",
        )

    results = {}
    for col in series_or_df.columns:
        if pd.api.types.is_numeric_dtype(series_or_df[col]):
            results[col] = _drawdown(series_or_df[col])
        else:
            results[col] = np.nan
    return pd.Series(results, name="max_drawdown")


def interest_paid_cum(
    df: pd.DataFrame,
    interest_col: str = "interest_paid",
) -> pd.Series:
    """
    Calculate cumulative interest paid.

    Args:
        df: Debt schedule frame
        interest_col: Column name for interest (optional field)

    Returns:
        Series with cumulative interest paid
    """
    if interest_col not in df.columns:
        return pd.Series(0.0, index=df.index, name="interest_paid_cum")

    return df[interest_col].cumsum().rename("interest_paid_cum")


def savings_rate(
    df: pd.DataFrame,
    inflows_col: str = "total_income",
    outflows_col: str = "total_expenses",
) -> pd.Series:
    """
    Calculate savings rate.

    Savings rate = (income - expenses) / income

    Args:
        df: Cash projection frame
        inflows_col: Column name for income
        outflows_col: Column name for expenses

    Returns:
        Series with savings rate (NaN where income <= 0)
    """
    inflows = df[inflows_col]
    outflows = df[outflows_col]

    with np.errstate(divide="ignore", invalid="ignore"):
        rate = np.where(inflows > 0, (inflows - outflows) / inflows, np.nan)

    return pd.Series(rate, index=df.index, name="savings_rate")


def payoff_month(df: pd.DataFrame, balance_col: str = "ending_balance") -> str | None:
    """
    First month in which a debt schedule reaches a zero balance.

    Args:
        df: Debt schedule frame
        balance_col: Column name for the owed balance

    Returns:
        ``"YYYY-MM"`` of the payoff month, or None if never repaid
    """
    repaid = df[balance_col] <= 0
    if not repaid.any():
        return None
    return str(df.index[np.argmax(repaid.to_numpy())])


def debt_free_month(df: pd.DataFrame, debts_col: str = "debts_total") -> str | None:
    """
    First month from which total debt stays at zero until the end.

    Args:
        df: Wealth frame
        debts_col: Column name for total debt

    Returns:
        ``"YYYY-MM"`` of the first debt-free month, or None if debt remains at
        the end of the horizon
    """
    owed = df[debts_col].to_numpy() > 0
    if len(owed) == 0 or owed[-1]:
        return None
    still_owed = np.nonzero(owed)[0]
    first_free = 0 if len(still_owed) == 0 else still_owed[-1] + 1
    return str(df.index[first_free])
