"""
Investment growth projection.
"""

from __future__ import annotations

from collections.abc import Iterable

from sampolio.core.entities import InvestmentAccount, InvestmentContribution
from sampolio.core.results import InvestmentProjectionRow
from sampolio.core.utils import YearMonth, month_range
from sampolio.strategies.flow.expander import occurs_in_month


def monthly_growth_factor(annual_growth_rate: float) -> float:
    """Monthly factor equivalent to ``annual_growth_rate`` compounded over 12 months."""
    return (1.0 + annual_growth_rate) ** (1.0 / 12.0)


def project_investment(
    investment: InvestmentAccount,
    contributions: Iterable[InvestmentContribution] = (),
    end_month: YearMonth | None = None,
) -> list[InvestmentProjectionRow]:
    """
    Project an investment's value from its valuation month.

    Each month the opening balance grows by the monthly factor, then that
    month's contributions are added. A contribution earns nothing in the
    month it lands.

    Args:
        investment: Investment to project
        contributions: One-off and repeating contributions
        end_month: Last projected month; defaults to ``investment.end_date``

    Returns:
        One row per month from ``valuation_date`` to the end month. Empty when
        no end month is known or it precedes the valuation date.

    **Example:**
        ```python
        inv = InvestmentAccount("etf", 10_000.0, 0.06, "2026-01")
        rows = project_investment(inv, end_month="2026-12")
        rows[-1].ending_balance   # 10000 * 1.06 ** (12 / 12) == 10600.0
        ```
    """
    end = end_month or investment.end_date
    if end is None:
        return []

    contributions = list(contributions)
    factor = monthly_growth_factor(investment.annual_growth_rate)
    balance = float(investment.principal)
    rows = []
    for ym in month_range(investment.valuation_date, end):
        grown = balance * factor
        added = sum(
            c.amount
            for c in contributions
            if occurs_in_month(c, ym, anchor=investment.valuation_date)
        )
        rows.append(
            InvestmentProjectionRow(
                year_month=ym,
                starting_balance=balance,
                growth=grown - balance,
                contributions=added,
                ending_balance=grown + added,
            )
        )
        balance = grown + added
    return rows
