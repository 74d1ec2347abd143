"""
Shared utilities for debt schedule strategies.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from sampolio.core.entities import Debt, DebtExtraPayment, DebtReferenceRate
from sampolio.core.results import DebtAmortizationRow
from sampolio.core.utils import YearMonth, add_months, month_range

# Balances below this are treated as fully repaid
CLOSE_EPS = 1e-6

# Upper bound for open-ended schedules that run until payoff
MAX_SCHEDULE_MONTHS = 1200


def sorted_reference_rates(
    reference_rates: Iterable[DebtReferenceRate],
) -> list[DebtReferenceRate]:
    return sorted(reference_rates, key=lambda r: r.effective_month)


def effective_rate(
    debt: Debt, rates: list[DebtReferenceRate], year_month: YearMonth
) -> float:
    """
    Annual rate in force in ``year_month``.

    The latest reference rate effective on or before the month plus the
    debt's margin; the debt's base rate when none applies yet. ``rates`` must
    be sorted by effective month.
    """
    current = None
    for r in rates:
        if r.effective_month > year_month:
            break
        current = r
    if current is None:
        return debt.annual_rate
    return current.annual_rate + debt.reference_rate_margin


def extras_by_month(extra_payments: Iterable[DebtExtraPayment]) -> dict[YearMonth, float]:
    """Sum extra payments per month."""
    out: dict[YearMonth, float] = defaultdict(float)
    for e in extra_payments:
        out[e.year_month] += e.amount
    return dict(out)


def schedule_end(debt: Debt, end_month: YearMonth | None) -> YearMonth | None:
    """Explicit end month, else the debt's own end date, else open-ended (None)."""
    return end_month or debt.end_date


def schedule_months(start: YearMonth, end: YearMonth | None):
    """Yield months from ``start`` to ``end``; open-ended up to the safety bound."""
    if end is not None:
        yield from month_range(start, end)
        return
    for offset in range(MAX_SCHEDULE_MONTHS):
        yield add_months(start, offset)


def closed_row(year_month: YearMonth, rate: float) -> DebtAmortizationRow:
    """Row reported for every month after the debt is repaid."""
    return DebtAmortizationRow(
        year_month=year_month,
        starting_balance=0.0,
        interest_rate=rate,
        interest_paid=0.0,
        principal_paid=0.0,
        extra_payment=0.0,
        total_payment=0.0,
        ending_balance=0.0,
    )
