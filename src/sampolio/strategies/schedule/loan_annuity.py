"""
Level-payment (annuity) debt schedule with variable reference rates.
"""

from __future__ import annotations

from collections.abc import Iterable

from sampolio.core.entities import Debt, DebtExtraPayment, DebtReferenceRate
from sampolio.core.errors import ConfigError
from sampolio.core.results import DebtAmortizationRow
from sampolio.core.specs import level_payment, term_from_amort
from sampolio.core.utils import YearMonth

from ._loan_utils import (
    CLOSE_EPS,
    closed_row,
    effective_rate,
    extras_by_month,
    schedule_end,
    schedule_months,
    sorted_reference_rates,
)


def resolve_term_months(debt: Debt) -> int:
    """
    Amortization term of ``debt`` in months.

    ``term_months`` wins; otherwise the term implied by ``amortization_pa`` at
    the base rate.

    Raises:
        ConfigError: If neither is available
    """
    if debt.term_months is not None:
        return int(debt.term_months)
    if debt.amortization_pa is not None:
        return term_from_amort(debt.annual_rate, debt.amortization_pa)
    raise ConfigError(f"{debt.id}: provide term_months or amortization_pa")


def resolve_level_payment(debt: Debt) -> float:
    """
    Level monthly payment fixed at origination.

    An explicit ``monthly_payment`` is used as given. Otherwise the annuity
    payment at the base rate over the resolved term. Later reference-rate
    changes never alter it.
    """
    if debt.monthly_payment is not None:
        return float(debt.monthly_payment)
    return level_payment(debt.principal, debt.annual_rate, resolve_term_months(debt))


def amortize_annuity(
    debt: Debt,
    reference_rates: Iterable[DebtReferenceRate] = (),
    extra_payments: Iterable[DebtExtraPayment] = (),
    end_month: YearMonth | None = None,
) -> list[DebtAmortizationRow]:
    """
    Month-by-month schedule of a level-payment debt.

    For each month:

    - rate = latest reference rate effective by then (plus margin), else base rate
    - interest = balance * rate / 12
    - the level payment covers interest first; the rest repays principal
    - interest the payment does not cover is added to the balance
    - extra payments reduce the balance directly
    - the balance never drops below zero

    Once repaid, every remaining month reports a zero balance and zero
    interest. Payments continue past the nominal term until the debt is repaid
    or the end month is reached. Without an end month the schedule stops at
    payoff.

    **Example - 12-month loan:**
        ```python
        debt = Debt("car", 12_000.0, "2026-01", annual_rate=0.12, term_months=12)
        rows = amortize_annuity(debt)
        round(rows[0].total_payment, 2)     # 1066.19
        round(rows[0].ending_balance, 2)    # 11053.81
        rows[-1].ending_balance             # 0.0
        ```
    """
    rates = sorted_reference_rates(reference_rates)
    extras = extras_by_month(extra_payments)
    end = schedule_end(debt, end_month)
    payment = resolve_level_payment(debt)

    rows: list[DebtAmortizationRow] = []
    balance = float(debt.principal)
    for ym in schedule_months(debt.start_date, end):
        rate = effective_rate(debt, rates, ym)
        if balance <= CLOSE_EPS:
            if end is None:
                break
            rows.append(closed_row(ym, rate))
            continue

        interest = balance * rate / 12.0
        scheduled = min(payment, balance + interest)
        principal_paid = max(0.0, scheduled - interest)
        after_payment = balance + interest - scheduled

        extra = min(max(extras.get(ym, 0.0), 0.0), max(after_payment, 0.0))
        ending = max(0.0, after_payment - extra)
        if ending <= CLOSE_EPS:
            ending = 0.0

        rows.append(
            DebtAmortizationRow(
                year_month=ym,
                starting_balance=balance,
                interest_rate=rate,
                interest_paid=interest,
                principal_paid=principal_paid,
                extra_payment=extra,
                total_payment=scheduled + extra,
                ending_balance=ending,
            )
        )
        balance = ending
    return rows
