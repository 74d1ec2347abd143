"""
Fixed-installment debt schedule (no interest, N equal installments).
"""

from __future__ import annotations

from collections.abc import Iterable

from sampolio.core.entities import Debt, DebtExtraPayment, DebtReferenceRate
from sampolio.core.errors import ConfigError
from sampolio.core.results import DebtAmortizationRow
from sampolio.core.utils import YearMonth

from ._loan_utils import CLOSE_EPS, closed_row, extras_by_month, schedule_end, schedule_months


def amortize_installments(
    debt: Debt,
    reference_rates: Iterable[DebtReferenceRate] = (),
    extra_payments: Iterable[DebtExtraPayment] = (),
    end_month: YearMonth | None = None,
) -> list[DebtAmortizationRow]:
    """
    Schedule of a debt repaid in fixed installments without interest.

    Typical of store credit or "pay in N" purchases. One installment of
    ``installment_amount`` is paid each month until ``total_installments``
    have been paid (when given) or the balance is repaid. The last
    installment is capped at the remaining balance. Extra payments reduce the
    balance directly.

    ``reference_rates`` is accepted for a uniform schedule signature and
    ignored.

    Raises:
        ConfigError: If ``installment_amount`` is missing or not positive
    """
    if debt.installment_amount is None or debt.installment_amount <= 0:
        raise ConfigError(f"{debt.id}: fixed-installment debts need installment_amount > 0")

    extras = extras_by_month(extra_payments)
    end = schedule_end(debt, end_month)
    limit = debt.total_installments

    rows: list[DebtAmortizationRow] = []
    balance = float(debt.principal)
    paid_count = 0
    for ym in schedule_months(debt.start_date, end):
        installments_left = limit is None or paid_count < limit
        if balance <= CLOSE_EPS or (end is None and not installments_left):
            if end is None:
                break
            rows.append(closed_row(ym, 0.0))
            continue

        installment = min(debt.installment_amount, balance) if installments_left else 0.0
        if installment > 0:
            paid_count += 1
        after_payment = balance - installment
        extra = min(max(extras.get(ym, 0.0), 0.0), after_payment)
        ending = max(0.0, after_payment - extra)
        if ending <= CLOSE_EPS:
            ending = 0.0

        rows.append(
            DebtAmortizationRow(
                year_month=ym,
                starting_balance=balance,
                interest_rate=0.0,
                interest_paid=0.0,
                principal_paid=installment,
                extra_payment=extra,
                total_payment=installment + extra,
                ending_balance=ending,
            )
        )
        balance = ending
    return rows
