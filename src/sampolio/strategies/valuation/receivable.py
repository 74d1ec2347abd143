"""
Receivable repayment projection.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from sampolio.core.entities import Receivable, ReceivableRepayment
from sampolio.core.results import ReceivableProjectionRow
from sampolio.core.utils import YearMonth, month_range


def project_receivable(
    receivable: Receivable,
    repayments: Iterable[ReceivableRepayment] = (),
    end_month: YearMonth | None = None,
    current_month: YearMonth | None = None,
) -> list[ReceivableProjectionRow]:
    """
    Project the outstanding balance of a receivable.

    Each month interest accrues on the opening balance (zero by default),
    then the month's repayments are applied. Repayments above the balance are
    clamped, so the balance never goes negative.

    From ``current_month`` on, months without a recorded repayment assume
    ``expected_monthly_repayment``. Months before it only use recorded
    repayments.

    Args:
        receivable: Receivable to project
        repayments: Recorded repayments (several per month are summed)
        end_month: Last projected month; defaults to ``receivable.end_date``
        current_month: Reference month from which expected repayments apply

    Returns:
        One row per month from ``start_date`` to the end month
    """
    end = end_month or receivable.end_date
    if end is None:
        return []

    recorded: dict[YearMonth, float] = defaultdict(float)
    for r in repayments:
        recorded[r.year_month] += r.amount

    monthly_rate = receivable.annual_interest_rate / 12.0
    balance = float(receivable.principal)
    rows = []
    for ym in month_range(receivable.start_date, end):
        interest = balance * monthly_rate
        owed = balance + interest
        expected = False
        if ym in recorded:
            repayment = recorded[ym]
        elif current_month is not None and ym >= current_month:
            repayment = receivable.expected_monthly_repayment
            expected = repayment > 0
        else:
            repayment = 0.0
        repayment = min(max(repayment, 0.0), owed)
        ending = max(0.0, owed - repayment)
        rows.append(
            ReceivableProjectionRow(
                year_month=ym,
                starting_balance=balance,
                interest=interest,
                repayment=repayment,
                ending_balance=ending,
                is_expected_repayment=expected,
            )
        )
        balance = ending
    return rows
