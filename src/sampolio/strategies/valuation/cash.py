"""
Cash account projection.
"""

from __future__ import annotations

from collections.abc import Iterable
from itertools import groupby

from sampolio.core.entities import (
    Account,
    OccurrenceOverride,
    PlannedItem,
    ProjectionFilters,
    RecurringItem,
    SalaryConfig,
)
from sampolio.core.kinds import K
from sampolio.core.results import MonthlyProjection, ProjectionLineItem, YearlyRollup
from sampolio.core.utils import is_in_range, parse_year_month
from sampolio.strategies.flow.expander import contributions, index_overrides


def _passes_item_filters(item, filters: ProjectionFilters | None) -> bool:
    if filters is None:
        return True
    if filters.item_types and item.type not in filters.item_types:
        return False
    if filters.item_kinds and item.kind not in filters.item_kinds:
        return False
    return True


def _passes_category(line: ProjectionLineItem, filters: ProjectionFilters | None) -> bool:
    # Uncategorized lines are never excluded by a category filter
    if filters is None or not filters.categories or line.category is None:
        return True
    return line.category in filters.categories


def project_cashflow(
    account: Account,
    recurring_items: Iterable[RecurringItem] = (),
    planned_items: Iterable[PlannedItem] = (),
    *,
    salaries: Iterable[SalaryConfig] = (),
    overrides: Iterable[OccurrenceOverride] = (),
    filters: ProjectionFilters | None = None,
) -> list[MonthlyProjection]:
    """
    Project an account's balance month by month.

    The projection is a strict left fold: the first month opens at
    ``account.starting_balance`` and every later month opens at the previous
    month's ending balance. Each month's totals are the sums of its
    breakdowns.

    Args:
        account: The account to project over its resolved horizon
        recurring_items: Recurring cash items
        planned_items: One-off and repeating planned items
        salaries: Salary configs contributing their net pay
        overrides: Per-month overrides of recurring occurrences
        filters: Optional view filters. The date window slices the result
            after the fold; category, type and kind filters drop items from
            the fold itself.

    Returns:
        One MonthlyProjection per month, in calendar order

    Raises:
        TypeError: If a planned item is neither one-off nor repeating

    **Example:**
        ```python
        account = Account("main", 1000.0, "2024-01", horizon_months=3)
        salary = RecurringItem("s", "Salary", "income", 2000.0)
        rent = RecurringItem("r", "Rent", "expense", 1500.0)
        [m.ending_balance for m in project_cashflow(account, [salary, rent])]
        # [1500.0, 2000.0, 2500.0]
        ```
    """
    override_index = index_overrides(overrides)
    items = [
        item
        for item in (*recurring_items, *salaries, *planned_items)
        if _passes_item_filters(item, filters)
    ]

    monthly: list[MonthlyProjection] = []
    balance = float(account.starting_balance)
    for ym in account.months:
        income: list[ProjectionLineItem] = []
        expenses: list[ProjectionLineItem] = []
        for item in items:
            lines = contributions(item, ym, override_index, anchor=account.starting_date)
            target = income if item.type == K.INCOME else expenses
            target.extend(li for li in lines if _passes_category(li, filters))

        total_income = sum(li.amount for li in income)
        total_expenses = sum(li.amount for li in expenses)
        net_change = total_income - total_expenses
        year, month = parse_year_month(ym)
        monthly.append(
            MonthlyProjection(
                year_month=ym,
                year=year,
                month=month,
                starting_balance=balance,
                total_income=total_income,
                total_expenses=total_expenses,
                net_change=net_change,
                ending_balance=balance + net_change,
                income_breakdown=income,
                expense_breakdown=expenses,
            )
        )
        balance += net_change

    if filters is not None and (filters.start_date or filters.end_date):
        monthly = [
            m
            for m in monthly
            if is_in_range(m.year_month, filters.start_date, filters.end_date)
        ]
    return monthly


def yearly_rollups(monthly: Iterable[MonthlyProjection]) -> list[YearlyRollup]:
    """
    Group consecutive monthly projections by calendar year.

    ``net_change`` equals both ``ending_balance - starting_balance`` and the
    sum of the monthly net changes. Nothing is recomputed from the items.
    """
    rollups = []
    for year, group in groupby(monthly, key=lambda m: m.year):
        months = list(group)
        rollups.append(
            YearlyRollup(
                year=year,
                starting_balance=months[0].starting_balance,
                ending_balance=months[-1].ending_balance,
                total_income=sum(m.total_income for m in months),
                total_expenses=sum(m.total_expenses for m in months),
                net_change=sum(m.net_change for m in months),
                months=months,
            )
        )
    return rollups


def unique_categories(*collections: Iterable) -> list[str]:
    """Sorted distinct categories across any number of item collections."""
    found = {
        item.category
        for items in collections
        for item in items
        if getattr(item, "category", None)
    }
    return sorted(found)
