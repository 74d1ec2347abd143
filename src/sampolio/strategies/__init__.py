"""
Projection strategies for Sampolio.

Strategies are plain functions over immutable records:

- Flow: schedule expansion and salary net pay
- Valuation: cash, investment and receivable projections
- Schedule: debt amortization schedules

Registry System:
Debt schedules are looked up by ``debt_type`` in ``DebtScheduleRegistry``,
which is populated with the default schedules when this package is imported.
"""

from .flow import contributions, interval_months, occurrences, occurs_in_month
from .registry import DebtScheduleRegistry, amortize_debt, register_defaults
from .schedule import amortize_annuity, amortize_installments
from .valuation import (
    project_cashflow,
    project_investment,
    project_receivable,
    unique_categories,
    yearly_rollups,
)

# Register all default schedules when module is imported
register_defaults()

__all__ = [
    # Flow
    "contributions",
    "interval_months",
    "occurrences",
    "occurs_in_month",
    # Valuation
    "project_cashflow",
    "yearly_rollups",
    "unique_categories",
    "project_investment",
    "project_receivable",
    # Schedule
    "amortize_annuity",
    "amortize_installments",
    "amortize_debt",
    # Registry
    "DebtScheduleRegistry",
    "register_defaults",
]
