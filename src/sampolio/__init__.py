"""
Sampolio - Personal Finance Projection Engine

Sampolio projects future cash balances and net worth from recorded financial
facts: cash accounts, recurring and planned cash items, salaries, investments,
receivables, and debts with variable rates.

Key Features:
- **Pure projectors**: Every projection is a plain function of immutable records
- **Explicit time**: The reference month is passed in, never read from a clock
- **Reconciled output**: Monthly balances reconcile exactly to their line items
- **Net worth**: Per-instrument projections combine into a monthly wealth view

Architecture Overview:
- **Entities**: Frozen dataclasses describing accounts, items and instruments
- **Flow strategies**: Schedule expansion and salary net pay
- **Valuation strategies**: Cash, investment and receivable projections
- **Schedule strategies**: Debt amortization, looked up by ``debt_type``
- **FinancialPlan**: Orchestrates a full run and aggregates wealth

Quick Start:
    ```python
    from sampolio import Account, RecurringItem, project_cashflow

    account = Account("main", 1000.0, "2024-01", horizon_months=3)
    salary = RecurringItem("salary", "Salary", "income", 2000.0)
    rent = RecurringItem("rent", "Rent", "expense", 1500.0)

    for month in project_cashflow(account, [salary, rent]):
        print(month.year_month, month.ending_balance)
    # 2024-01 1500.0
    # 2024-02 2000.0
    # 2024-03 2500.0
    ```

Limitations:
    Amounts in different currencies are summed without conversion.
"""

# Version information
__version__ = "0.1.0"
__author__ = "Sampolio Team"
__description__ = "Personal finance projection engine"

# Import core components for easy access
from .core.context import ProjectionContext
from .core.entities import (
    Account,
    Debt,
    DebtExtraPayment,
    DebtReferenceRate,
    InvestmentAccount,
    InvestmentContribution,
    OccurrenceOverride,
    OneOffItem,
    ProjectionFilters,
    Receivable,
    ReceivableRepayment,
    RecurringItem,
    RepeatingItem,
    SalaryBenefit,
    SalaryConfig,
)
from .core.errors import ConfigError, MixedCurrencyWarning, SampolioWarning
from .core.exceptions import PlanValidationError
from .core.kinds import K
from .core.results import aggregate_totals, to_frame
from .core.utils import add_months, month_range, months_between
from .core.wealth import InstrumentSeries, aggregate_wealth, compute_span
from .strategies import (
    amortize_debt,
    contributions,
    occurrences,
    project_cashflow,
    project_investment,
    project_receivable,
    unique_categories,
    yearly_rollups,
)
from .core.plan import FinancialPlan, PlanResults
from .core.validation import ValidationReport, validate_plan
from .core.catalog_loader import CatalogError, load_plan

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__description__",
    # Context and errors
    "ProjectionContext",
    "ConfigError",
    "PlanValidationError",
    "SampolioWarning",
    "MixedCurrencyWarning",
    "CatalogError",
    "K",
    # Entities
    "Account",
    "RecurringItem",
    "OccurrenceOverride",
    "SalaryBenefit",
    "SalaryConfig",
    "OneOffItem",
    "RepeatingItem",
    "ProjectionFilters",
    "InvestmentAccount",
    "InvestmentContribution",
    "Receivable",
    "ReceivableRepayment",
    "Debt",
    "DebtReferenceRate",
    "DebtExtraPayment",
    # Projectors
    "contributions",
    "occurrences",
    "project_cashflow",
    "yearly_rollups",
    "unique_categories",
    "project_investment",
    "project_receivable",
    "amortize_debt",
    # Wealth
    "InstrumentSeries",
    "aggregate_wealth",
    "compute_span",
    # Plan
    "FinancialPlan",
    "PlanResults",
    "ValidationReport",
    "validate_plan",
    "load_plan",
    # Calendar and frames
    "add_months",
    "month_range",
    "months_between",
    "aggregate_totals",
    "to_frame",
]
