"""
Core module for Sampolio.

This module contains the entity records, calendar helpers, result structures
and orchestration used by the projection engine.
"""

from .context import ProjectionContext
from .currency import Currency, format_amount, get_currency
from .entities import (
    Account,
    AccountBundle,
    Debt,
    DebtExtraPayment,
    DebtReferenceRate,
    InvestmentAccount,
    InvestmentContribution,
    OccurrenceOverride,
    OneOffItem,
    PlannedItem,
    ProjectionFilters,
    Receivable,
    ReceivableRepayment,
    RecurringItem,
    RepeatingItem,
    SalaryBenefit,
    SalaryConfig,
)
from .errors import ConfigError, MixedCurrencyWarning, SampolioWarning
from .exceptions import PlanValidationError
from .kinds import K
from .results import (
    DebtAmortizationRow,
    InvestmentProjectionRow,
    MonthlyProjection,
    ProjectionLineItem,
    ReceivableProjectionRow,
    WealthBreakdownEntry,
    WealthProjection,
    WealthProjectionMonth,
    YearlyRollup,
    aggregate_totals,
    check_monthly_identities,
    to_frame,
)
from .specs import level_payment, term_from_amort
from .utils import (
    YearMonth,
    add_months,
    format_year_month,
    month_range,
    months_between,
    parse_year_month,
    to_year_month,
)
from .wealth import InstrumentSeries, aggregate_wealth, compute_span

__all__ = [
    # Errors
    "ConfigError",
    "PlanValidationError",
    "SampolioWarning",
    "MixedCurrencyWarning",
    # Context
    "ProjectionContext",
    "K",
    # Currency
    "Currency",
    "get_currency",
    "format_amount",
    # Entities
    "Account",
    "AccountBundle",
    "RecurringItem",
    "OccurrenceOverride",
    "SalaryBenefit",
    "SalaryConfig",
    "OneOffItem",
    "RepeatingItem",
    "PlannedItem",
    "ProjectionFilters",
    "InvestmentAccount",
    "InvestmentContribution",
    "Receivable",
    "ReceivableRepayment",
    "Debt",
    "DebtReferenceRate",
    "DebtExtraPayment",
    # Results
    "ProjectionLineItem",
    "MonthlyProjection",
    "YearlyRollup",
    "DebtAmortizationRow",
    "InvestmentProjectionRow",
    "ReceivableProjectionRow",
    "WealthBreakdownEntry",
    "WealthProjectionMonth",
    "WealthProjection",
    "aggregate_totals",
    "check_monthly_identities",
    "to_frame",
    # Loan math
    "level_payment",
    "term_from_amort",
    # Calendar
    "YearMonth",
    "to_year_month",
    "parse_year_month",
    "format_year_month",
    "add_months",
    "months_between",
    "month_range",
    # Wealth
    "InstrumentSeries",
    "aggregate_wealth",
    "compute_span",
]
