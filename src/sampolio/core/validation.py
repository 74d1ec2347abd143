"""
Validation and reporting utilities for Sampolio.

Provides structured validation reports for financial plans. Validation runs
before projection; the projectors themselves assume valid input.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from sampolio.strategies.flow.salary import calculate_net_salary

from .context import ProjectionContext
from .entities import OneOffItem, RepeatingItem
from .exceptions import PlanValidationError
from .kinds import K
from .specs import term_from_amort
from .utils import months_between

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem found on one entity."""

    entity_id: str
    message: str

    def __str__(self) -> str:
        return f"[{self.entity_id}] {self.message}"


@dataclass
class ValidationReport:
    """
    Structured validation report for a financial plan.

    Provides machine-readable validation results with clear error/warning
    categorization for CLI integration and user feedback. Errors block
    projection; warnings flag inputs that project fine but look suspicious.
    """

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    def error(self, entity_id: str, message: str) -> None:
        self.errors.append(ValidationIssue(entity_id, message))

    def warn(self, entity_id: str, message: str) -> None:
        self.warnings.append(ValidationIssue(entity_id, message))

    def has_errors(self) -> bool:
        """Check if there are any hard errors."""
        return bool(self.errors)

    def has_warnings(self) -> bool:
        """Check if there are any warnings."""
        return bool(self.warnings)

    def is_valid(self) -> bool:
        """Check if validation passed (no errors, warnings are OK)."""
        return not self.has_errors()

    @property
    def problem_ids(self) -> list[str]:
        """Distinct ids of entities with errors, in order of appearance."""
        return list(dict.fromkeys(issue.entity_id for issue in self.errors))

    def get_exit_code(self) -> int:
        """
        Get appropriate CLI exit code.

        Returns:
            0: Valid (no errors)
            1: Errors present
            2: Warnings only
        """
        if self.has_errors():
            return 1
        elif self.has_warnings():
            return 2
        else:
            return 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "errors": [{"id": i.entity_id, "message": i.message} for i in self.errors],
            "warnings": [
                {"id": i.entity_id, "message": i.message} for i in self.warnings
            ],
            "has_errors": self.has_errors(),
            "has_warnings": self.has_warnings(),
            "is_valid": self.is_valid(),
            "exit_code": self.get_exit_code(),
        }

    def __str__(self) -> str:
        """Human-readable string representation."""
        lines = []

        if self.is_valid():
            lines.append("✅ Validation passed")
        else:
            lines.append("❌ Validation failed")

        for issue in self.errors:
            lines.append(f"Error: {issue}")

        for issue in self.warnings:
            lines.append(f"Warning: {issue}")

        return "\n".join(lines)


def _check_horizon(
    report: ValidationReport, entity_id: str, start, end, ctx: ProjectionContext
) -> None:
    if end is None:
        # open-ended records starting past the default horizon project to nothing
        if start > ctx.default_end_month:
            return
        end = ctx.default_end_month
    elif end < start:
        report.error(entity_id, f"end month {end} precedes start month {start}")
        return
    length = months_between(start, end) + 1
    if length > ctx.max_horizon_months:
        report.error(
            entity_id,
            f"horizon of {length} months exceeds the maximum of {ctx.max_horizon_months}",
        )


def _check_frequency(
    report: ValidationReport, entity_id: str, frequency, custom, allowed: list[str]
) -> None:
    if frequency not in allowed:
        report.error(entity_id, f"frequency must be one of {allowed}, got {frequency!r}")
        return
    if frequency == K.CUSTOM:
        if custom is None or custom <= 0:
            report.error(entity_id, "custom frequency needs custom_interval_months > 0")
    elif custom is not None:
        report.error(
            entity_id, f"custom_interval_months is only allowed with frequency '{K.CUSTOM}'"
        )


def _check_parent(
    report: ValidationReport, entity_id: str, parent_id, parents: set[str], label: str
) -> None:
    if parent_id is None:
        if len(parents) != 1:
            report.error(
                entity_id,
                f"no {label} given and the plan has {len(parents)} {label}s to choose from",
            )
    elif parent_id not in parents:
        report.error(entity_id, f"references unknown {label} '{parent_id}'")


def _check_duplicate_ids(report: ValidationReport, plan) -> None:
    collections = [
        plan.accounts,
        plan.recurring_items,
        plan.planned_items,
        plan.salaries,
        plan.investments,
        plan.receivables,
        plan.debts,
    ]
    counts = Counter(r.id for records in collections for r in records)
    for record_id, count in counts.items():
        if count > 1:
            report.error(record_id, f"id used by {count} records")


def _validate_accounts(report: ValidationReport, plan, ctx: ProjectionContext) -> None:
    account_ids = {a.id for a in plan.accounts}
    for account in plan.accounts:
        _check_horizon(report, account.id, account.starting_date, account.end_month, ctx)

    for item in plan.recurring_items:
        if item.amount <= 0:
            report.error(item.id, "amount must be > 0")
        _check_frequency(
            report, item.id, item.frequency, item.custom_interval_months, K.frequencies()
        )
        if item.start_date and item.end_date and item.end_date < item.start_date:
            report.error(item.id, "end_date precedes start_date")
        _check_parent(report, item.id, item.account_id, account_ids, "account")

    for item in plan.planned_items:
        if isinstance(item, RepeatingItem):
            if item.first_occurrence is None:
                report.error(item.id, "repeating items need first_occurrence")
            _check_frequency(
                report,
                item.id,
                item.frequency,
                item.custom_interval_months,
                K.repeating_frequencies(),
            )
            if (
                item.first_occurrence is not None
                and item.end_date is not None
                and item.end_date < item.first_occurrence
            ):
                report.warn(item.id, "end_date precedes first_occurrence; item never fires")
        elif not isinstance(item, OneOffItem):
            report.error(
                getattr(item, "id", "?"),
                f"unsupported planned item type {type(item).__name__}",
            )
            continue
        if item.amount <= 0:
            report.error(item.id, "amount must be > 0")
        _check_parent(report, item.id, item.account_id, account_ids, "account")

    for salary in plan.salaries:
        if salary.gross_salary <= 0:
            report.error(salary.id, "gross_salary must be > 0")
        for name in ("tax_rate", "contributions_rate"):
            rate = getattr(salary, name)
            if not 0 <= rate <= 1:
                report.error(salary.id, f"{name} must be a fraction in [0, 1], got {rate}")
        if salary.other_deductions < 0:
            report.error(salary.id, "other_deductions must be >= 0")
        if salary.gross_salary > 0 and calculate_net_salary(salary) < 0:
            report.warn(salary.id, "deductions exceed gross salary; net pay is negative")
        _check_parent(report, salary.id, salary.account_id, account_ids, "account")

    recurring_ids = {item.id for item in plan.recurring_items}
    for override in plan.overrides:
        label = f"{override.item_id}@{override.year_month}"
        if override.item_id not in recurring_ids:
            report.error(label, f"override references unknown recurring item '{override.item_id}'")
        if override.amount is not None and override.amount <= 0:
            report.error(label, "override amount must be > 0")


def _validate_investments(report: ValidationReport, plan, ctx: ProjectionContext) -> None:
    ids = {i.id for i in plan.investments}
    for inv in plan.investments:
        if inv.principal < 0:
            report.error(inv.id, "principal must be >= 0")
        if inv.annual_growth_rate <= -1:
            report.error(inv.id, "annual_growth_rate must be > -1")
        _check_horizon(report, inv.id, inv.valuation_date, inv.end_date, ctx)

    for c in plan.investment_contributions:
        label = c.id or f"contribution:{c.investment_id}"
        if c.amount <= 0:
            report.error(label, "amount must be > 0")
        if c.frequency is not None:
            _check_frequency(
                report, label, c.frequency, c.custom_interval_months, K.frequencies()
            )
        _check_parent(report, label, c.investment_id, ids, "investment")


def _validate_receivables(report: ValidationReport, plan, ctx: ProjectionContext) -> None:
    ids = {r.id for r in plan.receivables}
    for rec in plan.receivables:
        if rec.principal < 0:
            report.error(rec.id, "principal must be >= 0")
        if rec.annual_interest_rate < 0:
            report.error(rec.id, "annual_interest_rate must be >= 0")
        if rec.expected_monthly_repayment < 0:
            report.error(rec.id, "expected_monthly_repayment must be >= 0")
        _check_horizon(report, rec.id, rec.start_date, rec.end_date, ctx)

    for r in plan.receivable_repayments:
        label = r.id or f"repayment:{r.receivable_id}@{r.year_month}"
        if r.amount <= 0:
            report.error(label, "amount must be > 0")
        _check_parent(report, label, r.receivable_id, ids, "receivable")


def _validate_debts(report: ValidationReport, plan, ctx: ProjectionContext) -> None:
    ids = {d.id for d in plan.debts}
    for debt in plan.debts:
        if debt.principal <= 0:
            report.error(debt.id, "principal must be > 0")
        _check_horizon(report, debt.id, debt.start_date, debt.end_date, ctx)

        if debt.debt_type == K.DEBT_AMORTIZED:
            if debt.term_months is not None and debt.term_months <= 0:
                report.error(debt.id, "term_months must be > 0")
            if debt.monthly_payment is not None and debt.monthly_payment <= 0:
                report.error(debt.id, "monthly_payment must be > 0")
            if debt.amortization_pa is not None:
                try:
                    term_from_amort(debt.annual_rate, debt.amortization_pa)
                except ValueError as e:
                    report.error(debt.id, str(e))
            if (
                debt.term_months is None
                and debt.amortization_pa is None
                and debt.monthly_payment is None
            ):
                report.error(
                    debt.id, "provide term_months, amortization_pa or monthly_payment"
                )
            if (
                debt.monthly_payment is not None
                and debt.monthly_payment > 0
                and debt.monthly_payment <= debt.principal * debt.annual_rate / 12.0
            ):
                report.warn(
                    debt.id,
                    "monthly_payment does not cover first-month interest; balance will grow",
                )
        elif debt.debt_type == K.DEBT_FIXED_INSTALLMENT:
            if debt.installment_amount is None or debt.installment_amount <= 0:
                report.error(debt.id, "fixed-installment debts need installment_amount > 0")
            if debt.total_installments is not None and debt.total_installments <= 0:
                report.error(debt.id, "total_installments must be > 0")
        else:
            report.error(
                debt.id, f"debt_type must be one of {K.debt_types()}, got {debt.debt_type!r}"
            )

    for rate in plan.debt_reference_rates:
        label = f"rate:{rate.debt_id}@{rate.effective_month}"
        if rate.annual_rate < 0:
            report.warn(label, "negative reference rate")
        _check_parent(report, label, rate.debt_id, ids, "debt")

    for extra in plan.debt_extra_payments:
        label = extra.id or f"extra:{extra.debt_id}@{extra.year_month}"
        if extra.amount <= 0:
            report.error(label, "amount must be > 0")
        _check_parent(report, label, extra.debt_id, ids, "debt")


def validate_plan(
    plan, ctx: ProjectionContext, raise_on_error: bool = False
) -> ValidationReport:
    """
    Validate a financial plan before projection.

    Checks horizons against ``ctx.max_horizon_months``, amounts, frequency
    fields of recurring and planned items, debt configuration, duplicate ids
    and child records pointing at unknown parents. Mixed currencies are
    reported as a warning.

    Args:
        plan: FinancialPlan to validate
        ctx: Projection context providing horizon limits
        raise_on_error: Raise instead of returning a failing report

    Returns:
        The validation report

    Raises:
        PlanValidationError: If ``raise_on_error`` and the plan has errors
    """
    report = ValidationReport()
    _check_duplicate_ids(report, plan)
    _validate_accounts(report, plan, ctx)
    _validate_investments(report, plan, ctx)
    _validate_receivables(report, plan, ctx)
    _validate_debts(report, plan, ctx)

    currencies = sorted(
        {
            r.currency
            for records in (plan.accounts, plan.investments, plan.receivables, plan.debts)
            for r in records
        }
    )
    if len(currencies) > 1:
        report.warn(
            plan.id,
            f"mixed currencies {currencies} are summed without conversion",
        )

    logger.debug(
        "Validated plan '%s': %d errors, %d warnings",
        plan.id,
        len(report.errors),
        len(report.warnings),
    )
    if raise_on_error and report.has_errors():
        raise PlanValidationError(plan.id, report)
    return report
