"""
Tests for plan validation and reporting.
"""

import pytest
from sampolio.core.context import ProjectionContext
from sampolio.core.entities import (
    Account,
    Debt,
    DebtExtraPayment,
    InvestmentAccount,
    InvestmentContribution,
    OccurrenceOverride,
    OneOffItem,
    RecurringItem,
    RepeatingItem,
    SalaryConfig,
)
from sampolio.core.exceptions import PlanValidationError
from sampolio.core.plan import FinancialPlan
from sampolio.core.validation import ValidationReport, validate_plan


def _make_context(**kwargs):
    return ProjectionContext(current_month="2024-01", **kwargs)


def _plan(**records):
    plan = FinancialPlan(id="test", accounts=[Account("main", 0.0, "2024-01", horizon_months=12)])
    for name, values in records.items():
        setattr(plan, name, list(values))
    return plan


def _messages(issues):
    return [f"{i.entity_id}: {i.message}" for i in issues]


class TestValidationReport:
    """Report state and rendering."""

    def test_empty_report_is_valid(self):
        report = ValidationReport()
        assert report.is_valid()
        assert report.get_exit_code() == 0
        assert str(report) == "✅ Validation passed"

    def test_warnings_only(self):
        report = ValidationReport()
        report.warn("a", "looks odd")
        assert report.is_valid()
        assert report.get_exit_code() == 2
        assert "Warning: [a] looks odd" in str(report)

    def test_errors(self):
        report = ValidationReport()
        report.error("a", "bad")
        report.error("a", "worse")
        report.error("b", "bad")
        assert not report.is_valid()
        assert report.get_exit_code() == 1
        assert report.problem_ids == ["a", "b"]
        assert str(report).startswith("❌ Validation failed")
        payload = report.to_dict()
        assert payload["errors"][0] == {"id": "a", "message": "bad"}
        assert payload["exit_code"] == 1


class TestValidatePlan:
    def test_clean_plan_passes(self):
        plan = _plan(
            recurring_items=[RecurringItem("rent", "Rent", "expense", 1000.0)],
            planned_items=[
                OneOffItem(id="tv", name="TV", type="expense", amount=300.0, scheduled_date="2024-02")
            ],
            salaries=[SalaryConfig("job", "Job", 3000.0, tax_rate=0.2)],
        )
        report = validate_plan(plan, _make_context())
        assert report.is_valid(), str(report)
        assert not report.has_warnings()

    def test_non_positive_amounts(self):
        plan = _plan(recurring_items=[RecurringItem("rent", "Rent", "expense", 0.0)])
        report = validate_plan(plan, _make_context())
        assert "rent: amount must be > 0" in _messages(report.errors)

    def test_repeating_item_rules(self):
        items = [
            RepeatingItem(
                id="no_first",
                name="A",
                type="expense",
                amount=1.0,
                frequency="quarterly",
                first_occurrence=None,
            ),
            RepeatingItem(
                id="monthly",
                name="B",
                type="expense",
                amount=1.0,
                frequency="monthly",
                first_occurrence="2024-01",
            ),
            RepeatingItem(
                id="bad_custom",
                name="C",
                type="expense",
                amount=1.0,
                frequency="custom",
                custom_interval_months=0,
                first_occurrence="2024-01",
            ),
            RepeatingItem(
                id="stray_interval",
                name="D",
                type="expense",
                amount=1.0,
                frequency="yearly",
                custom_interval_months=6,
                first_occurrence="2024-01",
            ),
        ]
        report = validate_plan(_plan(planned_items=items), _make_context())
        assert set(report.problem_ids) == {"no_first", "monthly", "bad_custom", "stray_interval"}

    def test_repeating_end_before_first_is_a_warning(self):
        item = RepeatingItem(
            id="late",
            name="Late",
            type="expense",
            amount=1.0,
            frequency="yearly",
            first_occurrence="2024-06",
            end_date="2024-01",
        )
        report = validate_plan(_plan(planned_items=[item]), _make_context())
        assert report.is_valid()
        assert report.get_exit_code() == 2

    def test_horizon_above_maximum(self):
        plan = FinancialPlan(accounts=[Account("long", 0.0, "2024-01", horizon_months=240)])
        report = validate_plan(plan, _make_context(max_horizon_months=120))
        assert report.problem_ids == ["long"]
        assert "exceeds the maximum" in report.errors[0].message

    def test_open_ended_debt_starting_after_default_horizon(self):
        plan = _plan(debts=[Debt("future", 10_000.0, "2040-01", annual_rate=0.05, term_months=60)])
        report = validate_plan(plan, ProjectionContext("2026-01"))
        assert report.is_valid()
        assert plan.run(ProjectionContext("2026-01")).debts["future"] == []

    def test_explicit_end_before_start(self):
        plan = _plan(
            investments=[InvestmentAccount("etf", 1000.0, 0.05, "2024-06", end_date="2024-03")]
        )
        report = validate_plan(plan, _make_context())
        assert _messages(report.errors) == ["etf: end month 2024-03 precedes start month 2024-06"]

    def test_duplicate_ids(self):
        plan = _plan(recurring_items=[RecurringItem("main", "Clash", "income", 1.0)])
        report = validate_plan(plan, _make_context())
        assert "main: id used by 2 records" in _messages(report.errors)

    def test_unknown_parent_and_ambiguous_owner(self):
        plan = _plan(
            accounts=[
                Account("a", 0.0, "2024-01", horizon_months=12),
                Account("b", 0.0, "2024-01", horizon_months=12),
            ],
            recurring_items=[
                RecurringItem("orphan", "X", "expense", 1.0, account_id="zzz"),
                RecurringItem("unlinked", "Y", "expense", 1.0),
            ],
        )
        report = validate_plan(plan, _make_context())
        messages = _messages(report.errors)
        assert "orphan: references unknown account 'zzz'" in messages
        assert any(m.startswith("unlinked: no account given") for m in messages)

    def test_override_of_unknown_item(self):
        plan = _plan(overrides=[OccurrenceOverride("ghost", "2024-02", skip=True)])
        report = validate_plan(plan, _make_context())
        assert report.problem_ids == ["ghost@2024-02"]

    def test_salary_rates(self):
        plan = _plan(salaries=[SalaryConfig("job", "Job", 3000.0, tax_rate=20.0)])
        report = validate_plan(plan, _make_context())
        assert any("tax_rate must be a fraction" in m for m in _messages(report.errors))

    def test_debt_rules(self):
        plan = _plan(
            debts=[
                Debt("no_term", 1000.0, "2024-01", annual_rate=0.05),
                Debt("slow", 12_000.0, "2024-01", annual_rate=0.12, monthly_payment=50.0),
                Debt("odd", 1000.0, "2024-01", debt_type="balloon", term_months=12),
            ],
            debt_extra_payments=[DebtExtraPayment("2024-02", 100.0, debt_id="missing")],
        )
        report = validate_plan(plan, _make_context())
        assert set(report.problem_ids) == {"no_term", "odd", "extra:missing@2024-02"}
        assert [w.entity_id for w in report.warnings] == ["slow"]

    def test_investment_contribution_needs_known_investment(self):
        plan = _plan(
            investments=[InvestmentAccount("etf", 1000.0, 0.05, "2024-01")],
            investment_contributions=[
                InvestmentContribution(100.0, frequency="monthly", investment_id="etf"),
                InvestmentContribution(100.0, frequency="monthly", investment_id="bonds", id="c2"),
            ],
        )
        report = validate_plan(plan, _make_context())
        assert report.problem_ids == ["c2"]

    def test_mixed_currencies_warn(self):
        plan = _plan(investments=[InvestmentAccount("us", 1000.0, 0.05, "2024-01", currency="USD")])
        report = validate_plan(plan, _make_context())
        assert report.is_valid()
        assert any("mixed currencies" in w.message for w in report.warnings)

    def test_raise_on_error(self):
        plan = _plan(recurring_items=[RecurringItem("rent", "Rent", "expense", -5.0)])
        with pytest.raises(PlanValidationError) as excinfo:
            validate_plan(plan, _make_context(), raise_on_error=True)
        assert excinfo.value.plan_id == "test"
        assert excinfo.value.problem_ids == ["rent"]
        assert "[Plan test]" in str(excinfo.value)

    def test_error_message_lists_offending_records(self):
        plan = _plan(
            recurring_items=[
                RecurringItem("rent", "Rent", "expense", -5.0),
                RecurringItem("gym", "Gym", "expense", 0.0),
            ]
        )
        with pytest.raises(PlanValidationError) as excinfo:
            validate_plan(plan, _make_context(), raise_on_error=True)
        lines = str(excinfo.value).splitlines()
        assert lines == [
            "[Plan test] 2 validation error(s)",
            "  rent: amount must be > 0",
            "  gym: amount must be > 0",
        ]
        assert excinfo.value.report.has_errors()

    def test_error_message_truncates_long_lists(self):
        plan = _plan(
            recurring_items=[
                RecurringItem(f"item{n}", "X", "expense", -1.0) for n in range(12)
            ]
        )
        with pytest.raises(PlanValidationError) as excinfo:
            validate_plan(plan, _make_context(), raise_on_error=True)
        lines = str(excinfo.value).splitlines()
        assert lines[0] == "[Plan test] 12 validation error(s)"
        assert lines[-1] == "  ... and 2 more"
        assert len(excinfo.value.problem_ids) == 12
