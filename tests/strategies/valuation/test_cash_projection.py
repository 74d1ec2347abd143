"""
Tests for cash account projection and yearly rollups.
"""

import pytest
from sampolio.core.entities import (
    Account,
    OccurrenceOverride,
    OneOffItem,
    ProjectionFilters,
    RecurringItem,
    RepeatingItem,
    SalaryConfig,
)
from sampolio.core.results import check_monthly_identities
from sampolio.strategies.valuation.cash import (
    project_cashflow,
    unique_categories,
    yearly_rollups,
)


def _account(months=3, balance=1000.0):
    return Account("main", balance, "2024-01", horizon_months=months)


def _income():
    return RecurringItem("pay", "Pay", "income", 2000.0, category="Salary")


def _rent():
    return RecurringItem("rent", "Rent", "expense", 1500.0, category="Housing")


def _laptop():
    return OneOffItem(
        id="laptop",
        name="Laptop",
        type="expense",
        amount=300.0,
        scheduled_date="2024-02",
        category="Electronics",
    )


class TestProjectCashflow:
    """Month-by-month balance fold."""

    def test_recurring_income_and_expense(self):
        monthly = project_cashflow(_account(), [_income(), _rent()])
        assert [m.year_month for m in monthly] == ["2024-01", "2024-02", "2024-03"]
        assert [m.ending_balance for m in monthly] == pytest.approx([1500.0, 2000.0, 2500.0])
        assert all(m.net_change == pytest.approx(500.0) for m in monthly)

    def test_one_off_lands_in_its_month_only(self):
        monthly = project_cashflow(_account(), [_income(), _rent()], [_laptop()])
        assert monthly[0].net_change == pytest.approx(500.0)
        assert monthly[1].net_change == pytest.approx(200.0)
        assert monthly[1].ending_balance == pytest.approx(1700.0)
        assert monthly[2].net_change == pytest.approx(500.0)
        assert monthly[2].ending_balance == pytest.approx(2200.0)
        assert [li.item_id for li in monthly[1].expense_breakdown] == ["rent", "laptop"]

    def test_identities_hold(self):
        repeating = RepeatingItem(
            id="ins",
            name="Insurance",
            type="expense",
            amount=240.0,
            frequency="quarterly",
            first_occurrence="2024-01",
        )
        salary = SalaryConfig("job", "Job", 3000.0, tax_rate=0.25)
        monthly = project_cashflow(
            _account(months=14), [_rent()], [_laptop(), repeating], salaries=[salary]
        )
        check_monthly_identities(monthly)
        assert monthly[0].starting_balance == 1000.0

    def test_empty_account_keeps_balance(self):
        monthly = project_cashflow(_account(months=2, balance=-250.0))
        assert [m.ending_balance for m in monthly] == [-250.0, -250.0]
        assert monthly[0].income_breakdown == []

    def test_overrides_apply_to_recurring_items(self):
        overrides = [
            OccurrenceOverride("rent", "2024-02", skip=True),
            OccurrenceOverride("pay", "2024-03", amount=2500.0),
        ]
        monthly = project_cashflow(_account(), [_income(), _rent()], overrides=overrides)
        assert monthly[1].total_expenses == 0.0
        assert monthly[2].total_income == pytest.approx(2500.0)
        assert monthly[2].income_breakdown[0].is_overridden

    def test_is_deterministic(self):
        args = (_account(months=12), [_income(), _rent()], [_laptop()])
        assert project_cashflow(*args) == project_cashflow(*args)

    def test_unknown_planned_variant_raises(self):
        with pytest.raises(TypeError, match="Unsupported"):
            project_cashflow(_account(), [], [object()])


class TestFilters:
    def test_date_window_is_a_view(self):
        filters = ProjectionFilters(start_date="2024-02", end_date="2024-02")
        (february,) = project_cashflow(_account(), [_income(), _rent()], filters=filters)
        assert february.year_month == "2024-02"
        # Opening balance still includes January
        assert february.starting_balance == pytest.approx(1500.0)

    def test_type_filter_drops_items_from_fold(self):
        filters = ProjectionFilters(item_types=("expense",))
        monthly = project_cashflow(_account(), [_income(), _rent()], filters=filters)
        assert [m.ending_balance for m in monthly] == pytest.approx([-500.0, -2000.0, -3500.0])

    def test_kind_filter(self):
        filters = ProjectionFilters(item_kinds=("one-off",))
        monthly = project_cashflow(_account(), [_income(), _rent()], [_laptop()], filters=filters)
        assert [m.total_expenses for m in monthly] == [0.0, 300.0, 0.0]
        assert all(m.total_income == 0.0 for m in monthly)

    def test_recurring_kind_filter_keeps_salaries(self):
        insurance = RepeatingItem(
            id="insurance",
            name="Insurance",
            type="expense",
            amount=90.0,
            frequency="quarterly",
            first_occurrence="2024-01",
        )
        filters = ProjectionFilters(item_kinds=("recurring",))
        monthly = project_cashflow(
            _account(),
            [_rent()],
            [_laptop(), insurance],
            salaries=[SalaryConfig("job", "Job", 3000.0)],
            filters=filters,
        )
        assert [m.total_income for m in monthly] == pytest.approx([3000.0] * 3)
        assert [m.total_expenses for m in monthly] == pytest.approx([1500.0] * 3)

    def test_category_filter_keeps_uncategorized_lines(self):
        misc = RecurringItem("misc", "Misc", "expense", 10.0)
        filters = ProjectionFilters(categories=("Housing",))
        monthly = project_cashflow(_account(), [_income(), _rent(), misc], filters=filters)
        assert {li.item_id for li in monthly[0].expense_breakdown} == {"rent", "misc"}
        assert monthly[0].total_income == 0.0


class TestYearlyRollups:
    def test_rollups_reconcile_with_months(self):
        account = Account("main", 0.0, "2024-11", horizon_months=4)
        monthly = project_cashflow(account, [_income(), _rent()])
        rollups = yearly_rollups(monthly)
        assert [r.year for r in rollups] == [2024, 2025]
        for r in rollups:
            assert r.net_change == pytest.approx(r.ending_balance - r.starting_balance)
            assert r.net_change == pytest.approx(sum(m.net_change for m in r.months))
        assert rollups[0].total_income == pytest.approx(4000.0)
        assert rollups[1].starting_balance == pytest.approx(rollups[0].ending_balance)

    def test_empty(self):
        assert yearly_rollups([]) == []


def test_unique_categories():
    assert unique_categories([_income(), _rent()], [_laptop()]) == [
        "Electronics",
        "Housing",
        "Salary",
    ]
