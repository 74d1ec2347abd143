"""
Tests for the level-payment debt schedule.
"""

import pytest
from sampolio.core.entities import Debt, DebtExtraPayment, DebtReferenceRate
from sampolio.core.errors import ConfigError
from sampolio.strategies.schedule.loan_annuity import (
    amortize_annuity,
    resolve_level_payment,
    resolve_term_months,
)


def _loan(**overrides):
    fields = dict(id="car", principal=12_000.0, start_date="2024-01", annual_rate=0.12, term_months=12)
    fields.update(overrides)
    return Debt(**fields)


class TestLevelPaymentSchedule:
    """Plain annuity without rate changes or extras."""

    def test_first_month(self):
        rows = amortize_annuity(_loan())
        first = rows[0]
        assert first.starting_balance == 12_000.0
        assert first.interest_paid == pytest.approx(120.0)
        assert first.total_payment == pytest.approx(1066.19, abs=0.01)
        assert first.principal_paid == pytest.approx(946.19, abs=0.01)
        assert first.ending_balance == pytest.approx(11053.81, abs=0.01)

    def test_stops_at_payoff_without_end_month(self):
        rows = amortize_annuity(_loan())
        assert len(rows) == 12
        assert rows[-1].year_month == "2024-12"
        assert rows[-1].ending_balance == 0.0

    def test_balances_chain_and_never_go_negative(self):
        rows = amortize_annuity(_loan())
        for prev, row in zip(rows, rows[1:]):
            assert row.starting_balance == prev.ending_balance
        assert all(r.ending_balance >= 0.0 for r in rows)

    def test_closed_months_after_payoff(self):
        rows = amortize_annuity(_loan(), end_month="2025-06")
        assert len(rows) == 18
        closed = rows[12:]
        assert all(r.ending_balance == 0.0 for r in closed)
        assert all(r.interest_paid == 0.0 and r.total_payment == 0.0 for r in closed)

    def test_zero_rate_is_linear(self):
        rows = amortize_annuity(_loan(annual_rate=0.0))
        assert all(r.principal_paid == pytest.approx(1000.0) for r in rows)
        assert sum(r.interest_paid for r in rows) == 0.0


class TestExtraPayments:
    def test_extra_reduces_balance_and_interest(self):
        base = amortize_annuity(_loan())
        extra = amortize_annuity(_loan(), extra_payments=[DebtExtraPayment("2024-03", 2000.0)])
        assert extra[2].extra_payment == pytest.approx(2000.0)
        assert extra[2].ending_balance == pytest.approx(base[2].ending_balance - 2000.0)
        assert extra[3].ending_balance < base[3].ending_balance
        assert sum(r.interest_paid for r in extra) < sum(r.interest_paid for r in base)
        assert len(extra) < len(base)

    def test_extra_is_clamped_to_outstanding_balance(self):
        rows = amortize_annuity(_loan(), extra_payments=[DebtExtraPayment("2024-02", 50_000.0)])
        assert rows[1].ending_balance == 0.0
        assert rows[1].extra_payment == pytest.approx(rows[0].ending_balance - rows[1].principal_paid)
        assert len(rows) == 2

    def test_extras_in_same_month_are_summed(self):
        extras = [DebtExtraPayment("2024-02", 100.0), DebtExtraPayment("2024-02", 150.0)]
        rows = amortize_annuity(_loan(), extra_payments=extras)
        assert rows[1].extra_payment == pytest.approx(250.0)


class TestReferenceRates:
    def test_rate_applies_from_effective_month_plus_margin(self):
        debt = _loan(reference_rate_margin=0.01)
        rows = amortize_annuity(debt, reference_rates=[DebtReferenceRate("2024-04", 0.03)])
        assert [r.interest_rate for r in rows[:3]] == [0.12, 0.12, 0.12]
        assert rows[3].interest_rate == pytest.approx(0.04)
        assert rows[3].interest_paid == pytest.approx(rows[3].starting_balance * 0.04 / 12)

    def test_latest_effective_rate_wins_regardless_of_input_order(self):
        rates = [DebtReferenceRate("2024-06", 0.05), DebtReferenceRate("2024-03", 0.08)]
        rows = amortize_annuity(_loan(), reference_rates=rates)
        assert rows[2].interest_rate == pytest.approx(0.08)
        assert rows[5].interest_rate == pytest.approx(0.05)

    def test_payment_stays_fixed_when_rate_rises(self):
        rows = amortize_annuity(
            _loan(), reference_rates=[DebtReferenceRate("2024-07", 0.18)], end_month="2025-12"
        )
        payment = rows[0].total_payment
        assert rows[8].total_payment == pytest.approx(payment)
        # Higher rate with the same payment runs past the nominal term
        assert rows[11].ending_balance > 0.0
        assert rows[12].total_payment > 0.0


class TestExplicitPayment:
    def test_uncovered_interest_is_capitalized(self):
        rows = amortize_annuity(_loan(monthly_payment=50.0), end_month="2024-03")
        first = rows[0]
        assert first.principal_paid == 0.0
        assert first.ending_balance == pytest.approx(12_070.0)
        assert rows[1].ending_balance > first.ending_balance


class TestTermResolution:
    def test_term_from_amortization_rate(self):
        debt = _loan(term_months=None, amortization_pa=0.02, annual_rate=0.034)
        assert resolve_term_months(debt) > 300
        assert resolve_level_payment(debt) == pytest.approx(12_000 * 0.054 / 12, rel=0.01)

    def test_missing_term_raises(self):
        with pytest.raises(ConfigError, match="term_months or amortization_pa"):
            amortize_annuity(_loan(term_months=None))

    def test_explicit_payment_needs_no_term(self):
        debt = _loan(term_months=None, monthly_payment=2000.0)
        assert resolve_level_payment(debt) == 2000.0
        rows = amortize_annuity(debt)
        assert rows[-1].ending_balance == 0.0
