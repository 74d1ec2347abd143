"""
Tests for salary net-pay computation.
"""

import pytest
from sampolio.core.entities import SalaryBenefit, SalaryConfig
from sampolio.strategies.flow.salary import calculate_net_salary, salary_breakdown


def test_taxable_benefits_enlarge_the_base_only():
    salary = SalaryConfig(
        "job",
        "Job",
        4000.0,
        tax_rate=0.2,
        contributions_rate=0.1,
        other_deductions=50.0,
        benefits=(
            SalaryBenefit("Company car", 500.0, is_taxable=True),
            SalaryBenefit("Meal vouchers", 150.0),
        ),
    )
    b = salary_breakdown(salary)
    assert b.taxable_benefits == pytest.approx(500.0)
    assert b.taxable_base == pytest.approx(4500.0)
    assert b.tax == pytest.approx(900.0)
    assert b.contributions == pytest.approx(450.0)
    assert b.net_salary == pytest.approx(2600.0)
    assert calculate_net_salary(salary) == pytest.approx(2600.0)


def test_no_deductions_pays_gross():
    assert calculate_net_salary(SalaryConfig("job", "Job", 3100.0)) == pytest.approx(3100.0)


def test_deductions_can_exceed_gross():
    salary = SalaryConfig("job", "Job", 1000.0, tax_rate=0.6, other_deductions=500.0)
    assert calculate_net_salary(salary) == pytest.approx(-100.0)
