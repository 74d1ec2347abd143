"""
Salary net-pay computation.
"""

from __future__ import annotations

from dataclasses import dataclass

from sampolio.core.entities import SalaryConfig


@dataclass(frozen=True)
class SalaryBreakdown:
    """Monthly salary components, all positive amounts."""

    gross_salary: float
    taxable_benefits: float
    taxable_base: float
    tax: float
    contributions: float
    other_deductions: float
    net_salary: float


def salary_breakdown(salary: SalaryConfig) -> SalaryBreakdown:
    """
    Derive the monthly net salary from its gross components.

    Taxable benefits enlarge the base that tax and contributions are computed
    on, but they are never paid out, so they do not appear in the net amount.

    **Example:**
        ```python
        cfg = SalaryConfig(
            id="job",
            name="Job",
            gross_salary=4000.0,
            tax_rate=0.20,
            contributions_rate=0.10,
            benefits=(SalaryBenefit("Car", 500.0, is_taxable=True),),
        )
        salary_breakdown(cfg).net_salary   # 4000 - 900 - 450 = 2650.0
        ```
    """
    taxable_benefits = sum(b.amount for b in salary.benefits if b.is_taxable)
    taxable_base = salary.gross_salary + taxable_benefits
    tax = taxable_base * salary.tax_rate
    contributions = taxable_base * salary.contributions_rate
    net = salary.gross_salary - tax - contributions - salary.other_deductions
    return SalaryBreakdown(
        gross_salary=salary.gross_salary,
        taxable_benefits=taxable_benefits,
        taxable_base=taxable_base,
        tax=tax,
        contributions=contributions,
        other_deductions=salary.other_deductions,
        net_salary=net,
    )


def calculate_net_salary(salary: SalaryConfig) -> float:
    """Monthly cash actually received from ``salary``."""
    return salary_breakdown(salary).net_salary
