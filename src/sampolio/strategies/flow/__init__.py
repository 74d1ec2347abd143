"""
Flow strategies: schedule expansion and salary net pay.
"""

from .expander import contributions, interval_months, occurrences, occurs_in_month
from .salary import calculate_net_salary, salary_breakdown

__all__ = [
    "contributions",
    "interval_months",
    "occurrences",
    "occurs_in_month",
    "calculate_net_salary",
    "salary_breakdown",
]
