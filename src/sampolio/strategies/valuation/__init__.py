"""
Valuation strategies for cash accounts, investments and receivables.
"""

from .cash import project_cashflow, unique_categories, yearly_rollups
from .investment import project_investment
from .receivable import project_receivable

__all__ = [
    "project_cashflow",
    "yearly_rollups",
    "unique_categories",
    "project_investment",
    "project_receivable",
]
