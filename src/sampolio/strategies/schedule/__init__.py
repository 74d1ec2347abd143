"""
Schedule strategies for debts.
"""

from .installment import amortize_installments
from .loan_annuity import amortize_annuity, resolve_level_payment, resolve_term_months

__all__ = [
    "amortize_annuity",
    "amortize_installments",
    "resolve_level_payment",
    "resolve_term_months",
]
