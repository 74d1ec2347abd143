"""
Loan math helpers for Sampolio.
"""

from __future__ import annotations

import math


def level_payment(principal: float, rate_pa: float, term_months: int) -> float:
    """
    Level monthly payment that amortizes ``principal`` over ``term_months``.

    Standard annuity formula ``A = P * r / (1 - (1 + r)^-n)`` with
    ``r = rate_pa / 12``; a zero rate degrades to ``P / n``.

    Args:
        principal: Amount borrowed
        rate_pa: Annual interest rate (e.g., 0.12 for 12%)
        term_months: Number of monthly payments

    Returns:
        The fixed monthly payment

    Raises:
        ValueError: If term_months is not positive

    Example:
        >>> round(level_payment(12_000, 0.12, 12), 2)
        1066.19
    """
    if term_months <= 0:
        raise ValueError("term_months must be > 0")

    r_m = rate_pa / 12.0
    if r_m == 0.0:
        return principal / term_months
    # 1 - (1 + r)^-n without cancellation for tiny rates
    discount = -math.expm1(-term_months * math.log1p(r_m))
    return principal * r_m / discount


def term_from_amort(rate_pa: float, amort_pa: float) -> int:
    """
    Calculate loan term in months from annual interest rate and amortization rate.

    Uses the exact closed-form formula for annuity loans where:
    M = P * (rate_pa + amort_pa) / 12

    Args:
        rate_pa: Annual interest rate (e.g., 0.034 for 3.4%)
        amort_pa: Annual amortization rate (e.g., 0.02 for 2%)

    Returns:
        Number of months to fully amortize the loan

    Raises:
        ValueError: If parameters are invalid
    """
    if amort_pa <= 0:
        raise ValueError("amortization_pa must be > 0")
    if rate_pa + amort_pa >= 1:
        raise ValueError("rate_pa + amort_pa must be < 1")

    if rate_pa == 0.0:
        # Linear amortization: M = P / n, so n = 12 / amort_pa
        return math.ceil(12 / amort_pa)

    r = rate_pa / 12.0
    num = math.log(amort_pa / (rate_pa + amort_pa))
    den = math.log(1 + r)
    n = -num / den
    return int(math.ceil(n))
