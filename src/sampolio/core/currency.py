"""
Currency precision and display helpers for Sampolio.

Projections run in floats; these helpers only round for presentation. No
conversion between currencies is performed anywhere in the package.
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal
from enum import Enum


class RoundingPolicy(Enum):
    """Rounding policies for currency display."""

    BANKERS = ROUND_HALF_EVEN
    HALF_UP = ROUND_HALF_UP


class Currency:
    """
    Currency definition with precision, symbol and rounding rules.

    Attributes:
        code: ISO currency code (e.g., 'EUR', 'USD', 'JPY')
        decimals: Number of decimal places for this currency
        symbol: Display symbol
        rounding: Rounding policy for display
    """

    def __init__(
        self,
        code: str,
        decimals: int = 2,
        symbol: str | None = None,
        rounding: RoundingPolicy = RoundingPolicy.BANKERS,
    ):
        self.code = code.upper()
        self.decimals = decimals
        self.symbol = symbol or self.code
        self.rounding = rounding

    def quantize(self, amount: Decimal | float) -> Decimal:
        """Quantize amount to currency precision."""
        if not isinstance(amount, Decimal):
            amount = Decimal(str(amount))
        quantum = Decimal("1").scaleb(-self.decimals)  # e.g., 0.01 for 2 dp, 1 for 0 dp
        return amount.quantize(quantum, rounding=self.rounding.value)

    def format(self, amount: float) -> str:
        """Render ``amount`` with symbol and thousands separators."""
        value = self.quantize(amount)
        return f"{self.symbol}{value:,.{self.decimals}f}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency('{self.code}', decimals={self.decimals})"


# Currencies supported by the planner
CURRENCIES: dict[str, Currency] = {
    "EUR": Currency("EUR", 2, "€"),
    "USD": Currency("USD", 2, "$"),
    "BRL": Currency("BRL", 2, "R$"),
    "GBP": Currency("GBP", 2, "£"),
    "JPY": Currency("JPY", 0, "¥"),
    "CHF": Currency("CHF", 2, "CHF "),
    "CAD": Currency("CAD", 2, "C$"),
    "AUD": Currency("AUD", 2, "A$"),
}


def get_currency(code: str) -> Currency:
    """Get currency by code."""
    code = code.upper()
    if code not in CURRENCIES:
        # Default to 2 decimal places for unknown currencies
        return Currency(code, decimals=2)
    return CURRENCIES[code]


def format_amount(value: float, currency_code: str) -> str:
    """Format ``value`` for display in ``currency_code``."""
    return get_currency(currency_code).format(value)
