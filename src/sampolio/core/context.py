"""
Context classes for Sampolio projections.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ConfigError
from .utils import YearMonth, add_months, to_year_month


@dataclass(frozen=True)
class ProjectionContext:
    """
    Explicit reference values threaded through a projection run.

    Nothing in the engine reads the wall clock; the caller decides what
    "now" is and passes it here.

    Attributes:
        current_month: Reference month ("YYYY-MM") used to choose defaults
        default_horizon_months: Horizon for instruments without an explicit end
        max_horizon_months: Upper bound on any single projection length
        base_currency: Display currency for aggregated totals (no conversion)

    Note:
        ``current_month`` only feeds defaults (open-ended horizons, expected
        receivable repayments). It never changes how a month is computed.
    """

    current_month: YearMonth
    default_horizon_months: int = 120
    max_horizon_months: int = 1200
    base_currency: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "current_month", to_year_month(self.current_month))
        if self.base_currency is not None:
            object.__setattr__(self, "base_currency", self.base_currency.upper())
        if self.default_horizon_months < 1:
            raise ConfigError("default_horizon_months must be >= 1")
        if self.max_horizon_months < self.default_horizon_months:
            raise ConfigError("max_horizon_months must be >= default_horizon_months")

    @property
    def default_end_month(self) -> YearMonth:
        """Last month of the default horizon counted from ``current_month``."""
        return add_months(self.current_month, self.default_horizon_months - 1)
