"""
Net worth aggregation across instrument projections.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .errors import ConfigError, MixedCurrencyWarning
from .kinds import K
from .results import WealthBreakdownEntry, WealthProjection, WealthProjectionMonth
from .utils import YearMonth, earliest, latest, month_range

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstrumentSeries:
    """
    Projected closing values of one instrument.

    Attributes:
        instrument_id: Identifier of the projected record
        name: Display name
        category: One of ``cash``, ``investment``, ``receivable``, ``debt``
        currency: ISO currency code of the values
        rows: Projection rows in month order, each exposing ``year_month``
            and ``closing_value``

    Note:
        Debt values are owed amounts (>= 0); the aggregator subtracts them.
    """

    instrument_id: str
    name: str
    category: str
    currency: str
    rows: Sequence

    def __post_init__(self) -> None:
        if self.category not in (K.CASH, K.INVESTMENT, K.RECEIVABLE, K.DEBT):
            raise ConfigError(
                f"{self.instrument_id}: unknown wealth category {self.category!r}"
            )
        object.__setattr__(self, "rows", tuple(self.rows))

    @property
    def start_month(self) -> YearMonth | None:
        return self.rows[0].year_month if self.rows else None

    @property
    def end_month(self) -> YearMonth | None:
        return self.rows[-1].year_month if self.rows else None

    def value_at(self, year_month: YearMonth, values: dict[YearMonth, float]) -> float:
        """Zero before the first row, own value inside, last value carried forward after."""
        if not self.rows or year_month < self.start_month:
            return 0.0
        if year_month > self.end_month:
            return self.rows[-1].closing_value
        return values[year_month]


def compute_span(
    series: Iterable[InstrumentSeries],
) -> tuple[YearMonth | None, YearMonth | None]:
    """Earliest start and latest end across all non-empty series."""
    series = list(series)
    return (
        earliest(s.start_month for s in series),
        latest(s.end_month for s in series),
    )


def aggregate_wealth(series: Iterable[InstrumentSeries]) -> WealthProjection:
    """
    Combine per-instrument projections into monthly net worth.

    For every month of the combined span each instrument contributes zero
    before its own start, its projected value inside its range, and its last
    value after its end. Per month::

        net_worth = cash + investments + receivables - debts

    Amounts are summed without currency conversion. When more than one
    currency is present a ``MixedCurrencyWarning`` is emitted and the
    currencies are listed on the result.

    **Example:**
        ```python
        cash = InstrumentSeries("main", "Main", "cash", "EUR", cash_rows)
        loan = InstrumentSeries("car", "Car loan", "debt", "EUR", debt_rows)
        wealth = aggregate_wealth([cash, loan])
        wealth.months[0].net_worth
        ```
    """
    series = list(series)
    start, end = compute_span(series)
    currencies = sorted({s.currency for s in series if s.rows})

    if len(currencies) > 1:
        logger.info("Aggregating wealth across currencies %s without conversion", currencies)
        warnings.warn(
            f"Summing instruments in {', '.join(currencies)} without currency conversion",
            MixedCurrencyWarning,
            stacklevel=2,
        )

    if start is None:
        return WealthProjection(months=[], currencies=currencies, start_month=None, end_month=None)

    lookups = [{r.year_month: r.closing_value for r in s.rows} for s in series]
    months = []
    for ym in month_range(start, end):
        totals = {K.CASH: 0.0, K.INVESTMENT: 0.0, K.RECEIVABLE: 0.0, K.DEBT: 0.0}
        breakdown = []
        for s, values in zip(series, lookups):
            value = s.value_at(ym, values)
            totals[s.category] += value
            breakdown.append(
                WealthBreakdownEntry(s.instrument_id, s.name, s.category, s.currency, value)
            )
        months.append(
            WealthProjectionMonth(
                year_month=ym,
                cash_accounts_total=totals[K.CASH],
                investments_total=totals[K.INVESTMENT],
                receivables_total=totals[K.RECEIVABLE],
                debts_total=totals[K.DEBT],
                net_worth=(
                    totals[K.CASH]
                    + totals[K.INVESTMENT]
                    + totals[K.RECEIVABLE]
                    - totals[K.DEBT]
                ),
                breakdown=breakdown,
            )
        )

    logger.debug("Aggregated %d instruments over %s..%s", len(series), start, end)
    return WealthProjection(
        months=months, currencies=currencies, start_month=start, end_month=end
    )
