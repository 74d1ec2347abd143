"""
Schedule expansion: which records fire in which month, and for how much.

Every function here dispatches over the record variants with an exhaustive
``isinstance`` chain. A record type that is not handled raises ``TypeError``
rather than silently contributing nothing.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from sampolio.core.entities import (
    InvestmentContribution,
    OccurrenceOverride,
    OneOffItem,
    RecurringItem,
    RepeatingItem,
    SalaryConfig,
)
from sampolio.core.errors import ConfigError
from sampolio.core.kinds import K
from sampolio.core.results import ProjectionLineItem
from sampolio.core.utils import YearMonth, is_in_range, month_range, months_between

from .salary import calculate_net_salary

OverrideIndex = Mapping[tuple[str, YearMonth], OccurrenceOverride]

_FIXED_INTERVALS = {
    K.MONTHLY: 1,
    K.QUARTERLY: 3,
    K.YEARLY: 12,
}


def interval_months(frequency: str, custom_interval_months: int | None = None) -> int:
    """
    Resolve a frequency label to its interval in months.

    Raises:
        ConfigError: For an unknown frequency, or a custom frequency without a
            positive interval
    """
    if frequency in _FIXED_INTERVALS:
        return _FIXED_INTERVALS[frequency]
    if frequency == K.CUSTOM:
        if custom_interval_months is None or custom_interval_months <= 0:
            raise ConfigError(
                f"custom frequency needs custom_interval_months > 0, got {custom_interval_months!r}"
            )
        return int(custom_interval_months)
    raise ConfigError(f"Unknown frequency {frequency!r}; expected one of {K.frequencies()}")


def _on_cadence(month: YearMonth, anchor: YearMonth, interval: int) -> bool:
    offset = months_between(anchor, month)
    return offset >= 0 and offset % interval == 0


def occurs_in_month(item, month: YearMonth, anchor: YearMonth | None = None) -> bool:
    """
    True when ``item`` fires in ``month``.

    ``anchor`` is the cadence origin for records without their own start
    (typically the account's starting month).
    """
    if isinstance(item, OneOffItem):
        return month == item.scheduled_date

    if isinstance(item, RepeatingItem):
        if item.first_occurrence is None:
            return False
        if item.end_date is not None and month > item.end_date:
            return False
        interval = interval_months(item.frequency, item.custom_interval_months)
        return _on_cadence(month, item.first_occurrence, interval)

    if isinstance(item, RecurringItem):
        if not item.is_active or not is_in_range(month, item.start_date, item.end_date):
            return False
        interval = interval_months(item.frequency, item.custom_interval_months)
        if interval == 1:
            return True
        origin = item.start_date or anchor
        return origin is not None and _on_cadence(month, origin, interval)

    if isinstance(item, SalaryConfig):
        return item.is_active and is_in_range(month, item.start_date, item.end_date)

    if isinstance(item, InvestmentContribution):
        if item.year_month is not None:
            return month == item.year_month
        if not item.is_active or not is_in_range(month, item.start_date, item.end_date):
            return False
        interval = interval_months(item.frequency, item.custom_interval_months)
        origin = item.start_date or anchor
        if interval == 1:
            return True
        return origin is not None and _on_cadence(month, origin, interval)

    raise TypeError(f"Unsupported schedule record {type(item).__name__}")


def occurrences(
    item, start: YearMonth, end: YearMonth, anchor: YearMonth | None = None
) -> list[YearMonth]:
    """
    List the months in ``[start, end]`` in which ``item`` fires.

    **Example:**
        ```python
        rent_review = RepeatingItem(
            id="fee", name="Fee", type="expense", amount=90.0,
            frequency="quarterly", first_occurrence="2024-01",
        )
        occurrences(rent_review, "2024-01", "2024-12")
        # ['2024-01', '2024-04', '2024-07', '2024-10']
        ```
    """
    return [m for m in month_range(start, end) if occurs_in_month(item, m, anchor)]


def index_overrides(
    overrides: Iterable[OccurrenceOverride] | OverrideIndex | None,
) -> dict[tuple[str, YearMonth], OccurrenceOverride]:
    """Key occurrence overrides by ``(item_id, year_month)``; the last one wins."""
    if overrides is None:
        return {}
    if isinstance(overrides, dict):
        return overrides
    if isinstance(overrides, Mapping):
        return dict(overrides)
    return {(o.item_id, o.year_month): o for o in overrides}


def contributions(
    item,
    month: YearMonth,
    overrides: Iterable[OccurrenceOverride] | OverrideIndex | None = None,
    anchor: YearMonth | None = None,
) -> list[ProjectionLineItem]:
    """
    Cash line items ``item`` contributes to ``month``; an empty list means zero.

    Occurrence overrides only apply to recurring items. A skipping override
    removes the occurrence; any other override replaces the fields it sets and
    marks the line ``is_overridden``.
    """
    if not occurs_in_month(item, month, anchor):
        return []

    if isinstance(item, OneOffItem):
        return [
            ProjectionLineItem(
                item.id, item.name, item.amount, item.category, K.SRC_PLANNED_ONE_OFF
            )
        ]

    if isinstance(item, RepeatingItem):
        return [
            ProjectionLineItem(
                item.id, item.name, item.amount, item.category, K.SRC_PLANNED_REPEATING
            )
        ]

    if isinstance(item, RecurringItem):
        override = index_overrides(overrides).get((item.id, month))
        if override is None:
            return [
                ProjectionLineItem(
                    item.id, item.name, item.amount, item.category, K.SRC_RECURRING
                )
            ]
        if override.skip:
            return []
        return [
            ProjectionLineItem(
                item_id=item.id,
                name=override.name if override.name is not None else item.name,
                amount=override.amount if override.amount is not None else item.amount,
                category=(
                    override.category if override.category is not None else item.category
                ),
                source=K.SRC_RECURRING,
                is_overridden=True,
            )
        ]

    if isinstance(item, SalaryConfig):
        return [
            ProjectionLineItem(
                item.id, item.name, calculate_net_salary(item), item.category, K.SRC_SALARY
            )
        ]

    raise TypeError(f"Unsupported cash record {type(item).__name__}")
