"""
Calendar utilities for Sampolio.

All projections use a calendar month as their time unit. Months are exchanged
as ``"YYYY-MM"`` strings and handled internally as ``numpy.datetime64[M]``.
"""

from __future__ import annotations

from datetime import date, datetime

import numpy as np
import pandas as pd

YearMonth = str


def to_year_month(
    value: str | date | datetime | np.datetime64 | pd.Period,
) -> YearMonth:
    """
    Normalize a month-like value to a ``"YYYY-MM"`` key.

    Accepts ``"YYYY-MM"`` / ``"YYYY-MM-DD"`` strings, ``date``/``datetime``,
    ``np.datetime64`` and monthly ``pd.Period`` values.

    **Example:**
        ```python
        to_year_month(date(2026, 3, 15))    # '2026-03'
        to_year_month("2026-03-01")         # '2026-03'
        ```
    """
    if isinstance(value, pd.Period):
        return str(value.asfreq("M"))
    if isinstance(value, (date, datetime)):
        return format_year_month(value.year, value.month)
    if isinstance(value, np.datetime64):
        return str(value.astype("datetime64[M]"))
    if not isinstance(value, str):
        raise TypeError(f"Cannot interpret {value!r} as a year-month")

    text = value.strip()[:7]
    if len(text) != 7 or text[4] != "-" or not (text[:4] + text[5:]).isdigit():
        raise ValueError(f"Invalid year-month {value!r}, expected 'YYYY-MM'")
    return format_year_month(int(text[:4]), int(text[5:]))


def parse_year_month(year_month: YearMonth) -> tuple[int, int]:
    """Split a ``"YYYY-MM"`` key into ``(year, month)``."""
    year_str, month_str = to_year_month(year_month).split("-")
    return int(year_str), int(month_str)


def format_year_month(year: int, month: int) -> YearMonth:
    """Build a ``"YYYY-MM"`` key from its parts."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    return f"{year:04d}-{month:02d}"


def add_months(year_month: YearMonth, months: int) -> YearMonth:
    """Shift a month key by ``months`` (may be negative)."""
    shifted = np.datetime64(to_year_month(year_month), "M") + np.timedelta64(
        int(months), "M"
    )
    return str(shifted)


def months_between(start: YearMonth, end: YearMonth) -> int:
    """
    Signed number of months from ``start`` to ``end``.

    ``months_between("2024-01", "2024-04") == 3``.
    """
    delta = np.datetime64(to_year_month(end), "M") - np.datetime64(
        to_year_month(start), "M"
    )
    return int(delta.astype(int))


def month_range(
    start: YearMonth | date, end_or_months: YearMonth | date | int
) -> list[YearMonth]:
    """
    Generate the ordered, gap-free list of month keys from ``start``.

    The second argument is either an inclusive end month or a month count.
    An end before the start (or a count of zero) yields an empty list.

    **Example:**
        ```python
        month_range("2024-11", "2025-02")
        # ['2024-11', '2024-12', '2025-01', '2025-02']

        month_range(date(2026, 1, 1), 3)
        # ['2026-01', '2026-02', '2026-03']
        ```
    """
    s = np.datetime64(to_year_month(start), "M")
    if isinstance(end_or_months, (int, np.integer)) and not isinstance(end_or_months, bool):
        count = max(0, int(end_or_months))
    else:
        e = np.datetime64(to_year_month(end_or_months), "M")
        count = max(0, int((e - s).astype(int)) + 1)
    return [str(m) for m in s + np.arange(count).astype("timedelta64[M]")]


def is_in_range(
    year_month: YearMonth, start: YearMonth | None, end: YearMonth | None = None
) -> bool:
    """Inclusive window test; ``None`` bounds are open."""
    if start is not None and year_month < start:
        return False
    if end is not None and year_month > end:
        return False
    return True


def earliest(months) -> YearMonth | None:
    """Smallest month key of an iterable, ignoring ``None``."""
    present = [m for m in months if m is not None]
    return min(present) if present else None


def latest(months) -> YearMonth | None:
    """Largest month key of an iterable, ignoring ``None``."""
    present = [m for m in months if m is not None]
    return max(present) if present else None
