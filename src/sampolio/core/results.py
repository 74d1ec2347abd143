"""
Results and output structures for Sampolio.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields

import pandas as pd

from .utils import YearMonth


@dataclass(frozen=True)
class ProjectionLineItem:
    """
    One item's contribution to one month of a cash projection.

    Attributes:
        item_id: Identifier of the originating record
        name: Display name (possibly overridden for this month)
        amount: Positive amount; direction comes from the breakdown it sits in
        category: Category label, if any
        source: One of ``recurring``, ``salary``, ``planned-one-off``,
            ``planned-repeating``
        is_overridden: True when an occurrence override changed this line
    """

    item_id: str
    name: str
    amount: float
    category: str | None
    source: str
    is_overridden: bool = False


@dataclass(frozen=True)
class MonthlyProjection:
    """
    Cash account state for one month.

    ``ending_balance == starting_balance + net_change`` and
    ``net_change == total_income - total_expenses``, where the totals are the
    sums of their breakdowns.
    """

    year_month: YearMonth
    year: int
    month: int
    starting_balance: float
    total_income: float
    total_expenses: float
    net_change: float
    ending_balance: float
    income_breakdown: list[ProjectionLineItem] = field(default_factory=list)
    expense_breakdown: list[ProjectionLineItem] = field(default_factory=list)

    @property
    def closing_value(self) -> float:
        return self.ending_balance


@dataclass(frozen=True)
class YearlyRollup:
    """Calendar-year summary of consecutive monthly projections."""

    year: int
    starting_balance: float
    ending_balance: float
    total_income: float
    total_expenses: float
    net_change: float
    months: list[MonthlyProjection] = field(default_factory=list)


@dataclass(frozen=True)
class DebtAmortizationRow:
    """One month of a debt schedule. Balances are owed amounts (>= 0)."""

    year_month: YearMonth
    starting_balance: float
    interest_rate: float
    interest_paid: float
    principal_paid: float
    extra_payment: float
    total_payment: float
    ending_balance: float

    @property
    def closing_value(self) -> float:
        return self.ending_balance


@dataclass(frozen=True)
class InvestmentProjectionRow:
    """One month of investment growth: growth on the opening balance, then contributions."""

    year_month: YearMonth
    starting_balance: float
    growth: float
    contributions: float
    ending_balance: float

    @property
    def closing_value(self) -> float:
        return self.ending_balance


@dataclass(frozen=True)
class ReceivableProjectionRow:
    """One month of a receivable: interest accrues, then the repayment lands."""

    year_month: YearMonth
    starting_balance: float
    interest: float
    repayment: float
    ending_balance: float
    is_expected_repayment: bool = False

    @property
    def closing_value(self) -> float:
        return self.ending_balance


@dataclass(frozen=True)
class WealthBreakdownEntry:
    """Value contributed by a single instrument to a wealth month."""

    instrument_id: str
    name: str
    category: str
    currency: str
    value: float


@dataclass(frozen=True)
class WealthProjectionMonth:
    """
    Net worth decomposition for one month.

    ``debts_total`` is a positive owed amount; ``net_worth`` subtracts it.
    """

    year_month: YearMonth
    cash_accounts_total: float
    investments_total: float
    receivables_total: float
    debts_total: float
    net_worth: float
    breakdown: list[WealthBreakdownEntry] = field(default_factory=list)


@dataclass(frozen=True)
class WealthProjection:
    """
    Aggregated wealth over the combined span of all instruments.

    Attributes:
        months: One entry per month from ``start_month`` to ``end_month``
        currencies: Sorted currency codes found among the instruments
        start_month: Earliest instrument start (``None`` when empty)
        end_month: Latest instrument end (``None`` when empty)

    Note:
        Amounts in different currencies are summed as plain numbers.
        ``is_mixed_currency`` flags when that happened.
    """

    months: list[WealthProjectionMonth]
    currencies: list[str]
    start_month: YearMonth | None
    end_month: YearMonth | None

    @property
    def is_mixed_currency(self) -> bool:
        return len(self.currencies) > 1

    def to_frame(self) -> pd.DataFrame:
        return to_frame(self.months)


# Column semantics for period aggregation
FLOW_COLUMNS = [
    "total_income",
    "total_expenses",
    "net_change",
    "interest_paid",
    "principal_paid",
    "extra_payment",
    "total_payment",
    "growth",
    "contributions",
    "interest",
    "repayment",
]
OPENING_COLUMNS = ["starting_balance"]


def to_frame(rows) -> pd.DataFrame:
    """
    Convert result rows into a DataFrame indexed by period.

    Scalar fields become columns; nested breakdown lists are left out. Rows
    keyed by ``year_month`` get a monthly ``PeriodIndex``, yearly rollups a
    yearly one.

    **Example:**
        ```python
        monthly = project_cashflow(account, items, planned)
        df = to_frame(monthly)
        df.loc["2026-03", "ending_balance"]
        ```
    """
    rows = list(rows)
    if not rows:
        return pd.DataFrame(index=pd.PeriodIndex([], freq="M"))

    scalar_names = [
        f.name
        for f in fields(rows[0])
        if not isinstance(getattr(rows[0], f.name), (list, tuple, dict))
    ]
    records = [{name: getattr(row, name) for name in scalar_names} for row in rows]
    df = pd.DataFrame.from_records(records, columns=scalar_names)

    if "year_month" in df.columns:
        df.index = pd.PeriodIndex(df.pop("year_month"), freq="M")
    elif "year" in df.columns:
        df.index = pd.PeriodIndex(df.pop("year").astype(str), freq="Y")
    return df


def aggregate_totals(
    df: pd.DataFrame, freq: str = "Y", return_period_index: bool = True
) -> pd.DataFrame:
    """
    Aggregate a monthly frame by frequency with proper financial semantics.

    Flows (income, expenses, interest, payments, contributions) are summed.
    Opening balances take the first month of the period. Stocks (ending
    balances, wealth totals, rates) take the period-end value.

    Args:
        df: Monthly DataFrame as produced by ``to_frame``
        freq: Frequency string ('M', 'Q', 'Y', ...)
        return_period_index: If True, return PeriodIndex; if False, return Timestamp index

    Returns:
        Aggregated DataFrame

    Example:
        >>> rows = amortize_debt(debt)
        >>> yearly = aggregate_totals(to_frame(rows), "Y")
    """
    if not isinstance(df.index, pd.PeriodIndex):
        df = df.copy()
        df.index = df.index.to_period("M")

    if freq.upper() in ["M", "MONTHLY"]:
        return df

    agg = {}
    for col in df.columns:
        if col in FLOW_COLUMNS:
            agg[col] = "sum"
        elif col in OPENING_COLUMNS:
            agg[col] = "first"
        else:
            agg[col] = "last"

    out = df.groupby(df.index.asfreq(freq)).agg(agg)
    out = out.reindex(columns=df.columns)

    if return_period_index:
        return out
    return out.to_timestamp(how="end")


def check_monthly_identities(
    monthly: list[MonthlyProjection], eps: float = 1e-6
) -> None:
    """
    Assert the reconciliation identities of a cash projection.

    Raises:
        AssertionError: If any month fails to reconcile with its breakdown or
            with the previous month's ending balance
    """
    previous: MonthlyProjection | None = None
    for m in monthly:
        income = sum(li.amount for li in m.income_breakdown)
        expenses = sum(li.amount for li in m.expense_breakdown)
        assert abs(m.total_income - income) < eps, (
            f"{m.year_month}: income {m.total_income} != breakdown {income}"
        )
        assert abs(m.total_expenses - expenses) < eps, (
            f"{m.year_month}: expenses {m.total_expenses} != breakdown {expenses}"
        )
        assert abs(m.net_change - (m.total_income - m.total_expenses)) < eps, (
            f"{m.year_month}: net change does not match totals"
        )
        assert abs(m.ending_balance - (m.starting_balance + m.net_change)) < eps, (
            f"{m.year_month}: ending balance does not reconcile"
        )
        if previous is not None:
            assert abs(m.starting_balance - previous.ending_balance) < eps, (
                f"{m.year_month}: starting balance breaks continuity"
            )
        previous = m


def rows_to_records(rows) -> list[dict]:
    """Plain dict view of result rows, nested breakdowns included."""
    return [asdict(row) for row in rows]
