"""
Entity records consumed by the Sampolio projection engine.

Every record is a frozen dataclass: a read-only snapshot for the duration of a
projection call. Storage, mutation and CRUD belong to the caller. Month fields
are normalized to ``"YYYY-MM"`` keys on construction, and rates are decimal
fractions (``0.06`` means 6 % per year).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Union

from .errors import ConfigError
from .kinds import K
from .utils import YearMonth, add_months, month_range, to_year_month


def _month_or_none(value) -> YearMonth | None:
    return None if value is None else to_year_month(value)


def _normalize_months(obj, *names: str) -> None:
    """Normalize month-like fields of a frozen dataclass in place."""
    for name in names:
        object.__setattr__(obj, name, _month_or_none(getattr(obj, name)))


def _check_item_type(obj) -> None:
    if obj.type not in K.item_types():
        raise ConfigError(
            f"{obj.id}: type must be one of {K.item_types()}, got {obj.type!r}"
        )


# --------------------------------------------------------------------------
# Cash accounts and their items
# --------------------------------------------------------------------------


@dataclass(frozen=True)
class Account:
    """
    Cash account whose balance is projected month by month.

    Attributes:
        id: Unique identifier
        starting_balance: Signed balance at the start of ``starting_date``
        starting_date: First projected month
        horizon_months: Number of projected months (alternative to end_date)
        end_date: Explicit last projected month (takes precedence)
        name: Display name
        currency: ISO currency code

    Note:
        Exactly one of ``horizon_months``/``end_date`` is needed; when both are
        given ``end_date`` wins, mirroring how explicit end dates override
        durations elsewhere in the package.
    """

    id: str
    starting_balance: float
    starting_date: YearMonth
    horizon_months: int | None = None
    end_date: YearMonth | None = None
    name: str = ""
    currency: str = "EUR"

    def __post_init__(self) -> None:
        _normalize_months(self, "starting_date", "end_date")
        if self.end_date is None and self.horizon_months is None:
            raise ConfigError(f"{self.id}: provide horizon_months or end_date")
        if self.end_date is None and self.horizon_months < 1:
            raise ConfigError(f"{self.id}: horizon_months must be >= 1")
        if self.end_month < self.starting_date:
            raise ConfigError(
                f"{self.id}: end month {self.end_month} precedes starting date "
                f"{self.starting_date}"
            )

    @property
    def end_month(self) -> YearMonth:
        """Resolved last projected month."""
        if self.end_date is not None:
            return self.end_date
        return add_months(self.starting_date, self.horizon_months - 1)

    @property
    def months(self) -> list[YearMonth]:
        return month_range(self.starting_date, self.end_month)


@dataclass(frozen=True)
class RecurringItem:
    """
    Cash item repeating at a fixed cadence (monthly unless told otherwise).

    With the default monthly frequency the item contributes its amount every
    month of its active window that falls inside the account range. A missing
    ``start_date`` means "from the account start".
    """

    id: str
    name: str
    type: str
    amount: float
    category: str | None = None
    frequency: str = K.MONTHLY
    custom_interval_months: int | None = None
    start_date: YearMonth | None = None
    end_date: YearMonth | None = None
    is_active: bool = True
    account_id: str | None = None

    kind: ClassVar[str] = K.RECURRING

    def __post_init__(self) -> None:
        _normalize_months(self, "start_date", "end_date")
        _check_item_type(self)


@dataclass(frozen=True)
class OccurrenceOverride:
    """
    Per-month override of one recurring item occurrence.

    ``skip`` drops the occurrence; otherwise any non-``None`` field replaces
    the item's value for that month only.
    """

    item_id: str
    year_month: YearMonth
    amount: float | None = None
    name: str | None = None
    category: str | None = None
    skip: bool = False

    def __post_init__(self) -> None:
        _normalize_months(self, "year_month")


@dataclass(frozen=True)
class SalaryBenefit:
    """Non-cash benefit attached to a salary (company car, meal vouchers, ...)."""

    name: str
    amount: float
    is_taxable: bool = False


@dataclass(frozen=True)
class SalaryConfig:
    """
    Salary income: a recurring income whose amount is derived from gross pay.

    Rates are fractions of the taxable base. Benefits are never received as
    cash; taxable ones only enlarge the base that taxes and contributions are
    computed on.
    """

    id: str
    name: str
    gross_salary: float
    tax_rate: float = 0.0
    contributions_rate: float = 0.0
    other_deductions: float = 0.0
    benefits: tuple[SalaryBenefit, ...] = ()
    category: str | None = "Salary"
    start_date: YearMonth | None = None
    end_date: YearMonth | None = None
    is_active: bool = True
    account_id: str | None = None

    type: ClassVar[str] = K.INCOME
    kind: ClassVar[str] = K.RECURRING

    def __post_init__(self) -> None:
        _normalize_months(self, "start_date", "end_date")
        object.__setattr__(self, "benefits", tuple(self.benefits))


@dataclass(frozen=True, kw_only=True)
class OneOffItem:
    """Planned item firing exactly once, in ``scheduled_date``."""

    id: str
    name: str
    type: str
    amount: float
    scheduled_date: YearMonth
    category: str | None = None
    account_id: str | None = None

    kind: ClassVar[str] = K.ONE_OFF

    def __post_init__(self) -> None:
        _normalize_months(self, "scheduled_date")
        _check_item_type(self)


@dataclass(frozen=True, kw_only=True)
class RepeatingItem:
    """
    Planned item firing at ``first_occurrence + k * interval`` (k >= 0).

    ``frequency`` is quarterly (3 months), yearly (12) or custom
    (``custom_interval_months``). ``end_date`` bounds the occurrences.
    """

    id: str
    name: str
    type: str
    amount: float
    frequency: str
    first_occurrence: YearMonth | None
    custom_interval_months: int | None = None
    end_date: YearMonth | None = None
    category: str | None = None
    account_id: str | None = None

    kind: ClassVar[str] = K.REPEATING

    def __post_init__(self) -> None:
        _normalize_months(self, "first_occurrence", "end_date")
        _check_item_type(self)


PlannedItem = Union[OneOffItem, RepeatingItem]


# --------------------------------------------------------------------------
# Investments
# --------------------------------------------------------------------------


@dataclass(frozen=True)
class InvestmentAccount:
    """
    Investment valued at ``principal`` at the start of ``valuation_date``.

    ``annual_growth_rate`` compounds monthly as ``(1 + rate)^(1/12)``.
    """

    id: str
    principal: float
    annual_growth_rate: float
    valuation_date: YearMonth
    end_date: YearMonth | None = None
    name: str = ""
    currency: str = "EUR"

    def __post_init__(self) -> None:
        _normalize_months(self, "valuation_date", "end_date")


@dataclass(frozen=True)
class InvestmentContribution:
    """
    Money added to an investment.

    A contribution with ``year_month`` is a one-off event; otherwise it repeats
    from ``start_date`` every ``frequency`` until ``end_date``.
    """

    amount: float
    year_month: YearMonth | None = None
    frequency: str | None = None
    custom_interval_months: int | None = None
    start_date: YearMonth | None = None
    end_date: YearMonth | None = None
    is_active: bool = True
    id: str = ""
    investment_id: str | None = None

    def __post_init__(self) -> None:
        _normalize_months(self, "year_month", "start_date", "end_date")
        if self.year_month is not None and self.frequency is not None:
            raise ConfigError(
                f"Contribution {self.id or '?'}: one-off contributions carry no frequency"
            )
        if self.year_month is None and self.frequency is None:
            raise ConfigError(
                f"Contribution {self.id or '?'}: provide year_month or frequency"
            )

    @property
    def kind(self) -> str:
        return K.ONE_OFF if self.year_month is not None else K.RECURRING


# --------------------------------------------------------------------------
# Receivables
# --------------------------------------------------------------------------


@dataclass(frozen=True)
class Receivable:
    """
    Money owed to the user, repaid over time.

    ``annual_interest_rate`` accrues monthly on the outstanding balance and
    ``expected_monthly_repayment`` is assumed for months from the reference
    month onward that have no recorded repayment. Both default to zero.
    """

    id: str
    principal: float
    start_date: YearMonth
    annual_interest_rate: float = 0.0
    expected_monthly_repayment: float = 0.0
    end_date: YearMonth | None = None
    name: str = ""
    currency: str = "EUR"

    def __post_init__(self) -> None:
        _normalize_months(self, "start_date", "end_date")


@dataclass(frozen=True)
class ReceivableRepayment:
    """Recorded repayment of a receivable."""

    year_month: YearMonth
    amount: float
    id: str = ""
    receivable_id: str | None = None

    def __post_init__(self) -> None:
        _normalize_months(self, "year_month")


# --------------------------------------------------------------------------
# Debts
# --------------------------------------------------------------------------


@dataclass(frozen=True)
class Debt:
    """
    Loan owed by the user.

    **Amortized debts** (``debt_type='amortized'``) pay a level installment
    fixed at origination. The installment is either given explicitly
    (``monthly_payment``) or derived from ``annual_rate`` over
    ``term_months`` (or over the term implied by ``amortization_pa``).

    **Fixed-installment debts** repay ``installment_amount`` per month for at
    most ``total_installments`` months without interest.

    Reference rate entries override ``annual_rate`` from their effective month
    on; ``reference_rate_margin`` is added on top of them.
    """

    id: str
    principal: float
    start_date: YearMonth
    annual_rate: float = 0.0
    term_months: int | None = None
    amortization_pa: float | None = None
    monthly_payment: float | None = None
    debt_type: str = K.DEBT_AMORTIZED
    reference_rate_margin: float = 0.0
    installment_amount: float | None = None
    total_installments: int | None = None
    end_date: YearMonth | None = None
    name: str = ""
    currency: str = "EUR"

    def __post_init__(self) -> None:
        _normalize_months(self, "start_date", "end_date")


@dataclass(frozen=True)
class DebtReferenceRate:
    """Annual rate in force from ``effective_month`` onward."""

    effective_month: YearMonth
    annual_rate: float
    debt_id: str | None = None

    def __post_init__(self) -> None:
        _normalize_months(self, "effective_month")


@dataclass(frozen=True)
class DebtExtraPayment:
    """Lump sum applied directly to principal in ``year_month``."""

    year_month: YearMonth
    amount: float
    id: str = ""
    debt_id: str | None = None

    def __post_init__(self) -> None:
        _normalize_months(self, "year_month")


@dataclass(frozen=True)
class ProjectionFilters:
    """
    View filters for a cash projection.

    ``start_date``/``end_date`` slice the output after the balance fold.
    ``categories``, ``item_types`` and ``item_kinds`` drop non-matching items
    from the fold, which yields a what-if balance for the selection.
    """

    start_date: YearMonth | None = None
    end_date: YearMonth | None = None
    categories: tuple[str, ...] = ()
    item_types: tuple[str, ...] = ()
    item_kinds: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _normalize_months(self, "start_date", "end_date")
        for name in ("categories", "item_types", "item_kinds"):
            object.__setattr__(self, name, tuple(getattr(self, name)))


@dataclass(frozen=True)
class AccountBundle:
    """An account together with every record that feeds its projection."""

    account: Account
    recurring_items: tuple[RecurringItem, ...] = ()
    planned_items: tuple[PlannedItem, ...] = ()
    salaries: tuple[SalaryConfig, ...] = ()
    overrides: tuple[OccurrenceOverride, ...] = field(default=())

    def __post_init__(self) -> None:
        for name in ("recurring_items", "planned_items", "salaries", "overrides"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
