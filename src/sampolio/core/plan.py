"""
Financial plan orchestration for Sampolio.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from sampolio.strategies import (
    amortize_debt,
    project_cashflow,
    project_investment,
    project_receivable,
)

from .context import ProjectionContext
from .entities import (
    Account,
    AccountBundle,
    Debt,
    DebtExtraPayment,
    DebtReferenceRate,
    InvestmentAccount,
    InvestmentContribution,
    OccurrenceOverride,
    PlannedItem,
    ProjectionFilters,
    Receivable,
    ReceivableRepayment,
    RecurringItem,
    SalaryConfig,
)
from .errors import ConfigError
from .kinds import K
from .results import (
    DebtAmortizationRow,
    InvestmentProjectionRow,
    MonthlyProjection,
    ReceivableProjectionRow,
    WealthProjection,
    aggregate_totals,
    to_frame,
)
from .wealth import InstrumentSeries, aggregate_wealth

logger = logging.getLogger(__name__)


def _owned_by(records, attr: str, parent_id: str, sole_parent: bool) -> list:
    """Records linked to ``parent_id``; unlinked records belong to a sole parent."""
    return [
        r
        for r in records
        if getattr(r, attr) == parent_id or (getattr(r, attr) is None and sole_parent)
    ]


@dataclass
class PlanResults:
    """
    Output of a full plan run.

    Attributes:
        cash: Monthly projections per account id
        investments: Investment rows per investment id
        receivables: Receivable rows per receivable id
        debts: Amortization rows per debt id
        wealth: Aggregated net worth over the combined span
    """

    cash: dict[str, list[MonthlyProjection]]
    investments: dict[str, list[InvestmentProjectionRow]]
    receivables: dict[str, list[ReceivableProjectionRow]]
    debts: dict[str, list[DebtAmortizationRow]]
    wealth: WealthProjection

    @property
    def totals(self) -> pd.DataFrame:
        """Monthly wealth totals indexed by period."""
        return self.wealth.to_frame()

    def aggregate_totals(self, freq: str = "Y", **kwargs: Any) -> pd.DataFrame:
        """Wealth totals aggregated to ``freq`` (stocks take the period-end value)."""
        return aggregate_totals(self.totals, freq, **kwargs)

    def frame(self, instrument_id: str) -> pd.DataFrame:
        """Monthly frame of a single instrument's projection."""
        for group in (self.cash, self.investments, self.receivables, self.debts):
            if instrument_id in group:
                return to_frame(group[instrument_id])
        raise KeyError(instrument_id)


@dataclass
class FinancialPlan:
    """
    Complete set of financial facts for one household.

    This class holds the entity records and orchestrates a projection run:
    1. Projects each cash account from its items, salaries and overrides
    2. Projects each investment, receivable and debt up to its horizon
    3. Aggregates every projection into monthly net worth

    Child records link to their parent through ``account_id``,
    ``investment_id``, ``receivable_id`` or ``debt_id``. An unlinked child
    belongs to the parent when there is exactly one parent of that kind.

    Attributes:
        id: Unique identifier for the plan
        name: Human-readable name
        accounts: Cash accounts
        recurring_items: Recurring cash items
        planned_items: One-off and repeating planned items
        salaries: Salary configs
        overrides: Occurrence overrides of recurring items
        investments: Investment accounts
        investment_contributions: Contributions to investments
        receivables: Money owed to the user
        receivable_repayments: Recorded repayments of receivables
        debts: Loans owed by the user
        debt_reference_rates: Variable-rate schedule entries
        debt_extra_payments: Lump-sum prepayments

    Note:
        Instruments without an explicit end are projected up to
        ``ProjectionContext.default_end_month``.
    """

    id: str = "plan"
    name: str = "Unnamed Plan"
    accounts: list[Account] = field(default_factory=list)
    recurring_items: list[RecurringItem] = field(default_factory=list)
    planned_items: list[PlannedItem] = field(default_factory=list)
    salaries: list[SalaryConfig] = field(default_factory=list)
    overrides: list[OccurrenceOverride] = field(default_factory=list)
    investments: list[InvestmentAccount] = field(default_factory=list)
    investment_contributions: list[InvestmentContribution] = field(default_factory=list)
    receivables: list[Receivable] = field(default_factory=list)
    receivable_repayments: list[ReceivableRepayment] = field(default_factory=list)
    debts: list[Debt] = field(default_factory=list)
    debt_reference_rates: list[DebtReferenceRate] = field(default_factory=list)
    debt_extra_payments: list[DebtExtraPayment] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _find(self, records, record_id: str, label: str):
        for r in records:
            if r.id == record_id:
                return r
        raise ConfigError(f"Unknown {label} id: '{record_id}'")

    def account_bundle(self, account_id: str) -> AccountBundle:
        """Collect an account with every record that feeds its projection."""
        account = self._find(self.accounts, account_id, "account")
        sole = len(self.accounts) == 1
        recurring = _owned_by(self.recurring_items, "account_id", account_id, sole)
        item_ids = {item.id for item in recurring}
        return AccountBundle(
            account=account,
            recurring_items=recurring,
            planned_items=_owned_by(self.planned_items, "account_id", account_id, sole),
            salaries=_owned_by(self.salaries, "account_id", account_id, sole),
            overrides=[o for o in self.overrides if o.item_id in item_ids],
        )

    def contributions_for(self, investment_id: str) -> list[InvestmentContribution]:
        return _owned_by(
            self.investment_contributions,
            "investment_id",
            investment_id,
            len(self.investments) == 1,
        )

    def repayments_for(self, receivable_id: str) -> list[ReceivableRepayment]:
        return _owned_by(
            self.receivable_repayments,
            "receivable_id",
            receivable_id,
            len(self.receivables) == 1,
        )

    def reference_rates_for(self, debt_id: str) -> list[DebtReferenceRate]:
        return _owned_by(
            self.debt_reference_rates, "debt_id", debt_id, len(self.debts) == 1
        )

    def extra_payments_for(self, debt_id: str) -> list[DebtExtraPayment]:
        return _owned_by(
            self.debt_extra_payments, "debt_id", debt_id, len(self.debts) == 1
        )

    # ------------------------------------------------------------------
    # Single-instrument projections
    # ------------------------------------------------------------------

    def project_account(
        self, account_id: str, filters: ProjectionFilters | None = None
    ) -> list[MonthlyProjection]:
        """Project one cash account, optionally through view filters."""
        bundle = self.account_bundle(account_id)
        return project_cashflow(
            bundle.account,
            bundle.recurring_items,
            bundle.planned_items,
            salaries=bundle.salaries,
            overrides=bundle.overrides,
            filters=filters,
        )

    def project_investment(
        self, investment_id: str, ctx: ProjectionContext
    ) -> list[InvestmentProjectionRow]:
        investment = self._find(self.investments, investment_id, "investment")
        return project_investment(
            investment,
            self.contributions_for(investment_id),
            end_month=investment.end_date or ctx.default_end_month,
        )

    def project_receivable(
        self, receivable_id: str, ctx: ProjectionContext
    ) -> list[ReceivableProjectionRow]:
        receivable = self._find(self.receivables, receivable_id, "receivable")
        return project_receivable(
            receivable,
            self.repayments_for(receivable_id),
            end_month=receivable.end_date or ctx.default_end_month,
            current_month=ctx.current_month,
        )

    def amortize_debt(
        self, debt_id: str, ctx: ProjectionContext
    ) -> list[DebtAmortizationRow]:
        debt = self._find(self.debts, debt_id, "debt")
        return amortize_debt(
            debt,
            self.reference_rates_for(debt_id),
            self.extra_payments_for(debt_id),
            end_month=debt.end_date or ctx.default_end_month,
        )

    # ------------------------------------------------------------------
    # Full run
    # ------------------------------------------------------------------

    def run(self, ctx: ProjectionContext, max_workers: int | None = None) -> PlanResults:
        """
        Project every instrument and aggregate net worth.

        Per-instrument projections are independent and may run in a thread
        pool when ``max_workers`` > 1. The output is identical to a sequential
        run; only the aggregation step joins the results.

        Args:
            ctx: Projection context (reference month and horizon defaults)
            max_workers: Thread pool size; ``None`` or 1 runs sequentially

        Returns:
            PlanResults with per-instrument projections and wealth

        Raises:
            ConfigError: If a debt type has no registered schedule
        """
        tasks = (
            [(K.CASH, a.id, lambda a=a: self.project_account(a.id)) for a in self.accounts]
            + [
                (K.INVESTMENT, i.id, lambda i=i: self.project_investment(i.id, ctx))
                for i in self.investments
            ]
            + [
                (K.RECEIVABLE, r.id, lambda r=r: self.project_receivable(r.id, ctx))
                for r in self.receivables
            ]
            + [(K.DEBT, d.id, lambda d=d: self.amortize_debt(d.id, ctx)) for d in self.debts]
        )
        logger.info(
            "Running plan '%s': %d instruments, reference month %s",
            self.id,
            len(tasks),
            ctx.current_month,
        )

        if max_workers is not None and max_workers > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                outputs = list(pool.map(lambda task: task[2](), tasks))
        else:
            outputs = [task[2]() for task in tasks]

        grouped: dict[str, dict[str, list]] = {
            K.CASH: {},
            K.INVESTMENT: {},
            K.RECEIVABLE: {},
            K.DEBT: {},
        }
        for (category, instrument_id, _), rows in zip(tasks, outputs):
            grouped[category][instrument_id] = rows

        wealth = aggregate_wealth(self._series(grouped))
        return PlanResults(
            cash=grouped[K.CASH],
            investments=grouped[K.INVESTMENT],
            receivables=grouped[K.RECEIVABLE],
            debts=grouped[K.DEBT],
            wealth=wealth,
        )

    def _series(self, grouped: dict[str, dict[str, list]]) -> list[InstrumentSeries]:
        sources = {
            K.CASH: self.accounts,
            K.INVESTMENT: self.investments,
            K.RECEIVABLE: self.receivables,
            K.DEBT: self.debts,
        }
        return [
            InstrumentSeries(
                instrument_id=record.id,
                name=record.name or record.id,
                category=category,
                currency=record.currency,
                rows=grouped[category][record.id],
            )
            for category, records in sources.items()
            for record in records
        ]
