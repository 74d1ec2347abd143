"""Utilities for loading financial plans from YAML/JSON sources."""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from .entities import (
    Account,
    Debt,
    DebtExtraPayment,
    DebtReferenceRate,
    InvestmentAccount,
    InvestmentContribution,
    OccurrenceOverride,
    OneOffItem,
    Receivable,
    ReceivableRepayment,
    RecurringItem,
    RepeatingItem,
    SalaryBenefit,
    SalaryConfig,
)
from .errors import ConfigError
from .kinds import K
from .plan import FinancialPlan

__all__ = [
    "CatalogError",
    "load_plan",
    "read_source",
]

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when a plan file cannot be parsed or validated."""


def load_plan(
    source: str | Path | dict[str, Any], *, format: str | None = None
) -> FinancialPlan:
    """
    Parse a financial plan from YAML/JSON/dict into entity records.

    Children may be nested under their parent (``contributions`` under an
    investment, ``repayments`` under a receivable, ``reference_rates`` and
    ``extra_payments`` under a debt); they then inherit the parent id. They
    may also be listed at the top level with an explicit parent id.

    **Example:**
        ```yaml
        plan: {id: household, name: Household}
        defaults: {currency: EUR}
        accounts:
          - {id: main, starting_balance: 1000, starting_date: "2024-01", horizon_months: 24}
        recurring:
          - {id: rent, name: Rent, type: expense, amount: 1500}
        planned:
          - {kind: one-off, id: tv, name: TV, type: expense, amount: 300, scheduled_date: "2024-02"}
        debts:
          - id: car
            principal: 12000
            start_date: "2024-01"
            annual_rate: 0.12
            term_months: 12
            extra_payments: [{year_month: "2024-03", amount: 2000}]
        ```

    Raises:
        CatalogError: If the source is malformed or a record is invalid
        FileNotFoundError: If a path does not exist
    """
    mapping, label = read_source(source, format=format)
    meta = _ensure_dict(mapping.get("plan"), f"{label}::plan")
    defaults = _ensure_dict(mapping.get("defaults"), f"{label}::defaults")
    currency = defaults.get("currency")
    if currency is not None:
        currency = _coerce_str(currency, f"{label}::defaults.currency")

    plan = FinancialPlan(
        id=str(meta.get("id", "plan")),
        name=str(meta.get("name", "Unnamed Plan")),
    )

    for idx, data in _entries(mapping, "accounts", label):
        plan.accounts.append(
            _build(Account, _with_currency(data, currency), f"{label}::accounts[{idx}]")
        )

    for idx, data in _entries(mapping, "recurring", label):
        plan.recurring_items.append(
            _build(RecurringItem, data, f"{label}::recurring[{idx}]")
        )

    for idx, data in _entries(mapping, "planned", label):
        plan.planned_items.append(_build_planned(data, f"{label}::planned[{idx}]"))

    for idx, data in _entries(mapping, "salaries", label):
        ctx = f"{label}::salaries[{idx}]"
        benefits = [
            _build(SalaryBenefit, b, f"{ctx}.benefits[{j}]")
            for j, b in enumerate(_dict_list(data.pop("benefits", None), f"{ctx}.benefits"))
        ]
        plan.salaries.append(_build(SalaryConfig, data, ctx, benefits=tuple(benefits)))

    for idx, data in _entries(mapping, "overrides", label):
        plan.overrides.append(
            _build(OccurrenceOverride, data, f"{label}::overrides[{idx}]")
        )

    for idx, data in _entries(mapping, "investments", label):
        ctx = f"{label}::investments[{idx}]"
        children = _dict_list(data.pop("contributions", None), f"{ctx}.contributions")
        investment = _build(InvestmentAccount, _with_currency(data, currency), ctx)
        plan.investments.append(investment)
        for j, child in enumerate(children):
            plan.investment_contributions.append(
                _build(
                    InvestmentContribution,
                    child,
                    f"{ctx}.contributions[{j}]",
                    investment_id=investment.id,
                )
            )
    for idx, data in _entries(mapping, "investment_contributions", label):
        plan.investment_contributions.append(
            _build(InvestmentContribution, data, f"{label}::investment_contributions[{idx}]")
        )

    for idx, data in _entries(mapping, "receivables", label):
        ctx = f"{label}::receivables[{idx}]"
        children = _dict_list(data.pop("repayments", None), f"{ctx}.repayments")
        receivable = _build(Receivable, _with_currency(data, currency), ctx)
        plan.receivables.append(receivable)
        for j, child in enumerate(children):
            plan.receivable_repayments.append(
                _build(
                    ReceivableRepayment,
                    child,
                    f"{ctx}.repayments[{j}]",
                    receivable_id=receivable.id,
                )
            )
    for idx, data in _entries(mapping, "receivable_repayments", label):
        plan.receivable_repayments.append(
            _build(ReceivableRepayment, data, f"{label}::receivable_repayments[{idx}]")
        )

    for idx, data in _entries(mapping, "debts", label):
        ctx = f"{label}::debts[{idx}]"
        rates = _dict_list(data.pop("reference_rates", None), f"{ctx}.reference_rates")
        extras = _dict_list(data.pop("extra_payments", None), f"{ctx}.extra_payments")
        debt = _build(Debt, _with_currency(data, currency), ctx)
        plan.debts.append(debt)
        for j, child in enumerate(rates):
            plan.debt_reference_rates.append(
                _build(DebtReferenceRate, child, f"{ctx}.reference_rates[{j}]", debt_id=debt.id)
            )
        for j, child in enumerate(extras):
            plan.debt_extra_payments.append(
                _build(DebtExtraPayment, child, f"{ctx}.extra_payments[{j}]", debt_id=debt.id)
            )
    for idx, data in _entries(mapping, "debt_reference_rates", label):
        plan.debt_reference_rates.append(
            _build(DebtReferenceRate, data, f"{label}::debt_reference_rates[{idx}]")
        )
    for idx, data in _entries(mapping, "debt_extra_payments", label):
        plan.debt_extra_payments.append(
            _build(DebtExtraPayment, data, f"{label}::debt_extra_payments[{idx}]")
        )

    logger.info(
        "Loaded plan '%s' from %s: %d accounts, %d investments, %d receivables, %d debts",
        plan.id,
        label,
        len(plan.accounts),
        len(plan.investments),
        len(plan.receivables),
        len(plan.debts),
    )
    return plan


def read_source(
    source: str | Path | dict[str, Any], *, format: str | None = None
) -> tuple[dict[str, Any], str]:
    """Read a YAML/JSON file (or copy a mapping) into a plain dict."""
    if isinstance(source, dict):
        return deepcopy(source), "<mapping>"

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(path)

    fmt = (format or path.suffix.lstrip(".")).lower()
    text = path.read_text(encoding="utf-8")
    try:
        if fmt in {"yaml", "yml", ""}:
            data = yaml.safe_load(text)
        elif fmt == "json":
            data = json.loads(text)
        else:
            raise CatalogError(f"Unsupported plan format '{fmt}' for {path}")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise CatalogError(f"{path}: cannot parse {fmt or 'yaml'} ({exc})") from exc

    if not isinstance(data, dict):
        raise CatalogError(f"Plan root must be a mapping (source={path})")
    return data, str(path)


def _build_planned(data: dict[str, Any], ctx: str):
    kind = data.pop("kind", None)
    if kind == K.ONE_OFF:
        stray = {"frequency", "custom_interval_months", "first_occurrence", "end_date"} & set(data)
        if stray:
            raise CatalogError(
                f"{ctx}: one-off items carry no frequency fields, got {sorted(stray)}"
            )
        return _build(OneOffItem, data, ctx)
    if kind == K.REPEATING:
        if "scheduled_date" in data:
            raise CatalogError(f"{ctx}: repeating items carry no scheduled_date")
        data.setdefault("first_occurrence", None)
        return _build(RepeatingItem, data, ctx)
    raise CatalogError(f"{ctx}: 'kind' must be '{K.ONE_OFF}' or '{K.REPEATING}', got {kind!r}")


def _build(cls, data: dict[str, Any], ctx: str, **extra: Any):
    allowed = {f.name for f in fields(cls) if f.init}
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise CatalogError(f"{ctx}: unknown field(s) {unknown} for {cls.__name__}")
    try:
        return cls(**{**data, **extra})
    except (TypeError, ValueError, ConfigError) as exc:
        raise CatalogError(f"{ctx}: {exc}") from exc


def _with_currency(data: dict[str, Any], currency: str | None) -> dict[str, Any]:
    if currency is not None:
        data.setdefault("currency", currency)
    return data


def _entries(mapping: dict[str, Any], key: str, label: str):
    return enumerate(_dict_list(mapping.get(key), f"{label}::{key}"))


def _dict_list(value: Any, ctx: str) -> list[dict[str, Any]]:
    entries = _ensure_list(value, ctx, allow_none=True) or []
    return [_ensure_dict(entry, f"{ctx}[{idx}]") for idx, entry in enumerate(entries)]


def _coerce_str(value: Any, ctx: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise CatalogError(f"{ctx}: expected non-empty string")
    return value


def _ensure_dict(value: Any, ctx: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise CatalogError(f"{ctx}: expected a mapping")
    return deepcopy(value)


def _ensure_list(value: Any, ctx: str, *, allow_none: bool = False) -> list[Any] | None:
    if value is None:
        if allow_none:
            return None
        raise CatalogError(f"{ctx}: expected a list")
    if not isinstance(value, list):
        raise CatalogError(f"{ctx}: expected a list")
    return list(value)
