"""
Command-line interface for Sampolio.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from datetime import date

import numpy as np
import pandas as pd
import yaml

from sampolio import __version__
from sampolio.core.catalog_loader import CatalogError, load_plan
from sampolio.core.context import ProjectionContext
from sampolio.core.currency import format_amount
from sampolio.core.entities import ProjectionFilters
from sampolio.core.errors import ConfigError
from sampolio.core.exceptions import PlanValidationError
from sampolio.core.results import aggregate_totals, to_frame
from sampolio.core.utils import to_year_month
from sampolio.core.validation import validate_plan
from sampolio.strategies import yearly_rollups

logger = logging.getLogger(__name__)

EXAMPLE_PLAN = {
    "plan": {"id": "household", "name": "Household"},
    "defaults": {"currency": "EUR"},
    "accounts": [
        {
            "id": "main",
            "name": "Main Account",
            "starting_balance": 1000.0,
            "starting_date": "2026-01",
            "horizon_months": 24,
        }
    ],
    "salaries": [
        {
            "id": "job",
            "name": "Salary",
            "gross_salary": 4000.0,
            "tax_rate": 0.2,
            "contributions_rate": 0.1,
            "benefits": [{"name": "Meal vouchers", "amount": 150.0, "is_taxable": False}],
        }
    ],
    "recurring": [
        {"id": "rent", "name": "Rent", "type": "expense", "amount": 1200.0, "category": "Housing"},
        {"id": "food", "name": "Groceries", "type": "expense", "amount": 450.0, "category": "Food"},
    ],
    "planned": [
        {
            "kind": "one-off",
            "id": "laptop",
            "name": "New laptop",
            "type": "expense",
            "amount": 1500.0,
            "scheduled_date": "2026-03",
            "category": "Electronics",
        },
        {
            "kind": "repeating",
            "id": "insurance",
            "name": "Car insurance",
            "type": "expense",
            "amount": 240.0,
            "frequency": "quarterly",
            "first_occurrence": "2026-01",
            "category": "Transport",
        },
    ],
    "investments": [
        {
            "id": "etf",
            "name": "ETF Portfolio",
            "principal": 10000.0,
            "annual_growth_rate": 0.06,
            "valuation_date": "2026-01",
            "contributions": [{"amount": 200.0, "frequency": "monthly", "start_date": "2026-01"}],
        }
    ],
    "receivables": [
        {
            "id": "loan_to_friend",
            "name": "Loan to a friend",
            "principal": 2000.0,
            "start_date": "2026-01",
            "expected_monthly_repayment": 100.0,
        }
    ],
    "debts": [
        {
            "id": "car",
            "name": "Car loan",
            "principal": 12000.0,
            "start_date": "2026-01",
            "annual_rate": 0.06,
            "term_months": 36,
            "reference_rates": [{"effective_month": "2027-01", "annual_rate": 0.05}],
            "extra_payments": [{"year_month": "2026-06", "amount": 2000.0}],
            "reference_rate_margin": 0.01,
        }
    ],
}


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy values, pandas objects and result rows."""

    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, pd.Period):
            return str(obj)
        elif isinstance(obj, pd.DataFrame):
            frame = obj.copy()
            frame.index = frame.index.astype(str)
            return frame.reset_index(names="period").to_dict("records")
        elif is_dataclass(obj) and not isinstance(obj, type):
            return asdict(obj)
        return super().default(obj)


def _dump_json(data) -> None:
    json.dump(data, sys.stdout, indent=2, cls=NumpyEncoder)
    sys.stdout.write("\n")


def _context(args) -> ProjectionContext:
    current = args.current_month or to_year_month(date.today())
    return ProjectionContext(
        current_month=current,
        default_horizon_months=args.horizon,
        base_currency=args.base_currency,
    )


def cmd_example(args) -> int:
    """Print a minimal working plan."""
    if args.json:
        _dump_json(EXAMPLE_PLAN)
    else:
        sys.stdout.write(yaml.safe_dump(EXAMPLE_PLAN, sort_keys=False))
    return 0


def cmd_project(args) -> int:
    """Project one cash account."""
    try:
        plan = load_plan(args.plan)
        filters = ProjectionFilters(
            start_date=args.start,
            end_date=args.end,
            categories=args.category or (),
            item_types=args.type or (),
            item_kinds=args.kind or (),
        )
        monthly = plan.project_account(args.account, filters=filters)
        currency = plan.account_bundle(args.account).account.currency
    except (CatalogError, ConfigError, FileNotFoundError, ValueError) as e:
        print(f"Error projecting account: {e}", file=sys.stderr)
        return 1

    if args.yearly:
        rollups = yearly_rollups(monthly)
        if args.json:
            _dump_json(to_frame(rollups))
            return 0
        for r in rollups:
            print(
                f"{r.year}  start {format_amount(r.starting_balance, currency):>14}  "
                f"in {format_amount(r.total_income, currency):>14}  "
                f"out {format_amount(r.total_expenses, currency):>14}  "
                f"end {format_amount(r.ending_balance, currency):>14}"
            )
        return 0

    if args.json:
        _dump_json(monthly)
        return 0
    for m in monthly:
        print(
            f"{m.year_month}  start {format_amount(m.starting_balance, currency):>14}  "
            f"in {format_amount(m.total_income, currency):>14}  "
            f"out {format_amount(m.total_expenses, currency):>14}  "
            f"end {format_amount(m.ending_balance, currency):>14}"
        )
    return 0


def cmd_wealth(args) -> int:
    """Run a full plan and print monthly (or yearly) net worth."""
    try:
        plan = load_plan(args.plan)
        ctx = _context(args)
        validate_plan(plan, ctx, raise_on_error=True)
        results = plan.run(ctx, max_workers=args.workers)
    except PlanValidationError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except (CatalogError, ConfigError, FileNotFoundError, ValueError) as e:
        print(f"Error running plan: {e}", file=sys.stderr)
        return 1

    if results.wealth.is_mixed_currency:
        logger.warning(
            "Plan mixes currencies %s; totals are summed without conversion",
            results.wealth.currencies,
        )

    currency = ctx.base_currency or (results.wealth.currencies or ["EUR"])[0]
    frame = results.totals
    if args.yearly:
        frame = aggregate_totals(frame, "Y")
    if args.json:
        _dump_json(
            {
                "plan": plan.id,
                "currencies": results.wealth.currencies,
                "display_currency": currency,
                "totals": frame,
            }
        )
        return 0

    columns = [
        "cash_accounts_total",
        "investments_total",
        "receivables_total",
        "debts_total",
        "net_worth",
    ]
    print(f"{'period':<8}" + "".join(f"{c.replace('_total', ''):>18}" for c in columns))
    for period, row in frame.iterrows():
        print(
            f"{str(period):<8}"
            + "".join(f"{format_amount(row[c], currency):>18}" for c in columns)
        )
    return 0


def cmd_validate(args) -> int:
    """Validate a plan file."""
    try:
        plan = load_plan(args.plan)
        report = validate_plan(plan, _context(args))
    except (CatalogError, ConfigError, FileNotFoundError, ValueError) as e:
        if args.format == "json":
            _dump_json(
                {
                    "has_errors": True,
                    "has_warnings": False,
                    "is_valid": False,
                    "exit_code": 1,
                    "error": str(e),
                }
            )
        else:
            print(f"❌ Validation failed: {e}")
        return 1

    if args.format == "json":
        _dump_json(report.to_dict())
    else:
        print(str(report))
    return report.get_exit_code()


def _add_context_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--current-month",
        help="Reference month (YYYY-MM); defaults to the current calendar month",
    )
    parser.add_argument(
        "--horizon",
        type=int,
        default=120,
        help="Months projected for instruments without an end date (default: 120)",
    )
    parser.add_argument(
        "--base-currency",
        help="Currency used to display aggregated totals (default: the plan's first currency)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sampolio", description="Sampolio - Personal finance projection engine"
    )
    parser.add_argument("--version", action="version", version=f"Sampolio {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="cmd", required=True, help="Available commands")

    # Example command
    example_parser = subparsers.add_parser("example", help="Print a minimal working plan")
    example_parser.add_argument("--json", action="store_true", help="Print JSON instead of YAML")
    example_parser.set_defaults(func=cmd_example)

    # Project command
    project_parser = subparsers.add_parser("project", help="Project one cash account")
    project_parser.add_argument("plan", help="Plan file (YAML or JSON)")
    project_parser.add_argument("--account", required=True, help="Account id")
    project_parser.add_argument("--start", help="First month shown (YYYY-MM)")
    project_parser.add_argument("--end", help="Last month shown (YYYY-MM)")
    project_parser.add_argument(
        "--category", action="append", help="Only include this category (repeatable)"
    )
    project_parser.add_argument(
        "--type", action="append", choices=["income", "expense"], help="Only include this item type"
    )
    project_parser.add_argument(
        "--kind",
        action="append",
        choices=["recurring", "one-off", "repeating"],
        help="Only include this item kind",
    )
    project_parser.add_argument("--yearly", action="store_true", help="Show yearly rollups")
    project_parser.add_argument("--json", action="store_true", help="Output in JSON format")
    project_parser.set_defaults(func=cmd_project)

    # Wealth command
    wealth_parser = subparsers.add_parser("wealth", help="Project net worth for a full plan")
    wealth_parser.add_argument("plan", help="Plan file (YAML or JSON)")
    _add_context_args(wealth_parser)
    wealth_parser.add_argument("--workers", type=int, default=None, help="Thread pool size")
    wealth_parser.add_argument("--yearly", action="store_true", help="Aggregate by year")
    wealth_parser.add_argument("--json", action="store_true", help="Output in JSON format")
    wealth_parser.set_defaults(func=cmd_wealth)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a plan file")
    validate_parser.add_argument("plan", help="Plan file (YAML or JSON)")
    _add_context_args(validate_parser)
    validate_parser.add_argument(
        "--format", choices=["human", "json"], default="human", help="Output format"
    )
    validate_parser.set_defaults(func=cmd_validate)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
