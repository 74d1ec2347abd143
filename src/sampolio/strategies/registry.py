"""
Debt schedule registry for Sampolio.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from sampolio.core.entities import Debt, DebtExtraPayment, DebtReferenceRate
from sampolio.core.errors import ConfigError
from sampolio.core.kinds import K
from sampolio.core.results import DebtAmortizationRow
from sampolio.core.utils import YearMonth

from .schedule.installment import amortize_installments
from .schedule.loan_annuity import amortize_annuity

DebtSchedule = Callable[..., list[DebtAmortizationRow]]

DebtScheduleRegistry: dict[str, DebtSchedule] = {}


def register_defaults():
    """
    Register the default debt schedules in the global registry.

    Registered Schedules:
        - 'amortized': Level-payment annuity with variable reference rates
        - 'fixed-installment': Interest-free fixed installments

    Note:
        This function is automatically called when the strategies package is
        imported. Additional schedules can be registered by assigning to
        ``DebtScheduleRegistry`` directly.
    """
    DebtScheduleRegistry[K.DEBT_AMORTIZED] = amortize_annuity
    DebtScheduleRegistry[K.DEBT_FIXED_INSTALLMENT] = amortize_installments


def amortize_debt(
    debt: Debt,
    reference_rates: Iterable[DebtReferenceRate] = (),
    extra_payments: Iterable[DebtExtraPayment] = (),
    end_month: YearMonth | None = None,
) -> list[DebtAmortizationRow]:
    """
    Amortize ``debt`` with the schedule registered for its ``debt_type``.

    Raises:
        ConfigError: If no schedule is registered for the debt type
    """
    schedule = DebtScheduleRegistry.get(debt.debt_type)
    if schedule is None:
        raise ConfigError(
            f"{debt.id}: unknown debt_type {debt.debt_type!r}; "
            f"registered: {sorted(DebtScheduleRegistry)}"
        )
    return schedule(debt, reference_rates, extra_payments, end_month)
