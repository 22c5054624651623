"""Core calculation engine for the mortgage planner.

This module builds the monthly amortization ledger. Principal is amortized
straight-line over the months left in the nominal term, recomputed every
month, so the plan re-levels itself after any under- or over-payment. Users
may override the amount actually paid in any month; interest is always
covered first and only the remainder reduces principal.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, getcontext
from typing import List, Optional

from .data_models import LoanParameters, OverrideMap, ScheduleRow
from .utils import add_months, bounded_decimal

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

EPSILON = Decimal("0.01")  # balance at or below one cent counts as paid off
MAX_MONTHS = 1200  # hard bound on the loop; at most MAX_MONTHS - 1 rows

ZERO = Decimal("0")


def _override_for(overrides: Optional[OverrideMap], month_index: int) -> Optional[Decimal]:
    """Return the finite override for ``month_index`` or ``None``."""
    if not overrides:
        return None
    return bounded_decimal(overrides.get(month_index))


def generate_schedule(
    principal,
    annual_rate,
    term_months: int,
    start_month: date,
    overrides: Optional[OverrideMap] = None,
) -> List[ScheduleRow]:
    """Compute the amortization schedule for a loan.

    Parameters
    ----------
    principal:
        Amount borrowed. A non-positive value yields an empty schedule.
    annual_rate:
        Annual nominal interest rate in percent.
    term_months: int
        Nominal term in months. A non-positive value yields an empty schedule.
    start_month: date
        Due date of the first row.
    overrides: OverrideMap, optional
        Actual payments keyed by 1-based month index. Months that are absent,
        or whose value is not a finite number, use the planned payment. The
        mapping is only read.

    Principal, rate and overrides are clamped to ``utils.MAX_AMOUNT`` in
    magnitude.

    Returns
    -------
    List[ScheduleRow]
        Rows in increasing ``month_index`` order. The schedule ends in the
        month the balance drops to one cent or less, which may be before the
        nominal term (overpaid) or after it (underpaid). It never holds more
        than ``MAX_MONTHS - 1`` rows.
    """
    balance = bounded_decimal(principal) or ZERO
    rate = bounded_decimal(annual_rate) or ZERO
    if balance <= 0 or term_months <= 0:
        return []

    monthly_rate = rate / Decimal(100) / Decimal(12)
    schedule: List[ScheduleRow] = []
    month_index = 1
    due_date = start_month

    while (month_index <= term_months or balance > EPSILON) and month_index < MAX_MONTHS:
        months_remaining = max(term_months - month_index + 1, 1)
        planned_principal = balance / Decimal(months_remaining)
        planned_interest = balance * monthly_rate
        planned_payment = planned_principal + planned_interest

        override = _override_for(overrides, month_index)
        actual_payment = override if override is not None else planned_payment

        # Interest first; an underpayment eats into interest before principal.
        interest_paid = min(actual_payment, planned_interest)
        principal_paid = min(max(actual_payment - interest_paid, ZERO), balance)
        balance_after = max(balance - principal_paid, ZERO)

        schedule.append(
            ScheduleRow(
                month_index=month_index,
                due_date=due_date,
                starting_balance=balance,
                planned_payment=planned_payment,
                planned_principal=min(planned_principal, balance),
                planned_interest=planned_interest,
                actual_payment=actual_payment,
                interest_paid=interest_paid,
                principal_paid=principal_paid,
                extra_payment=max(actual_payment - planned_payment, ZERO),
                shortfall=max(planned_payment - actual_payment, ZERO),
                balance_after=balance_after,
                overridden=override is not None,
            )
        )

        balance = balance_after
        month_index += 1
        due_date = add_months(due_date, 1)

        if balance <= EPSILON:
            break

    if balance > EPSILON:
        logger.warning(
            "Schedule stopped at the %d-month limit with %s still outstanding",
            MAX_MONTHS,
            balance,
        )
    logger.debug("Generated %d schedule rows (%d overrides)", len(schedule), len(overrides or {}))
    return schedule


def compute_schedule(params: LoanParameters, overrides: Optional[OverrideMap] = None) -> List[ScheduleRow]:
    """Compute the schedule for a ``LoanParameters`` instance."""
    return generate_schedule(
        params.principal,
        params.annual_rate,
        params.term_months,
        params.start_month,
        overrides,
    )


def schedule_truncated(schedule: List[ScheduleRow]) -> bool:
    """Return True when the schedule was cut off by the month limit unpaid."""
    return bool(schedule) and schedule[-1].balance_after > EPSILON
