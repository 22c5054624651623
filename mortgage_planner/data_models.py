"""Data models for the mortgage planner.

This module defines dataclasses representing the entities used by the
planner: the loan parameters, individual schedule rows and the aggregate
totals derived from a schedule. Using dataclasses makes it easy to construct,
inspect and serialize these structures.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Mapping, Optional

from .utils import coerce_amount, coerce_term_months

# Sparse map of 1-based month index to the amount actually paid that month.
OverrideMap = Mapping[int, Decimal]


@dataclass(frozen=True)
class LoanParameters:
    """Inputs of a single schedule computation.

    Attributes
    ----------
    principal: Decimal
        The amount borrowed.
    annual_rate: Decimal
        Annual nominal interest rate in percent (``3.54`` means 3.54 %).
    term_months: int
        Nominal term in months.
    start_month: date
        First due date, normalized to the first day of the month.
    """

    principal: Decimal
    annual_rate: Decimal
    term_months: int
    start_month: date

    @classmethod
    def from_inputs(cls, principal, annual_rate, term_years, start_month: date) -> "LoanParameters":
        """Build parameters from loosely validated user input.

        Negative or non-numeric amounts become zero and the term is rounded
        to whole months with a floor of one month.
        """
        return cls(
            principal=coerce_amount(principal),
            annual_rate=coerce_amount(annual_rate),
            term_months=coerce_term_months(term_years),
            start_month=start_month.replace(day=1),
        )


@dataclass
class ScheduleRow:
    """One month of the amortization ledger.

    ``planned_*`` values describe what an unmodified plan would charge this
    month, the remaining values what actually happened given the payment made.
    ``extra_payment`` and ``shortfall`` are never both positive.
    """

    month_index: int
    due_date: date
    starting_balance: Decimal
    planned_payment: Decimal
    planned_principal: Decimal
    planned_interest: Decimal
    actual_payment: Decimal
    interest_paid: Decimal
    principal_paid: Decimal
    extra_payment: Decimal
    shortfall: Decimal
    balance_after: Decimal
    overridden: bool = False

    @property
    def is_cleared(self) -> bool:
        return self.balance_after <= Decimal("0.01")


@dataclass
class ScheduleTotals:
    """Aggregate metrics of a single schedule."""

    total_interest: Decimal
    total_paid: Decimal
    total_extra: Decimal
    total_shortfall: Decimal
    months: int
    payoff_date: Optional[date]


@dataclass
class ScenarioComparison:
    """Base plan (no overrides) versus the plan with the user's payments."""

    base: ScheduleTotals
    actual: ScheduleTotals
    interest_saved: Decimal
    months_saved: int
