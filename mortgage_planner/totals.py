"""Summary metrics derived from amortization schedules."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Optional

from .data_models import LoanParameters, OverrideMap, ScenarioComparison, ScheduleRow, ScheduleTotals
from .engine import compute_schedule


def summarize(schedule: Iterable[ScheduleRow]) -> ScheduleTotals:
    """Reduce a schedule to its totals.

    ``months`` is the number of rows and ``payoff_date`` the due date of the
    last row (``None`` for an empty schedule).
    """
    rows: List[ScheduleRow] = list(schedule)
    return ScheduleTotals(
        total_interest=sum((r.interest_paid for r in rows), Decimal("0")),
        total_paid=sum((r.actual_payment for r in rows), Decimal("0")),
        total_extra=sum((r.extra_payment for r in rows), Decimal("0")),
        total_shortfall=sum((r.shortfall for r in rows), Decimal("0")),
        months=len(rows),
        payoff_date=rows[-1].due_date if rows else None,
    )


def compare_totals(base: ScheduleTotals, actual: ScheduleTotals) -> ScenarioComparison:
    return ScenarioComparison(
        base=base,
        actual=actual,
        interest_saved=max(base.total_interest - actual.total_interest, Decimal("0")),
        months_saved=max(base.months - actual.months, 0),
    )


def compare_scenarios(params: LoanParameters, overrides: Optional[OverrideMap] = None) -> ScenarioComparison:
    """Compare the plan with the given overrides against the unmodified plan.

    The base schedule is always generated with an empty override map, so the
    savings never depend on an earlier scenario.
    """
    base = summarize(compute_schedule(params, {}))
    actual = summarize(compute_schedule(params, overrides or {}))
    return compare_totals(base, actual)
