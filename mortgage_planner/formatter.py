"""Output helpers for the mortgage planner.

This module renders amounts, months, schedules and summaries as text. Amounts
are rounded to cents only here, at the display boundary; the engine keeps
full precision.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from . import config
from .data_models import ScenarioComparison, ScheduleRow
from .utils import round_cents


def format_currency(value: Decimal, symbol: Optional[str] = None) -> str:
    """Render ``value`` rounded to cents with a currency symbol, e.g. ``€1,804.25``."""
    symbol = config.CURRENCY_SYMBOL if symbol is None else symbol
    rounded = round_cents(value)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.2f}"


def format_month(value: Optional[date]) -> str:
    """Render a due date as ``December 2025``; ``TBD`` when there is none."""
    if value is None:
        return "TBD"
    return value.strftime("%B %Y")


def format_optional(value: Decimal) -> str:
    """Currency for positive amounts, a dash otherwise."""
    return format_currency(value) if value > 0 else "-"


def print_summary(comparison: ScenarioComparison) -> None:
    """Print the base plan against the current scenario."""
    base, actual = comparison.base, comparison.actual
    print("Summary")
    print("-" * 72)
    print(f"Base plan          : {base.months} months ({format_month(base.payoff_date)})")
    print(f"Current scenario   : {actual.months} months ({format_month(actual.payoff_date)})")
    print(f"Base interest      : {format_currency(base.total_interest)}")
    print(f"Actual interest    : {format_currency(actual.total_interest)}")
    print(f"Interest saved     : {format_currency(comparison.interest_saved)}")
    print(f"Total paid         : {format_currency(actual.total_paid)}")
    if actual.total_extra:
        print(f"Extra paid         : {format_currency(actual.total_extra)}")
    if actual.total_shortfall:
        print(f"Shortfall          : {format_currency(actual.total_shortfall)}")
    if comparison.months_saved:
        print(f"Term reduction     : {comparison.months_saved} months")
    print("-" * 72)


def print_schedule(schedule: Iterable[ScheduleRow]) -> None:
    """Print the amortization schedule as a tab-separated table."""
    headers = [
        "Month",
        "Due",
        "Planned",
        "Principal",
        "Interest",
        "Actual",
        "Extra",
        "Shortfall",
        "Balance",
    ]
    print("\t".join(headers))
    for row in schedule:
        print(
            "\t".join(
                [
                    str(row.month_index),
                    row.due_date.strftime("%Y-%m"),
                    f"{round_cents(row.planned_payment):.2f}",
                    f"{round_cents(row.principal_paid):.2f}",
                    f"{round_cents(row.interest_paid):.2f}",
                    f"{round_cents(row.actual_payment):.2f}",
                    f"{round_cents(row.extra_payment):.2f}",
                    f"{round_cents(row.shortfall):.2f}",
                    f"{round_cents(row.balance_after):.2f}",
                ]
            )
        )
