"""Utility functions for the mortgage planner.

This module provides helpers for parsing user input into Python data types and
for handling dates, including adding months and normalizing year-month strings
to ``datetime.date`` instances. It uses Python's ``datetime`` module to
calculate month offsets.
"""

from __future__ import annotations

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext
from typing import Optional

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

CENT = Decimal("0.01")

# Amounts and rates are clamped to this magnitude so products stay in range.
MAX_AMOUNT = Decimal("1e15")
MAX_TERM_YEARS = Decimal("1e8")


def parse_year_month(ym: str) -> date:
    """Parse a YYYY-MM string into a ``date`` object (first day of month).

    Parameters
    ----------
    ym: str
        A string in the form ``"YYYY-MM"``. The day component, if present,
        will be ignored.

    Returns
    -------
    date
        A date object representing the first day of the specified month.

    Raises
    ------
    ValueError
        If the string is not a valid year-month.
    """
    try:
        parts = ym.strip().split("-")
        if len(parts) < 2:
            raise ValueError
        return date(int(parts[0]), int(parts[1]), 1)
    except (AttributeError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid year-month string: {ym}") from exc


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and surrounding whitespace. It raises
    ``ValueError`` if conversion fails.
    """
    try:
        cleaned = value.replace(",", "").strip()
        return Decimal(cleaned)
    except (AttributeError, InvalidOperation) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc


def to_decimal(value) -> Optional[Decimal]:
    """Return ``value`` as a finite ``Decimal`` or ``None``.

    Accepts ints, floats, Decimals and numeric strings. Floats go through
    ``str`` so that ``0.1`` becomes ``Decimal("0.1")``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        try:
            result = decimal_from_str(str(value))
        except ValueError:
            return None
    if not result.is_finite():
        return None
    return result


def bounded_decimal(value) -> Optional[Decimal]:
    """Like ``to_decimal`` but clamped to ``[-MAX_AMOUNT, MAX_AMOUNT]``."""
    result = to_decimal(value)
    if result is None:
        return None
    return max(min(result, MAX_AMOUNT), -MAX_AMOUNT)


def coerce_amount(value) -> Decimal:
    """Coerce a principal or rate input to a non-negative ``Decimal``."""
    result = bounded_decimal(value)
    if result is None or result < 0:
        return Decimal("0")
    return result


def coerce_term_months(term_years) -> int:
    """Convert a term in years to whole months, never less than one."""
    years = to_decimal(term_years)
    if years is None or years <= 0:
        return 1
    years = min(years, MAX_TERM_YEARS)
    months = (years * 12).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return max(int(months), 1)


def round_cents(value: Decimal) -> Decimal:
    """Round a monetary value to cent precision (half up)."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
