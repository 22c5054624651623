"""Helpers for editing the map of actual payments.

The generator only reads an ``OverrideMap``; the functions here are what the
front ends use to build one from user input. They never modify the map they
are given and always return a new dictionary.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional

from .data_models import OverrideMap, ScheduleRow
from .utils import to_decimal

FORM_PREFIX = "actual_"


def parse_override_text(text: Optional[str]) -> Optional[Decimal]:
    """Parse the text typed for a month's actual payment.

    Empty, non-numeric and non-finite input means "no override" and yields
    ``None``. Zero is a valid override (nothing was paid).
    """
    if text is None or not str(text).strip():
        return None
    return to_decimal(str(text))


def set_override(overrides: Optional[OverrideMap], month_index: int, text: Optional[str]) -> Dict[int, Decimal]:
    """Return a copy of ``overrides`` with the entry for ``month_index`` updated.

    The entry is removed when ``text`` does not parse as an amount.
    """
    updated = dict(overrides or {})
    amount = parse_override_text(text)
    if amount is None:
        updated.pop(month_index, None)
    else:
        updated[month_index] = amount
    return updated


def overrides_from_form(form: Mapping[str, str], prefix: str = FORM_PREFIX) -> Dict[int, Decimal]:
    """Collect ``<prefix><month>`` fields of a submitted form into a map."""
    overrides: Dict[int, Decimal] = {}
    for key, value in form.items():
        if not key.startswith(prefix):
            continue
        try:
            month_index = int(key[len(prefix):])
        except ValueError:
            continue
        if month_index < 1:
            continue
        overrides = set_override(overrides, month_index, value)
    return overrides


def apply_flat_extra(
    base_schedule: Iterable[ScheduleRow],
    amount,
    overrides: Optional[OverrideMap] = None,
) -> Dict[int, Decimal]:
    """Pay ``amount`` on top of the planned payment in every month.

    ``base_schedule`` should be generated without overrides; each of its rows
    sets ``planned_payment + amount`` at that row's month index, replacing any
    earlier override for that month. A non-positive amount returns an
    unchanged copy.
    """
    updated = dict(overrides or {})
    extra = to_decimal(amount)
    if extra is None or extra <= 0:
        return updated
    for row in base_schedule:
        updated[row.month_index] = row.planned_payment + extra
    return updated


def clear_overrides() -> Dict[int, Decimal]:
    return {}
