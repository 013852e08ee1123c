"""Currency rounding and month arithmetic shared by every engine module."""

import calendar
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


def round_money(value: Decimal | int | float) -> Decimal:
    """Round to currency minor units (2 decimals, half-up).

    Every monetary value stored on a record or result goes through here.
    """
    if isinstance(value, float):
        value = Decimal(str(value))
    return Decimal(value).quantize(TWO_PLACES, ROUND_HALF_UP)


def add_months(d: date, months: int) -> date:
    """Return ``d`` shifted by ``months``, clamping the day to the month end."""
    year = d.year + (d.month - 1 + months) // 12
    month = (d.month - 1 + months) % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start`` to ``end`` (days ignored)."""
    return (end.year - start.year) * 12 + (end.month - start.month)
