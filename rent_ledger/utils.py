"""Utility functions for the rent ledger.

This module provides helpers for parsing user input into Python data types,
for rounding money to whole currency units and for calendar arithmetic.
Month and year offsets follow overflow semantics: a day that does not exist
in the target month spills over into the following month instead of being
clamped (Jan 31 plus one month is Mar 3 in a non-leap year).
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext
from typing import Union

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

Number = Union[int, float, str, Decimal]

_WHOLE_UNIT = Decimal("1")


def parse_iso_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string into a ``date`` object.

    Any time component after a ``T`` or a space is ignored, so timestamps
    coming from a database row are truncated to their calendar day.

    Raises
    ------
    ValueError
        If the string is not a valid calendar date.
    """
    try:
        day_part = value.strip().replace(" ", "T").split("T")[0]
        year, month, day = (int(p) for p in day_part.split("-"))
        return date(year, month, day)
    except Exception as exc:
        raise ValueError(f"Invalid date string: {value}") from exc


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and handles both integer and float-like
    strings. It raises ``ValueError`` if conversion fails.
    """
    try:
        cleaned = value.replace(",", "").strip()
        result = Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, str):
        return decimal_from_str(value)
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Number) -> Decimal:
    """Round to whole currency units, halves away from zero."""
    return to_decimal(value).quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP)


def _overflow_date(year: int, month: int, day: int) -> date:
    # Normalise month into 1..12 and let the day spill past the month end.
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return date(year, month, 1) + timedelta(days=day - 1)


def add_months(dt: date, months: int) -> date:
    """Return the date ``months`` calendar months after ``dt``.

    Days past the end of the target month roll over into the next month.
    """
    return _overflow_date(dt.year, dt.month + months, dt.day)


def add_years(dt: date, years: int) -> date:
    """Return the date ``years`` after ``dt`` (Feb 29 rolls over to Mar 1)."""
    return _overflow_date(dt.year + years, dt.month, dt.day)
