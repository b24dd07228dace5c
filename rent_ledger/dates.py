"""Date arithmetic for contracts.

Every function that compares against "today" takes it as an argument; only
the command-line and web entry points read the clock (via ``today_from``).
All values are calendar dates, so time of day never enters a comparison.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from .data_models import CONTRACT_TYPES, MONTHLY, YEARLY
from .utils import add_months, add_years, parse_iso_date


def today_from(value: Optional[str] = None) -> date:
    """Return ``value`` parsed as a date, or the current date when empty."""
    if value:
        return parse_iso_date(value)
    return date.today()


def is_expired(end_date: date, today: date) -> bool:
    return end_date < today


def days_until_due(end_date: date, today: date) -> int:
    """Whole days from ``today`` to ``end_date``.

    Negative means overdue by ``abs(value)`` days and ``0`` means due today.
    """
    return (end_date - today).days


def days_overdue(end_date: date, today: date) -> int:
    return max(0, -days_until_due(end_date, today))


def days_between(start_date: date, end_date: date) -> int:
    return (end_date - start_date).days


def add_contract_period(start_date: date, contract_type: str) -> Optional[date]:
    """Default end date for a contract of ``contract_type`` starting on ``start_date``.

    Monthly contracts run one calendar month and yearly contracts one
    calendar year. Custom contracts have no default; the caller supplies the
    end date explicitly, so ``None`` is returned.
    """
    if contract_type not in CONTRACT_TYPES:
        raise ValueError(f"Unknown contract type: {contract_type}")
    if contract_type == MONTHLY:
        return add_months(start_date, 1)
    if contract_type == YEARLY:
        return add_years(start_date, 1)
    # custom
    return None


def default_end_date(today: date) -> date:
    """End date proposed for a new tenant form: one month from today."""
    return add_months(today, 1)
