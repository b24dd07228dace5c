"""Rent schedule calculation.

This module computes the total rent owed for a contract term. Two formulas
are available:

``span`` (the default)
    Classify the number of days between start and end. A span of 365-366
    days is billed as a year (``monthly_rate * 12``), 28-31 days as one
    month, fewer than 28 days at the daily rate, and anything else as
    ``floor(days / 30)`` months plus ``days % 30`` days at the daily rate.

``calendar``
    Count whole calendar months from the start date, then bill the days left
    over at the daily rate.

Both formulas never return a negative amount. When a contract carries a
``stored_total_rent`` (written when the contract was extended), that figure
is used as-is instead of recomputing.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from .data_models import CALENDAR, CONTRACT_TYPES, MONTHLY, RENT_METHODS, SPAN, ContractSnapshot
from .utils import Number, add_months, round_money, to_decimal

DAYS_PER_BILLING_MONTH = 30


def default_daily_rate(monthly_rate: Number) -> Decimal:
    """Daily rate used when a contract does not set one: ``round(monthly / 30)``."""
    return round_money(to_decimal(monthly_rate) / Decimal(DAYS_PER_BILLING_MONTH))


def _rent_by_span(days: int, monthly_rate: Decimal, daily_rate: Decimal) -> Decimal:
    if 365 <= days <= 366:
        return monthly_rate * 12
    if 28 <= days <= 31:
        return monthly_rate
    if days < 28:
        return daily_rate * days
    months, leftover = divmod(days, DAYS_PER_BILLING_MONTH)
    return monthly_rate * months + daily_rate * leftover


def _rent_by_calendar(
    start_date: date, end_date: date, monthly_rate: Decimal, daily_rate: Decimal
) -> Decimal:
    full_months = (end_date.year - start_date.year) * 12 + (end_date.month - start_date.month)
    anchor = add_months(start_date, full_months)
    # Overflowing month ends can overshoot by more than one step (Jan 31 -> Mar 2).
    while full_months > 0 and anchor > end_date:
        full_months -= 1
        anchor = add_months(start_date, full_months)
    remaining_days = (end_date - anchor).days
    return monthly_rate * full_months + daily_rate * remaining_days


def total_rent(
    start_date: date,
    end_date: date,
    monthly_rate: Number,
    daily_rate: Optional[Number] = None,
    contract_type: str = MONTHLY,
    method: str = SPAN,
) -> Decimal:
    """Return the rent owed for the term ``[start_date, end_date]``.

    Parameters
    ----------
    start_date, end_date: date
        Bounds of the term. A reversed range bills nothing.
    monthly_rate: Number
        Rent per full month.
    daily_rate: Optional[Number]
        Rent per leftover day; defaults to ``default_daily_rate(monthly_rate)``.
    contract_type: str
        Contract type of the term. Both formulas bill by elapsed time, so the
        type is only validated here.
    method: str
        ``"span"`` or ``"calendar"``.

    Returns
    -------
    Decimal
        The total rounded to whole currency units, never below zero.
    """
    if contract_type not in CONTRACT_TYPES:
        raise ValueError(f"Unknown contract type: {contract_type}")
    if method not in RENT_METHODS:
        raise ValueError(f"Unknown rent method: {method}")
    monthly = to_decimal(monthly_rate)
    daily = default_daily_rate(monthly) if daily_rate is None else to_decimal(daily_rate)
    if end_date <= start_date:
        return Decimal(0)

    if method == CALENDAR:
        amount = _rent_by_calendar(start_date, end_date, monthly, daily)
    else:
        amount = _rent_by_span((end_date - start_date).days, monthly, daily)
    return max(Decimal(0), round_money(amount))


def contract_total_rent(contract: ContractSnapshot, method: str = SPAN) -> Decimal:
    """Total rent for ``contract``; a stored total from an extension wins."""
    if contract.stored_total_rent is not None:
        return contract.stored_total_rent
    return total_rent(
        contract.start_date,
        contract.end_date,
        contract.monthly_rate,
        contract.effective_daily_rate,
        contract.contract_type,
        method,
    )


def additional_rent_for_extension(
    old_end: date,
    new_end: date,
    monthly_rate: Number,
    daily_rate: Optional[Number] = None,
    contract_type: str = MONTHLY,
    method: str = SPAN,
) -> Decimal:
    """Rent for the extra span ``[old_end, new_end]`` billed as its own mini-contract.

    The result is added to the contract's prior total when the extension is
    confirmed; it never replaces it.
    """
    return total_rent(old_end, new_end, monthly_rate, daily_rate, contract_type, method)
