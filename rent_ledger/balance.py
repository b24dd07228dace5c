"""Balance and late-fee calculation.

A contract accrues a late fee only once its end date has passed while part
of the rent is still unpaid. Two late-fee methods exist:

``per_diem`` (the default)
    ``days_overdue * daily_rate``, growing with every day past the end date.

``flat``
    A one-off ``round(balance * LATE_FEE_PERCENTAGE)``, independent of how
    long the contract has been overdue. Older screens still show this
    figure.

Everything here is a pure function of its inputs.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable

from .data_models import FLAT, LATE_FEE_METHODS, PER_DIEM, Payment
from .dates import days_overdue, is_expired
from .utils import Number, round_money, to_decimal

LATE_FEE_PERCENTAGE = Decimal("0.10")


def total_paid(payments: Iterable[Payment]) -> Decimal:
    return sum((p.amount for p in payments), Decimal(0))


def balance(total_rent: Number, paid: Number) -> Decimal:
    """Outstanding rent, floored at zero so overpayment never goes negative."""
    return max(Decimal(0), to_decimal(total_rent) - to_decimal(paid))


def is_past_due(total_rent: Number, paid: Number) -> bool:
    return to_decimal(paid) < to_decimal(total_rent)


def late_fee(
    end_date: date,
    today: date,
    total_rent: Number,
    paid: Number,
    daily_rate: Number,
    method: str = PER_DIEM,
    percentage: Number = LATE_FEE_PERCENTAGE,
) -> Decimal:
    """Late fee owed on ``today`` for a contract ending on ``end_date``.

    Returns zero while the contract has not expired or nothing is owed.
    ``percentage`` only applies to the flat method.
    """
    if method not in LATE_FEE_METHODS:
        raise ValueError(f"Unknown late fee method: {method}")
    if not (is_expired(end_date, today) and is_past_due(total_rent, paid)):
        return Decimal(0)
    if method == FLAT:
        return round_money(balance(total_rent, paid) * to_decimal(percentage))
    return round_money(to_decimal(daily_rate) * days_overdue(end_date, today))


def total_due(total_rent: Number, paid: Number, fee: Number) -> Decimal:
    """Balance plus the late fee accrued at evaluation time."""
    return balance(total_rent, paid) + to_decimal(fee)
