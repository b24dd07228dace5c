"""Payment status classification for badges and list filters."""

from __future__ import annotations

from decimal import Decimal

from .data_models import PAID, PARTIAL, UNPAID
from .utils import Number, round_money, to_decimal


def payment_status(amount_paid: Number, total_amount: Number) -> str:
    """Return ``"paid"``, ``"partial"`` or ``"unpaid"``."""
    paid = to_decimal(amount_paid)
    if paid >= to_decimal(total_amount):
        return PAID
    if paid > 0:
        return PARTIAL
    return UNPAID


def payment_percentage(amount_paid: Number, total_amount: Number) -> int:
    """Share of ``total_amount`` covered by ``amount_paid``, in whole percent.

    A non-positive total counts as fully paid. Overpayment is reported as is,
    so the result can exceed 100.
    """
    total = to_decimal(total_amount)
    if total <= 0:
        return 100
    return int(round_money(to_decimal(amount_paid) / total * Decimal(100)))
