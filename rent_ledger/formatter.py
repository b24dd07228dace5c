"""Output helpers for the rent ledger.

This module renders balance views and due lists in a plain text format and
provides the short phrases the screens show next to a contract ("3 days
overdue", "2 months, 5 days").
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable

from .config import DEFAULT_CURRENCY
from .data_models import BalanceView, DueEntry
from .dates import days_between, days_until_due
from .utils import round_money


def format_currency(amount: Decimal, symbol: str = DEFAULT_CURRENCY) -> str:
    return f"{symbol}{round_money(amount):,.0f}"


def days_until_due_text(end_date: date, today: date) -> str:
    days = days_until_due(end_date, today)
    if days < 0:
        return f"{abs(days)} days overdue"
    if days == 0:
        return "Due today"
    return f"{days} days left"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''}"


def contract_duration_text(start_date: date, end_date: date) -> str:
    """Describe a contract length in 30-day months and leftover days."""
    months, days = divmod(days_between(start_date, end_date), 30)
    if months > 0 and days > 0:
        return f"{_plural(months, 'month')}, {_plural(days, 'day')}"
    if months > 0:
        return _plural(months, "month")
    return _plural(days, "day")


def print_balance_view(view: BalanceView, symbol: str = DEFAULT_CURRENCY) -> None:
    """Print a balance view in a human-readable format."""
    print("Balance")
    print("-" * 48)
    print(f"Total rent         : {format_currency(view.total_rent, symbol)}")
    print(f"Total paid         : {format_currency(view.total_paid, symbol)} ({view.percentage_paid}%)")
    print(f"Balance            : {format_currency(view.balance, symbol)}")
    if view.late_fee > 0:
        print(f"Late fee           : {format_currency(view.late_fee, symbol)}")
        print(f"Days overdue       : {view.days_overdue}")
    print(f"Total due          : {format_currency(view.total_due, symbol)}")
    print(f"Status             : {view.status.upper()}")
    print("-" * 48)


def print_due_list(entries: Iterable[DueEntry], today: date, symbol: str = DEFAULT_CURRENCY) -> None:
    """Print the due list as a tab separated table."""
    headers = ["Contract", "End", "Due", "Balance", "LateFee", "TotalDue", "Status"]
    print("\t".join(headers))
    for entry in entries:
        row = [
            entry.label,
            entry.contract.end_date.isoformat(),
            days_until_due_text(entry.contract.end_date, today),
            format_currency(entry.view.balance, symbol),
            format_currency(entry.view.late_fee, symbol),
            format_currency(entry.view.total_due, symbol),
            entry.view.status,
        ]
        print("\t".join(row))
