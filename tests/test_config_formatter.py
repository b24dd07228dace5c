from datetime import date
from decimal import Decimal

import pytest

from rent_ledger.config import LedgerSettings
from rent_ledger.data_models import BalanceView
from rent_ledger.formatter import (
    contract_duration_text,
    days_until_due_text,
    format_currency,
    print_balance_view,
)


def test_settings_defaults():
    settings = LedgerSettings.from_env({})
    assert settings.rent_method == "span"
    assert settings.late_fee_method == "per_diem"
    assert settings.currency == "₱"


def test_settings_from_environment():
    settings = LedgerSettings.from_env(
        {
            "RENT_LEDGER_RENT_METHOD": "Calendar",
            "RENT_LEDGER_LATE_FEE_METHOD": " FLAT ",
            "RENT_LEDGER_CURRENCY": "$",
        }
    )
    assert settings == LedgerSettings(rent_method="calendar", late_fee_method="flat", currency="$")


def test_settings_reject_unknown_methods():
    with pytest.raises(ValueError):
        LedgerSettings.from_env({"RENT_LEDGER_LATE_FEE_METHOD": "compound"})
    with pytest.raises(ValueError):
        LedgerSettings(rent_method="weekly")


def test_format_currency():
    assert format_currency(Decimal("36000")) == "₱36,000"
    assert format_currency(Decimal("0"), "$") == "$0"
    assert format_currency(Decimal("2.5")) == "₱3"
    assert format_currency(Decimal("1234.5")) == "₱1,235"


def test_days_until_due_text():
    today = date(2024, 3, 11)
    assert days_until_due_text(date(2024, 3, 1), today) == "10 days overdue"
    assert days_until_due_text(today, today) == "Due today"
    assert days_until_due_text(date(2024, 3, 16), today) == "5 days left"


def test_contract_duration_text():
    assert contract_duration_text(date(2024, 1, 1), date(2024, 3, 16)) == "2 months, 15 days"
    assert contract_duration_text(date(2024, 1, 1), date(2024, 1, 31)) == "1 month"
    assert contract_duration_text(date(2024, 1, 1), date(2024, 2, 1)) == "1 month, 1 day"
    assert contract_duration_text(date(2024, 1, 1), date(2024, 1, 2)) == "1 day"


def test_print_balance_view(capsys):
    view = BalanceView(
        total_rent=Decimal("5000"),
        total_paid=Decimal("2000"),
        balance=Decimal("3000"),
        days_overdue=10,
        late_fee=Decimal("1000"),
        total_due=Decimal("4000"),
        status="partial",
        percentage_paid=40,
        expired=True,
    )
    print_balance_view(view)
    out = capsys.readouterr().out
    assert "₱4,000" in out
    assert "Late fee           : ₱1,000" in out
    assert "PARTIAL" in out
