from datetime import date
from decimal import Decimal

import pytest

from rent_ledger.dates import (
    add_contract_period,
    days_between,
    days_overdue,
    days_until_due,
    default_end_date,
    is_expired,
    today_from,
)
from rent_ledger.utils import add_months, add_years, decimal_from_str, parse_iso_date, round_money


def test_monthly_period_keeps_day_of_month():
    assert add_contract_period(date(2024, 1, 15), "monthly") == date(2024, 2, 15)


def test_monthly_period_rolls_into_next_year():
    assert add_contract_period(date(2024, 12, 15), "monthly") == date(2025, 1, 15)


def test_month_end_overflows_instead_of_clamping():
    assert add_contract_period(date(2023, 1, 31), "monthly") == date(2023, 3, 3)
    assert add_contract_period(date(2024, 1, 31), "monthly") == date(2024, 3, 2)


def test_yearly_period():
    assert add_contract_period(date(2024, 3, 10), "yearly") == date(2025, 3, 10)
    assert add_contract_period(date(2024, 2, 29), "yearly") == date(2025, 3, 1)


def test_custom_period_has_no_default_end():
    assert add_contract_period(date(2024, 3, 10), "custom") is None


def test_unknown_contract_type_rejected():
    with pytest.raises(ValueError):
        add_contract_period(date(2024, 3, 10), "weekly")


def test_expiry_is_strict():
    assert not is_expired(date(2024, 3, 1), date(2024, 3, 1))
    assert is_expired(date(2024, 2, 29), date(2024, 3, 1))
    assert not is_expired(date(2024, 3, 2), date(2024, 3, 1))


def test_days_until_due_and_overdue():
    assert days_until_due(date(2024, 3, 10), date(2024, 3, 1)) == 9
    assert days_until_due(date(2024, 3, 1), date(2024, 3, 1)) == 0
    assert days_until_due(date(2024, 3, 1), date(2024, 3, 11)) == -10
    assert days_overdue(date(2024, 3, 1), date(2024, 3, 11)) == 10
    assert days_overdue(date(2024, 3, 10), date(2024, 3, 1)) == 0


def test_days_between():
    assert days_between(date(2024, 1, 1), date(2024, 3, 1)) == 60


def test_default_end_date_is_one_month_out():
    assert default_end_date(date(2024, 4, 10)) == date(2024, 5, 10)
    assert default_end_date(date(2024, 5, 31)) == date(2024, 7, 1)


def test_today_from_parses_explicit_value():
    assert today_from("2024-05-01") == date(2024, 5, 1)


def test_add_months_and_years_cross_boundaries():
    assert add_months(date(2024, 11, 30), 3) == date(2025, 3, 2)
    assert add_months(date(2024, 3, 15), -3) == date(2023, 12, 15)
    assert add_years(date(2023, 6, 1), 2) == date(2025, 6, 1)


def test_parse_iso_date_truncates_time():
    assert parse_iso_date("2024-05-01T10:30:00Z") == date(2024, 5, 1)
    assert parse_iso_date("2024-05-01 23:59:59") == date(2024, 5, 1)
    with pytest.raises(ValueError):
        parse_iso_date("2024-13-01")
    with pytest.raises(ValueError):
        parse_iso_date("next week")


def test_money_helpers():
    assert decimal_from_str("36,000") == Decimal("36000")
    assert round_money(Decimal("2.5")) == Decimal("3")
    assert round_money(Decimal("166.666")) == Decimal("167")
    with pytest.raises(ValueError):
        decimal_from_str("abc")
