"""Data models for the rent ledger.

This module defines dataclasses for the values the calculator reads and
produces: a contract snapshot, individual payment records, the derived
balance view and rows of the due list. The calculator never stores these;
callers build them fresh from whatever rows they fetched and pass them in.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Optional

from .utils import round_money, to_decimal

MONTHLY = "monthly"
YEARLY = "yearly"
CUSTOM = "custom"
CONTRACT_TYPES = (MONTHLY, YEARLY, CUSTOM)

PAID = "paid"
PARTIAL = "partial"
UNPAID = "unpaid"
PAYMENT_STATUSES = (PAID, PARTIAL, UNPAID)

ACTIVE = "active"
COMPLETED = "completed"
EVICTED = "evicted"
TERMINATED = "terminated"
CONTRACT_STATUSES = (ACTIVE, COMPLETED, EVICTED, TERMINATED)

PER_DIEM = "per_diem"
FLAT = "flat"
LATE_FEE_METHODS = (PER_DIEM, FLAT)

SPAN = "span"
CALENDAR = "calendar"
RENT_METHODS = (SPAN, CALENDAR)


@dataclass(frozen=True)
class ContractSnapshot:
    """A tenancy agreement as seen by the calculator.

    Attributes
    ----------
    start_date: date
        First day of the tenancy.
    end_date: date
        Day the contract is due. Must not be before ``start_date``.
    monthly_rate: Decimal
        Rent charged per full month.
    daily_rate: Optional[Decimal]
        Rent charged per leftover day. When omitted the effective daily rate
        is ``round(monthly_rate / 30)``.
    contract_type: str
        ``"monthly"``, ``"yearly"`` or ``"custom"``.
    stored_total_rent: Optional[Decimal]
        Total recorded by a previous extension. When present it replaces the
        computed total outright.
    """

    start_date: date
    end_date: date
    monthly_rate: Decimal
    daily_rate: Optional[Decimal] = None
    contract_type: str = MONTHLY
    stored_total_rent: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise ValueError(
                f"Contract end date {self.end_date} is before start date {self.start_date}"
            )
        if self.contract_type not in CONTRACT_TYPES:
            raise ValueError(f"Unknown contract type: {self.contract_type}")
        # frozen dataclass: normalise numeric inputs through object.__setattr__
        object.__setattr__(self, "monthly_rate", to_decimal(self.monthly_rate))
        if self.daily_rate is not None:
            object.__setattr__(self, "daily_rate", to_decimal(self.daily_rate))
        if self.stored_total_rent is not None:
            object.__setattr__(self, "stored_total_rent", to_decimal(self.stored_total_rent))

    @property
    def effective_daily_rate(self) -> Decimal:
        if self.daily_rate is not None:
            return self.daily_rate
        return round_money(self.monthly_rate / Decimal(30))

    def with_changes(self, **changes) -> "ContractSnapshot":
        return replace(self, **changes)


@dataclass(frozen=True)
class Payment:
    """A single payment made against a contract."""

    amount: Decimal
    date: date

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))


@dataclass(frozen=True)
class BalanceView:
    """Derived figures for one contract at one evaluation date.

    ``total_due`` is always ``balance + late_fee``. ``percentage_paid`` is not
    clamped, so overpayment shows up as a value above 100.
    """

    total_rent: Decimal
    total_paid: Decimal
    balance: Decimal
    days_overdue: int
    late_fee: Decimal
    total_due: Decimal
    status: str
    percentage_paid: int = 0
    expired: bool = False

    def as_dict(self) -> dict:
        return {
            "total_rent": float(self.total_rent),
            "total_paid": float(self.total_paid),
            "balance": float(self.balance),
            "days_overdue": self.days_overdue,
            "late_fee": float(self.late_fee),
            "total_due": float(self.total_due),
            "status": self.status,
            "percentage_paid": self.percentage_paid,
            "expired": self.expired,
        }


@dataclass(frozen=True)
class DueEntry:
    """A row of the due list: a contract with an outstanding balance."""

    contract: ContractSnapshot
    view: BalanceView
    days_until_due: int
    label: str = ""
    is_overdue: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "is_overdue", self.days_until_due < 0)
