"""Ledger pipeline and contract actions.

``summarize`` chains the calculators: total rent for the contract, payments
to date, balance, late fee and status. The remaining functions are the
checks a caller runs before it persists an action (recording a payment,
settling in full, extending or closing a contract). None of them write
anywhere; they return new values for the caller to store.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from .balance import balance, late_fee, total_due, total_paid
from .data_models import (
    ACTIVE,
    COMPLETED,
    CONTRACT_STATUSES,
    EVICTED,
    PER_DIEM,
    SPAN,
    TERMINATED,
    BalanceView,
    ContractSnapshot,
    DueEntry,
    Payment,
)
from .dates import days_overdue, days_until_due, is_expired
from .rent import additional_rent_for_extension, contract_total_rent
from .status import payment_percentage, payment_status
from .utils import Number, to_decimal

logger = logging.getLogger(__name__)


class PaymentRejected(ValueError):
    """Raised when a payment amount cannot be applied to a contract."""


class ContractStateError(ValueError):
    """Raised when a contract cannot move to the requested status."""


def summarize(
    contract: ContractSnapshot,
    payments: Iterable[Payment],
    today: date,
    rent_method: str = SPAN,
    late_fee_method: str = PER_DIEM,
) -> BalanceView:
    """Derive the balance view of ``contract`` as of ``today``."""
    rent = contract_total_rent(contract, rent_method)
    paid = total_paid(payments)
    fee = late_fee(
        contract.end_date,
        today,
        rent,
        paid,
        contract.effective_daily_rate,
        method=late_fee_method,
    )
    return BalanceView(
        total_rent=rent,
        total_paid=paid,
        balance=balance(rent, paid),
        days_overdue=days_overdue(contract.end_date, today),
        late_fee=fee,
        total_due=total_due(rent, paid, fee),
        status=payment_status(paid, rent),
        percentage_paid=payment_percentage(paid, rent),
        expired=is_expired(contract.end_date, today),
    )


def settle_amount(
    contract: ContractSnapshot,
    payments: Iterable[Payment],
    today: date,
    rent_method: str = SPAN,
    late_fee_method: str = PER_DIEM,
) -> Decimal:
    """Amount to record when a contract is marked fully paid on ``today``.

    This is the balance plus the late fee accrued at that moment.
    """
    return summarize(contract, payments, today, rent_method, late_fee_method).total_due


def record_payment(
    contract: ContractSnapshot,
    payments: Sequence[Payment],
    amount: Number,
    paid_on: date,
    today: Optional[date] = None,
    rent_method: str = SPAN,
    late_fee_method: str = PER_DIEM,
) -> Tuple[Payment, ...]:
    """Return ``payments`` with a new payment of ``amount`` appended.

    The amount must be positive and must not exceed the current balance.
    """
    value = to_decimal(amount)
    if value <= 0:
        raise PaymentRejected("Amount must be greater than 0")
    view = summarize(contract, payments, today or paid_on, rent_method, late_fee_method)
    if value > view.balance:
        logger.warning(
            "payment_exceeds_balance",
            extra={"amount": str(value), "balance": str(view.balance)},
        )
        raise PaymentRejected(f"Payment cannot exceed balance of {view.balance}")
    logger.info(
        "payment_recorded",
        extra={"amount": str(value), "paid_on": paid_on.isoformat(), "balance": str(view.balance - value)},
    )
    return tuple(payments) + (Payment(amount=value, date=paid_on),)


def settle_contract(
    contract: ContractSnapshot,
    payments: Sequence[Payment],
    paid_on: date,
    rent_method: str = SPAN,
    late_fee_method: str = PER_DIEM,
) -> Tuple[Payment, ...]:
    """Return ``payments`` with a payment clearing everything owed on ``paid_on``.

    A contract with nothing due gets no extra payment.
    """
    amount = settle_amount(contract, payments, paid_on, rent_method, late_fee_method)
    if amount <= 0:
        return tuple(payments)
    logger.info(
        "contract_settled",
        extra={"amount": str(amount), "paid_on": paid_on.isoformat()},
    )
    return tuple(payments) + (Payment(amount=amount, date=paid_on),)


def extend_contract(
    contract: ContractSnapshot,
    new_end: date,
    contract_type: Optional[str] = None,
    rent_method: str = SPAN,
) -> ContractSnapshot:
    """Return ``contract`` renewed until ``new_end``.

    The rent for ``[end_date, new_end]`` is added to the contract's current
    total and stored on the new snapshot, so later summaries use it verbatim.
    """
    if new_end <= contract.end_date:
        raise ValueError(f"New end date {new_end} must be after {contract.end_date}")
    kind = contract_type or contract.contract_type
    prior = contract_total_rent(contract, rent_method)
    extra = additional_rent_for_extension(
        contract.end_date,
        new_end,
        contract.monthly_rate,
        contract.effective_daily_rate,
        kind,
        rent_method,
    )
    logger.info(
        "contract_extended",
        extra={
            "old_end": contract.end_date.isoformat(),
            "new_end": new_end.isoformat(),
            "additional_rent": str(extra),
        },
    )
    return contract.with_changes(
        end_date=new_end,
        contract_type=kind,
        stored_total_rent=prior + extra,
    )


def close_contract(current_status: str, new_status: str, outstanding: Number = 0) -> str:
    """Validate a move out of ``active`` and return the new status.

    ``completed`` is a voluntary move-out and is refused while rent is still
    owed. ``evicted`` keeps the outstanding balance on record as a debt.
    ``terminated`` ends the contract without conditions.
    """
    if current_status not in CONTRACT_STATUSES:
        raise ContractStateError(f"Unknown contract status: {current_status}")
    if new_status not in (COMPLETED, EVICTED, TERMINATED):
        raise ContractStateError(f"Cannot close a contract as {new_status}")
    if current_status != ACTIVE:
        raise ContractStateError(f"Contract is already {current_status}")
    owed = to_decimal(outstanding)
    if new_status == COMPLETED and owed > 0:
        raise ContractStateError(f"Tenant still has an unpaid balance of {owed}")
    logger.info(
        "contract_closed",
        extra={"status": new_status, "outstanding": str(owed)},
    )
    return new_status


def due_entries(
    accounts: Iterable[Tuple[str, ContractSnapshot, Iterable[Payment]]],
    today: date,
    rent_method: str = SPAN,
    late_fee_method: str = PER_DIEM,
) -> List[DueEntry]:
    """Contracts that still owe rent, soonest (or most overdue) first.

    ``accounts`` yields ``(label, contract, payments)`` triples; the label is
    carried through untouched for display.
    """
    entries: List[DueEntry] = []
    for label, contract, payments in accounts:
        view = summarize(contract, payments, today, rent_method, late_fee_method)
        if view.balance <= 0:
            continue
        entries.append(
            DueEntry(
                contract=contract,
                view=view,
                days_until_due=days_until_due(contract.end_date, today),
                label=label,
            )
        )
    entries.sort(key=lambda e: (e.days_until_due, e.label))
    return entries


def outstanding_total(views: Iterable[BalanceView]) -> Decimal:
    """Sum of balances, e.g. the debt left behind by evicted tenants."""
    return sum((v.balance for v in views), Decimal(0))
