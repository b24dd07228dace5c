"""Command-line interface for the rent ledger.

This module uses the ``click`` library to implement a multi-command
interface. Users can summarise a contract's balance, look up default end
dates, price an extension, classify a payment and list the contracts that
still owe rent. Formula choices default to the environment settings
(see ``rent_ledger.config``) and can be overridden per command.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import click

from .config import LedgerSettings
from .data_models import CONTRACT_TYPES, CUSTOM, LATE_FEE_METHODS, RENT_METHODS, ContractSnapshot, Payment
from .dates import add_contract_period, today_from
from .formatter import format_currency, print_balance_view, print_due_list
from .ledger import due_entries, extend_contract, summarize
from .rent import contract_total_rent
from .status import payment_percentage, payment_status
from .utils import decimal_from_str, parse_iso_date


def parse_date_option(value: str) -> date:
    try:
        return parse_iso_date(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def parse_amount(value: str) -> Decimal:
    try:
        return decimal_from_str(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def parse_payment_strings(values: Tuple[str, ...], default_date: date) -> List[Payment]:
    """Parse ``AMOUNT`` or ``YYYY-MM-DD:AMOUNT`` payment entries."""
    payments: List[Payment] = []
    for item in values:
        if ":" in item:
            day, amount = item.split(":", 1)
            payments.append(Payment(amount=parse_amount(amount), date=parse_date_option(day)))
        else:
            payments.append(Payment(amount=parse_amount(item), date=default_date))
    return payments


def build_contract_from_options(
    start_date: str,
    end_date: Optional[str],
    monthly_rate: str,
    daily_rate: Optional[str] = None,
    contract_type: str = "monthly",
    stored_total: Optional[str] = None,
) -> ContractSnapshot:
    start = parse_date_option(start_date)
    contract_type = contract_type.lower()
    if contract_type not in CONTRACT_TYPES:
        raise click.BadParameter(f"Unknown contract type: {contract_type}")
    if end_date:
        end = parse_date_option(end_date)
    elif contract_type == CUSTOM:
        raise click.BadParameter("Custom contracts need an explicit end date")
    else:
        end = add_contract_period(start, contract_type)
    try:
        return ContractSnapshot(
            start_date=start,
            end_date=end,
            monthly_rate=parse_amount(monthly_rate),
            daily_rate=parse_amount(daily_rate) if daily_rate else None,
            contract_type=contract_type,
            stored_total_rent=parse_amount(stored_total) if stored_total else None,
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def contract_from_mapping(data: Mapping[str, Any]) -> Tuple[ContractSnapshot, List[Payment]]:
    """Build a contract and its payments from a JSON-style row.

    Expected keys are ``start_date``, ``end_date``, ``monthly_rate`` and
    optionally ``daily_rate``, ``contract_type``, ``total_rent`` and
    ``payments`` (a list of ``{"amount": ..., "date": ...}``).
    """
    contract = build_contract_from_options(
        str(data["start_date"]),
        str(data["end_date"]) if data.get("end_date") else None,
        str(data["monthly_rate"]),
        str(data["daily_rate"]) if data.get("daily_rate") is not None else None,
        str(data.get("contract_type") or "monthly"),
        str(data["total_rent"]) if data.get("total_rent") is not None else None,
    )
    payments = [
        Payment(
            amount=parse_amount(str(p["amount"])),
            date=parse_date_option(str(p.get("date") or data["start_date"])),
        )
        for p in data.get("payments", [])
    ]
    return contract, payments


def _settings(ctx: click.Context, rent_method: Optional[str], late_fee_method: Optional[str]) -> LedgerSettings:
    base: LedgerSettings = ctx.obj
    return LedgerSettings(
        rent_method=rent_method or base.rent_method,
        late_fee_method=late_fee_method or base.late_fee_method,
        currency=base.currency,
    )


def _write_json(path: Path, data: Dict[str, Any]) -> None:
    if path.suffix.lower() != ".json":
        raise click.BadParameter("Export must use .json extension")
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    click.echo(f"Exported to {path}")


def contract_options(func):
    """Options shared by every command that describes one contract."""
    options = [
        click.option("--start-date", "-s", "start_date", required=True, help="Contract start (YYYY-MM-DD)"),
        click.option("--end-date", "-e", "end_date", help="Contract end (YYYY-MM-DD); defaults from --type"),
        click.option("--monthly-rate", "-m", "monthly_rate", required=True, help="Rent per month"),
        click.option("--daily-rate", "daily_rate", help="Rent per day (default: monthly / 30)"),
        click.option("--type", "contract_type", type=click.Choice(CONTRACT_TYPES), default="monthly", help="Contract type"),
        click.option("--total-rent", "stored_total", help="Stored total rent from a previous extension"),
        click.option("--rent-method", "rent_method", type=click.Choice(RENT_METHODS), help="Total rent formula"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log ledger actions to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Rent and payment ledger calculator."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    try:
        ctx.obj = LedgerSettings.from_env()
    except ValueError as exc:
        raise click.ClickException(str(exc))


@cli.command()
@contract_options
@click.option("--paid", "paid", multiple=True, help="Payment as AMOUNT or YYYY-MM-DD:AMOUNT")
@click.option("--late-fee-method", "late_fee_method", type=click.Choice(LATE_FEE_METHODS), help="Late fee formula")
@click.option("--today", "today", help="Evaluation date (YYYY-MM-DD); defaults to the current date")
@click.option("--output", "output", type=str, help="Output file path (.json)")
@click.pass_context
def summary(
    ctx: click.Context,
    start_date: str,
    end_date: Optional[str],
    monthly_rate: str,
    daily_rate: Optional[str],
    contract_type: str,
    stored_total: Optional[str],
    rent_method: Optional[str],
    paid: Tuple[str, ...],
    late_fee_method: Optional[str],
    today: Optional[str],
    output: Optional[str],
) -> None:
    """Compute and print the balance view of a contract."""
    settings = _settings(ctx, rent_method, late_fee_method)
    contract = build_contract_from_options(start_date, end_date, monthly_rate, daily_rate, contract_type, stored_total)
    as_of = parse_date_option(today) if today else today_from()
    payments = parse_payment_strings(paid, contract.start_date)
    view = summarize(contract, payments, as_of, settings.rent_method, settings.late_fee_method)
    if output:
        _write_json(Path(output), {"today": as_of.isoformat(), "summary": view.as_dict()})
    else:
        print_balance_view(view, settings.currency)


@cli.command("end-date")
@click.option("--start-date", "-s", "start_date", required=True, help="Contract start (YYYY-MM-DD)")
@click.option("--type", "contract_type", type=click.Choice(CONTRACT_TYPES), default="monthly", help="Contract type")
def end_date_command(start_date: str, contract_type: str) -> None:
    """Print the default end date for a contract type."""
    end = add_contract_period(parse_date_option(start_date), contract_type)
    if end is None:
        raise click.ClickException("Custom contracts have no default end date")
    click.echo(end.isoformat())


@cli.command()
@contract_options
@click.option("--new-end-date", "new_end_date", required=True, help="Renewed end date (YYYY-MM-DD)")
@click.option("--new-type", "new_type", type=click.Choice(CONTRACT_TYPES), help="Contract type after renewal")
@click.pass_context
def extend(
    ctx: click.Context,
    start_date: str,
    end_date: Optional[str],
    monthly_rate: str,
    daily_rate: Optional[str],
    contract_type: str,
    stored_total: Optional[str],
    rent_method: Optional[str],
    new_end_date: str,
    new_type: Optional[str],
) -> None:
    """Price a contract extension and print the new stored total."""
    settings = _settings(ctx, rent_method, None)
    contract = build_contract_from_options(start_date, end_date, monthly_rate, daily_rate, contract_type, stored_total)
    try:
        renewed = extend_contract(contract, parse_date_option(new_end_date), new_type, settings.rent_method)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    before = contract_total_rent(contract, settings.rent_method)
    click.echo(f"Previous total     : {format_currency(before, settings.currency)}")
    click.echo(f"Additional rent    : {format_currency(renewed.stored_total_rent - before, settings.currency)}")
    click.echo(f"New total          : {format_currency(renewed.stored_total_rent, settings.currency)}")
    click.echo(f"New end date       : {renewed.end_date.isoformat()}")


@cli.command()
@click.option("--paid", "paid", required=True, help="Amount paid")
@click.option("--total", "total", required=True, help="Total amount owed")
def status(paid: str, total: str) -> None:
    """Classify a payment as paid, partial or unpaid."""
    amount_paid = parse_amount(paid)
    total_amount = parse_amount(total)
    click.echo(f"{payment_status(amount_paid, total_amount)} ({payment_percentage(amount_paid, total_amount)}%)")


@cli.command()
@click.argument("contracts_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--late-fee-method", "late_fee_method", type=click.Choice(LATE_FEE_METHODS), help="Late fee formula")
@click.option("--rent-method", "rent_method", type=click.Choice(RENT_METHODS), help="Total rent formula")
@click.option("--today", "today", help="Evaluation date (YYYY-MM-DD); defaults to the current date")
@click.pass_context
def due(
    ctx: click.Context,
    contracts_file: Path,
    late_fee_method: Optional[str],
    rent_method: Optional[str],
    today: Optional[str],
) -> None:
    """List contracts from a JSON file that still owe rent.

    The file holds a list of contract rows, for example:

        [{"label": "Room 101", "start_date": "2024-01-01", "end_date": "2024-02-01",
          "monthly_rate": 5000, "payments": [{"amount": 2000, "date": "2024-01-05"}]}]
    """
    settings = _settings(ctx, rent_method, late_fee_method)
    as_of = parse_date_option(today) if today else today_from()
    with contracts_file.open("r", encoding="utf-8") as f:
        try:
            rows = json.load(f)
        except ValueError as exc:
            raise click.ClickException(f"{contracts_file} is not valid JSON: {exc}")
    if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
        raise click.ClickException(f"{contracts_file} must hold a list of contract objects")
    accounts = []
    for index, row in enumerate(rows, start=1):
        try:
            contract, payments = contract_from_mapping(row)
        except KeyError as exc:
            raise click.ClickException(f"Contract #{index} is missing {exc}")
        except TypeError as exc:
            raise click.ClickException(f"Contract #{index} is malformed: {exc}")
        accounts.append((str(row.get("label") or f"#{index}"), contract, payments))
    entries = due_entries(accounts, as_of, settings.rent_method, settings.late_fee_method)
    if not entries:
        click.echo("No outstanding dues")
        return
    print_due_list(entries, as_of, settings.currency)
    overdue = sum(1 for e in entries if e.is_overdue)
    total = sum((e.view.total_due for e in entries), Decimal(0))
    click.echo(f"{len(entries)} contracts, {overdue} overdue, total due {format_currency(total, settings.currency)}")


if __name__ == "__main__":
    cli()
