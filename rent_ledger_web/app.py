import os
import re

import click
from flask import Flask, render_template, request

from rent_ledger.config import LedgerSettings
from rent_ledger.dates import add_contract_period, days_until_due, default_end_date, today_from
from rent_ledger.formatter import contract_duration_text, days_until_due_text, format_currency
from rent_ledger.ledger import summarize
from rent_ledger.main import build_contract_from_options, parse_date_option, parse_payment_strings

app = Flask(__name__)
app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
settings = LedgerSettings.from_env()

_ENTRY_SEPARATOR = re.compile(r"\r?\n|,(?=\s*\d{4}-\d{2}-\d{2}:)")


def parse_form_list(value: str) -> list[str]:
    """Parse payment entries from a form field.

    Entries are separated by newlines, or by a comma that is followed by a
    new ``YYYY-MM-DD:`` entry, so thousands separators inside an amount
    ("2024-02-05:2,000") stay intact. Returns a list of trimmed strings,
    skipping any empty entries.
    """
    if not value:
        return []
    parts = [p.strip() for p in _ENTRY_SEPARATOR.split(value)]
    return [p for p in parts if p]


def _form_to_contract(form):
    return build_contract_from_options(
        form.get("start_date", "").strip(),
        form.get("end_date", "").strip() or None,
        form.get("monthly_rate", "").strip(),
        form.get("daily_rate", "").strip() or None,
        form.get("contract_type", "monthly"),
        form.get("total_rent", "").strip() or None,
    )


def _run_summary(form):
    contract = _form_to_contract(form)
    today_value = form.get("today", "").strip()
    as_of = parse_date_option(today_value) if today_value else today_from()
    payments = parse_payment_strings(tuple(parse_form_list(form.get("payments", ""))), contract.start_date)
    view = summarize(contract, payments, as_of, settings.rent_method, settings.late_fee_method)
    details = {
        "end_date": contract.end_date.isoformat(),
        "due_text": days_until_due_text(contract.end_date, as_of),
        "is_overdue": days_until_due(contract.end_date, as_of) < 0,
        "duration": contract_duration_text(contract.start_date, contract.end_date),
        "daily_rate": format_currency(contract.effective_daily_rate, settings.currency),
    }
    return view, details


@app.template_filter("money")
def money_filter(value):
    return format_currency(value, settings.currency)


@app.route("/", methods=["GET", "POST"])
def index():
    view = None
    details = None
    error = None
    form = request.form if request.method == "POST" else {}

    if request.method == "POST":
        try:
            view, details = _run_summary(request.form)
        except (ValueError, click.ClickException) as exc:
            error = str(exc)

    return render_template(
        "index.html",
        view=view,
        details=details,
        error=error,
        form=form,
        asset_version=app.config["ASSET_VERSION"],
    )


@app.get("/end-date")
def end_date():
    """Default end date for the new tenant form, as plain text."""
    start = request.args.get("start_date", "").strip()
    contract_type = request.args.get("contract_type", "monthly")
    if not start:
        return default_end_date(today_from()).isoformat()
    try:
        end = add_contract_period(parse_date_option(start), contract_type)
    except (ValueError, click.ClickException):
        return "", 400
    return end.isoformat() if end else ""


if __name__ == "__main__":
    print("Starting Rent Ledger web app...")
    app.run(debug=True)
