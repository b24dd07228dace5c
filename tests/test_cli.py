import json

import pytest
from click.testing import CliRunner

from rent_ledger.main import cli

OVERDUE_CONTRACT = [
    "--start-date", "2024-02-01",
    "--end-date", "2024-03-01",
    "--monthly-rate", "5000",
    "--daily-rate", "100",
    "--paid", "2024-02-05:2000",
    "--today", "2024-03-11",
]


@pytest.fixture
def runner(monkeypatch):
    for name in ("RENT_LEDGER_RENT_METHOD", "RENT_LEDGER_LATE_FEE_METHOD", "RENT_LEDGER_CURRENCY"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


def test_summary_prints_balance_view(runner):
    result = runner.invoke(cli, ["summary", *OVERDUE_CONTRACT])
    assert result.exit_code == 0, result.output
    assert "Total due          : ₱4,000" in result.output
    assert "PARTIAL" in result.output


def test_summary_flat_late_fee(runner):
    result = runner.invoke(cli, ["summary", *OVERDUE_CONTRACT, "--late-fee-method", "flat"])
    assert result.exit_code == 0, result.output
    assert "Total due          : ₱3,300" in result.output


def test_summary_reads_late_fee_method_from_environment(runner):
    result = runner.invoke(cli, ["summary", *OVERDUE_CONTRACT], env={"RENT_LEDGER_LATE_FEE_METHOD": "flat"})
    assert result.exit_code == 0, result.output
    assert "₱3,300" in result.output


def test_summary_exports_json(runner, tmp_path):
    path = tmp_path / "summary.json"
    result = runner.invoke(cli, ["summary", *OVERDUE_CONTRACT, "--output", str(path)])
    assert result.exit_code == 0, result.output
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["today"] == "2024-03-11"
    assert data["summary"]["total_due"] == 4000.0
    assert data["summary"]["late_fee"] == 1000.0


def test_summary_custom_contract_requires_end_date(runner):
    result = runner.invoke(cli, ["summary", "-s", "2024-02-01", "-m", "5000", "--type", "custom", "--today", "2024-02-02"])
    assert result.exit_code != 0
    assert "explicit end date" in result.output


def test_summary_rejects_bad_date(runner):
    result = runner.invoke(cli, ["summary", "-s", "2024-02-30", "-m", "5000"])
    assert result.exit_code != 0
    assert "Invalid date string" in result.output


def test_end_date(runner):
    result = runner.invoke(cli, ["end-date", "-s", "2024-01-15"])
    assert result.output.strip() == "2024-02-15"
    result = runner.invoke(cli, ["end-date", "-s", "2024-01-31", "--type", "yearly"])
    assert result.output.strip() == "2025-01-31"
    result = runner.invoke(cli, ["end-date", "-s", "2024-01-31", "--type", "custom"])
    assert result.exit_code != 0


def test_extend(runner):
    result = runner.invoke(cli, ["extend", "-s", "2024-01-15", "-m", "5000", "--new-end-date", "2024-03-15"])
    assert result.exit_code == 0, result.output
    assert "Additional rent    : ₱5,000" in result.output
    assert "New total          : ₱10,000" in result.output
    assert "New end date       : 2024-03-15" in result.output


def test_extend_rejects_earlier_end(runner):
    result = runner.invoke(cli, ["extend", "-s", "2024-01-15", "-m", "5000", "--new-end-date", "2024-02-01"])
    assert result.exit_code != 0


def test_status(runner):
    result = runner.invoke(cli, ["status", "--paid", "6000", "--total", "5000"])
    assert result.output.strip() == "paid (120%)"
    result = runner.invoke(cli, ["status", "--paid", "0", "--total", "5000"])
    assert result.output.strip() == "unpaid (0%)"


def test_due_lists_contracts_with_balance(runner, tmp_path):
    rows = [
        {"label": "Room 101", "start_date": "2024-02-01", "end_date": "2024-03-01",
         "monthly_rate": 3000, "payments": [{"amount": 3000, "date": "2024-02-01"}]},
        {"label": "Room 102", "start_date": "2024-02-01", "end_date": "2024-03-01",
         "monthly_rate": 5000, "daily_rate": 100, "payments": [{"amount": 2000, "date": "2024-02-05"}]},
        {"label": "Room 103", "start_date": "2024-03-01", "end_date": "2024-04-01", "monthly_rate": 4000},
    ]
    path = tmp_path / "contracts.json"
    path.write_text(json.dumps(rows), encoding="utf-8")
    result = runner.invoke(cli, ["due", str(path), "--today", "2024-03-11"])
    assert result.exit_code == 0, result.output
    assert "Room 101" not in result.output
    assert result.output.index("Room 102") < result.output.index("Room 103")
    assert "10 days overdue" in result.output
    assert "2 contracts, 1 overdue, total due ₱8,000" in result.output


def test_due_with_nothing_owed(runner, tmp_path):
    path = tmp_path / "contracts.json"
    path.write_text("[]", encoding="utf-8")
    result = runner.invoke(cli, ["due", str(path), "--today", "2024-03-11"])
    assert result.exit_code == 0
    assert "No outstanding dues" in result.output


def test_due_reports_missing_fields(runner, tmp_path):
    path = tmp_path / "contracts.json"
    path.write_text(json.dumps([{"start_date": "2024-03-01"}]), encoding="utf-8")
    result = runner.invoke(cli, ["due", str(path), "--today", "2024-03-11"])
    assert result.exit_code != 0
    assert "missing" in result.output


def test_due_reports_malformed_json(runner, tmp_path):
    path = tmp_path / "contracts.json"
    path.write_text("[{", encoding="utf-8")
    result = runner.invoke(cli, ["due", str(path), "--today", "2024-03-11"])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "is not valid JSON" in result.output


@pytest.mark.parametrize("payload", ['{"label": "Room 101"}', '["Room 101"]', '[{"start_date": "2024-03-01", "monthly_rate": 3000, "payments": [5]}]'])
def test_due_rejects_rows_that_are_not_contracts(runner, tmp_path, payload):
    path = tmp_path / "contracts.json"
    path.write_text(payload, encoding="utf-8")
    result = runner.invoke(cli, ["due", str(path), "--today", "2024-03-11"])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Error:" in result.output
