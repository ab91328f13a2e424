from __future__ import annotations

import logging
import re

import pytest
from typer.testing import CliRunner

from main_cli import app

runner = CliRunner()

AS_OF = "2024-01-10"


@pytest.fixture(autouse=True)
def isolated_user_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("CASHFLOW_DB_URL", raising=False)
    root = logging.getLogger()
    previous = list(root.handlers)
    yield
    for handler in root.handlers:
        if handler not in previous:
            handler.close()
    root.handlers[:] = previous


@pytest.fixture
def db(tmp_path):
    return tmp_path / "cashflow.db"


def _invoke(db, *args):
    return runner.invoke(app, [*args, "--db", str(db)])


def _created_id(result) -> str:
    match = re.search(r"Created \w+: (\S+)", result.output)
    assert match, result.output
    return match.group(1)


def test_init_creates_database(db):
    result = _invoke(db, "init")

    assert result.exit_code == 0, result.output
    assert "Initialized cashflow database" in result.output
    assert db.exists()


def test_project_prints_running_balance(db):
    account_id = _created_id(_invoke(db, "account", "add", "--name", "Checking", "--balance", "3420.50"))
    _invoke(
        db,
        "commitment", "add",
        "--name", "Rent",
        "--amount", "1850",
        "--due", "2024-01-15",
        "--account", account_id,
    )

    result = _invoke(db, "project", "--days", "7", "--as-of", AS_OF)

    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert len(lines) == 8
    assert lines[0].startswith("2024-01-10") and "3420.50" in lines[0]
    assert lines[5].startswith("2024-01-15") and "1570.50" in lines[5] and "Rent" in lines[5]
    assert "1570.50" in lines[7]


def test_alerts_report_overdue_critical_bill(db):
    _invoke(db, "account", "add", "--name", "Checking", "--balance", "3420.50")
    _invoke(
        db,
        "commitment", "add",
        "--name", "Water",
        "--amount", "350",
        "--due", "2024-01-07",
        "--priority", "critical",
    )

    result = _invoke(db, "alerts", "--as-of", AS_OF)

    assert result.exit_code == 0, result.output
    assert "[critical] Overdue critical bill: Water (350.00 remaining)" in result.output


def test_pay_then_list_envelopes(db):
    account_id = _created_id(_invoke(db, "account", "add", "--name", "Checking", "--balance", "500"))
    commitment_id = _created_id(
        _invoke(
            db,
            "commitment", "add",
            "--name", "Groceries",
            "--amount", "100",
            "--due", "2024-01-01",
            "--recurrence", "weekly",
            "--account", account_id,
        )
    )

    paid = _invoke(db, "pay", "--commitment", commitment_id, "--amount", "40")
    assert paid.exit_code == 0, paid.output

    listed = _invoke(db, "instances", "--as-of", AS_OF)
    assert listed.exit_code == 0, listed.output
    assert "2024-01-01 Groceries: 40.00/100.00 remaining 60.00 [open]" in listed.output

    rolled = _invoke(db, "rollover", "--commitment", commitment_id)
    assert rolled.exit_code == 0, rolled.output
    assert "Rolled over 60.00 to 2024-01-08" in rolled.output

    accounts = _invoke(db, "account", "list")
    assert "Spendable: 460.00" in accounts.output


def test_domain_errors_exit_with_code(db):
    _invoke(db, "account", "add", "--name", "Checking")
    commitment_id = _created_id(
        _invoke(db, "commitment", "add", "--name", "Gym", "--amount", "30", "--due", "2024-01-12")
    )

    result = _invoke(db, "pay", "--commitment", commitment_id, "--amount", "30")

    assert result.exit_code == 1
    assert "ACCOUNT_REQUIRED" in result.output


def test_unknown_commitment_is_reported(db):
    result = _invoke(db, "rollover", "--commitment", "missing")

    assert result.exit_code == 1
    assert "COMMITMENT_NOT_FOUND" in result.output


def test_ledger_post_edit_delete_round_trip(db):
    account_id = _created_id(_invoke(db, "account", "add", "--name", "Checking", "--balance", "500"))
    commitment_id = _created_id(
        _invoke(
            db,
            "commitment", "add",
            "--name", "Groceries",
            "--amount", "100",
            "--due", "2024-01-01",
            "--recurrence", "weekly",
            "--account", account_id,
        )
    )

    posted = _invoke(
        db,
        "ledger", "post",
        "--description", "Groceries week 1",
        "--amount", "100",
        "--account", account_id,
        "--alloc", f"{commitment_id}:2024-01-01:100",
        "--item", "Food:100",
        "--date", "2024-01-01",
    )
    assert posted.exit_code == 0, posted.output
    entry_id = _created_id(posted)
    assert "due 2024-01-08" in _invoke(db, "commitment", "list").output

    listed = _invoke(db, "ledger", "list")
    assert f"{entry_id}: 2024-01-01 expense 100.00 Groceries week 1" in listed.output
    assert f"-> {commitment_id} 100.00" in listed.output

    moved = _invoke(db, "ledger", "edit", "--id", entry_id, "--alloc", f"{commitment_id}:2024-01-08:100")
    assert moved.exit_code == 0, moved.output
    assert f"Updated entry: {entry_id} (1 allocation(s))" in moved.output
    assert "due 2024-01-01" in _invoke(db, "commitment", "list").output

    deleted = _invoke(db, "ledger", "delete", "--id", entry_id)
    assert deleted.exit_code == 0, deleted.output
    assert "Spendable: 500.00" in _invoke(db, "account", "list").output
    assert "No entries" in _invoke(db, "ledger", "list").output


def test_ledger_post_rejects_over_allocation(db):
    account_id = _created_id(_invoke(db, "account", "add", "--name", "Checking", "--balance", "500"))
    commitment_id = _created_id(
        _invoke(db, "commitment", "add", "--name", "Gym", "--amount", "30", "--due", "2024-01-12")
    )

    result = _invoke(
        db,
        "ledger", "post",
        "--description", "Gym",
        "--amount", "20",
        "--account", account_id,
        "--alloc", f"{commitment_id}:2024-01-12:30",
    )

    assert result.exit_code == 1
    assert "Error [" in result.output
    assert "No entries" in _invoke(db, "ledger", "list").output


def test_ledger_post_rejects_malformed_allocation(db):
    account_id = _created_id(_invoke(db, "account", "add", "--name", "Checking"))

    result = _invoke(
        db,
        "ledger", "post",
        "--description", "Gym",
        "--amount", "20",
        "--account", account_id,
        "--alloc", "not-an-allocation",
    )

    assert result.exit_code == 2
