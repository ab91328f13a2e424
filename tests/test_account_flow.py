from __future__ import annotations

from datetime import date

import pytest

from core.exceptions import NotFoundError, ValidationError


def test_spendable_balance_excludes_reserve_accounts(services, checking):
    acc = services["account_service"]
    acc.create_account("Wallet", "cash", 80.0)
    acc.create_account("Emergency fund", "savings", 10000.0, is_reserve=True)

    assert acc.spendable_balance() == pytest.approx(3500.50)
    assert [a.name for a in acc.list_accounts()] == ["Checking", "Emergency fund", "Wallet"]


def test_reconcile_overwrites_balance_and_records_difference(services, checking):
    acc = services["account_service"]

    reconciled = acc.reconcile(checking.id, 3400.0)

    assert reconciled.current_balance == pytest.approx(3400.0)
    entries = services["audit_service"].list_recent(entity_type="account")
    assert entries[0].action == "account.reconcile"
    assert entries[0].details["difference"] == pytest.approx(-20.50)


def test_delete_account_detaches_commitments_and_entries(services, checking):
    acc = services["account_service"]
    rent = services["commitment_service"].create_commitment(
        name="Rent",
        direction="bill",
        amount=1850.0,
        due_date=date(2024, 2, 1),
        recurrence_rule="monthly",
        account_id=checking.id,
    )
    entry = services["ledger_service"].post_entry("Coffee", 4.5, "expense", checking.id)

    acc.delete_account(checking.id)

    assert acc.get_account(checking.id) is None
    assert services["commitment_service"].get_commitment(rent.id).account_id is None
    assert services["ledger_service"].get_entry(entry.id).account_id is None


def test_account_validation(services):
    acc = services["account_service"]

    with pytest.raises(ValidationError) as exc:
        acc.create_account("  ")
    assert exc.value.code == "ACCOUNT_NAME_EMPTY"

    with pytest.raises(ValidationError) as exc:
        acc.create_account("Broker", "stocks")
    assert exc.value.code == "INVALID_ACCOUNT_TYPE"

    with pytest.raises(NotFoundError):
        acc.reconcile("missing", 10.0)


def test_update_account_can_mark_reserve(services, checking):
    acc = services["account_service"]

    updated = acc.update_account(checking.id, name="Main checking", is_reserve=True)

    assert updated.name == "Main checking"
    assert acc.spendable_balance() == pytest.approx(0.0)
