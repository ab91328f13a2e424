from __future__ import annotations

from datetime import date

import pytest

from core.exceptions import NotFoundError, ValidationError
from core.models import AllocationRequest, InstanceStatus
from infra.db.repositories import SqlAlchemyAllocationRepository, SqlAlchemyInstanceRepository

TODAY = date(2024, 1, 10)
DUE = date(2024, 1, 20)


def _bill(services, account, *, name="Insurance", amount=100.0, due=DUE, recurrence=None):
    return services["commitment_service"].create_commitment(
        name=name,
        direction="bill",
        amount=amount,
        due_date=due,
        recurrence_rule=recurrence,
        account_id=account.id,
    )


def _post(services, account, amount, allocations=(), description="Payment"):
    return services["ledger_service"].post_entry(
        description,
        amount,
        "expense",
        account.id,
        allocations=allocations,
        entry_date=TODAY,
    )


def _balance(services, account):
    return services["account_service"].get_account(account.id).current_balance


def test_allocation_cannot_exceed_remaining_then_exact_remaining_funds(services, checking):
    bill = _bill(services, checking)
    _post(services, checking, 40.0, [AllocationRequest(bill.id, DUE, 40.0)])

    instance = services["instance_service"].get_instance(bill.id, DUE)
    assert instance.allocated_amount == pytest.approx(40.0)
    assert instance.status == InstanceStatus.OPEN

    with pytest.raises(ValidationError) as exc:
        _post(services, checking, 70.0, [AllocationRequest(bill.id, DUE, 70.0)])
    assert exc.value.code == "ALLOCATION_EXCEEDS_REMAINING"

    assert _balance(services, checking) == pytest.approx(3380.50)
    assert len(services["ledger_service"].list_entries()) == 1
    assert services["instance_service"].get_instance(bill.id, DUE).allocated_amount == pytest.approx(40.0)

    _post(services, checking, 60.0, [AllocationRequest(bill.id, DUE, 60.0)])

    instance = services["instance_service"].get_instance(bill.id, DUE)
    assert instance.allocated_amount == pytest.approx(100.0)
    assert instance.status == InstanceStatus.FUNDED
    assert services["commitment_service"].get_commitment(bill.id).paid is True
    assert _balance(services, checking) == pytest.approx(3320.50)


def test_allocation_within_epsilon_of_remaining_is_accepted(services, checking):
    bill = _bill(services, checking)
    _post(services, checking, 100.004, [AllocationRequest(bill.id, DUE, 100.004)])

    instance = services["instance_service"].get_instance(bill.id, DUE)
    assert instance.status == InstanceStatus.FUNDED


def test_allocation_sum_must_match_entry_amount(services, checking):
    bill = _bill(services, checking)

    with pytest.raises(ValidationError) as exc:
        _post(services, checking, 60.0, [AllocationRequest(bill.id, DUE, 50.0)])

    assert exc.value.code == "ALLOCATION_SUM_MISMATCH"
    assert services["ledger_service"].list_entries() == []
    assert services["instance_service"].get_instance(bill.id, DUE) is None
    assert _balance(services, checking) == pytest.approx(3420.50)


def test_non_positive_allocation_is_rejected(services, checking):
    bill = _bill(services, checking)

    with pytest.raises(ValidationError) as exc:
        _post(
            services,
            checking,
            50.0,
            [AllocationRequest(bill.id, DUE, 60.0), AllocationRequest(bill.id, DUE, -10.0)],
        )
    assert exc.value.code == "INVALID_ALLOCATION_AMOUNT"


def test_unallocated_transaction_only_moves_the_balance(services, checking):
    entry = services["ledger_service"].post_entry(
        "Side job", 200.0, "income", checking.id, entry_date=TODAY
    )

    assert entry.allocations == []
    assert _balance(services, checking) == pytest.approx(3620.50)


def test_failed_request_rolls_back_earlier_requests(services, checking):
    rent = _bill(services, checking, name="Rent", amount=500.0)
    phone = _bill(services, checking, name="Phone", amount=40.0)

    with pytest.raises(ValidationError):
        _post(
            services,
            checking,
            560.0,
            [AllocationRequest(rent.id, DUE, 500.0), AllocationRequest(phone.id, DUE, 60.0)],
        )

    assert services["instance_service"].get_instance(rent.id, DUE) is None
    assert services["commitment_service"].get_commitment(rent.id).paid is False
    assert _balance(services, checking) == pytest.approx(3420.50)


def test_unknown_commitment_is_not_found(services, checking):
    with pytest.raises(NotFoundError) as exc:
        _post(services, checking, 10.0, [AllocationRequest("missing", DUE, 10.0)])

    assert exc.value.code == "COMMITMENT_NOT_FOUND"
    assert services["ledger_service"].list_entries() == []


def test_envelopes_stay_consistent_with_their_allocations(services, session, checking):
    rent = _bill(services, checking, name="Rent", amount=500.0, recurrence="monthly")
    phone = _bill(services, checking, name="Phone", amount=40.0)

    first = _post(
        services,
        checking,
        240.0,
        [AllocationRequest(rent.id, DUE, 200.0), AllocationRequest(phone.id, DUE, 40.0)],
    )
    _post(services, checking, 300.0, [AllocationRequest(rent.id, DUE, 300.0)])
    services["ledger_service"].edit_entry(
        first.id,
        amount=150.0,
        allocations=[AllocationRequest(rent.id, DUE, 150.0)],
    )

    allocation_repo = SqlAlchemyAllocationRepository(session)
    for instance in SqlAlchemyInstanceRepository(session).list_all():
        total = sum(a.amount for a in allocation_repo.list_by_instance(instance.id))
        assert instance.allocated_amount == pytest.approx(total)
        assert instance.allocated_amount <= instance.planned_amount + 0.005
        assert instance.is_funded == (instance.allocated_amount >= instance.planned_amount - 0.005)

    for entry in services["ledger_service"].list_entries():
        if entry.allocations:
            assert sum(a.amount for a in entry.allocations) == pytest.approx(entry.amount)
