from __future__ import annotations

from datetime import date

import pytest

from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.models import AllocationRequest, CommitmentPriority, InstanceStatus, RecurrenceKind

DUE = date(2024, 1, 20)


def _create(services, account=None, **overrides):
    values = dict(
        name="Rent",
        direction="bill",
        amount=1200.0,
        due_date=DUE,
        recurrence_rule="monthly",
        account_id=account.id if account else None,
    )
    values.update(overrides)
    return services["commitment_service"].create_commitment(**values)


def test_create_validates_inputs(services):
    with pytest.raises(ValidationError) as exc:
        _create(services, name=" ")
    assert exc.value.code == "COMMITMENT_NAME_EMPTY"

    with pytest.raises(ValidationError) as exc:
        _create(services, amount=0)
    assert exc.value.code == "INVALID_AMOUNT"

    with pytest.raises(ValidationError) as exc:
        _create(services, direction="transfer")
    assert exc.value.code == "INVALID_DIRECTION"

    with pytest.raises(ValidationError) as exc:
        _create(services, priority="urgent")
    assert exc.value.code == "INVALID_PRIORITY"

    with pytest.raises(NotFoundError) as exc:
        _create(services, account_id="missing")
    assert exc.value.code == "ACCOUNT_NOT_FOUND"


def test_unknown_recurrence_rule_is_stored_as_monthly(services):
    commitment = _create(services, recurrence_rule="every_other_tuesday")

    stored = services["commitment_service"].get_commitment(commitment.id)
    assert stored.recurrence.kind == RecurrenceKind.MONTHLY


def test_update_can_turn_recurring_into_one_time(services, checking):
    cs = services["commitment_service"]
    commitment = _create(services, checking)

    cs.update_commitment(commitment.id, recurrence_rule=None, priority="critical", amount=1300.0)

    stored = cs.get_commitment(commitment.id)
    assert stored.recurrence is None
    assert stored.priority == CommitmentPriority.CRITICAL
    assert stored.amount == pytest.approx(1300.0)
    assert stored.account_id == checking.id


def test_delete_refused_while_allocations_exist(services, checking):
    cs = services["commitment_service"]
    commitment = _create(services, checking)
    entry = services["ledger_service"].post_entry(
        "Rent",
        1200.0,
        "expense",
        checking.id,
        allocations=[AllocationRequest(commitment.id, DUE, 1200.0)],
        entry_date=DUE,
    )

    with pytest.raises(BusinessRuleError) as exc:
        cs.delete_commitment(commitment.id)
    assert exc.value.code == "COMMITMENT_HAS_ALLOCATIONS"

    services["ledger_service"].delete_entry(entry.id)
    cs.delete_commitment(commitment.id)

    assert cs.get_commitment(commitment.id) is None
    assert services["instance_service"].get_instance(commitment.id, DUE) is None


def test_set_planned_amount_cannot_drop_below_allocated(services, checking):
    cs = services["commitment_service"]
    commitment = _create(services, checking)
    services["ledger_service"].post_entry(
        "Rent part",
        500.0,
        "expense",
        checking.id,
        allocations=[AllocationRequest(commitment.id, DUE, 500.0)],
        entry_date=DUE,
    )

    with pytest.raises(ValidationError) as exc:
        cs.set_planned_amount(commitment.id, DUE, 400.0)
    assert exc.value.code == "PLANNED_BELOW_ALLOCATED"

    instance = cs.set_planned_amount(commitment.id, DUE, 500.0)

    assert instance.status == InstanceStatus.FUNDED
    assert cs.get_commitment(commitment.id).due_date == date(2024, 2, 20)


def test_list_commitments_active_only(services):
    cs = services["commitment_service"]
    kept = _create(services, name="Rent")
    paused = _create(services, name="Gym")
    cs.set_active(paused.id, False)

    assert [c.id for c in cs.list_commitments(active_only=True)] == [kept.id]
    assert len(cs.list_commitments()) == 2


def test_lowering_one_time_plan_to_allocated_marks_paid_on_given_day(services, checking):
    cs = services["commitment_service"]
    repair = _create(services, checking, name="Boiler repair", amount=300.0, recurrence_rule=None)
    services["ledger_service"].post_entry(
        "Boiler deposit",
        250.0,
        "expense",
        checking.id,
        allocations=[AllocationRequest(repair.id, DUE, 250.0)],
        entry_date=date(2024, 1, 5),
    )

    cs.set_planned_amount(repair.id, DUE, 250.0, as_of=date(2024, 1, 12))

    settled = cs.get_commitment(repair.id)
    assert settled.paid is True
    assert settled.paid_date == date(2024, 1, 12)
    assert settled.actual_amount == pytest.approx(250.0)
