from __future__ import annotations

from datetime import date, timedelta

import pytest

from core.exceptions import ValidationError
from core.models import AllocationRequest

TODAY = date(2024, 1, 10)


def _commitment(services, account, name, amount, due, *, direction="bill", recurrence=None, priority="normal"):
    return services["commitment_service"].create_commitment(
        name=name,
        direction=direction,
        amount=amount,
        due_date=due,
        recurrence_rule=recurrence,
        priority=priority,
        account_id=account.id,
    )


def _project(services, days=28, simulate=()):
    return services["projection_service"].project(days, simulate, as_of=TODAY)


def test_one_time_bill_steps_balance_down_from_its_due_date(services, checking):
    due = TODAY + timedelta(days=5)
    _commitment(services, checking, "Rent", 1850.0, due)

    projection = _project(services)

    assert len(projection) == 29
    assert projection[0].day == TODAY
    assert projection[-1].day == TODAY + timedelta(days=28)
    for day in projection:
        expected = 3420.50 if day.day < due else 1570.50
        assert day.balance == pytest.approx(expected)
    assert [o.name for o in projection[5].occurrences] == ["Rent"]


def test_overdue_bill_is_pinned_to_today(services, checking):
    _commitment(services, checking, "Water", 350.0, TODAY - timedelta(days=3), priority="critical")

    projection = _project(services, days=14)

    assert projection[0].balance == pytest.approx(3070.50)
    assert projection[-1].balance == pytest.approx(3070.50)
    occurrence = projection[0].occurrences[0]
    assert occurrence.overdue is True
    assert occurrence.due_date == TODAY - timedelta(days=3)
    assert sum(len(d.occurrences) for d in projection) == 1


def test_overdue_recurring_bill_shows_today_and_its_next_occurrences(services, checking):
    _commitment(services, checking, "Groceries", 100.0, date(2024, 1, 1), recurrence="weekly")

    projection = _project(services, days=7)

    assert projection[0].balance == pytest.approx(3320.50)
    assert projection[5].day == date(2024, 1, 15)
    assert projection[5].balance == pytest.approx(3220.50)


def test_simulated_early_payment_moves_one_time_bill_to_today(services, checking):
    laptop = _commitment(services, checking, "Laptop", 200.0, TODAY + timedelta(days=10))
    salary = _commitment(
        services, checking, "Salary", 900.0, TODAY + timedelta(days=3), direction="income", recurrence="biweekly"
    )

    baseline = _project(services)
    simulated = _project(services, simulate=[laptop.id, salary.id])

    assert baseline[0].balance == pytest.approx(3420.50)
    assert simulated[0].balance == pytest.approx(3220.50)
    assert simulated[0].occurrences[0].label == "Laptop (simulated)"
    assert simulated[10].occurrences == []
    assert simulated[3].balance == pytest.approx(4120.50)
    assert baseline[-1].balance == pytest.approx(simulated[-1].balance)


def test_partially_funded_envelope_projects_only_its_remainder(services, checking):
    due = TODAY + timedelta(days=3)
    phone = _commitment(services, checking, "Phone", 100.0, due)
    services["ledger_service"].post_entry(
        "Phone part", 40.0, "expense", checking.id,
        allocations=[AllocationRequest(phone.id, due, 40.0)],
        entry_date=TODAY,
    )

    projection = _project(services)

    assert projection[0].balance == pytest.approx(3380.50)
    assert projection[3].balance == pytest.approx(3320.50)
    assert projection[3].occurrences[0].amount == pytest.approx(60.0)


def test_funded_occurrence_is_not_projected_again(services, checking):
    due = TODAY + timedelta(days=2)
    gym = _commitment(services, checking, "Gym", 30.0, due, recurrence="weekly")
    services["payment_service"].mark_paid(gym.id, 30.0, paid_date=TODAY)

    projection = _project(services, days=14)

    days_with_gym = [d.day for d in projection if d.occurrences]
    assert days_with_gym == [due + timedelta(days=7)]


def test_reserve_accounts_and_inactive_commitments_are_ignored(services, checking):
    services["account_service"].create_account("Emergency fund", "savings", 10000.0, is_reserve=True)
    paused = _commitment(services, checking, "Streaming", 15.0, TODAY + timedelta(days=1), recurrence="monthly")
    services["commitment_service"].set_active(paused.id, False)

    projection = _project(services, days=7)

    assert all(d.balance == pytest.approx(3420.50) for d in projection)


def test_zero_day_horizon_and_negative_horizon(services, checking):
    assert len(_project(services, days=0)) == 1

    with pytest.raises(ValidationError) as exc:
        _project(services, days=-1)
    assert exc.value.code == "INVALID_HORIZON"
