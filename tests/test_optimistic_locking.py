from __future__ import annotations

from datetime import date

import pytest

from core.exceptions import ConcurrencyError, NotFoundError
from core.models import CommitmentInstance
from infra.db.repositories import SqlAlchemyInstanceRepository


def test_instance_update_rejects_stale_version(services, session, checking):
    commitment = services["commitment_service"].create_commitment(
        name="Rent", direction="bill", amount=1200.0, due_date=date(2024, 2, 1), account_id=checking.id
    )
    repo = SqlAlchemyInstanceRepository(session)
    instance_id = repo.ensure(commitment.id, date(2024, 2, 1), 1200.0)

    first = repo.get(instance_id)
    second = repo.get(instance_id)

    first.allocated_amount = 100.0
    repo.update(first)
    assert first.version == 2

    second.allocated_amount = 200.0
    with pytest.raises(ConcurrencyError) as exc:
        repo.update(second)
    assert exc.value.code == "STALE_WRITE"
    session.rollback()


def test_instance_update_of_missing_row_is_not_found(session):
    repo = SqlAlchemyInstanceRepository(session)
    ghost = CommitmentInstance.create("missing", date(2024, 2, 1), 10.0)

    with pytest.raises(NotFoundError) as exc:
        repo.update(ghost)
    assert exc.value.code == "INSTANCE_NOT_FOUND"
