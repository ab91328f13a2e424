from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from core.interfaces import CommitmentHistoryRepository, CommitmentRepository, InstanceRepository
from core.models import Commitment, CommitmentHistory, CommitmentInstance, InstanceStatus
from infra.db.commitment.mapper import (
    commitment_from_orm,
    commitment_to_orm,
    history_from_orm,
    history_to_orm,
    instance_from_orm,
    instance_to_orm,
)
from infra.db.models import CommitmentHistoryORM, CommitmentInstanceORM, CommitmentORM
from infra.db.optimistic import update_with_version_check


class SqlAlchemyCommitmentRepository(CommitmentRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, commitment: Commitment) -> None:
        self.session.add(commitment_to_orm(commitment))
        self.session.flush()

    def update(self, commitment: Commitment) -> None:
        self.session.execute(
            update(CommitmentORM)
            .where(CommitmentORM.id == commitment.id)
            .values(
                name=commitment.name,
                direction=commitment.direction,
                amount=float(commitment.amount),
                due_date=commitment.due_date,
                recurrence_rule=(commitment.recurrence.to_rule() if commitment.recurrence else None),
                priority=commitment.priority,
                autopay=bool(commitment.autopay),
                account_id=commitment.account_id,
                active=bool(commitment.active),
                paid=bool(commitment.paid),
                actual_amount=commitment.actual_amount,
                paid_date=commitment.paid_date,
            )
        )

    def delete(self, commitment_id: str) -> None:
        self.session.query(CommitmentORM).filter_by(id=commitment_id).delete()

    def get(self, commitment_id: str) -> Optional[Commitment]:
        obj = self.session.get(CommitmentORM, commitment_id, populate_existing=True)
        return commitment_from_orm(obj) if obj else None

    def list_all(self) -> List[Commitment]:
        stmt = select(CommitmentORM).order_by(CommitmentORM.due_date, CommitmentORM.name)
        rows = self.session.execute(stmt.execution_options(populate_existing=True)).scalars().all()
        return [commitment_from_orm(row) for row in rows]

    def list_active(self) -> List[Commitment]:
        stmt = (
            select(CommitmentORM)
            .where(CommitmentORM.active.is_(True))
            .order_by(CommitmentORM.due_date, CommitmentORM.name)
        )
        rows = self.session.execute(stmt.execution_options(populate_existing=True)).scalars().all()
        return [commitment_from_orm(row) for row in rows]

    def set_due_date(self, commitment_id: str, due_date: date) -> None:
        self.session.execute(
            update(CommitmentORM)
            .where(CommitmentORM.id == commitment_id)
            .values(due_date=due_date, paid=False, actual_amount=None, paid_date=None)
        )

    def set_paid(
        self,
        commitment_id: str,
        *,
        paid: bool,
        actual_amount: float | None = None,
        paid_date: date | None = None,
    ) -> None:
        self.session.execute(
            update(CommitmentORM)
            .where(CommitmentORM.id == commitment_id)
            .values(paid=paid, actual_amount=actual_amount, paid_date=paid_date)
        )

    def detach_account(self, account_id: str) -> None:
        self.session.execute(
            update(CommitmentORM)
            .where(CommitmentORM.account_id == account_id)
            .values(account_id=None)
        )


class SqlAlchemyInstanceRepository(InstanceRepository):
    def __init__(self, session: Session):
        self.session = session

    def _joined(self):
        return select(
            CommitmentInstanceORM,
            CommitmentORM.name,
            CommitmentORM.direction,
        ).join(CommitmentORM, CommitmentORM.id == CommitmentInstanceORM.commitment_id)

    def _materialize(self, stmt) -> List[CommitmentInstance]:
        rows = self.session.execute(stmt.execution_options(populate_existing=True)).all()
        return [
            instance_from_orm(obj, commitment_name=name, commitment_direction=direction)
            for obj, name, direction in rows
        ]

    def get(self, instance_id: str) -> Optional[CommitmentInstance]:
        found = self._materialize(self._joined().where(CommitmentInstanceORM.id == instance_id))
        return found[0] if found else None

    def get_by_key(self, commitment_id: str, due_date: date) -> Optional[CommitmentInstance]:
        found = self._materialize(
            self._joined().where(
                CommitmentInstanceORM.commitment_id == commitment_id,
                CommitmentInstanceORM.due_date == due_date,
            )
        )
        return found[0] if found else None

    def ensure(self, commitment_id: str, due_date: date, planned_amount: float) -> str:
        stmt = select(CommitmentInstanceORM.id).where(
            CommitmentInstanceORM.commitment_id == commitment_id,
            CommitmentInstanceORM.due_date == due_date,
        )
        existing = self.session.execute(stmt).scalar_one_or_none()
        if existing is not None:
            return existing
        # a racing insert of the same key fails on ux_instance_commitment_due
        instance = CommitmentInstance.create(commitment_id, due_date, planned_amount)
        self.session.add(instance_to_orm(instance))
        self.session.flush()
        return instance.id

    def update(self, instance: CommitmentInstance) -> None:
        instance.version = update_with_version_check(
            self.session,
            CommitmentInstanceORM,
            instance.id,
            getattr(instance, "version", 1),
            {
                "planned_amount": float(instance.planned_amount),
                "allocated_amount": float(instance.allocated_amount),
                "status": instance.status,
            },
            not_found_message="Commitment instance not found.",
            stale_message="Commitment instance was updated by another request.",
            not_found_code="INSTANCE_NOT_FOUND",
        )

    def list_for_active_commitments(
        self,
        *,
        due_on_or_before: date,
        open_only: bool = False,
    ) -> List[CommitmentInstance]:
        stmt = self._joined().where(
            CommitmentORM.active.is_(True),
            CommitmentInstanceORM.due_date <= due_on_or_before,
        )
        if open_only:
            stmt = stmt.where(CommitmentInstanceORM.status == InstanceStatus.OPEN)
        stmt = stmt.order_by(CommitmentInstanceORM.due_date, CommitmentORM.name)
        return self._materialize(stmt)

    def list_all(self) -> List[CommitmentInstance]:
        return self._materialize(self._joined().order_by(CommitmentInstanceORM.due_date))

    def delete_by_commitment(self, commitment_id: str) -> None:
        self.session.query(CommitmentInstanceORM).filter_by(commitment_id=commitment_id).delete()


class SqlAlchemyCommitmentHistoryRepository(CommitmentHistoryRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, row: CommitmentHistory) -> None:
        self.session.add(history_to_orm(row))

    def list_by_commitment(self, commitment_id: str) -> List[CommitmentHistory]:
        stmt = (
            select(CommitmentHistoryORM)
            .where(CommitmentHistoryORM.commitment_id == commitment_id)
            .order_by(CommitmentHistoryORM.paid_date.desc(), CommitmentHistoryORM.due_date.desc())
        )
        rows = self.session.execute(stmt).scalars().all()
        return [history_from_orm(row) for row in rows]

    def delete_by_commitment(self, commitment_id: str) -> None:
        self.session.query(CommitmentHistoryORM).filter_by(commitment_id=commitment_id).delete()


__all__ = [
    "SqlAlchemyCommitmentRepository",
    "SqlAlchemyInstanceRepository",
    "SqlAlchemyCommitmentHistoryRepository",
]
