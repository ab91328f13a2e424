from __future__ import annotations

from core.models import (
    Commitment,
    CommitmentDirection,
    CommitmentHistory,
    CommitmentInstance,
    CommitmentPriority,
    InstanceStatus,
    Recurrence,
)
from infra.db.models import CommitmentHistoryORM, CommitmentInstanceORM, CommitmentORM


def commitment_to_orm(c: Commitment) -> CommitmentORM:
    return CommitmentORM(
        id=c.id,
        name=c.name,
        direction=c.direction,
        amount=float(c.amount),
        due_date=c.due_date,
        recurrence_rule=(c.recurrence.to_rule() if c.recurrence else None),
        priority=c.priority,
        autopay=bool(c.autopay),
        account_id=c.account_id,
        active=bool(c.active),
        paid=bool(c.paid),
        actual_amount=c.actual_amount,
        paid_date=c.paid_date,
        created_at=c.created_at,
    )


def commitment_from_orm(obj: CommitmentORM) -> Commitment:
    return Commitment(
        id=obj.id,
        name=obj.name,
        direction=CommitmentDirection(obj.direction),
        amount=float(obj.amount),
        due_date=obj.due_date,
        recurrence=Recurrence.parse(obj.recurrence_rule),
        priority=CommitmentPriority(obj.priority) if obj.priority else CommitmentPriority.NORMAL,
        autopay=bool(obj.autopay),
        account_id=obj.account_id,
        active=bool(obj.active),
        paid=bool(obj.paid),
        actual_amount=obj.actual_amount,
        paid_date=obj.paid_date,
        created_at=obj.created_at,
    )


def instance_to_orm(instance: CommitmentInstance) -> CommitmentInstanceORM:
    return CommitmentInstanceORM(
        id=instance.id,
        commitment_id=instance.commitment_id,
        due_date=instance.due_date,
        planned_amount=float(instance.planned_amount),
        allocated_amount=float(instance.allocated_amount),
        status=instance.status,
        version=getattr(instance, "version", 1),
    )


def instance_from_orm(
    obj: CommitmentInstanceORM,
    *,
    commitment_name: str | None = None,
    commitment_direction: CommitmentDirection | None = None,
) -> CommitmentInstance:
    return CommitmentInstance(
        id=obj.id,
        commitment_id=obj.commitment_id,
        due_date=obj.due_date,
        planned_amount=float(obj.planned_amount),
        allocated_amount=float(obj.allocated_amount or 0.0),
        status=InstanceStatus(obj.status) if obj.status else InstanceStatus.OPEN,
        version=getattr(obj, "version", 1),
        commitment_name=commitment_name,
        commitment_direction=(
            CommitmentDirection(commitment_direction) if commitment_direction else None
        ),
    )


def history_to_orm(row: CommitmentHistory) -> CommitmentHistoryORM:
    return CommitmentHistoryORM(
        id=row.id,
        commitment_id=row.commitment_id,
        amount=row.amount,
        actual_amount=row.actual_amount,
        paid_date=row.paid_date,
        due_date=row.due_date,
    )


def history_from_orm(obj: CommitmentHistoryORM) -> CommitmentHistory:
    return CommitmentHistory(
        id=obj.id,
        commitment_id=obj.commitment_id,
        amount=float(obj.amount),
        actual_amount=float(obj.actual_amount),
        paid_date=obj.paid_date,
        due_date=obj.due_date,
    )


__all__ = [
    "commitment_to_orm",
    "commitment_from_orm",
    "instance_to_orm",
    "instance_from_orm",
    "history_to_orm",
    "history_from_orm",
]
