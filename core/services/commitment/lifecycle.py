from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.interfaces import (
    AllocationRepository,
    CommitmentHistoryRepository,
    CommitmentRepository,
    InstanceRepository,
)
from core.models import (
    Commitment,
    CommitmentDirection,
    CommitmentInstance,
    CommitmentPriority,
)
from core.domain.money import exceeds
from core.services.audit.helpers import record_audit
from core.services.commitment.advancer import RecurrenceAdvancer
from core.services.commitment.validation import CommitmentValidationMixin

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class CommitmentLifecycleMixin(CommitmentValidationMixin):
    _session: Session
    _commitment_repo: CommitmentRepository
    _instance_repo: InstanceRepository
    _allocation_repo: AllocationRepository
    _history_repo: CommitmentHistoryRepository
    _advancer: RecurrenceAdvancer

    def create_commitment(
        self,
        name: str,
        direction: CommitmentDirection | str,
        amount: float,
        due_date: date,
        recurrence_rule=None,
        priority: CommitmentPriority | str = CommitmentPriority.NORMAL,
        autopay: bool = False,
        account_id: str | None = None,
    ) -> Commitment:
        self._validate_commitment_name(name)
        self._validate_commitment_amount(amount)
        if not isinstance(due_date, date):
            raise ValidationError("Commitment due date must be a valid date.", code="INVALID_DUE_DATE")
        self._validate_account_ref(account_id)

        commitment = Commitment.create(
            name=name.strip(),
            direction=self._coerce_direction(direction),
            amount=amount,
            due_date=due_date,
            recurrence=self._coerce_recurrence(recurrence_rule),
            priority=self._coerce_priority(priority),
            autopay=bool(autopay),
            account_id=account_id,
        )

        try:
            self._commitment_repo.add(commitment)
            record_audit(
                self,
                action="commitment.create",
                entity_type="commitment",
                entity_id=commitment.id,
                commitment_id=commitment.id,
                details={
                    "name": commitment.name,
                    "amount": commitment.amount,
                    "due_date": commitment.due_date,
                    "recurrence": commitment.recurrence.to_rule() if commitment.recurrence else None,
                },
            )
            self._session.commit()
            logger.info(f"Created commitment {commitment.id} - {commitment.name}")
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error creating commitment: {exc}")
            raise

        domain_events.commitments_changed.emit(commitment.id)
        return commitment

    def update_commitment(
        self,
        commitment_id: str,
        name: str | None = None,
        amount: float | None = None,
        due_date: date | None = None,
        recurrence_rule=_UNSET,
        priority: CommitmentPriority | str | None = None,
        autopay: bool | None = None,
        account_id=_UNSET,
    ) -> Commitment:
        """Edit a commitment's own fields.

        Existing envelopes keep their planned amounts. Pass ``recurrence_rule=None``
        to turn a recurring commitment into a one-time one.
        """
        commitment = self._require_commitment(commitment_id)

        if name is not None:
            self._validate_commitment_name(name)
            commitment.name = name.strip()
        if amount is not None:
            self._validate_commitment_amount(amount)
            commitment.amount = float(amount)
        if due_date is not None:
            commitment.due_date = due_date
        if recurrence_rule is not _UNSET:
            commitment.recurrence = self._coerce_recurrence(recurrence_rule)
        if priority is not None:
            commitment.priority = self._coerce_priority(priority)
        if autopay is not None:
            commitment.autopay = bool(autopay)
        if account_id is not _UNSET:
            self._validate_account_ref(account_id)
            commitment.account_id = account_id

        try:
            self._commitment_repo.update(commitment)
            record_audit(
                self,
                action="commitment.update",
                entity_type="commitment",
                entity_id=commitment.id,
                commitment_id=commitment.id,
                details={"name": commitment.name, "amount": commitment.amount},
            )
            self._session.commit()
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error updating commitment {commitment_id}: {exc}")
            raise

        domain_events.commitments_changed.emit(commitment.id)
        return commitment

    def set_active(self, commitment_id: str, active: bool) -> None:
        commitment = self._require_commitment(commitment_id)
        commitment.active = bool(active)
        try:
            self._commitment_repo.update(commitment)
            record_audit(
                self,
                action="commitment.set_active",
                entity_type="commitment",
                entity_id=commitment.id,
                commitment_id=commitment.id,
                details={"active": commitment.active},
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        domain_events.commitments_changed.emit(commitment.id)

    def delete_commitment(self, commitment_id: str) -> None:
        commitment = self._require_commitment(commitment_id)
        if self._allocation_repo.count_by_commitment(commitment_id) > 0:
            raise BusinessRuleError(
                "Commitment has ledger allocations. Delete or edit those transactions first.",
                code="COMMITMENT_HAS_ALLOCATIONS",
            )
        try:
            self._history_repo.delete_by_commitment(commitment_id)
            self._instance_repo.delete_by_commitment(commitment_id)
            self._commitment_repo.delete(commitment_id)
            record_audit(
                self,
                action="commitment.delete",
                entity_type="commitment",
                entity_id=commitment_id,
                details={"name": commitment.name},
            )
            self._session.commit()
            logger.info(f"Deleted commitment {commitment_id} - {commitment.name}")
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error deleting commitment {commitment_id}: {exc}")
            raise
        domain_events.commitments_changed.emit(commitment_id)

    def set_planned_amount(
        self,
        commitment_id: str,
        due_date: date,
        planned_amount: float,
        *,
        as_of: date | None = None,
    ) -> CommitmentInstance:
        """Edit one envelope's plan, materializing it first when needed."""
        commitment = self._require_commitment(commitment_id)
        if planned_amount is None or float(planned_amount) < 0:
            raise ValidationError("Planned amount cannot be negative.", code="INVALID_PLANNED_AMOUNT")

        try:
            instance_id = self._instance_repo.ensure(commitment.id, due_date, commitment.amount)
            instance = self._instance_repo.get(instance_id)
            if instance is None:
                raise NotFoundError("Commitment instance not found.", code="INSTANCE_NOT_FOUND")
            if exceeds(instance.allocated_amount, planned_amount):
                raise ValidationError(
                    f"Planned amount {float(planned_amount):.2f} is below the "
                    f"{instance.allocated_amount:.2f} already allocated.",
                    code="PLANNED_BELOW_ALLOCATED",
                )
            previous = instance.planned_amount
            instance.planned_amount = float(planned_amount)
            instance.status = instance.derived_status()
            self._instance_repo.update(instance)
            if instance.is_funded:
                self._advancer.settle(commitment.id, paid_date=as_of or date.today())
            record_audit(
                self,
                action="instance.set_planned_amount",
                entity_type="commitment_instance",
                entity_id=instance.id,
                commitment_id=commitment.id,
                details={"due_date": due_date, "from": previous, "to": instance.planned_amount},
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        domain_events.commitments_changed.emit(commitment.id)
        return instance


__all__ = ["CommitmentLifecycleMixin"]
