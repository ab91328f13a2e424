from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from core.exceptions import NotFoundError
from core.interfaces import CommitmentRepository, InstanceRepository
from core.models import Commitment, CommitmentInstance, InstanceStatus
from core.domain.money import exceeds
from core.domain.recurrence import advance_date

logger = logging.getLogger(__name__)


@dataclass
class ClosedInstance:
    instance: CommitmentInstance
    leftover: float
    carried_to: Optional[date]
    next_due_date: date


class RecurrenceAdvancer:
    """Moves a commitment's stored due date past its funded occurrences.

    Every method works inside the caller's transaction and never commits.
    """

    def __init__(self, commitment_repo: CommitmentRepository, instance_repo: InstanceRepository):
        self._commitment_repo = commitment_repo
        self._instance_repo = instance_repo

    def _require_commitment(self, commitment_id: str) -> Commitment:
        commitment = self._commitment_repo.get(commitment_id)
        if commitment is None:
            raise NotFoundError("Commitment not found.", code="COMMITMENT_NOT_FOUND")
        return commitment

    def settle(self, commitment_id: str, *, paid_date: date) -> Commitment:
        """Advance past every funded occurrence starting at the stored due date.

        One-time commitments are marked paid instead once their single
        occurrence is funded.
        """
        commitment = self._require_commitment(commitment_id)
        if not commitment.is_recurring:
            instance = self._instance_repo.get_by_key(commitment.id, commitment.due_date)
            if instance is not None and instance.is_funded and not commitment.paid:
                self._commitment_repo.set_paid(
                    commitment.id,
                    paid=True,
                    actual_amount=instance.allocated_amount,
                    paid_date=paid_date,
                )
                logger.info(f"One-time commitment {commitment.id} marked paid")
            return self._require_commitment(commitment.id)

        next_due = commitment.due_date
        while True:
            instance = self._instance_repo.get_by_key(commitment.id, next_due)
            if instance is None or not instance.is_funded:
                break
            next_due = commitment.recurrence.advance(next_due)

        if next_due != commitment.due_date:
            self._commitment_repo.set_due_date(commitment.id, next_due)
            logger.info(f"Advanced commitment {commitment.id} from {commitment.due_date} to {next_due}")
        return self._require_commitment(commitment.id)

    def reopen(self, commitment_id: str, reopened_due_dates: Iterable[date] = ()) -> None:
        """Undo the forward moves of envelopes that reopened after a reversal.

        A recurring commitment's due date goes back to the earliest reopened
        occurrence. A one-time commitment loses its paid marker.
        """
        commitment = self._commitment_repo.get(commitment_id)
        if commitment is None:
            return
        if commitment.is_recurring:
            earliest = min(reopened_due_dates, default=None)
            if earliest is not None and earliest < commitment.due_date:
                self._commitment_repo.set_due_date(commitment.id, earliest)
                logger.info(f"Moved commitment {commitment.id} back from {commitment.due_date} to {earliest}")
            return
        if not commitment.paid:
            return
        instance = self._instance_repo.get_by_key(commitment.id, commitment.due_date)
        if instance is not None and not instance.is_funded:
            self._commitment_repo.set_paid(commitment.id, paid=False)
            logger.info(f"One-time commitment {commitment.id} reopened")

    def close_instance(
        self,
        commitment: Commitment,
        instance_due_date: date,
        *,
        carry_leftover: bool,
    ) -> ClosedInstance:
        """Mark an occurrence funded whatever its allocation level.

        With ``carry_leftover`` the unspent remainder is added to the plan of the
        following occurrence; otherwise it is released back to general cash.
        """
        instance_id = self._instance_repo.ensure(commitment.id, instance_due_date, commitment.amount)
        instance = self._instance_repo.get(instance_id)
        if instance is None:
            raise NotFoundError("Commitment instance not found.", code="INSTANCE_NOT_FOUND")

        leftover = instance.remaining_amount
        instance.status = InstanceStatus.FUNDED
        self._instance_repo.update(instance)

        next_due = advance_date(instance_due_date, commitment.recurrence)
        carried_to: Optional[date] = None
        if carry_leftover and exceeds(leftover, 0.0):
            next_id = self._instance_repo.ensure(commitment.id, next_due, commitment.amount)
            next_instance = self._instance_repo.get(next_id)
            if next_instance is None:
                raise NotFoundError("Commitment instance not found.", code="INSTANCE_NOT_FOUND")
            next_instance.planned_amount += leftover
            next_instance.status = next_instance.derived_status()
            self._instance_repo.update(next_instance)
            carried_to = next_due

        return ClosedInstance(
            instance=instance,
            leftover=leftover,
            carried_to=carried_to,
            next_due_date=next_due,
        )


__all__ = ["RecurrenceAdvancer", "ClosedInstance"]
