from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Sequence

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, ValidationError
from core.interfaces import (
    AccountRepository,
    AllocationRepository,
    CommitmentRepository,
    InstanceRepository,
)
from core.models import (
    Allocation,
    AllocationRequest,
    InstanceStatus,
    LedgerEntry,
)
from core.domain.money import exceeds
from core.services.allocation.validation import AllocationValidationMixin
from core.services.commitment.advancer import RecurrenceAdvancer

logger = logging.getLogger(__name__)


class AllocationEngine(AllocationValidationMixin):
    """Applies ledger money to commitment envelopes.

    Nothing here commits: callers own the transaction so that a failure on the
    last request rolls back every earlier row change.
    """

    def __init__(
        self,
        session: Session,
        account_repo: AccountRepository,
        commitment_repo: CommitmentRepository,
        instance_repo: InstanceRepository,
        allocation_repo: AllocationRepository,
        advancer: RecurrenceAdvancer,
    ):
        self._session: Session = session
        self._account_repo: AccountRepository = account_repo
        self._commitment_repo: CommitmentRepository = commitment_repo
        self._instance_repo: InstanceRepository = instance_repo
        self._allocation_repo: AllocationRepository = allocation_repo
        self._advancer: RecurrenceAdvancer = advancer

    def apply_account_impact(self, entry: LedgerEntry) -> None:
        if entry.account_id is None:
            return
        self._account_repo.adjust_balance(entry.account_id, entry.balance_impact)

    def reverse_account_impact(self, entry: LedgerEntry) -> None:
        if entry.account_id is None:
            return
        self._account_repo.adjust_balance(entry.account_id, -entry.balance_impact)

    def apply_allocations(
        self,
        entry: LedgerEntry,
        requests: Sequence[AllocationRequest] = (),
    ) -> List[Allocation]:
        """Post ``entry``'s balance impact and fund the requested envelopes.

        Raises ``ValidationError`` (``ALLOCATION_EXCEEDS_REMAINING``) as soon as a
        request is larger than its envelope's remaining amount; the caller must
        roll back.
        """
        self._validate_allocation_requests(requests, entry.amount)

        applied: List[Allocation] = []
        touched: Dict[str, None] = {}
        for request in requests:
            commitment = self._commitment_repo.get(request.commitment_id)
            if commitment is None:
                raise NotFoundError(
                    f"Commitment {request.commitment_id} not found.",
                    code="COMMITMENT_NOT_FOUND",
                )
            instance_id = self._instance_repo.ensure(
                commitment.id, request.instance_due_date, commitment.amount
            )
            instance = self._instance_repo.get(instance_id)
            if instance is None:
                raise NotFoundError("Commitment instance not found.", code="INSTANCE_NOT_FOUND")

            remaining = instance.remaining_amount
            if exceeds(request.amount, remaining):
                raise ValidationError(
                    f"Allocation of {float(request.amount):.2f} exceeds remaining "
                    f"{remaining:.2f} for {commitment.name} due {request.instance_due_date}.",
                    code="ALLOCATION_EXCEEDS_REMAINING",
                )

            allocation = Allocation.create(
                ledger_entry_id=entry.id,
                instance_id=instance.id,
                commitment_id=commitment.id,
                amount=request.amount,
                note=request.note,
            )
            self._allocation_repo.add(allocation)

            instance.allocated_amount += float(request.amount)
            instance.status = instance.derived_status()
            self._instance_repo.update(instance)

            allocation.commitment_name = commitment.name
            applied.append(allocation)
            touched[commitment.id] = None

        self.apply_account_impact(entry)

        for commitment_id in touched:
            self._advancer.settle(commitment_id, paid_date=entry.entry_date)

        if applied:
            logger.info(f"Applied {len(applied)} allocation(s) for ledger entry {entry.id}")
        return applied

    def reverse_allocations(self, ledger_entry_id: str) -> List[Allocation]:
        """Take every allocation of the entry back out of its envelope.

        Each touched envelope is reopened unconditionally and its commitment
        moves back to it when it lies before the stored due date. The allocation
        rows are deleted. The entry's balance impact is left alone.
        """
        existing = self._allocation_repo.list_by_ledger(ledger_entry_id)
        reopened: Dict[str, List[date]] = {}
        for allocation in existing:
            instance = self._instance_repo.get(allocation.instance_id)
            if instance is None:
                continue
            instance.allocated_amount = max(0.0, instance.allocated_amount - allocation.amount)
            instance.status = InstanceStatus.OPEN
            self._instance_repo.update(instance)
            reopened.setdefault(allocation.commitment_id, []).append(instance.due_date)

        self._allocation_repo.delete_by_ledger(ledger_entry_id)

        for commitment_id, due_dates in reopened.items():
            self._advancer.reopen(commitment_id, due_dates)

        if existing:
            logger.info(f"Reversed {len(existing)} allocation(s) for ledger entry {ledger_entry_id}")
        return existing


__all__ = ["AllocationEngine"]
