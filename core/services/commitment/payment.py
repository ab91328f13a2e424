from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.interfaces import (
    AccountRepository,
    CommitmentHistoryRepository,
    CommitmentRepository,
    InstanceRepository,
    LedgerRepository,
)
from core.models import (
    AllocationRequest,
    Commitment,
    CommitmentHistory,
    LedgerEntry,
    LedgerEntryType,
    LedgerLineItem,
    LineItemInput,
)
from core.domain.money import exceeds
from core.services.audit.helpers import record_audit
from core.services.audit.service import AuditService
from core.services.commitment.advancer import ClosedInstance, RecurrenceAdvancer

if TYPE_CHECKING:
    from core.services.allocation.engine import AllocationEngine

logger = logging.getLogger(__name__)


class CommitmentPaymentService:
    """Payment, rollover and release actions on a single occurrence."""

    def __init__(
        self,
        session: Session,
        commitment_repo: CommitmentRepository,
        instance_repo: InstanceRepository,
        ledger_repo: LedgerRepository,
        history_repo: CommitmentHistoryRepository,
        account_repo: AccountRepository,
        engine: AllocationEngine,
        advancer: RecurrenceAdvancer,
        audit_service: AuditService | None = None,
    ):
        self._session: Session = session
        self._commitment_repo: CommitmentRepository = commitment_repo
        self._instance_repo: InstanceRepository = instance_repo
        self._ledger_repo: LedgerRepository = ledger_repo
        self._history_repo: CommitmentHistoryRepository = history_repo
        self._account_repo: AccountRepository = account_repo
        self._engine: AllocationEngine = engine
        self._advancer: RecurrenceAdvancer = advancer
        self._audit_service: AuditService | None = audit_service

    def _require_commitment(self, commitment_id: str) -> Commitment:
        commitment = self._commitment_repo.get(commitment_id)
        if commitment is None:
            raise NotFoundError("Commitment not found.", code="COMMITMENT_NOT_FOUND")
        return commitment

    def mark_paid(
        self,
        commitment_id: str,
        actual_amount: float,
        *,
        instance_due_date: date | None = None,
        note: str | None = None,
        account_id: str | None = None,
        paid_date: date | None = None,
    ) -> LedgerEntry:
        """Record a payment for one occurrence and fund its envelope with it.

        Writes a ledger entry (with one line item and one allocation), a history
        row and the account balance change. When the payment is larger than what
        is left in the envelope the plan is raised to fit the payment.
        """
        if actual_amount is None or float(actual_amount) <= 0:
            raise ValidationError("Payment amount must be greater than 0.", code="INVALID_AMOUNT")
        commitment = self._require_commitment(commitment_id)
        if commitment.is_settled_one_time:
            raise BusinessRuleError("Commitment is already paid.", code="ALREADY_PAID")

        effective_account_id = account_id or commitment.account_id
        if not effective_account_id:
            raise ValidationError(
                "No account linked. Select an account for this payment.",
                code="ACCOUNT_REQUIRED",
            )
        if self._account_repo.get(effective_account_id) is None:
            raise NotFoundError("Account not found.", code="ACCOUNT_NOT_FOUND")

        paid_on = paid_date or date.today()
        target_due_date = instance_due_date or commitment.due_date
        amount = float(actual_amount)
        label = (note or "").strip() or None

        entry = LedgerEntry.create(
            description=f"{commitment.name}: {label}" if label else commitment.name,
            amount=amount,
            entry_type=LedgerEntryType.for_direction(commitment.direction),
            account_id=effective_account_id,
            entry_date=paid_on,
            commitment_id=commitment.id,
        )

        try:
            self._ledger_repo.add(entry)
            self._ledger_repo.add_line_item(
                LedgerLineItem.create(
                    entry.id,
                    LineItemInput(
                        description=label or commitment.name,
                        amount=amount,
                        commitment_id=commitment.id,
                        instance_due_date=target_due_date,
                    ),
                )
            )
            self._history_repo.add(
                CommitmentHistory.create(
                    commitment_id=commitment.id,
                    amount=commitment.amount,
                    actual_amount=amount,
                    paid_date=paid_on,
                    due_date=target_due_date,
                )
            )

            instance_id = self._instance_repo.ensure(commitment.id, target_due_date, commitment.amount)
            instance = self._instance_repo.get(instance_id)
            if instance is None:
                raise NotFoundError("Commitment instance not found.", code="INSTANCE_NOT_FOUND")
            if exceeds(amount, instance.remaining_amount):
                instance.planned_amount = instance.allocated_amount + amount
                self._instance_repo.update(instance)

            entry.allocations = self._engine.apply_allocations(
                entry,
                [AllocationRequest(commitment.id, target_due_date, amount, label)],
            )
            record_audit(
                self,
                action="commitment.mark_paid",
                entity_type="commitment",
                entity_id=commitment.id,
                commitment_id=commitment.id,
                details={
                    "amount": amount,
                    "due_date": target_due_date,
                    "ledger_entry_id": entry.id,
                    "account_id": effective_account_id,
                },
            )
            self._session.commit()
            logger.info(f"Marked {commitment.id} paid for {target_due_date}: {amount:.2f}")
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error marking commitment {commitment_id} paid: {exc}")
            raise

        domain_events.ledger_changed.emit(entry.id)
        domain_events.accounts_changed.emit(effective_account_id)
        domain_events.commitments_changed.emit(commitment.id)
        return entry

    def rollover(
        self,
        commitment_id: str,
        instance_due_date: date | None = None,
        *,
        as_of: date | None = None,
    ) -> ClosedInstance:
        """Close an occurrence and carry its unspent plan into the next one."""
        commitment = self._require_commitment(commitment_id)
        if not commitment.is_recurring:
            raise BusinessRuleError(
                "Leftover handling only applies to recurring commitments.",
                code="RECURRENCE_REQUIRED",
            )
        return self._close(commitment, instance_due_date, carry_leftover=True, as_of=as_of)

    def release(
        self,
        commitment_id: str,
        instance_due_date: date | None = None,
        *,
        as_of: date | None = None,
    ) -> ClosedInstance:
        """Close an occurrence and let its unspent plan go back to general cash.

        No ledger row is written: the money was never spent, so balances already
        hold it. The released amount is kept in the audit trail.
        """
        commitment = self._require_commitment(commitment_id)
        if commitment.is_settled_one_time:
            raise BusinessRuleError("Commitment is already paid.", code="ALREADY_PAID")
        return self._close(commitment, instance_due_date, carry_leftover=False, as_of=as_of)

    def _close(
        self,
        commitment: Commitment,
        instance_due_date: date | None,
        *,
        carry_leftover: bool,
        as_of: date | None = None,
    ) -> ClosedInstance:
        target_due_date = instance_due_date or commitment.due_date
        action = "commitment.rollover" if carry_leftover else "commitment.release"
        try:
            closed = self._advancer.close_instance(
                commitment,
                target_due_date,
                carry_leftover=carry_leftover,
            )
            self._advancer.settle(commitment.id, paid_date=as_of or date.today())
            record_audit(
                self,
                action=action,
                entity_type="commitment_instance",
                entity_id=closed.instance.id,
                commitment_id=commitment.id,
                details={
                    "due_date": target_due_date,
                    "leftover": round(closed.leftover, 2),
                    "carried_to": closed.carried_to,
                },
            )
            self._session.commit()
            logger.info(
                f"{action} on {commitment.id} for {target_due_date}, leftover {closed.leftover:.2f}"
            )
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error running {action} for {commitment.id}: {exc}")
            raise

        domain_events.commitments_changed.emit(commitment.id)
        return closed


__all__ = ["CommitmentPaymentService"]
