from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import NotFoundError, ValidationError
from core.interfaces import (
    AccountRepository,
    AllocationRepository,
    InstanceRepository,
    LedgerRepository,
)
from core.models import (
    AllocationRequest,
    LedgerEntry,
    LedgerEntryType,
    LedgerLineItem,
    LineItemInput,
)
from core.services.allocation.engine import AllocationEngine
from core.services.allocation.validation import AllocationValidationMixin
from core.services.audit.helpers import record_audit
from core.services.audit.service import AuditService

logger = logging.getLogger(__name__)


class LedgerService(AllocationValidationMixin):
    """Recorded money movements and the envelopes they fund."""

    def __init__(
        self,
        session: Session,
        ledger_repo: LedgerRepository,
        allocation_repo: AllocationRepository,
        instance_repo: InstanceRepository,
        account_repo: AccountRepository,
        engine: AllocationEngine,
        audit_service: AuditService | None = None,
    ):
        self._session: Session = session
        self._ledger_repo: LedgerRepository = ledger_repo
        self._allocation_repo: AllocationRepository = allocation_repo
        self._instance_repo: InstanceRepository = instance_repo
        self._account_repo: AccountRepository = account_repo
        self._engine: AllocationEngine = engine
        self._audit_service: AuditService | None = audit_service

    @staticmethod
    def _coerce_type(value) -> LedgerEntryType:
        if isinstance(value, LedgerEntryType):
            return value
        try:
            return LedgerEntryType(str(value).strip().lower())
        except ValueError as exc:
            raise ValidationError(
                "Transaction type must be 'income' or 'expense'.",
                code="INVALID_ENTRY_TYPE",
            ) from exc

    def _require_account(self, account_id: Optional[str]) -> None:
        if not account_id:
            raise ValidationError("Transaction account is required.", code="ACCOUNT_REQUIRED")
        if self._account_repo.get(account_id) is None:
            raise NotFoundError("Account not found.", code="ACCOUNT_NOT_FOUND")

    def _require_entry(self, entry_id: str) -> LedgerEntry:
        entry = self._ledger_repo.get(entry_id)
        if entry is None:
            raise NotFoundError("Ledger entry not found.", code="LEDGER_ENTRY_NOT_FOUND")
        return entry

    def _store_line_items(self, entry_id: str, items: Sequence[LineItemInput]) -> List[LedgerLineItem]:
        stored: List[LedgerLineItem] = []
        for item in items:
            line_item = LedgerLineItem.create(entry_id, item)
            self._ledger_repo.add_line_item(line_item)
            stored.append(line_item)
        return stored

    def post_entry(
        self,
        description: str,
        amount: float,
        entry_type: LedgerEntryType | str,
        account_id: str,
        allocations: Sequence[AllocationRequest] = (),
        line_items: Sequence[LineItemInput] = (),
        entry_date: date | None = None,
    ) -> LedgerEntry:
        if not description or not description.strip():
            raise ValidationError("Transaction description cannot be empty.", code="DESCRIPTION_EMPTY")
        self._validate_entry_amount(amount)
        resolved_type = self._coerce_type(entry_type)
        self._validate_allocation_requests(allocations, amount)
        self._validate_line_items(line_items, amount)
        self._require_account(account_id)

        entry = LedgerEntry.create(
            description=description.strip(),
            amount=amount,
            entry_type=resolved_type,
            account_id=account_id,
            entry_date=entry_date or date.today(),
        )

        try:
            self._ledger_repo.add(entry)
            entry.allocations = self._engine.apply_allocations(entry, allocations)
            entry.line_items = self._store_line_items(entry.id, line_items)
            record_audit(
                self,
                action="ledger.post",
                entity_type="ledger_entry",
                entity_id=entry.id,
                details={
                    "amount": entry.amount,
                    "type": entry.entry_type.value,
                    "account_id": account_id,
                    "allocations": len(entry.allocations),
                },
            )
            self._session.commit()
            logger.info(f"Posted ledger entry {entry.id} ({entry.entry_type.value} {entry.amount:.2f})")
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error posting ledger entry: {exc}")
            raise

        domain_events.ledger_changed.emit(entry.id)
        domain_events.accounts_changed.emit(account_id)
        return entry

    def edit_entry(
        self,
        entry_id: str,
        description: str | None = None,
        amount: float | None = None,
        entry_type: LedgerEntryType | str | None = None,
        account_id: str | None = None,
        allocations: Sequence[AllocationRequest] | None = None,
        line_items: Sequence[LineItemInput] | None = None,
    ) -> LedgerEntry:
        """Reverse the entry's effects, then re-apply them with the new values.

        ``allocations=None`` re-applies the entry's current allocations; pass an
        empty sequence to leave the entry unallocated. ``line_items=None`` keeps
        the current line items. Everything happens in one transaction.
        """
        existing = self._require_entry(entry_id)

        updated = LedgerEntry(
            id=existing.id,
            entry_date=existing.entry_date,
            description=existing.description,
            amount=existing.amount,
            entry_type=existing.entry_type,
            account_id=existing.account_id,
            commitment_id=existing.commitment_id,
            created_at=existing.created_at,
        )
        if description is not None:
            if not description.strip():
                raise ValidationError("Transaction description cannot be empty.", code="DESCRIPTION_EMPTY")
            updated.description = description.strip()
        if amount is not None:
            self._validate_entry_amount(amount)
            updated.amount = float(amount)
        if entry_type is not None:
            updated.entry_type = self._coerce_type(entry_type)
        if account_id is not None:
            self._require_account(account_id)
            updated.account_id = account_id

        if allocations is None:
            requests = self._current_requests(entry_id)
        else:
            requests = list(allocations)
        self._validate_allocation_requests(requests, updated.amount)

        if line_items is None:
            kept = self._ledger_repo.list_line_items(entry_id)
            self._validate_line_items(
                [LineItemInput(i.description, i.amount) for i in kept],
                updated.amount,
            )
        else:
            self._validate_line_items(line_items, updated.amount)

        try:
            self._engine.reverse_account_impact(existing)
            self._engine.reverse_allocations(entry_id)
            self._ledger_repo.update(updated)
            updated.allocations = self._engine.apply_allocations(updated, requests)
            if line_items is not None:
                self._ledger_repo.delete_line_items(entry_id)
                self._store_line_items(entry_id, line_items)
            updated.line_items = self._ledger_repo.list_line_items(entry_id)
            record_audit(
                self,
                action="ledger.edit",
                entity_type="ledger_entry",
                entity_id=entry_id,
                details={
                    "from_amount": existing.amount,
                    "to_amount": updated.amount,
                    "type": updated.entry_type.value,
                    "allocations": len(updated.allocations),
                },
            )
            self._session.commit()
            logger.info(f"Edited ledger entry {entry_id}")
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error editing ledger entry {entry_id}: {exc}")
            raise

        domain_events.ledger_changed.emit(entry_id)
        for touched_account in {existing.account_id, updated.account_id} - {None}:
            domain_events.accounts_changed.emit(touched_account)
        return updated

    def delete_entry(self, entry_id: str) -> None:
        existing = self._require_entry(entry_id)
        try:
            self._engine.reverse_allocations(entry_id)
            self._engine.reverse_account_impact(existing)
            self._ledger_repo.delete_line_items(entry_id)
            self._ledger_repo.delete(entry_id)
            record_audit(
                self,
                action="ledger.delete",
                entity_type="ledger_entry",
                entity_id=entry_id,
                details={"amount": existing.amount, "type": existing.entry_type.value},
            )
            self._session.commit()
            logger.info(f"Deleted ledger entry {entry_id}")
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error deleting ledger entry {entry_id}: {exc}")
            raise

        domain_events.ledger_changed.emit(entry_id)
        if existing.account_id:
            domain_events.accounts_changed.emit(existing.account_id)

    def _current_requests(self, entry_id: str) -> List[AllocationRequest]:
        requests: List[AllocationRequest] = []
        for allocation in self._allocation_repo.list_by_ledger(entry_id):
            instance = self._instance_repo.get(allocation.instance_id)
            if instance is None:
                continue
            requests.append(
                AllocationRequest(
                    commitment_id=allocation.commitment_id,
                    instance_due_date=instance.due_date,
                    amount=allocation.amount,
                    note=allocation.note,
                )
            )
        return requests

    def get_entry(self, entry_id: str) -> LedgerEntry:
        entry = self._require_entry(entry_id)
        entry.allocations = self._allocation_repo.list_by_ledger(entry_id)
        entry.line_items = self._ledger_repo.list_line_items(entry_id)
        return entry

    def list_entries(self) -> List[LedgerEntry]:
        """All entries, newest first, with their allocations and line items."""
        entries = self._ledger_repo.list_all()
        by_entry: dict[str, list] = {}
        for allocation in self._allocation_repo.list_all():
            by_entry.setdefault(allocation.ledger_entry_id, []).append(allocation)
        for entry in entries:
            entry.allocations = by_entry.get(entry.id, [])
            entry.line_items = self._ledger_repo.list_line_items(entry.id)
        return entries


__all__ = ["LedgerService"]
