from __future__ import annotations

from core.models import Allocation, LedgerEntry, LedgerEntryType, LedgerLineItem
from infra.db.models import AllocationORM, LedgerEntryORM, LedgerLineItemORM


def ledger_to_orm(entry: LedgerEntry) -> LedgerEntryORM:
    return LedgerEntryORM(
        id=entry.id,
        entry_date=entry.entry_date,
        description=entry.description,
        amount=float(entry.amount),
        entry_type=entry.entry_type,
        account_id=entry.account_id,
        commitment_id=entry.commitment_id,
        created_at=entry.created_at,
    )


def ledger_from_orm(obj: LedgerEntryORM) -> LedgerEntry:
    return LedgerEntry(
        id=obj.id,
        entry_date=obj.entry_date,
        description=obj.description,
        amount=float(obj.amount),
        entry_type=LedgerEntryType(obj.entry_type),
        account_id=obj.account_id,
        commitment_id=obj.commitment_id,
        created_at=obj.created_at,
    )


def line_item_to_orm(item: LedgerLineItem) -> LedgerLineItemORM:
    return LedgerLineItemORM(
        id=item.id,
        ledger_entry_id=item.ledger_entry_id,
        description=item.description,
        amount=float(item.amount),
        commitment_id=item.commitment_id,
        instance_due_date=item.instance_due_date,
    )


def line_item_from_orm(obj: LedgerLineItemORM) -> LedgerLineItem:
    return LedgerLineItem(
        id=obj.id,
        ledger_entry_id=obj.ledger_entry_id,
        description=obj.description,
        amount=float(obj.amount),
        commitment_id=obj.commitment_id,
        instance_due_date=obj.instance_due_date,
    )


def allocation_to_orm(allocation: Allocation) -> AllocationORM:
    return AllocationORM(
        id=allocation.id,
        ledger_entry_id=allocation.ledger_entry_id,
        instance_id=allocation.instance_id,
        commitment_id=allocation.commitment_id,
        amount=float(allocation.amount),
        note=allocation.note,
    )


def allocation_from_orm(obj: AllocationORM, *, commitment_name: str | None = None) -> Allocation:
    return Allocation(
        id=obj.id,
        ledger_entry_id=obj.ledger_entry_id,
        instance_id=obj.instance_id,
        commitment_id=obj.commitment_id,
        amount=float(obj.amount),
        note=obj.note,
        commitment_name=commitment_name,
    )


__all__ = [
    "ledger_to_orm",
    "ledger_from_orm",
    "line_item_to_orm",
    "line_item_from_orm",
    "allocation_to_orm",
    "allocation_from_orm",
]
