from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from core.interfaces import AllocationRepository, LedgerRepository
from core.models import Allocation, LedgerEntry, LedgerLineItem
from infra.db.ledger.mapper import (
    allocation_from_orm,
    allocation_to_orm,
    ledger_from_orm,
    ledger_to_orm,
    line_item_from_orm,
    line_item_to_orm,
)
from infra.db.models import AllocationORM, CommitmentORM, LedgerEntryORM, LedgerLineItemORM


class SqlAlchemyLedgerRepository(LedgerRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, entry: LedgerEntry) -> None:
        self.session.add(ledger_to_orm(entry))
        self.session.flush()

    def update(self, entry: LedgerEntry) -> None:
        self.session.execute(
            update(LedgerEntryORM)
            .where(LedgerEntryORM.id == entry.id)
            .values(
                description=entry.description,
                amount=float(entry.amount),
                entry_type=entry.entry_type,
                account_id=entry.account_id,
                entry_date=entry.entry_date,
            )
        )

    def delete(self, entry_id: str) -> None:
        self.session.query(LedgerEntryORM).filter_by(id=entry_id).delete()

    def get(self, entry_id: str) -> Optional[LedgerEntry]:
        obj = self.session.get(LedgerEntryORM, entry_id, populate_existing=True)
        return ledger_from_orm(obj) if obj else None

    def list_all(self) -> List[LedgerEntry]:
        stmt = select(LedgerEntryORM).order_by(
            LedgerEntryORM.entry_date.desc(),
            LedgerEntryORM.created_at.desc(),
        )
        rows = self.session.execute(stmt.execution_options(populate_existing=True)).scalars().all()
        return [ledger_from_orm(row) for row in rows]

    def detach_account(self, account_id: str) -> None:
        self.session.execute(
            update(LedgerEntryORM)
            .where(LedgerEntryORM.account_id == account_id)
            .values(account_id=None)
        )

    def add_line_item(self, item: LedgerLineItem) -> None:
        self.session.add(line_item_to_orm(item))
        self.session.flush()

    def list_line_items(self, entry_id: str) -> List[LedgerLineItem]:
        stmt = select(LedgerLineItemORM).where(LedgerLineItemORM.ledger_entry_id == entry_id)
        rows = self.session.execute(stmt).scalars().all()
        return [line_item_from_orm(row) for row in rows]

    def delete_line_items(self, entry_id: str) -> None:
        self.session.query(LedgerLineItemORM).filter_by(ledger_entry_id=entry_id).delete()


class SqlAlchemyAllocationRepository(AllocationRepository):
    def __init__(self, session: Session):
        self.session = session

    def _with_names(self):
        return select(AllocationORM, CommitmentORM.name).join(
            CommitmentORM, CommitmentORM.id == AllocationORM.commitment_id
        )

    def add(self, allocation: Allocation) -> None:
        self.session.add(allocation_to_orm(allocation))
        self.session.flush()

    def list_by_ledger(self, entry_id: str) -> List[Allocation]:
        rows = self.session.execute(
            self._with_names().where(AllocationORM.ledger_entry_id == entry_id)
        ).all()
        return [allocation_from_orm(obj, commitment_name=name) for obj, name in rows]

    def list_by_instance(self, instance_id: str) -> List[Allocation]:
        rows = self.session.execute(
            self._with_names().where(AllocationORM.instance_id == instance_id)
        ).all()
        return [allocation_from_orm(obj, commitment_name=name) for obj, name in rows]

    def list_all(self) -> List[Allocation]:
        rows = self.session.execute(self._with_names()).all()
        return [allocation_from_orm(obj, commitment_name=name) for obj, name in rows]

    def delete_by_ledger(self, entry_id: str) -> None:
        self.session.query(AllocationORM).filter_by(ledger_entry_id=entry_id).delete()

    def count_by_commitment(self, commitment_id: str) -> int:
        stmt = select(func.count(AllocationORM.id)).where(AllocationORM.commitment_id == commitment_id)
        return int(self.session.execute(stmt).scalar_one())


__all__ = ["SqlAlchemyLedgerRepository", "SqlAlchemyAllocationRepository"]
