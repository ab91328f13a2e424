from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional

from core.domain.enums import LedgerEntryType
from core.domain.identifiers import generate_id


@dataclass(frozen=True)
class AllocationRequest:
    """Caller's ask to put part of a transaction against one occurrence."""

    commitment_id: str
    instance_due_date: date
    amount: float
    note: Optional[str] = None


@dataclass(frozen=True)
class LineItemInput:
    description: str
    amount: float
    commitment_id: Optional[str] = None
    instance_due_date: Optional[date] = None


@dataclass
class Allocation:
    id: str
    ledger_entry_id: str
    instance_id: str
    commitment_id: str
    amount: float
    note: Optional[str] = None
    commitment_name: Optional[str] = None

    @staticmethod
    def create(
        ledger_entry_id: str,
        instance_id: str,
        commitment_id: str,
        amount: float,
        note: Optional[str] = None,
    ) -> "Allocation":
        return Allocation(
            id=generate_id(),
            ledger_entry_id=ledger_entry_id,
            instance_id=instance_id,
            commitment_id=commitment_id,
            amount=float(amount),
            note=note,
        )


@dataclass
class LedgerLineItem:
    id: str
    ledger_entry_id: str
    description: str
    amount: float
    commitment_id: Optional[str] = None
    instance_due_date: Optional[date] = None

    @staticmethod
    def create(ledger_entry_id: str, item: LineItemInput) -> "LedgerLineItem":
        return LedgerLineItem(
            id=generate_id(),
            ledger_entry_id=ledger_entry_id,
            description=item.description,
            amount=float(item.amount),
            commitment_id=item.commitment_id,
            instance_due_date=item.instance_due_date,
        )


@dataclass
class LedgerEntry:
    id: str
    entry_date: date
    description: str
    amount: float
    entry_type: LedgerEntryType
    account_id: Optional[str]
    commitment_id: Optional[str] = None
    created_at: Optional[datetime] = None
    allocations: List[Allocation] = field(default_factory=list)
    line_items: List[LedgerLineItem] = field(default_factory=list)

    @property
    def balance_impact(self) -> float:
        if self.entry_type == LedgerEntryType.INCOME:
            return self.amount
        return -self.amount

    @staticmethod
    def create(
        description: str,
        amount: float,
        entry_type: LedgerEntryType,
        account_id: Optional[str],
        entry_date: date,
        commitment_id: Optional[str] = None,
    ) -> "LedgerEntry":
        return LedgerEntry(
            id=generate_id(),
            entry_date=entry_date,
            description=description,
            amount=float(amount),
            entry_type=entry_type,
            account_id=account_id,
            commitment_id=commitment_id,
            created_at=datetime.now(timezone.utc),
        )


__all__ = [
    "AllocationRequest",
    "LineItemInput",
    "Allocation",
    "LedgerLineItem",
    "LedgerEntry",
]
