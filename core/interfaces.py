from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from core.models import (
    Account,
    Allocation,
    AuditLogEntry,
    Commitment,
    CommitmentHistory,
    CommitmentInstance,
    LedgerEntry,
    LedgerLineItem,
)


class AccountRepository(ABC):
    @abstractmethod
    def add(self, account: Account) -> None: ...

    @abstractmethod
    def update(self, account: Account) -> None: ...

    @abstractmethod
    def delete(self, account_id: str) -> None: ...

    @abstractmethod
    def get(self, account_id: str) -> Optional[Account]: ...

    @abstractmethod
    def list_all(self) -> List[Account]: ...

    @abstractmethod
    def adjust_balance(self, account_id: str, delta: float) -> None: ...

    @abstractmethod
    def set_balance(self, account_id: str, balance: float) -> None: ...


class CommitmentRepository(ABC):
    @abstractmethod
    def add(self, commitment: Commitment) -> None: ...

    @abstractmethod
    def update(self, commitment: Commitment) -> None: ...

    @abstractmethod
    def delete(self, commitment_id: str) -> None: ...

    @abstractmethod
    def get(self, commitment_id: str) -> Optional[Commitment]: ...

    @abstractmethod
    def list_all(self) -> List[Commitment]: ...

    @abstractmethod
    def list_active(self) -> List[Commitment]: ...

    @abstractmethod
    def set_due_date(self, commitment_id: str, due_date: date) -> None: ...

    @abstractmethod
    def set_paid(
        self,
        commitment_id: str,
        *,
        paid: bool,
        actual_amount: float | None = None,
        paid_date: date | None = None,
    ) -> None: ...

    @abstractmethod
    def detach_account(self, account_id: str) -> None: ...


class InstanceRepository(ABC):
    @abstractmethod
    def get(self, instance_id: str) -> Optional[CommitmentInstance]: ...

    @abstractmethod
    def get_by_key(self, commitment_id: str, due_date: date) -> Optional[CommitmentInstance]: ...

    @abstractmethod
    def ensure(self, commitment_id: str, due_date: date, planned_amount: float) -> str: ...

    @abstractmethod
    def update(self, instance: CommitmentInstance) -> None: ...

    @abstractmethod
    def list_for_active_commitments(
        self,
        *,
        due_on_or_before: date,
        open_only: bool = False,
    ) -> List[CommitmentInstance]: ...

    @abstractmethod
    def list_all(self) -> List[CommitmentInstance]: ...

    @abstractmethod
    def delete_by_commitment(self, commitment_id: str) -> None: ...


class LedgerRepository(ABC):
    @abstractmethod
    def add(self, entry: LedgerEntry) -> None: ...

    @abstractmethod
    def update(self, entry: LedgerEntry) -> None: ...

    @abstractmethod
    def delete(self, entry_id: str) -> None: ...

    @abstractmethod
    def get(self, entry_id: str) -> Optional[LedgerEntry]: ...

    @abstractmethod
    def list_all(self) -> List[LedgerEntry]: ...

    @abstractmethod
    def detach_account(self, account_id: str) -> None: ...

    @abstractmethod
    def add_line_item(self, item: LedgerLineItem) -> None: ...

    @abstractmethod
    def list_line_items(self, entry_id: str) -> List[LedgerLineItem]: ...

    @abstractmethod
    def delete_line_items(self, entry_id: str) -> None: ...


class AllocationRepository(ABC):
    @abstractmethod
    def add(self, allocation: Allocation) -> None: ...

    @abstractmethod
    def list_by_ledger(self, entry_id: str) -> List[Allocation]: ...

    @abstractmethod
    def list_by_instance(self, instance_id: str) -> List[Allocation]: ...

    @abstractmethod
    def list_all(self) -> List[Allocation]: ...

    @abstractmethod
    def delete_by_ledger(self, entry_id: str) -> None: ...

    @abstractmethod
    def count_by_commitment(self, commitment_id: str) -> int: ...


class CommitmentHistoryRepository(ABC):
    @abstractmethod
    def add(self, row: CommitmentHistory) -> None: ...

    @abstractmethod
    def list_by_commitment(self, commitment_id: str) -> List[CommitmentHistory]: ...

    @abstractmethod
    def delete_by_commitment(self, commitment_id: str) -> None: ...


class AuditLogRepository(ABC):
    @abstractmethod
    def add(self, entry: AuditLogEntry) -> None: ...

    @abstractmethod
    def list_recent(
        self,
        limit: int = 200,
        *,
        entity_type: str | None = None,
        commitment_id: str | None = None,
    ) -> List[AuditLogEntry]: ...


__all__ = [
    "AccountRepository",
    "CommitmentRepository",
    "InstanceRepository",
    "LedgerRepository",
    "AllocationRepository",
    "CommitmentHistoryRepository",
    "AuditLogRepository",
]
