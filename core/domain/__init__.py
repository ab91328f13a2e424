from core.domain.account import Account
from core.domain.audit import AuditLogEntry
from core.domain.commitment import Commitment, CommitmentHistory, CommitmentInstance
from core.domain.enums import (
    AccountType,
    AlertSeverity,
    CommitmentDirection,
    CommitmentPriority,
    InstanceStatus,
    LedgerEntryType,
)
from core.domain.identifiers import generate_id, instance_key
from core.domain.ledger import (
    Allocation,
    AllocationRequest,
    LedgerEntry,
    LedgerLineItem,
    LineItemInput,
)
from core.domain.recurrence import IntervalUnit, Recurrence, RecurrenceKind

__all__ = [
    "generate_id",
    "instance_key",
    "AccountType",
    "AlertSeverity",
    "CommitmentDirection",
    "CommitmentPriority",
    "InstanceStatus",
    "LedgerEntryType",
    "Account",
    "Commitment",
    "CommitmentInstance",
    "CommitmentHistory",
    "Allocation",
    "AllocationRequest",
    "LedgerEntry",
    "LedgerLineItem",
    "LineItemInput",
    "Recurrence",
    "RecurrenceKind",
    "IntervalUnit",
    "AuditLogEntry",
]
