"""Compatibility wrapper: domain models are importable from ``core.models``."""

from core.domain import (
    Account,
    AccountType,
    AlertSeverity,
    Allocation,
    AllocationRequest,
    AuditLogEntry,
    Commitment,
    CommitmentDirection,
    CommitmentHistory,
    CommitmentInstance,
    CommitmentPriority,
    InstanceStatus,
    IntervalUnit,
    LedgerEntry,
    LedgerEntryType,
    LedgerLineItem,
    LineItemInput,
    Recurrence,
    RecurrenceKind,
    generate_id,
)

__all__ = [
    "generate_id",
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
