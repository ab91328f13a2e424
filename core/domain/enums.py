from __future__ import annotations

from enum import Enum


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CASH = "cash"
    CREDIT = "credit"


class CommitmentDirection(str, Enum):
    INCOME = "income"
    BILL = "bill"


class CommitmentPriority(str, Enum):
    CRITICAL = "critical"
    NORMAL = "normal"
    FLEXIBLE = "flexible"


class InstanceStatus(str, Enum):
    OPEN = "open"
    FUNDED = "funded"


class LedgerEntryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"

    @staticmethod
    def for_direction(direction: CommitmentDirection) -> "LedgerEntryType":
        if direction == CommitmentDirection.INCOME:
            return LedgerEntryType.INCOME
        return LedgerEntryType.EXPENSE


class AlertSeverity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


__all__ = [
    "AccountType",
    "CommitmentDirection",
    "CommitmentPriority",
    "InstanceStatus",
    "LedgerEntryType",
    "AlertSeverity",
]
