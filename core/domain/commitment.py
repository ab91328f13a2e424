from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from core.domain.enums import CommitmentDirection, CommitmentPriority, InstanceStatus
from core.domain.identifiers import generate_id
from core.domain.money import at_least
from core.domain.recurrence import Recurrence


@dataclass
class Commitment:
    """An expected income or bill.

    For recurring commitments ``due_date`` is the earliest occurrence that is not
    yet fully funded; it only ever moves forward. For one-time commitments it is
    the single occurrence and ``paid`` is the terminal marker.
    """

    id: str
    name: str
    direction: CommitmentDirection
    amount: float
    due_date: date
    recurrence: Optional[Recurrence] = None
    priority: CommitmentPriority = CommitmentPriority.NORMAL
    autopay: bool = False
    account_id: Optional[str] = None
    active: bool = True
    paid: bool = False
    actual_amount: Optional[float] = None
    paid_date: Optional[date] = None
    created_at: Optional[datetime] = None

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    @property
    def is_income(self) -> bool:
        return self.direction == CommitmentDirection.INCOME

    @property
    def is_settled_one_time(self) -> bool:
        return self.paid and not self.is_recurring

    @staticmethod
    def create(
        name: str,
        direction: CommitmentDirection,
        amount: float,
        due_date: date,
        recurrence: Optional[Recurrence] = None,
        priority: CommitmentPriority = CommitmentPriority.NORMAL,
        autopay: bool = False,
        account_id: Optional[str] = None,
    ) -> "Commitment":
        return Commitment(
            id=generate_id(),
            name=name,
            direction=direction,
            amount=float(amount),
            due_date=due_date,
            recurrence=recurrence,
            priority=priority,
            autopay=autopay,
            account_id=account_id,
            created_at=datetime.now(timezone.utc),
        )


@dataclass
class CommitmentInstance:
    """Envelope for one occurrence of a commitment."""

    id: str
    commitment_id: str
    due_date: date
    planned_amount: float
    allocated_amount: float = 0.0
    status: InstanceStatus = InstanceStatus.OPEN
    version: int = 1
    commitment_name: Optional[str] = None
    commitment_direction: Optional[CommitmentDirection] = None

    @property
    def remaining_amount(self) -> float:
        return self.planned_amount - self.allocated_amount

    @property
    def is_funded(self) -> bool:
        return self.status == InstanceStatus.FUNDED

    def derived_status(self) -> InstanceStatus:
        if at_least(self.allocated_amount, self.planned_amount):
            return InstanceStatus.FUNDED
        return InstanceStatus.OPEN

    @staticmethod
    def create(commitment_id: str, due_date: date, planned_amount: float) -> "CommitmentInstance":
        return CommitmentInstance(
            id=generate_id(),
            commitment_id=commitment_id,
            due_date=due_date,
            planned_amount=float(planned_amount),
        )


@dataclass
class CommitmentHistory:
    id: str
    commitment_id: str
    amount: float
    actual_amount: float
    paid_date: date
    due_date: date

    @staticmethod
    def create(
        commitment_id: str,
        amount: float,
        actual_amount: float,
        paid_date: date,
        due_date: date,
    ) -> "CommitmentHistory":
        return CommitmentHistory(
            id=generate_id(),
            commitment_id=commitment_id,
            amount=float(amount),
            actual_amount=float(actual_amount),
            paid_date=paid_date,
            due_date=due_date,
        )


__all__ = ["Commitment", "CommitmentInstance", "CommitmentHistory"]
