from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List

from core.domain.money import signed_impact
from core.models import CommitmentDirection, CommitmentPriority


@dataclass
class ProjectedOccurrence:
    commitment_id: str
    name: str
    amount: float
    direction: CommitmentDirection
    priority: CommitmentPriority
    due_date: date
    overdue: bool = False
    simulated: bool = False

    @property
    def label(self) -> str:
        return f"{self.name} (simulated)" if self.simulated else self.name


@dataclass
class ProjectionDay:
    day: date
    balance: float
    occurrences: List[ProjectedOccurrence] = field(default_factory=list)

    @property
    def net_change(self) -> float:
        return sum(
            signed_impact(o.amount, inflow=o.direction == CommitmentDirection.INCOME)
            for o in self.occurrences
        )


__all__ = ["ProjectedOccurrence", "ProjectionDay"]
