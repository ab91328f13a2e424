from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Tuple

from sqlalchemy.orm import Session

from core.exceptions import ValidationError
from core.interfaces import AccountRepository, CommitmentRepository, InstanceRepository
from core.models import Commitment, CommitmentInstance
from core.domain.identifiers import instance_key
from core.domain.money import exceeds
from core.services.common.base import ServiceBase
from core.services.projection.models import ProjectedOccurrence, ProjectionDay
from core.services.recurrence.expander import expand_occurrences

logger = logging.getLogger(__name__)

DEFAULT_PROJECTION_DAYS = 28


class ProjectionService(ServiceBase):
    """Day-by-day running balance over the coming days.

    Read-only. All rows come from the session's current transaction so accounts,
    commitments and envelopes are seen as one snapshot.
    """

    def __init__(
        self,
        session: Session,
        account_repo: AccountRepository,
        commitment_repo: CommitmentRepository,
        instance_repo: InstanceRepository,
    ):
        super().__init__(session)
        self._account_repo: AccountRepository = account_repo
        self._commitment_repo: CommitmentRepository = commitment_repo
        self._instance_repo: InstanceRepository = instance_repo

    def project(
        self,
        days: int = DEFAULT_PROJECTION_DAYS,
        simulated_early_ids: Iterable[str] = (),
        as_of: date | None = None,
    ) -> List[ProjectionDay]:
        if days is None or int(days) < 0:
            raise ValidationError("Projection horizon cannot be negative.", code="INVALID_HORIZON")
        today = self._today(as_of)
        horizon_end = today + timedelta(days=int(days))
        simulated = set(simulated_early_ids or ())

        seed = sum(a.current_balance for a in self._account_repo.list_all() if a.is_spendable)
        instances: Dict[Tuple[str, date], CommitmentInstance] = {
            instance_key(i.commitment_id, i.due_date): i for i in self._instance_repo.list_all()
        }

        projection = [
            ProjectionDay(day=today + timedelta(days=offset), balance=0.0)
            for offset in range(int(days) + 1)
        ]
        by_day = {p.day: p for p in projection}

        for commitment in self._commitment_repo.list_active():
            if commitment.is_settled_one_time:
                continue
            is_simulated = commitment.id in simulated and not commitment.is_recurring
            for placed_on, due_date, overdue in self._occurrences(
                commitment, today, horizon_end, instances, is_simulated
            ):
                target = by_day.get(placed_on)
                if target is None:
                    continue
                effective = commitment.amount
                instance = instances.get(instance_key(commitment.id, due_date))
                if instance is not None:
                    if instance.is_funded:
                        continue
                    effective = instance.remaining_amount
                    if not exceeds(effective, 0.0):
                        continue
                target.occurrences.append(
                    ProjectedOccurrence(
                        commitment_id=commitment.id,
                        name=commitment.name,
                        amount=effective,
                        direction=commitment.direction,
                        priority=commitment.priority,
                        due_date=due_date,
                        overdue=overdue,
                        simulated=is_simulated,
                    )
                )

        # each occurrence shifts its own day and every later one
        running = seed
        for projected in projection:
            running += projected.net_change
            projected.balance = round(running, 2)

        logger.debug(f"Projected {len(projection)} day(s) from {today} with seed {seed:.2f}")
        return projection

    @staticmethod
    def _occurrences(
        commitment: Commitment,
        today: date,
        horizon_end: date,
        instances: Dict[Tuple[str, date], CommitmentInstance],
        is_simulated: bool,
    ) -> List[Tuple[date, date, bool]]:
        """(day placed on, envelope due date, overdue) for one commitment."""
        if is_simulated:
            return [(today, commitment.due_date, commitment.due_date < today)]

        placed = [
            (due, due, False)
            for due in expand_occurrences(commitment.due_date, commitment.recurrence, today, horizon_end)
        ]
        if commitment.due_date < today:
            stale = instances.get(instance_key(commitment.id, commitment.due_date))
            if stale is None or not stale.is_funded:
                placed.insert(0, (today, commitment.due_date, True))
        return placed


__all__ = ["ProjectionService", "DEFAULT_PROJECTION_DAYS"]
