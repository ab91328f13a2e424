from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, List

from sqlalchemy.orm import Session

from core.interfaces import CommitmentRepository, InstanceRepository
from core.models import Commitment, CommitmentInstance
from core.services.common.base import ServiceBase
from core.services.recurrence.expander import expand_occurrences

logger = logging.getLogger(__name__)

ELIGIBILITY_WINDOW_DAYS = 28


class InstanceService(ServiceBase):
    """Lazily materializes one envelope per (commitment, occurrence date)."""

    def __init__(
        self,
        session: Session,
        commitment_repo: CommitmentRepository,
        instance_repo: InstanceRepository,
    ):
        super().__init__(session)
        self._commitment_repo: CommitmentRepository = commitment_repo
        self._instance_repo: InstanceRepository = instance_repo

    def ensure_instance(
        self,
        commitment_id: str,
        due_date: date,
        default_planned_amount: float,
        *,
        commit: bool = True,
    ) -> str:
        """Return the instance id for the occurrence, creating it when missing.

        An existing instance is returned untouched, so an edited planned amount
        survives repeated calls. With ``commit=False`` the row is only flushed
        into the caller's transaction.
        """
        if not commit:
            return self._instance_repo.ensure(commitment_id, due_date, default_planned_amount)
        try:
            instance_id = self._instance_repo.ensure(commitment_id, due_date, default_planned_amount)
            self._session.commit()
            return instance_id
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error ensuring instance for {commitment_id} on {due_date}: {exc}")
            raise

    def get_instance(self, commitment_id: str, due_date: date) -> CommitmentInstance | None:
        return self._instance_repo.get_by_key(commitment_id, due_date)

    def get_eligible_instances(self, as_of: date | None = None) -> List[CommitmentInstance]:
        """Open envelopes due on or before the end of the eligibility window.

        Overdue unfunded occurrences are carried forward regardless of how old
        they are.
        """
        today = self._today(as_of)
        window_end = today + timedelta(days=ELIGIBILITY_WINDOW_DAYS)
        candidates = [c for c in self._commitment_repo.list_active() if not c.paid]
        self._materialize(candidates, today, window_end)
        return self._instance_repo.list_for_active_commitments(
            due_on_or_before=window_end,
            open_only=True,
        )

    def get_all_instances_for_window(
        self,
        window_end: date,
        as_of: date | None = None,
    ) -> List[CommitmentInstance]:
        today = self._today(as_of)
        candidates = [c for c in self._commitment_repo.list_active() if not c.is_settled_one_time]
        self._materialize(candidates, today, window_end)
        return self._instance_repo.list_for_active_commitments(due_on_or_before=window_end)

    def _materialize(self, commitments: Iterable[Commitment], today: date, window_end: date) -> None:
        ensured = 0
        try:
            for commitment in commitments:
                due_dates = expand_occurrences(
                    commitment.due_date, commitment.recurrence, today, window_end
                )
                if commitment.due_date < today:
                    due_dates.insert(0, commitment.due_date)
                for due_date in due_dates:
                    self._instance_repo.ensure(commitment.id, due_date, commitment.amount)
                    ensured += 1
            self._session.commit()
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error materializing commitment instances: {exc}")
            raise
        logger.debug(f"Ensured {ensured} commitment instance(s) through {window_end}")


__all__ = ["InstanceService", "ELIGIBILITY_WINDOW_DAYS"]
