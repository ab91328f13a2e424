from __future__ import annotations

from typing import List

from core.interfaces import CommitmentHistoryRepository, CommitmentRepository
from core.models import Commitment, CommitmentHistory


class CommitmentQueryMixin:
    _commitment_repo: CommitmentRepository
    _history_repo: CommitmentHistoryRepository

    def get_commitment(self, commitment_id: str) -> Commitment | None:
        return self._commitment_repo.get(commitment_id)

    def list_commitments(self, *, active_only: bool = False) -> List[Commitment]:
        if active_only:
            return self._commitment_repo.list_active()
        return self._commitment_repo.list_all()

    def list_history(self, commitment_id: str) -> List[CommitmentHistory]:
        return self._history_repo.list_by_commitment(commitment_id)


__all__ = ["CommitmentQueryMixin"]
