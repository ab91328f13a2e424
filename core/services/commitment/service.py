from __future__ import annotations

from sqlalchemy.orm import Session

from core.interfaces import (
    AccountRepository,
    AllocationRepository,
    CommitmentHistoryRepository,
    CommitmentRepository,
    InstanceRepository,
)
from core.services.audit.service import AuditService
from core.services.commitment.advancer import RecurrenceAdvancer
from core.services.commitment.lifecycle import CommitmentLifecycleMixin
from core.services.commitment.query import CommitmentQueryMixin


class CommitmentService(CommitmentLifecycleMixin, CommitmentQueryMixin):
    def __init__(
        self,
        session: Session,
        commitment_repo: CommitmentRepository,
        instance_repo: InstanceRepository,
        allocation_repo: AllocationRepository,
        history_repo: CommitmentHistoryRepository,
        account_repo: AccountRepository,
        advancer: RecurrenceAdvancer,
        audit_service: AuditService | None = None,
    ):
        self._session: Session = session
        self._commitment_repo: CommitmentRepository = commitment_repo
        self._instance_repo: InstanceRepository = instance_repo
        self._allocation_repo: AllocationRepository = allocation_repo
        self._history_repo: CommitmentHistoryRepository = history_repo
        self._account_repo: AccountRepository = account_repo
        self._advancer: RecurrenceAdvancer = advancer
        self._audit_service: AuditService | None = audit_service


__all__ = ["CommitmentService"]
