from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from core.services.account import AccountService
from core.services.alerts import AlertService
from core.services.allocation import AllocationEngine
from core.services.audit import AuditService
from core.services.commitment import CommitmentPaymentService, CommitmentService, RecurrenceAdvancer
from core.services.instances import InstanceService
from core.services.ledger import LedgerService
from core.services.projection import ProjectionService
from infra.db.repositories import (
    SqlAlchemyAccountRepository,
    SqlAlchemyAllocationRepository,
    SqlAlchemyAuditLogRepository,
    SqlAlchemyCommitmentHistoryRepository,
    SqlAlchemyCommitmentRepository,
    SqlAlchemyInstanceRepository,
    SqlAlchemyLedgerRepository,
)


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    audit_service: AuditService
    account_service: AccountService
    commitment_service: CommitmentService
    instance_service: InstanceService
    allocation_engine: AllocationEngine
    ledger_service: LedgerService
    payment_service: CommitmentPaymentService
    projection_service: ProjectionService
    alert_service: AlertService

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "audit_service": self.audit_service,
            "account_service": self.account_service,
            "commitment_service": self.commitment_service,
            "instance_service": self.instance_service,
            "allocation_engine": self.allocation_engine,
            "ledger_service": self.ledger_service,
            "payment_service": self.payment_service,
            "projection_service": self.projection_service,
            "alert_service": self.alert_service,
        }


def build_service_graph(session: Session) -> ServiceGraph:
    account_repo = SqlAlchemyAccountRepository(session)
    commitment_repo = SqlAlchemyCommitmentRepository(session)
    instance_repo = SqlAlchemyInstanceRepository(session)
    history_repo = SqlAlchemyCommitmentHistoryRepository(session)
    ledger_repo = SqlAlchemyLedgerRepository(session)
    allocation_repo = SqlAlchemyAllocationRepository(session)
    audit_repo = SqlAlchemyAuditLogRepository(session)

    audit_service = AuditService(session=session, audit_repo=audit_repo)
    advancer = RecurrenceAdvancer(commitment_repo, instance_repo)
    allocation_engine = AllocationEngine(
        session,
        account_repo,
        commitment_repo,
        instance_repo,
        allocation_repo,
        advancer,
    )

    account_service = AccountService(
        session,
        account_repo,
        commitment_repo,
        ledger_repo,
        audit_service=audit_service,
    )
    commitment_service = CommitmentService(
        session,
        commitment_repo,
        instance_repo,
        allocation_repo,
        history_repo,
        account_repo,
        advancer,
        audit_service=audit_service,
    )
    instance_service = InstanceService(session, commitment_repo, instance_repo)
    ledger_service = LedgerService(
        session,
        ledger_repo,
        allocation_repo,
        instance_repo,
        account_repo,
        allocation_engine,
        audit_service=audit_service,
    )
    payment_service = CommitmentPaymentService(
        session,
        commitment_repo,
        instance_repo,
        ledger_repo,
        history_repo,
        account_repo,
        allocation_engine,
        advancer,
        audit_service=audit_service,
    )
    projection_service = ProjectionService(session, account_repo, commitment_repo, instance_repo)
    alert_service = AlertService(session, projection_service, commitment_repo, instance_repo)

    return ServiceGraph(
        session=session,
        audit_service=audit_service,
        account_service=account_service,
        commitment_service=commitment_service,
        instance_service=instance_service,
        allocation_engine=allocation_engine,
        ledger_service=ledger_service,
        payment_service=payment_service,
        projection_service=projection_service,
        alert_service=alert_service,
    )
