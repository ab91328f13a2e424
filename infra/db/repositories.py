"""Compatibility wrapper: SQLAlchemy repositories importable from one module."""

from infra.db.account.repository import SqlAlchemyAccountRepository
from infra.db.audit.repository import SqlAlchemyAuditLogRepository
from infra.db.commitment.repository import (
    SqlAlchemyCommitmentHistoryRepository,
    SqlAlchemyCommitmentRepository,
    SqlAlchemyInstanceRepository,
)
from infra.db.ledger.repository import SqlAlchemyAllocationRepository, SqlAlchemyLedgerRepository

__all__ = [
    "SqlAlchemyAccountRepository",
    "SqlAlchemyAuditLogRepository",
    "SqlAlchemyCommitmentRepository",
    "SqlAlchemyInstanceRepository",
    "SqlAlchemyCommitmentHistoryRepository",
    "SqlAlchemyLedgerRepository",
    "SqlAlchemyAllocationRepository",
]
