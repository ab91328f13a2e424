from infra.db.commitment.mapper import (
    commitment_from_orm,
    commitment_to_orm,
    history_from_orm,
    history_to_orm,
    instance_from_orm,
    instance_to_orm,
)
from infra.db.commitment.repository import (
    SqlAlchemyCommitmentHistoryRepository,
    SqlAlchemyCommitmentRepository,
    SqlAlchemyInstanceRepository,
)

__all__ = [
    "commitment_to_orm",
    "commitment_from_orm",
    "instance_to_orm",
    "instance_from_orm",
    "history_to_orm",
    "history_from_orm",
    "SqlAlchemyCommitmentRepository",
    "SqlAlchemyInstanceRepository",
    "SqlAlchemyCommitmentHistoryRepository",
]
