from infra.db.ledger.mapper import (
    allocation_from_orm,
    allocation_to_orm,
    ledger_from_orm,
    ledger_to_orm,
    line_item_from_orm,
    line_item_to_orm,
)
from infra.db.ledger.repository import SqlAlchemyAllocationRepository, SqlAlchemyLedgerRepository

__all__ = [
    "ledger_to_orm",
    "ledger_from_orm",
    "line_item_to_orm",
    "line_item_from_orm",
    "allocation_to_orm",
    "allocation_from_orm",
    "SqlAlchemyLedgerRepository",
    "SqlAlchemyAllocationRepository",
]
