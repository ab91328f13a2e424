from core.services.ledger.service import LedgerService

__all__ = ["LedgerService"]
