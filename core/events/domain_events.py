"""Change notifications for accounts, commitments and the ledger."""
from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.accounts_changed: Signal[str] = Signal()     # account_id
        self.commitments_changed: Signal[str] = Signal()  # commitment_id
        self.ledger_changed: Signal[str] = Signal()       # ledger_entry_id


# SINGLE global instance
domain_events = DomainEvents()
