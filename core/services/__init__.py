from .account import AccountService
from .alerts import Alert, AlertService
from .allocation import AllocationEngine
from .audit import AuditService
from .commitment import ClosedInstance, CommitmentPaymentService, CommitmentService, RecurrenceAdvancer
from .instances import InstanceService
from .ledger import LedgerService
from .projection import ProjectedOccurrence, ProjectionDay, ProjectionService
from .recurrence import expand_occurrences

__all__ = [
    "AccountService",
    "Alert",
    "AlertService",
    "AllocationEngine",
    "AuditService",
    "ClosedInstance",
    "CommitmentPaymentService",
    "CommitmentService",
    "RecurrenceAdvancer",
    "InstanceService",
    "LedgerService",
    "ProjectedOccurrence",
    "ProjectionDay",
    "ProjectionService",
    "expand_occurrences",
]
