from core.services.commitment.advancer import ClosedInstance, RecurrenceAdvancer
from core.services.commitment.payment import CommitmentPaymentService
from core.services.commitment.service import CommitmentService

__all__ = [
    "ClosedInstance",
    "CommitmentPaymentService",
    "CommitmentService",
    "RecurrenceAdvancer",
]
