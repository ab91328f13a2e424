from core.services.allocation.engine import AllocationEngine
from core.services.allocation.validation import AllocationValidationMixin

__all__ = ["AllocationEngine", "AllocationValidationMixin"]
