# core/exceptions.py

class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str,*, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when caller data is malformed or breaks an envelope limit."""


class NotFoundError(DomainError):
    """Raised when a referenced account, commitment, instance or ledger entry is absent."""


class BusinessRuleError(DomainError):
    """Raised when an action is not allowed in the current state (e.g. rollover of a one-time bill)."""


class ConcurrencyError(DomainError):
    """Raised when optimistic locking detects a stale update."""
