from __future__ import annotations

from core.exceptions import NotFoundError, ValidationError
from core.interfaces import AccountRepository, CommitmentRepository
from core.models import Commitment, CommitmentDirection, CommitmentPriority, Recurrence


class CommitmentValidationMixin:
    _commitment_repo: CommitmentRepository
    _account_repo: AccountRepository

    def _validate_commitment_name(self, name: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Commitment name cannot be empty.", code="COMMITMENT_NAME_EMPTY")

    def _validate_commitment_amount(self, amount: float) -> None:
        if amount is None or float(amount) <= 0:
            raise ValidationError("Commitment amount must be greater than 0.", code="INVALID_AMOUNT")

    def _validate_account_ref(self, account_id: str | None) -> None:
        if account_id is None:
            return
        if self._account_repo.get(account_id) is None:
            raise NotFoundError("Account not found.", code="ACCOUNT_NOT_FOUND")

    def _require_commitment(self, commitment_id: str) -> Commitment:
        commitment = self._commitment_repo.get(commitment_id)
        if commitment is None:
            raise NotFoundError("Commitment not found.", code="COMMITMENT_NOT_FOUND")
        return commitment

    @staticmethod
    def _coerce_direction(value) -> CommitmentDirection:
        if isinstance(value, CommitmentDirection):
            return value
        try:
            return CommitmentDirection(str(value).strip().lower())
        except ValueError as exc:
            raise ValidationError(
                "Commitment direction must be 'income' or 'bill'.",
                code="INVALID_DIRECTION",
            ) from exc

    @staticmethod
    def _coerce_priority(value) -> CommitmentPriority:
        if isinstance(value, CommitmentPriority):
            return value
        try:
            return CommitmentPriority(str(value).strip().lower())
        except ValueError as exc:
            raise ValidationError(
                "Commitment priority must be 'critical', 'normal' or 'flexible'.",
                code="INVALID_PRIORITY",
            ) from exc

    @staticmethod
    def _coerce_recurrence(value) -> Recurrence | None:
        if value is None or isinstance(value, Recurrence):
            return value
        return Recurrence.parse(str(value))


__all__ = ["CommitmentValidationMixin"]
