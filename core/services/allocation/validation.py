from __future__ import annotations

from typing import Sequence

from core.exceptions import ValidationError
from core.models import AllocationRequest, LineItemInput
from core.domain.money import amounts_match


class AllocationValidationMixin:
    def _validate_entry_amount(self, amount: float) -> None:
        if amount is None or float(amount) <= 0:
            raise ValidationError(
                "Transaction amount must be greater than 0.",
                code="INVALID_AMOUNT",
            )

    def _validate_allocation_requests(
        self,
        requests: Sequence[AllocationRequest],
        total_amount: float,
    ) -> None:
        if not requests:
            return
        for request in requests:
            if not request.commitment_id:
                raise ValidationError(
                    "Each allocation must name a commitment.",
                    code="ALLOCATION_COMMITMENT_REQUIRED",
                )
            if request.instance_due_date is None:
                raise ValidationError(
                    "Each allocation must name the occurrence due date.",
                    code="ALLOCATION_DUE_DATE_REQUIRED",
                )
            if float(request.amount) <= 0:
                raise ValidationError(
                    "Each allocation amount must be greater than 0.",
                    code="INVALID_ALLOCATION_AMOUNT",
                )
        allocated_total = sum(float(r.amount) for r in requests)
        if not amounts_match(allocated_total, total_amount):
            raise ValidationError(
                f"Allocation total ({allocated_total:.2f}) must equal transaction amount "
                f"({float(total_amount):.2f}).",
                code="ALLOCATION_SUM_MISMATCH",
            )

    def _validate_line_items(
        self,
        items: Sequence[LineItemInput],
        total_amount: float,
    ) -> None:
        if not items:
            return
        for item in items:
            if not (item.description or "").strip():
                raise ValidationError(
                    "Line item description cannot be empty.",
                    code="LINE_ITEM_DESCRIPTION_EMPTY",
                )
            if float(item.amount) <= 0:
                raise ValidationError(
                    "Each line item amount must be greater than 0.",
                    code="INVALID_LINE_ITEM_AMOUNT",
                )
        items_total = sum(float(i.amount) for i in items)
        if not amounts_match(items_total, total_amount):
            raise ValidationError(
                f"Line items total ({items_total:.2f}) must equal transaction amount "
                f"({float(total_amount):.2f}).",
                code="LINE_ITEM_SUM_MISMATCH",
            )


__all__ = ["AllocationValidationMixin"]
