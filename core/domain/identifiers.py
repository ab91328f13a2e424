from __future__ import annotations

from datetime import date
from uuid import uuid4


def generate_id() -> str:
    return str(uuid4())


def instance_key(commitment_id: str, due_date: date) -> tuple[str, date]:
    """Natural key of a commitment instance: one envelope per occurrence."""
    return (commitment_id, due_date)


__all__ = ["generate_id", "instance_key"]
