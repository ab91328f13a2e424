from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.models import AlertSeverity


@dataclass
class Alert:
    severity: AlertSeverity
    message: str
    action: str
    commitment_id: Optional[str] = None


__all__ = ["Alert"]
