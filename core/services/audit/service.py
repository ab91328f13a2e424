from __future__ import annotations

from typing import Any, List

from sqlalchemy.orm import Session

from core.interfaces import AuditLogRepository
from core.models import AuditLogEntry


class AuditService:
    def __init__(self, session: Session, audit_repo: AuditLogRepository):
        self._session = session
        self._audit_repo = audit_repo

    def record(
        self,
        *,
        action: str,
        entity_type: str,
        entity_id: str,
        commitment_id: str | None = None,
        details: dict[str, Any] | None = None,
        commit: bool = False,
    ) -> AuditLogEntry:
        entry = AuditLogEntry.create(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            commitment_id=commitment_id,
            details=details or {},
        )
        self._audit_repo.add(entry)
        if commit:
            self._session.commit()
        return entry

    def list_recent(
        self,
        limit: int = 200,
        *,
        entity_type: str | None = None,
        commitment_id: str | None = None,
    ) -> List[AuditLogEntry]:
        return self._audit_repo.list_recent(
            limit=limit,
            entity_type=entity_type,
            commitment_id=commitment_id,
        )


__all__ = ["AuditService"]
