from core.services.audit.helpers import record_audit
from core.services.audit.service import AuditService

__all__ = ["AuditService", "record_audit"]
