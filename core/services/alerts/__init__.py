from core.services.alerts.models import Alert
from core.services.alerts.service import AlertService

__all__ = ["Alert", "AlertService"]
