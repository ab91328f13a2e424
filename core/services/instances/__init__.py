from core.services.instances.service import ELIGIBILITY_WINDOW_DAYS, InstanceService

__all__ = ["InstanceService", "ELIGIBILITY_WINDOW_DAYS"]
