from core.services.projection.models import ProjectedOccurrence, ProjectionDay
from core.services.projection.simulator import DEFAULT_PROJECTION_DAYS, ProjectionService

__all__ = [
    "DEFAULT_PROJECTION_DAYS",
    "ProjectedOccurrence",
    "ProjectionDay",
    "ProjectionService",
]
