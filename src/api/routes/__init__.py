"""API route modules."""

from .events import router as events_router
from .health import router as health_router
from .issues import router as issues_router
from .labels import router as labels_router
from .project_fields import router as project_fields_router

__all__ = [
    "health_router",
    "events_router",
    "issues_router",
    "labels_router",
    "project_fields_router",
]
