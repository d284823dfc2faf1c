"""Master API router mounted at /api/v1."""

from fastapi import APIRouter
from mentormatch.api.routes import (
    auth,
    health,
    messages,
    milestones,
    notifications,
    projects,
    stream,
    suggestions,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router)
# Static /projects/... paths must be registered before /projects/{project_id}
api_router.include_router(suggestions.router)
api_router.include_router(milestones.router)
api_router.include_router(projects.router)
api_router.include_router(messages.router)
api_router.include_router(notifications.router)
api_router.include_router(stream.router)
