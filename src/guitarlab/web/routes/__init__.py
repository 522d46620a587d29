"""Route handlers for the Web API."""

from guitarlab.web.routes.health import router as health_router
from guitarlab.web.routes.progress import router as progress_router
from guitarlab.web.routes.achievements import router as achievements_router
from guitarlab.web.routes.content import router as content_router

__all__ = [
    "health_router",
    "progress_router",
    "achievements_router",
    "content_router",
]
