"""API routers package."""
from .favorites import router as favorites_router
from .health import router as health_router
from .media import router as media_router
from .profile import router as profile_router
from .reviews import router as reviews_router
from .trending import router as trending_router

__all__ = [
    "favorites_router",
    "health_router",
    "media_router",
    "profile_router",
    "reviews_router",
    "trending_router",
]
