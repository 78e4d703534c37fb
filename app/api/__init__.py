"""API package - FastAPI routes and dependencies."""
from .dependencies import get_current_principal
from .routers import (
    favorites_router,
    health_router,
    media_router,
    profile_router,
    reviews_router,
    trending_router,
)

__all__ = [
    "favorites_router",
    "get_current_principal",
    "health_router",
    "media_router",
    "profile_router",
    "reviews_router",
    "trending_router",
]
