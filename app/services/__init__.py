"""Services package - business logic layer."""
from .catalog import CatalogClient
from .favorites import FavoriteService
from .identity import (
    IdentityVerifier,
    SessionIdentityVerifier,
    TokenIdentityVerifier,
    extract_bearer_token,
)
from .media import MediaService
from .profiles import ProfileService
from .reviews import ReviewService
from .trending import TrendingService

__all__ = [
    "CatalogClient",
    "FavoriteService",
    "IdentityVerifier",
    "MediaService",
    "ProfileService",
    "ReviewService",
    "SessionIdentityVerifier",
    "TokenIdentityVerifier",
    "TrendingService",
    "extract_bearer_token",
]
