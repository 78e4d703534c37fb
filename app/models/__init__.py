"""Models package - domain entities and interfaces."""
from .interfaces import (
    FavoriteRepository,
    MediaRepository,
    ProfileRepository,
    ReviewRepository,
    TrendingRepository,
)
from .schemas import (
    CatalogDetail,
    ErrorResponse,
    Favorite,
    FavoriteCreate,
    FavoriteWithMedia,
    MediaDetail,
    MediaItem,
    MediaUpsert,
    MessageResponse,
    Principal,
    Profile,
    ProfileUpdate,
    Review,
    ReviewCreate,
    ReviewUpdate,
    ReviewWithAuthor,
    TrendingEntry,
    TrendingWithMedia,
)

__all__ = [
    # Interfaces
    "FavoriteRepository",
    "MediaRepository",
    "ProfileRepository",
    "ReviewRepository",
    "TrendingRepository",
    # Schemas
    "CatalogDetail",
    "ErrorResponse",
    "Favorite",
    "FavoriteCreate",
    "FavoriteWithMedia",
    "MediaDetail",
    "MediaItem",
    "MediaUpsert",
    "MessageResponse",
    "Principal",
    "Profile",
    "ProfileUpdate",
    "Review",
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewWithAuthor",
    "TrendingEntry",
    "TrendingWithMedia",
]
