"""
Repository interfaces (abstractions).
Using Protocol for structural subtyping (duck typing with type hints).
Production: SQLAlchemy async repositories. Testing: in-memory implementations.

Every method is a single logical store query. Implementations raise
``StoreError`` on store failure and return ``None``/``False`` for absent rows.
"""
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from app.core.pagination import PageWindow
from app.models.schemas import (
    Favorite,
    FavoriteWithMedia,
    MediaItem,
    MediaType,
    MediaUpsert,
    Profile,
    Review,
    ReviewWithAuthor,
    TrendingWithMedia,
)


@runtime_checkable
class MediaRepository(Protocol):
    """Catalog table access."""

    async def search(
        self,
        window: PageWindow,
        title: Optional[str] = None,
        media_type: Optional[MediaType] = None,
    ) -> List[MediaItem]:
        """
        Filtered scan over the catalog.

        Args:
            window: Inclusive offset window
            title: Case-insensitive substring match on title
            media_type: Exact match on type

        Returns:
            At most ``window.limit`` items, ordered by title then id
        """
        ...

    async def get(self, media_id: str) -> Optional[MediaItem]:
        ...

    async def upsert_many(self, items: Sequence[MediaUpsert]) -> int:
        """Insert or refresh rows keyed by external_catalog_id; returns count."""
        ...


@runtime_checkable
class ReviewRepository(Protocol):
    """Review table access."""

    async def create(
        self, user_id: str, media_id: str, rating: int, review_text: str
    ) -> Review:
        ...

    async def get(self, review_id: str) -> Optional[Review]:
        ...

    async def list_for_media(self, media_id: str) -> List[ReviewWithAuthor]:
        """Reviews for a media item with the author's username, newest first."""
        ...

    async def update(
        self, review_id: str, owner_id: str, changes: Dict[str, Any]
    ) -> Optional[Review]:
        """Update where id AND user_id match; None if no row matched."""
        ...

    async def delete(self, review_id: str, owner_id: str) -> bool:
        """Delete where id AND user_id match; False if no row matched."""
        ...


@runtime_checkable
class ProfileRepository(Protocol):
    """Profile table access."""

    async def get(self, profile_id: str) -> Optional[Profile]:
        ...

    async def update(self, profile_id: str, username: str) -> Optional[Profile]:
        ...


@runtime_checkable
class FavoriteRepository(Protocol):
    """Favorite table access. (user_id, media_id) is unique."""

    async def add(self, user_id: str, media_id: str) -> Favorite:
        """Create the favorite, or return the existing one for the pair."""
        ...

    async def list_for_user(self, user_id: str) -> List[FavoriteWithMedia]:
        """Favorites with embedded media, newest first."""
        ...

    async def remove(self, user_id: str, media_id: str) -> int:
        """Delete the pair; returns rows affected (0 is not an error)."""
        ...


@runtime_checkable
class TrendingRepository(Protocol):
    """Trending table access (read-only)."""

    async def list(
        self, limit: int, trending_type: Optional[str] = None
    ) -> List[TrendingWithMedia]:
        """Entries with embedded media, newest first, at most ``limit``."""
        ...
