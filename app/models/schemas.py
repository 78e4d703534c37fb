"""
Domain models using Pydantic.
Records returned by the store, request bodies, and composite responses.
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

MediaType = Literal["movie", "tv"]

RATING_MIN = 1
RATING_MAX = 5


# =============================================================================
# Identity
# =============================================================================


class Principal(BaseModel):
    """Authenticated end user, identified by the provider's subject id."""

    id: str = Field(..., min_length=1, description="Durable subject identifier")
    email: Optional[str] = Field(default=None, description="Email, when provided")


# =============================================================================
# Store Records
# =============================================================================


class StoreRecord(BaseModel):
    """Base for rows read from the store (ORM objects or dicts)."""

    model_config = ConfigDict(from_attributes=True)


class MediaItem(StoreRecord):
    """Catalog entry. Identity fields are immutable."""

    id: str
    external_catalog_id: int
    type: MediaType
    title: str
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    popularity: Optional[float] = None


class Review(StoreRecord):
    id: str
    media_id: str
    user_id: str
    rating: int
    review_text: str
    created_at: datetime


class AuthorSummary(BaseModel):
    """Author fields embedded in a review listing."""

    username: Optional[str] = None


class ReviewWithAuthor(Review):
    profiles: Optional[AuthorSummary] = None


class Profile(StoreRecord):
    id: str
    username: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Favorite(StoreRecord):
    user_id: str
    media_id: str
    created_at: datetime


class FavoriteWithMedia(Favorite):
    media: Optional[MediaItem] = None


class TrendingEntry(StoreRecord):
    id: str
    media_id: str
    trending_type: str
    created_at: datetime


class TrendingWithMedia(TrendingEntry):
    media: Optional[MediaItem] = None


class MediaUpsert(BaseModel):
    """Row written by the ingestion job, keyed by external_catalog_id."""

    external_catalog_id: int
    type: MediaType
    title: str
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    popularity: Optional[float] = None


# =============================================================================
# API Models (Requests)
# =============================================================================


class ReviewCreate(BaseModel):
    """Body of POST /reviews. Owner comes from the verified principal."""

    media_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX)
    review_text: str = Field(..., min_length=1)


class ReviewUpdate(BaseModel):
    """Body of PUT /reviews/{id}; at least one field required."""

    rating: Optional[int] = Field(default=None, ge=RATING_MIN, le=RATING_MAX)
    review_text: Optional[str] = Field(default=None, min_length=1)

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ProfileUpdate(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)


class FavoriteCreate(BaseModel):
    media_id: str = Field(..., min_length=1)


# =============================================================================
# API Models (Responses)
# =============================================================================


class CatalogDetail(BaseModel):
    """
    Extended detail from the external catalog (cast/crew, clips).
    Unknown catalog fields are passed through untouched.
    """

    model_config = ConfigDict(extra="allow")

    id: int
    credits: Dict[str, Any] = Field(default_factory=dict)
    videos: Dict[str, Any] = Field(default_factory=dict)


class MediaDetail(BaseModel):
    """Stored media item enriched with live catalog detail."""

    media: MediaItem
    details: CatalogDetail


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(..., description="Error message")


class HealthComponent(BaseModel):
    name: str
    state: str


class ReadinessResponse(BaseModel):
    status: str
    store_backend: str
    auth_backend: str
    circuit_breakers: List[HealthComponent]
