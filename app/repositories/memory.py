"""
In-memory repository implementations.
Used for local development and testing when no DATABASE_URL is configured.
All repositories share one ``InMemoryDatabase`` so joins across tables work,
and foreign-key / uniqueness constraints are checked the way the relational
store would check them.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from app.core.exceptions import StoreError
from app.core.pagination import PageWindow
from app.models.schemas import (
    AuthorSummary,
    Favorite,
    FavoriteWithMedia,
    MediaItem,
    MediaType,
    MediaUpsert,
    Profile,
    Review,
    ReviewWithAuthor,
    TrendingEntry,
    TrendingWithMedia,
)

REVIEW_MUTABLE_FIELDS = frozenset({"rating", "review_text"})


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _newest_first(records):
    """Order by created_at descending; ties go to the later insert."""
    indexed = list(enumerate(records))
    indexed.sort(key=lambda pair: (pair[1].created_at, pair[0]), reverse=True)
    return [record for _, record in indexed]


class InMemoryDatabase:
    """Tables held as dicts keyed by primary key."""

    def __init__(self) -> None:
        self.media: Dict[str, MediaItem] = {}
        self.profiles: Dict[str, Profile] = {}
        self.reviews: Dict[str, Review] = {}
        self.favorites: Dict[Tuple[str, str], Favorite] = {}
        self.trending: Dict[str, TrendingEntry] = {}

    def require_media(self, media_id: str, table: str) -> None:
        if media_id not in self.media:
            raise StoreError(
                f'insert or update on table "{table}" violates foreign key '
                f'constraint "{table}_media_id_fkey"',
                operation=f"{table}.insert",
            )

    # -------------------------------------------------------------------------
    # Seeding helpers (tests / local development)
    # -------------------------------------------------------------------------

    def add_media(
        self,
        media_id: str,
        title: str,
        media_type: MediaType = "movie",
        external_catalog_id: Optional[int] = None,
    ) -> MediaItem:
        item = MediaItem(
            id=media_id,
            external_catalog_id=(
                external_catalog_id
                if external_catalog_id is not None
                else len(self.media) + 1
            ),
            type=media_type,
            title=title,
        )
        self.media[media_id] = item
        return item

    def add_profile(self, profile_id: str, username: Optional[str]) -> Profile:
        profile = Profile(id=profile_id, username=username, created_at=_now())
        self.profiles[profile_id] = profile
        return profile

    def add_trending(
        self,
        media_id: str,
        trending_type: str,
        created_at: Optional[datetime] = None,
    ) -> TrendingEntry:
        self.require_media(media_id, "trending")
        entry = TrendingEntry(
            id=str(uuid.uuid4()),
            media_id=media_id,
            trending_type=trending_type,
            created_at=created_at or _now(),
        )
        self.trending[entry.id] = entry
        return entry

    def load_sample_data(self) -> None:
        """Load a small catalog for local development."""
        base = _now() - timedelta(hours=1)
        for index, (title, media_type) in enumerate(
            [
                ("The Matrix", "movie"),
                ("The Matrix Reloaded", "movie"),
                ("Inception", "movie"),
                ("Breaking Bad", "tv"),
                ("The Expanse", "tv"),
            ],
            start=1,
        ):
            media_id = f"m{index}"
            self.add_media(media_id, title, media_type, external_catalog_id=1000 + index)
            self.add_trending(
                media_id,
                "day" if index % 2 else "week",
                created_at=base + timedelta(minutes=index),
            )


class InMemoryMediaRepository:
    """In-memory implementation of MediaRepository."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def search(
        self,
        window: PageWindow,
        title: Optional[str] = None,
        media_type: Optional[MediaType] = None,
    ) -> List[MediaItem]:
        needle = title.lower() if title else None
        matches = [
            item
            for item in self._db.media.values()
            if (needle is None or needle in item.title.lower())
            and (media_type is None or item.type == media_type)
        ]
        matches.sort(key=lambda item: (item.title, item.id))
        return matches[window.start:window.end + 1]

    async def get(self, media_id: str) -> Optional[MediaItem]:
        return self._db.media.get(media_id)

    async def upsert_many(self, items: Sequence[MediaUpsert]) -> int:
        by_external_id = {item.external_catalog_id: item for item in items}
        existing = {m.external_catalog_id: m for m in self._db.media.values()}
        for external_id, item in by_external_id.items():
            current = existing.get(external_id)
            if current is None:
                new_id = str(uuid.uuid4())
                self._db.media[new_id] = MediaItem(id=new_id, **item.model_dump())
            else:
                self._db.media[current.id] = current.model_copy(
                    update=item.model_dump(
                        include={"title", "overview", "poster_path", "release_date", "popularity"}
                    )
                )
        return len(by_external_id)


class InMemoryReviewRepository:
    """In-memory implementation of ReviewRepository."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def create(
        self, user_id: str, media_id: str, rating: int, review_text: str
    ) -> Review:
        self._db.require_media(media_id, "reviews")
        review = Review(
            id=str(uuid.uuid4()),
            media_id=media_id,
            user_id=user_id,
            rating=rating,
            review_text=review_text,
            created_at=_now(),
        )
        self._db.reviews[review.id] = review
        return review

    async def get(self, review_id: str) -> Optional[Review]:
        return self._db.reviews.get(review_id)

    async def list_for_media(self, media_id: str) -> List[ReviewWithAuthor]:
        reviews = _newest_first(
            r for r in self._db.reviews.values() if r.media_id == media_id
        )
        results = []
        for review in reviews:
            profile = self._db.profiles.get(review.user_id)
            results.append(
                ReviewWithAuthor(
                    **review.model_dump(),
                    profiles=AuthorSummary(username=profile.username) if profile else None,
                )
            )
        return results

    async def update(
        self, review_id: str, owner_id: str, changes: Dict[str, Any]
    ) -> Optional[Review]:
        review = self._db.reviews.get(review_id)
        if review is None or review.user_id != owner_id:
            return None
        values = {k: v for k, v in changes.items() if k in REVIEW_MUTABLE_FIELDS}
        updated = review.model_copy(update=values)
        self._db.reviews[review_id] = updated
        return updated

    async def delete(self, review_id: str, owner_id: str) -> bool:
        review = self._db.reviews.get(review_id)
        if review is None or review.user_id != owner_id:
            return False
        del self._db.reviews[review_id]
        return True


class InMemoryProfileRepository:
    """In-memory implementation of ProfileRepository."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def get(self, profile_id: str) -> Optional[Profile]:
        return self._db.profiles.get(profile_id)

    async def update(self, profile_id: str, username: str) -> Optional[Profile]:
        profile = self._db.profiles.get(profile_id)
        if profile is None:
            return None
        if any(
            p.username == username and p.id != profile_id
            for p in self._db.profiles.values()
        ):
            raise StoreError(
                'duplicate key value violates unique constraint "profiles_username_key"',
                operation="profiles.update",
            )
        updated = profile.model_copy(update={"username": username, "updated_at": _now()})
        self._db.profiles[profile_id] = updated
        return updated


class InMemoryFavoriteRepository:
    """In-memory implementation of FavoriteRepository."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def add(self, user_id: str, media_id: str) -> Favorite:
        key = (user_id, media_id)
        existing = self._db.favorites.get(key)
        if existing is not None:
            return existing
        self._db.require_media(media_id, "favorites")
        favorite = Favorite(user_id=user_id, media_id=media_id, created_at=_now())
        self._db.favorites[key] = favorite
        return favorite

    async def list_for_user(self, user_id: str) -> List[FavoriteWithMedia]:
        favorites = _newest_first(
            f for f in self._db.favorites.values() if f.user_id == user_id
        )
        return [
            FavoriteWithMedia(**f.model_dump(), media=self._db.media.get(f.media_id))
            for f in favorites
        ]

    async def remove(self, user_id: str, media_id: str) -> int:
        return 1 if self._db.favorites.pop((user_id, media_id), None) else 0


class InMemoryTrendingRepository:
    """In-memory implementation of TrendingRepository."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def list(
        self, limit: int, trending_type: Optional[str] = None
    ) -> List[TrendingWithMedia]:
        entries = _newest_first(
            e
            for e in self._db.trending.values()
            if trending_type is None or e.trending_type == trending_type
        )
        return [
            TrendingWithMedia(**e.model_dump(), media=self._db.media.get(e.media_id))
            for e in entries[:limit]
        ]
