"""
SQLAlchemy repository implementations.
Each public method runs exactly one logical query inside its own session.
Driver/constraint failures are converted to ``StoreError`` carrying the
store's message; absent rows are reported as ``None``/``False``/``0``.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import StoreError
from app.core.pagination import PageWindow
from app.core.telemetry import STORE_ERRORS_TOTAL
from app.models import tables
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

logger = logging.getLogger(__name__)

REVIEW_MUTABLE_FIELDS = frozenset({"rating", "review_text"})


def _store_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class _SqlRepository:
    """Shared session handling for SQL repositories."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                message = _store_message(exc)
                logger.warning(f"Store error during {operation}: {message}")
                STORE_ERRORS_TOTAL.labels(operation=operation).inc()
                raise StoreError(message, operation=operation) from exc


class SqlMediaRepository(_SqlRepository):

    async def search(
        self,
        window: PageWindow,
        title: Optional[str] = None,
        media_type: Optional[MediaType] = None,
    ) -> List[MediaItem]:
        stmt = select(tables.Media)
        if title:
            stmt = stmt.where(tables.Media.title.icontains(title, autoescape=True))
        if media_type:
            stmt = stmt.where(tables.Media.type == media_type)
        stmt = (
            stmt.order_by(tables.Media.title, tables.Media.id)
            .offset(window.offset)
            .limit(window.limit)
        )

        async with self._session("media.search") as session:
            rows = (await session.scalars(stmt)).all()
            return [MediaItem.model_validate(row) for row in rows]

    async def get(self, media_id: str) -> Optional[MediaItem]:
        async with self._session("media.get") as session:
            row = await session.get(tables.Media, media_id)
            return MediaItem.model_validate(row) if row is not None else None

    async def upsert_many(self, items: Sequence[MediaUpsert]) -> int:
        if not items:
            return 0

        # Last occurrence wins when the batch repeats an external id
        by_external_id = {item.external_catalog_id: item for item in items}

        async with self._session("media.upsert") as session:
            existing = {
                row.external_catalog_id: row
                for row in (
                    await session.scalars(
                        select(tables.Media).where(
                            tables.Media.external_catalog_id.in_(list(by_external_id))
                        )
                    )
                ).all()
            }
            for external_id, item in by_external_id.items():
                row = existing.get(external_id)
                if row is None:
                    session.add(tables.Media(**item.model_dump()))
                    continue
                # Identity fields stay as first ingested
                for field in ("title", "overview", "poster_path", "release_date", "popularity"):
                    setattr(row, field, getattr(item, field))
            await session.flush()
        return len(by_external_id)


class SqlReviewRepository(_SqlRepository):

    async def create(
        self, user_id: str, media_id: str, rating: int, review_text: str
    ) -> Review:
        async with self._session("reviews.create") as session:
            row = tables.Review(
                user_id=user_id,
                media_id=media_id,
                rating=rating,
                review_text=review_text,
            )
            session.add(row)
            await session.flush()
            return Review.model_validate(row)

    async def get(self, review_id: str) -> Optional[Review]:
        async with self._session("reviews.get") as session:
            row = await session.get(tables.Review, review_id)
            return Review.model_validate(row) if row is not None else None

    async def list_for_media(self, media_id: str) -> List[ReviewWithAuthor]:
        stmt = (
            select(tables.Review, tables.Profile)
            .outerjoin(tables.Profile, tables.Profile.id == tables.Review.user_id)
            .where(tables.Review.media_id == media_id)
            .order_by(tables.Review.created_at.desc(), tables.Review.id)
        )
        async with self._session("reviews.list") as session:
            rows = (await session.execute(stmt)).all()
            return [
                ReviewWithAuthor(
                    **Review.model_validate(review).model_dump(),
                    profiles=(
                        AuthorSummary(username=profile.username)
                        if profile is not None
                        else None
                    ),
                )
                for review, profile in rows
            ]

    async def update(
        self, review_id: str, owner_id: str, changes: Dict[str, Any]
    ) -> Optional[Review]:
        values = {k: v for k, v in changes.items() if k in REVIEW_MUTABLE_FIELDS}
        if not values:
            current = await self.get(review_id)
            return current if current is not None and current.user_id == owner_id else None

        stmt = (
            update(tables.Review)
            .where(tables.Review.id == review_id, tables.Review.user_id == owner_id)
            .values(**values)
            .returning(tables.Review)
            .execution_options(synchronize_session=False)
        )
        async with self._session("reviews.update") as session:
            row = (await session.scalars(stmt)).first()
            return Review.model_validate(row) if row is not None else None

    async def delete(self, review_id: str, owner_id: str) -> bool:
        stmt = (
            delete(tables.Review)
            .where(tables.Review.id == review_id, tables.Review.user_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        async with self._session("reviews.delete") as session:
            result = await session.execute(stmt)
            return result.rowcount > 0


class SqlProfileRepository(_SqlRepository):

    async def get(self, profile_id: str) -> Optional[Profile]:
        async with self._session("profiles.get") as session:
            row = await session.get(tables.Profile, profile_id)
            return Profile.model_validate(row) if row is not None else None

    async def update(self, profile_id: str, username: str) -> Optional[Profile]:
        stmt = (
            update(tables.Profile)
            .where(tables.Profile.id == profile_id)
            .values(username=username, updated_at=datetime.now(timezone.utc))
            .returning(tables.Profile)
            .execution_options(synchronize_session=False)
        )
        async with self._session("profiles.update") as session:
            row = (await session.scalars(stmt)).first()
            return Profile.model_validate(row) if row is not None else None


class SqlFavoriteRepository(_SqlRepository):

    async def add(self, user_id: str, media_id: str) -> Favorite:
        async with self._session("favorites.add") as session:
            row = await session.get(tables.Favorite, (user_id, media_id))
            if row is None:
                row = tables.Favorite(user_id=user_id, media_id=media_id)
                session.add(row)
                await session.flush()
            return Favorite.model_validate(row)

    async def list_for_user(self, user_id: str) -> List[FavoriteWithMedia]:
        stmt = (
            select(tables.Favorite, tables.Media)
            .outerjoin(tables.Media, tables.Media.id == tables.Favorite.media_id)
            .where(tables.Favorite.user_id == user_id)
            .order_by(tables.Favorite.created_at.desc())
        )
        async with self._session("favorites.list") as session:
            rows = (await session.execute(stmt)).all()
            return [
                FavoriteWithMedia(
                    **Favorite.model_validate(favorite).model_dump(),
                    media=MediaItem.model_validate(media) if media is not None else None,
                )
                for favorite, media in rows
            ]

    async def remove(self, user_id: str, media_id: str) -> int:
        stmt = (
            delete(tables.Favorite)
            .where(tables.Favorite.user_id == user_id, tables.Favorite.media_id == media_id)
            .execution_options(synchronize_session=False)
        )
        async with self._session("favorites.remove") as session:
            result = await session.execute(stmt)
            return result.rowcount


class SqlTrendingRepository(_SqlRepository):

    async def list(
        self, limit: int, trending_type: Optional[str] = None
    ) -> List[TrendingWithMedia]:
        stmt = select(tables.Trending, tables.Media).outerjoin(
            tables.Media, tables.Media.id == tables.Trending.media_id
        )
        if trending_type:
            stmt = stmt.where(tables.Trending.trending_type == trending_type)
        stmt = stmt.order_by(tables.Trending.created_at.desc()).limit(limit)

        async with self._session("trending.list") as session:
            rows = (await session.execute(stmt)).all()
            return [
                TrendingWithMedia(
                    **TrendingEntry.model_validate(entry).model_dump(),
                    media=MediaItem.model_validate(media) if media is not None else None,
                )
                for entry, media in rows
            ]
