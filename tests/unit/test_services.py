import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

from app.core.exceptions import InvalidParameterError, NotFoundError
from app.core.pagination import PageWindow
from app.models.schemas import FavoriteCreate, Principal, ProfileUpdate
from app.repositories.memory import (
    InMemoryDatabase,
    InMemoryFavoriteRepository,
    InMemoryProfileRepository,
    InMemoryTrendingRepository,
)
from app.services.favorites import FavoriteService
from app.services.media import MediaService
from app.services.profiles import ProfileService
from app.services.trending import TRENDING_LIMIT, TrendingService

U1 = Principal(id="u1")
U2 = Principal(id="u2")


def _trending_db(count: int) -> InMemoryDatabase:
    db = InMemoryDatabase()
    db.add_media("m1", "The Matrix")
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i in range(count):
        db.add_trending("m1", "day" if i % 2 else "week", created_at=base + timedelta(minutes=i))
    return db


class TestMediaService:
    @pytest.mark.asyncio
    async def test_search_resolves_window(self):
        repo = MagicMock()
        repo.search = AsyncMock(return_value=[])
        service = MediaService(media_repo=repo)

        await service.search(title="matrix", page=2, per_page=10)

        repo.search.assert_awaited_once_with(
            PageWindow(10, 19), title="matrix", media_type=None
        )

    @pytest.mark.asyncio
    async def test_search_defaults(self):
        repo = MagicMock()
        repo.search = AsyncMock(return_value=[])
        service = MediaService(media_repo=repo, default_per_page=5)

        await service.search(title="")

        repo.search.assert_awaited_once_with(PageWindow(0, 4), title=None, media_type=None)

    @pytest.mark.asyncio
    async def test_unknown_type_is_rejected(self):
        repo = MagicMock()
        repo.search = AsyncMock(return_value=[])
        service = MediaService(media_repo=repo)

        with pytest.raises(InvalidParameterError) as exc_info:
            await service.search(media_type="podcast")

        assert exc_info.value.details["fields"] == ["type"]
        repo.search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_missing_is_not_found(self):
        repo = MagicMock()
        repo.get = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError):
            await MediaService(media_repo=repo).get("nope")

    @pytest.mark.asyncio
    async def test_enrich_without_catalog_client(self):
        repo = MagicMock()
        repo.get = AsyncMock(return_value=MagicMock())

        with pytest.raises(RuntimeError):
            await MediaService(media_repo=repo).enrich("m1")


class TestTrendingService:
    @pytest.mark.asyncio
    async def test_never_more_than_cap(self):
        service = TrendingService(InMemoryTrendingRepository(_trending_db(30)))

        entries = await service.list()

        assert len(entries) == TRENDING_LIMIT
        created = [e.created_at for e in entries]
        assert created == sorted(created, reverse=True)

    @pytest.mark.asyncio
    async def test_configured_limit_is_clamped(self):
        db = _trending_db(30)
        assert len(await TrendingService(InMemoryTrendingRepository(db), limit=500).list()) == 20
        assert len(await TrendingService(InMemoryTrendingRepository(db), limit=0).list()) == 1
        assert len(await TrendingService(InMemoryTrendingRepository(db), limit=5).list()) == 5

    @pytest.mark.asyncio
    async def test_cap_holds_even_if_repository_overshoots(self):
        repo = MagicMock()
        repo.list = AsyncMock(return_value=list(range(50)))

        entries = await TrendingService(repo).list()

        assert len(entries) == TRENDING_LIMIT

    @pytest.mark.asyncio
    async def test_type_filter(self):
        service = TrendingService(InMemoryTrendingRepository(_trending_db(6)))

        entries = await service.list("day")

        assert len(entries) == 3
        assert {e.trending_type for e in entries} == {"day"}


class TestProfileService:
    @pytest.mark.asyncio
    async def test_get_and_update_own_profile(self):
        db = InMemoryDatabase()
        db.add_profile("u1", "neo")
        service = ProfileService(InMemoryProfileRepository(db))

        assert (await service.get(U1)).username == "neo"
        updated = await service.update(U1, ProfileUpdate(username="the-one"))
        assert updated.username == "the-one"
        assert db.profiles["u1"].username == "the-one"

    @pytest.mark.asyncio
    async def test_missing_profile_is_not_found(self):
        service = ProfileService(InMemoryProfileRepository(InMemoryDatabase()))
        with pytest.raises(NotFoundError):
            await service.get(U1)
        with pytest.raises(NotFoundError):
            await service.update(U1, ProfileUpdate(username="x"))


class TestFavoriteService:
    @pytest.mark.asyncio
    async def test_scoped_to_principal(self):
        db = InMemoryDatabase()
        db.add_media("m1", "The Matrix")
        service = FavoriteService(InMemoryFavoriteRepository(db))

        await service.add(U1, FavoriteCreate(media_id="m1"))

        assert [f.media_id for f in await service.list(U1)] == ["m1"]
        assert await service.list(U2) == []
        assert await service.remove(U2, "m1") == 0
        assert await service.remove(U1, "m1") == 1
