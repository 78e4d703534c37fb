"""
Dependency injection container.
Creates and wires all application components.
Uses FastAPI's dependency injection system.
"""
import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.config import get_settings
from app.core.circuit_breaker import CircuitBreaker
from app.core.exceptions import InvalidCredentialError
from app.models.interfaces import (
    FavoriteRepository,
    MediaRepository,
    ProfileRepository,
    ReviewRepository,
    TrendingRepository,
)
from app.models.schemas import Principal
from app.repositories.database import create_engine, create_session_factory
from app.repositories.memory import (
    InMemoryDatabase,
    InMemoryFavoriteRepository,
    InMemoryMediaRepository,
    InMemoryProfileRepository,
    InMemoryReviewRepository,
    InMemoryTrendingRepository,
)
from app.repositories.sql import (
    SqlFavoriteRepository,
    SqlMediaRepository,
    SqlProfileRepository,
    SqlReviewRepository,
    SqlTrendingRepository,
)
from app.services.catalog import CatalogClient
from app.services.favorites import FavoriteService
from app.services.identity import (
    IdentityVerifier,
    SessionIdentityVerifier,
    TokenIdentityVerifier,
)
from app.services.media import MediaService
from app.services.profiles import ProfileService
from app.services.reviews import ReviewService
from app.services.trending import TrendingService

logger = logging.getLogger(__name__)


# =============================================================================
# Singleton Instances (Application Lifetime)
# =============================================================================


def store_backend() -> str:
    """'sql' when DATABASE_URL is configured, else 'memory'."""
    return "sql" if get_settings().DATABASE_URL else "memory"


@lru_cache()
def get_engine() -> AsyncEngine:
    """Get singleton async engine."""
    settings = get_settings()
    return create_engine(
        settings.DATABASE_URL,
        pool_size=settings.DB_POOL_SIZE,
        echo=settings.DB_ECHO,
    )


@lru_cache()
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get singleton session factory."""
    return create_session_factory(get_engine())


@lru_cache()
def get_in_memory_database() -> InMemoryDatabase:
    """Get singleton in-memory database with the sample catalog loaded."""
    db = InMemoryDatabase()
    db.load_sample_data()
    return db


@lru_cache()
def get_media_repository() -> MediaRepository:
    if store_backend() == "sql":
        return SqlMediaRepository(get_session_factory())
    return InMemoryMediaRepository(get_in_memory_database())


@lru_cache()
def get_review_repository() -> ReviewRepository:
    if store_backend() == "sql":
        return SqlReviewRepository(get_session_factory())
    return InMemoryReviewRepository(get_in_memory_database())


@lru_cache()
def get_profile_repository() -> ProfileRepository:
    if store_backend() == "sql":
        return SqlProfileRepository(get_session_factory())
    return InMemoryProfileRepository(get_in_memory_database())


@lru_cache()
def get_favorite_repository() -> FavoriteRepository:
    if store_backend() == "sql":
        return SqlFavoriteRepository(get_session_factory())
    return InMemoryFavoriteRepository(get_in_memory_database())


@lru_cache()
def get_trending_repository() -> TrendingRepository:
    if store_backend() == "sql":
        return SqlTrendingRepository(get_session_factory())
    return InMemoryTrendingRepository(get_in_memory_database())


@lru_cache()
def get_identity_circuit_breaker() -> CircuitBreaker:
    """Get singleton circuit breaker for the identity provider."""
    settings = get_settings()
    return CircuitBreaker(
        name="identity_provider",
        failure_threshold=settings.CIRCUIT_BREAKER_FAILURE_THRESHOLD,
        recovery_timeout_sec=settings.CIRCUIT_BREAKER_RECOVERY_TIMEOUT_SEC,
        # A rejected token is a normal answer, not an outage
        ignored_exceptions=(InvalidCredentialError,),
    )


@lru_cache()
def get_catalog_circuit_breaker() -> CircuitBreaker:
    """Get singleton circuit breaker for the external catalog."""
    settings = get_settings()
    return CircuitBreaker(
        name="external_catalog",
        failure_threshold=settings.CIRCUIT_BREAKER_FAILURE_THRESHOLD,
        recovery_timeout_sec=settings.CIRCUIT_BREAKER_RECOVERY_TIMEOUT_SEC,
    )


@lru_cache()
def get_identity_verifier() -> IdentityVerifier:
    """Get the identity verifier selected by AUTH_BACKEND."""
    settings = get_settings()
    if settings.AUTH_BACKEND == "jwt":
        verifier: IdentityVerifier = TokenIdentityVerifier(
            secret=settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            cache_ttl_seconds=settings.AUTH_CACHE_TTL_SEC,
        )
    else:
        verifier = SessionIdentityVerifier(
            base_url=settings.IDENTITY_PROVIDER_URL,
            api_key=settings.IDENTITY_PROVIDER_API_KEY,
            circuit_breaker=get_identity_circuit_breaker(),
            timeout_seconds=settings.IDENTITY_TIMEOUT_MS / 1000,
            cache_ttl_seconds=settings.AUTH_CACHE_TTL_SEC,
        )
    logger.info(f"Identity backend: {verifier.backend_name}")
    return verifier


@lru_cache()
def get_catalog_client() -> CatalogClient:
    """Get singleton external catalog client."""
    settings = get_settings()
    return CatalogClient(
        base_url=settings.CATALOG_BASE_URL,
        api_key=settings.CATALOG_API_KEY,
        circuit_breaker=get_catalog_circuit_breaker(),
        timeout_seconds=settings.CATALOG_TIMEOUT_MS / 1000,
        append_to_response=settings.CATALOG_APPEND_TO_RESPONSE,
    )


# =============================================================================
# Request-Scoped Dependencies (Per-Request Lifetime)
# =============================================================================


async def get_current_principal(
    authorization: Optional[str] = Header(default=None),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Principal:
    """Verified principal for protected routes (401 otherwise)."""
    return await verifier.verify(authorization)


def get_media_service(
    media_repo: MediaRepository = Depends(get_media_repository),
    catalog_client: CatalogClient = Depends(get_catalog_client),
) -> MediaService:
    settings = get_settings()
    return MediaService(
        media_repo=media_repo,
        catalog_client=catalog_client,
        default_page=settings.DEFAULT_PAGE,
        default_per_page=settings.DEFAULT_PER_PAGE,
    )


def get_review_service(
    review_repo: ReviewRepository = Depends(get_review_repository),
) -> ReviewService:
    return ReviewService(review_repo=review_repo)


def get_profile_service(
    profile_repo: ProfileRepository = Depends(get_profile_repository),
) -> ProfileService:
    return ProfileService(profile_repo=profile_repo)


def get_favorite_service(
    favorite_repo: FavoriteRepository = Depends(get_favorite_repository),
) -> FavoriteService:
    return FavoriteService(favorite_repo=favorite_repo)


def get_trending_service(
    trending_repo: TrendingRepository = Depends(get_trending_repository),
) -> TrendingService:
    return TrendingService(
        trending_repo=trending_repo, limit=get_settings().TRENDING_LIMIT
    )


# =============================================================================
# Cleanup Functions
# =============================================================================


async def close_clients() -> None:
    """Close outbound clients and the engine if they were created."""
    if get_identity_verifier.cache_info().currsize:
        await get_identity_verifier().aclose()
        get_identity_verifier.cache_clear()
    if get_catalog_client.cache_info().currsize:
        await get_catalog_client().aclose()
        get_catalog_client.cache_clear()
    if get_engine.cache_info().currsize:
        await get_engine().dispose()


def clear_caches() -> None:
    """Clear all cached singleton instances (for testing)."""
    get_engine.cache_clear()
    get_session_factory.cache_clear()
    get_in_memory_database.cache_clear()
    get_media_repository.cache_clear()
    get_review_repository.cache_clear()
    get_profile_repository.cache_clear()
    get_favorite_repository.cache_clear()
    get_trending_repository.cache_clear()
    get_identity_circuit_breaker.cache_clear()
    get_catalog_circuit_breaker.cache_clear()
    get_identity_verifier.cache_clear()
    get_catalog_client.cache_clear()
