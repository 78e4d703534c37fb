"""
Pytest configuration and fixtures.
"""
from typing import Any, Dict

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import (
    clear_caches,
    get_catalog_client,
    get_favorite_repository,
    get_identity_verifier,
    get_media_repository,
    get_profile_repository,
    get_review_repository,
    get_trending_repository,
)
from app.core.circuit_breaker import CircuitBreaker
from app.core.exceptions import InvalidCredentialError
from app.main import app
from app.repositories.memory import (
    InMemoryDatabase,
    InMemoryFavoriteRepository,
    InMemoryMediaRepository,
    InMemoryProfileRepository,
    InMemoryReviewRepository,
    InMemoryTrendingRepository,
)
from app.services.catalog import CatalogClient
from app.services.identity import IdentityVerifier

CATALOG_BASE_URL = "https://catalog.test/3"

MATRIX_DETAIL = {
    "id": 603,
    "title": "The Matrix",
    "credits": {"cast": [{"name": "Keanu Reeves", "character": "Neo"}], "crew": []},
    "videos": {"results": [{"key": "vKQi3bBA1y8", "site": "YouTube", "type": "Trailer"}]},
}


class FakeIdentityVerifier(IdentityVerifier):
    """Accepts a fixed set of tokens; everything else is rejected."""

    backend_name = "fake"
    subject_field = "id"

    TOKENS = {"token-u1": "u1", "token-u2": "u2", "token-u3": "u3"}

    async def _fetch_claims(self, token: str) -> Dict[str, Any]:
        user_id = self.TOKENS.get(token)
        if user_id is None:
            raise InvalidCredentialError()
        return {"id": user_id}


def catalog_handler(request: httpx.Request) -> httpx.Response:
    """Mock external catalog: knows movie 603 only."""
    if request.url.path.endswith("/movie/603"):
        return httpx.Response(200, json=MATRIX_DETAIL)
    return httpx.Response(
        404, json={"status_message": "The resource you requested could not be found."}
    )


@pytest.fixture
def memory_db():
    """Fixture for a small in-memory store."""
    db = InMemoryDatabase()
    db.add_media("m1", "The Matrix", "movie", external_catalog_id=603)
    db.add_media("m2", "The Matrix Reloaded", "movie", external_catalog_id=604)
    db.add_media("m3", "Breaking Bad", "tv", external_catalog_id=1396)
    db.add_profile("u1", "neo")
    db.add_profile("u2", "trinity")
    return db


@pytest.fixture
def catalog_client():
    """Fixture for a catalog client backed by a mock transport."""
    return CatalogClient(
        base_url=CATALOG_BASE_URL,
        api_key="test-key",
        circuit_breaker=CircuitBreaker("external_catalog", failure_threshold=100),
        transport=httpx.MockTransport(catalog_handler),
    )


@pytest.fixture
def identity_verifier():
    return FakeIdentityVerifier()


@pytest.fixture
def test_client(memory_db, catalog_client, identity_verifier):
    """
    TestClient fixture with dependency overrides.
    Uses in-memory repositories and a fake identity provider for isolation.
    """
    app.dependency_overrides[get_media_repository] = lambda: InMemoryMediaRepository(memory_db)
    app.dependency_overrides[get_review_repository] = lambda: InMemoryReviewRepository(memory_db)
    app.dependency_overrides[get_profile_repository] = lambda: InMemoryProfileRepository(memory_db)
    app.dependency_overrides[get_favorite_repository] = lambda: InMemoryFavoriteRepository(memory_db)
    app.dependency_overrides[get_trending_repository] = lambda: InMemoryTrendingRepository(memory_db)
    app.dependency_overrides[get_catalog_client] = lambda: catalog_client
    app.dependency_overrides[get_identity_verifier] = lambda: identity_verifier

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
    clear_caches()


@pytest.fixture
def auth_u1():
    return {"Authorization": "Bearer token-u1"}


@pytest.fixture
def auth_u2():
    return {"Authorization": "Bearer token-u2"}
