"""
Integration tests for the bearer-token gate on protected routes.
"""
from datetime import datetime, timezone

import httpx
import pytest

from app.api.dependencies import get_identity_verifier
from app.core.circuit_breaker import CircuitBreaker
from app.core.exceptions import InvalidCredentialError
from app.main import app
from app.models.schemas import Review
from app.services.identity import SessionIdentityVerifier

PROTECTED_ROUTES = [
    ("post", "/reviews", {"media_id": "m1", "rating": 5, "review_text": "Great"}),
    ("put", "/reviews/r1", {"rating": 1}),
    ("delete", "/reviews/r1", None),
    ("get", "/profile", None),
    ("put", "/profile", {"username": "hacker"}),
    ("get", "/favorites", None),
    ("post", "/favorites", {"media_id": "m1"}),
    ("delete", "/favorites/m1", None),
]

PROVIDER_TEXT = "invalid JWT: unable to parse or verify signature, token is expired"


def _call(client, method, path, body, headers=None):
    kwargs = {"headers": headers or {}}
    if body is not None:
        kwargs["json"] = body
    return client.request(method.upper(), path, **kwargs)


@pytest.fixture
def seeded_review(memory_db):
    memory_db.reviews.clear()
    memory_db.reviews["r1"] = Review(
        id="r1",
        media_id="m1",
        user_id="u1",
        rating=4,
        review_text="Solid",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    memory_db.favorites.clear()
    return memory_db


class TestMissingCredential:
    @pytest.mark.parametrize("method,path,body", PROTECTED_ROUTES)
    def test_no_header(self, test_client, seeded_review, method, path, body):
        before = (
            dict(seeded_review.reviews),
            dict(seeded_review.favorites),
            dict(seeded_review.profiles),
        )

        response = _call(test_client, method, path, body)

        assert response.status_code == 401
        assert response.json() == {"error": "No token provided"}
        assert (
            dict(seeded_review.reviews),
            dict(seeded_review.favorites),
            dict(seeded_review.profiles),
        ) == before

    @pytest.mark.parametrize("header", ["token-u1", "Basic token-u1", "Bearer"])
    def test_malformed_header(self, test_client, header):
        response = test_client.get("/favorites", headers={"Authorization": header})

        assert response.status_code == 401
        assert response.json() == {"error": "No token provided"}

    def test_missing_credential_precedes_body_validation(self, test_client):
        response = test_client.post("/reviews", json={})

        assert response.status_code == 401


class TestInvalidCredential:
    @pytest.mark.parametrize("method,path,body", PROTECTED_ROUTES)
    def test_rejected_token(self, test_client, seeded_review, method, path, body):
        response = _call(
            test_client, method, path, body, headers={"Authorization": "Bearer forged"}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token"}
        assert seeded_review.reviews["r1"].rating == 4
        assert seeded_review.favorites == {}

    def test_provider_text_never_reaches_client(self, test_client):
        verifier = SessionIdentityVerifier(
            base_url="https://identity.test",
            api_key="anon-key",
            circuit_breaker=CircuitBreaker(
                "identity_provider", ignored_exceptions=(InvalidCredentialError,)
            ),
            transport=httpx.MockTransport(
                lambda request: httpx.Response(401, json={"msg": PROVIDER_TEXT})
            ),
        )
        app.dependency_overrides[get_identity_verifier] = lambda: verifier

        response = test_client.get("/profile", headers={"Authorization": "Bearer expired"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token"}
        assert PROVIDER_TEXT not in response.text

    def test_unreachable_provider_is_503(self, test_client):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        verifier = SessionIdentityVerifier(
            base_url="https://identity.test",
            api_key="anon-key",
            circuit_breaker=CircuitBreaker("identity_provider"),
            transport=httpx.MockTransport(handler),
        )
        app.dependency_overrides[get_identity_verifier] = lambda: verifier

        response = test_client.get("/favorites", headers={"Authorization": "Bearer anything"})

        assert response.status_code == 503
        assert set(response.json()) == {"error"}


class TestPublicRoutes:
    @pytest.mark.parametrize(
        "path", ["/", "/health", "/media/search", "/media/m1", "/media/m1/reviews", "/trending"]
    )
    def test_no_token_needed(self, test_client, path):
        assert test_client.get(path).status_code == 200
