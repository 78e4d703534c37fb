"""
Bearer-credential verification against the external identity provider.

Two interchangeable backends share one contract, ``verify(header)``:

- ``SessionIdentityVerifier`` looks the session up at the provider's
  ``/auth/v1/user`` endpoint; the subject id arrives as ``id``.
- ``TokenIdentityVerifier`` checks the token signature locally; the subject
  id arrives as the ``sub`` claim.

Both normalize to ``Principal.id``. The backend is chosen once at startup.
"""
import hashlib
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

import httpx
from jose import JWTError, jwt

from app.core.cache import TTLCache
from app.core.circuit_breaker import CircuitBreaker
from app.core.exceptions import (
    CircuitBreakerOpenError,
    InvalidCredentialError,
    MissingCredentialError,
    ServiceUnavailableError,
)
from app.core.telemetry import AUTH_FAILURES_TOTAL
from app.models.schemas import Principal

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer"


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Return the token from an ``Authorization: Bearer <token>`` header.

    Raises:
        MissingCredentialError: If the header is absent or malformed
    """
    if not authorization:
        raise MissingCredentialError()
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != BEARER_PREFIX:
        raise MissingCredentialError()
    return parts[1]


def _token_digest(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def _unverified_expiry(token: str) -> Optional[float]:
    """Read ``exp`` without verifying; None for opaque or malformed tokens."""
    try:
        exp = jwt.get_unverified_claims(token).get("exp")
    except JWTError:
        return None
    return float(exp) if isinstance(exp, (int, float)) else None


class IdentityVerifier(ABC):
    """
    Abstract bearer-credential verifier.

    Subclasses implement ``_fetch_claims`` and name the claim that holds the
    provider's durable subject id in ``subject_field``.
    """

    subject_field: str = "id"
    backend_name: str = "abstract"

    def __init__(self, cache_ttl_seconds: int = 0) -> None:
        self._cache_ttl = cache_ttl_seconds
        self._cache: Optional[TTLCache[Principal]] = (
            TTLCache(max_entries=4096) if cache_ttl_seconds > 0 else None
        )

    async def verify(self, authorization: Optional[str]) -> Principal:
        """
        Verify the raw Authorization header value.

        Raises:
            MissingCredentialError: Header absent or not ``Bearer <token>``
            InvalidCredentialError: Provider rejected the credential
            ServiceUnavailableError: Provider could not be reached
        """
        try:
            token = extract_bearer_token(authorization)
        except MissingCredentialError:
            AUTH_FAILURES_TOTAL.labels(reason="missing").inc()
            raise

        digest = _token_digest(token) if self._cache is not None else None
        if digest is not None:
            cached = self._cache.get(digest)
            if cached is not None:
                return cached

        try:
            claims = await self._fetch_claims(token)
            principal = self._to_principal(claims)
        except InvalidCredentialError:
            AUTH_FAILURES_TOTAL.labels(reason="invalid").inc()
            raise
        except (ServiceUnavailableError, CircuitBreakerOpenError):
            AUTH_FAILURES_TOTAL.labels(reason="unavailable").inc()
            raise

        if digest is not None:
            self._remember(digest, token, principal)
        return principal

    @abstractmethod
    async def _fetch_claims(self, token: str) -> Dict[str, Any]:
        """Validate ``token`` with the provider and return its identity claims."""
        pass

    def _to_principal(self, claims: Dict[str, Any]) -> Principal:
        subject = claims.get(self.subject_field)
        if not isinstance(subject, str) or not subject:
            logger.debug(f"Identity claims missing '{self.subject_field}'")
            raise InvalidCredentialError()
        email = claims.get("email")
        return Principal(id=subject, email=email if isinstance(email, str) else None)

    def _remember(self, digest: str, token: str, principal: Principal) -> None:
        expiry = _unverified_expiry(token)
        if expiry is None:
            return
        ttl = min(self._cache_ttl, expiry - time.time())
        self._cache.set(digest, principal, ttl_seconds=ttl)

    async def aclose(self) -> None:
        """Release outbound resources, if any."""
        return None


class SessionIdentityVerifier(IdentityVerifier):
    """Managed-auth session lookup (``GET /auth/v1/user``)."""

    subject_field = "id"
    backend_name = "session"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        circuit_breaker: CircuitBreaker,
        timeout_seconds: float = 5.0,
        cache_ttl_seconds: int = 0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(cache_ttl_seconds=cache_ttl_seconds)
        self._api_key = api_key
        self._circuit_breaker = circuit_breaker
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            transport=transport,
        )

    async def _fetch_claims(self, token: str) -> Dict[str, Any]:
        return await self._circuit_breaker.call(lambda: self._lookup(token))

    async def _lookup(self, token: str) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {token}"}
        if self._api_key:
            headers["apikey"] = self._api_key

        try:
            response = await self._http.get("/auth/v1/user", headers=headers)
        except httpx.HTTPError as exc:
            logger.warning(f"Identity provider unreachable: {exc.__class__.__name__}")
            raise ServiceUnavailableError("identity_provider") from exc

        if response.status_code >= 500:
            logger.warning(f"Identity provider error: status={response.status_code}")
            raise ServiceUnavailableError("identity_provider")
        if response.status_code != 200:
            # Provider text stays in the debug log, never in the response
            logger.debug(
                f"Identity provider rejected token: status={response.status_code} "
                f"body={response.text[:200]}"
            )
            raise InvalidCredentialError()

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Identity provider returned a non-JSON body")
            raise ServiceUnavailableError("identity_provider") from exc
        if not isinstance(payload, dict):
            raise InvalidCredentialError()
        return payload

    async def aclose(self) -> None:
        await self._http.aclose()


class TokenIdentityVerifier(IdentityVerifier):
    """Signed-token (JWT) verification with the provider's shared secret."""

    subject_field = "sub"
    backend_name = "jwt"

    def __init__(
        self,
        secret: str,
        algorithms: Sequence[str] = ("HS256",),
        audience: Optional[str] = None,
        cache_ttl_seconds: int = 0,
    ) -> None:
        super().__init__(cache_ttl_seconds=cache_ttl_seconds)
        if not secret:
            raise ValueError("JWT_SECRET must be set for the jwt auth backend")
        self._secret = secret
        self._algorithms = list(algorithms)
        self._audience = audience

    async def _fetch_claims(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=self._algorithms,
                audience=self._audience,
                options={"verify_aud": self._audience is not None},
            )
        except JWTError as exc:
            logger.debug(f"Token verification failed: {exc}")
            raise InvalidCredentialError() from exc
