"""
External catalog client.

Read-only lookups against the external catalog source (TMDB-compatible API):
extended detail for a single title (credits and clips appended) and the
popular lists used by the ingestion job. Every failure is reported as
``BridgeError``; the underlying transport exception is logged, never raised.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from app.core.circuit_breaker import CircuitBreaker
from app.core.exceptions import BridgeError, CircuitBreakerOpenError
from app.core.telemetry import CATALOG_BRIDGE_ERRORS_TOTAL
from app.models.schemas import CatalogDetail, MediaItem, MediaType

logger = logging.getLogger(__name__)


class CatalogClient:
    """
    Async client for the external catalog source.

    Usage:
        client = CatalogClient(base_url, api_key, circuit_breaker=breaker)
        detail = await client.get_details("movie", 603)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        circuit_breaker: CircuitBreaker,
        timeout_seconds: float = 5.0,
        append_to_response: str = "credits,videos",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._append_to_response = append_to_response
        self._circuit_breaker = circuit_breaker
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            transport=transport,
        )

    async def get_details(self, media_type: MediaType, external_id: int) -> CatalogDetail:
        """
        Fetch extended detail (cast/crew and clips) for one title.

        Raises:
            BridgeError: On any transport, status, decode or breaker failure
        """
        payload = await self._get_json(
            f"/{media_type}/{external_id}",
            {"append_to_response": self._append_to_response},
        )
        try:
            return CatalogDetail.model_validate(payload)
        except ValidationError as exc:
            logger.warning(f"Catalog detail for {media_type}/{external_id} did not parse")
            CATALOG_BRIDGE_ERRORS_TOTAL.labels(reason="decode").inc()
            raise BridgeError("decode") from exc

    async def enrich(self, media: MediaItem) -> CatalogDetail:
        """Detail for a stored media item, keyed by its external id."""
        return await self.get_details(media.type, media.external_catalog_id)

    async def get_popular(self, media_type: MediaType, page: int = 1) -> List[Dict[str, Any]]:
        """One page of the catalog's popular list (raw result dicts)."""
        payload = await self._get_json(f"/{media_type}/popular", {"page": page})
        results = payload.get("results") if isinstance(payload, dict) else None
        return results if isinstance(results, list) else []

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        try:
            response = await self._circuit_breaker.call(lambda: self._send(path, params))
        except CircuitBreakerOpenError as exc:
            CATALOG_BRIDGE_ERRORS_TOTAL.labels(reason="circuit_open").inc()
            raise BridgeError("circuit_open") from exc

        # A 4xx is the catalog answering cleanly, so it stays out of the breaker
        if response.is_error:
            logger.warning(f"Catalog request {path} failed: status={response.status_code}")
            CATALOG_BRIDGE_ERRORS_TOTAL.labels(reason="status").inc()
            raise BridgeError("status")

        try:
            return response.json()
        except ValueError as exc:
            logger.warning(f"Catalog request {path} returned invalid JSON")
            CATALOG_BRIDGE_ERRORS_TOTAL.labels(reason="decode").inc()
            raise BridgeError("decode") from exc

    async def _send(self, path: str, params: Dict[str, Any]) -> httpx.Response:
        """GET against the catalog; raises only on transport errors and 5xx."""
        query = {"api_key": self._api_key, **params}
        try:
            response = await self._http.get(path, params=query)
        except httpx.HTTPError as exc:
            logger.warning(f"Catalog request {path} failed: {exc.__class__.__name__}")
            CATALOG_BRIDGE_ERRORS_TOTAL.labels(reason="transport").inc()
            raise BridgeError("transport") from exc

        if response.is_server_error:
            logger.warning(f"Catalog request {path} failed: status={response.status_code}")
            CATALOG_BRIDGE_ERRORS_TOTAL.labels(reason="status").inc()
            raise BridgeError("status")
        return response

    async def aclose(self) -> None:
        await self._http.aclose()
