import httpx
import pytest

from app.core.circuit_breaker import CircuitBreaker, CircuitState
from app.core.exceptions import BridgeError
from app.models.schemas import MediaItem
from app.services.catalog import CatalogClient

BASE_URL = "https://catalog.test/3"


def _client(handler, breaker=None) -> CatalogClient:
    return CatalogClient(
        base_url=BASE_URL,
        api_key="test-key",
        circuit_breaker=breaker or CircuitBreaker("external_catalog", failure_threshold=5),
        transport=httpx.MockTransport(handler),
    )


class TestGetDetails:
    @pytest.mark.asyncio
    async def test_detail_request_and_payload(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(
                200,
                json={
                    "id": 603,
                    "title": "The Matrix",
                    "credits": {"cast": [{"name": "Keanu Reeves"}]},
                    "videos": {"results": []},
                },
            )

        client = _client(handler)
        detail = await client.get_details("movie", 603)

        assert seen["path"] == "/3/movie/603"
        assert seen["params"] == {"api_key": "test-key", "append_to_response": "credits,videos"}
        assert detail.id == 603
        assert detail.credits["cast"][0]["name"] == "Keanu Reeves"
        # Fields the catalog adds are passed through
        assert detail.model_dump()["title"] == "The Matrix"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_tv_detail_uses_tv_path(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            return httpx.Response(200, json={"id": 1396, "name": "Breaking Bad"})

        detail = await _client(handler).get_details("tv", 1396)

        assert seen["path"] == "/3/tv/1396"
        assert detail.id == 1396

    @pytest.mark.asyncio
    async def test_unknown_title_is_bridge_error(self):
        client = _client(lambda request: httpx.Response(404, json={"status_code": 34}))
        with pytest.raises(BridgeError) as exc_info:
            await client.get_details("movie", 999999)

        assert exc_info.value.status_code == 500
        assert exc_info.value.to_dict() == {
            "error": "Failed to fetch details from external catalog"
        }
        assert exc_info.value.details["reason"] == "status"

    @pytest.mark.asyncio
    async def test_transport_failure_is_bridge_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(BridgeError) as exc_info:
            await _client(handler).get_details("movie", 603)
        assert exc_info.value.details["reason"] == "transport"

    @pytest.mark.asyncio
    async def test_invalid_json_is_bridge_error(self):
        client = _client(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
        with pytest.raises(BridgeError) as exc_info:
            await client.get_details("movie", 603)
        assert exc_info.value.details["reason"] == "decode"

    @pytest.mark.asyncio
    async def test_payload_without_id_is_bridge_error(self):
        client = _client(lambda request: httpx.Response(200, json={"title": "No id"}))
        with pytest.raises(BridgeError) as exc_info:
            await client.get_details("movie", 603)
        assert exc_info.value.details["reason"] == "decode"

    @pytest.mark.asyncio
    async def test_open_circuit_is_bridge_error(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        breaker = CircuitBreaker("external_catalog", failure_threshold=2)
        client = _client(handler, breaker=breaker)

        for _ in range(2):
            with pytest.raises(BridgeError):
                await client.get_details("movie", 603)
        assert breaker.state == CircuitState.OPEN

        with pytest.raises(BridgeError) as exc_info:
            await client.get_details("movie", 603)
        assert exc_info.value.details["reason"] == "circuit_open"
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_unknown_titles_do_not_open_circuit(self):
        def handler(request):
            if request.url.path == "/3/movie/603":
                return httpx.Response(200, json={"id": 603})
            return httpx.Response(404, json={"status_code": 34})

        breaker = CircuitBreaker("external_catalog", failure_threshold=2)
        client = _client(handler, breaker=breaker)

        for external_id in (1, 2, 3):
            with pytest.raises(BridgeError) as exc_info:
                await client.get_details("movie", external_id)
            assert exc_info.value.details["reason"] == "status"

        assert breaker.state == CircuitState.CLOSED
        detail = await client.get_details("movie", 603)
        assert detail.id == 603

    @pytest.mark.asyncio
    async def test_server_errors_count_after_unknown_titles(self):
        statuses = iter([404, 404, 502, 502])
        breaker = CircuitBreaker("external_catalog", failure_threshold=2)
        client = _client(lambda request: httpx.Response(next(statuses)), breaker=breaker)

        for _ in range(4):
            with pytest.raises(BridgeError):
                await client.get_details("movie", 603)

        assert breaker.state == CircuitState.OPEN


class TestEnrichAndPopular:
    @pytest.mark.asyncio
    async def test_enrich_uses_external_id_and_type(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            return httpx.Response(200, json={"id": 1396})

        media = MediaItem(
            id="m3", external_catalog_id=1396, type="tv", title="Breaking Bad"
        )
        detail = await _client(handler).enrich(media)

        assert seen["path"] == "/3/tv/1396"
        assert detail.id == 1396

    @pytest.mark.asyncio
    async def test_get_popular_returns_results(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["page"] = request.url.params.get("page")
            return httpx.Response(200, json={"page": 2, "results": [{"id": 1}, {"id": 2}]})

        results = await _client(handler).get_popular("movie", page=2)

        assert seen == {"path": "/3/movie/popular", "page": "2"}
        assert [r["id"] for r in results] == [1, 2]

    @pytest.mark.asyncio
    async def test_get_popular_without_results(self):
        results = await _client(lambda request: httpx.Response(200, json={})).get_popular("tv")
        assert results == []
