"""API tests for the nutrition proxy endpoints.

The upstream provider is replaced with a scripted httpx.MockTransport, so no
network access or API key is needed.
"""

import httpx
import pytest
from httpx import AsyncClient

from fakes import FakeUpstream, ok

EGGS_AND_RICE = {"name": "2 eggs and rice", "calories": 300, "protein": 12, "carbs": 45, "fat": 8}


class TestGetMacrosEndpoint:
    """Tests for POST /api/get-macros."""

    @pytest.mark.asyncio
    async def test_success(self, client: AsyncClient, make_service, use_service):
        upstream = FakeUpstream(ok(EGGS_AND_RICE))
        use_service(make_service(upstream))

        response = await client.post("/api/get-macros", json={"query": "2 large eggs and 100g rice"})

        assert response.status_code == 200
        assert response.json() == EGGS_AND_RICE
        assert '"calories":300,' in response.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"query": ""}, {"query": "   "}, {"query": None}])
    async def test_missing_query(self, client: AsyncClient, make_service, use_service, body):
        """Test a missing query is rejected before any upstream call."""
        upstream = FakeUpstream(ok(EGGS_AND_RICE))
        use_service(make_service(upstream))

        response = await client.post("/api/get-macros", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Query is required"}
        assert upstream.calls == 0

    @pytest.mark.asyncio
    async def test_missing_body(self, client: AsyncClient, make_service, use_service):
        upstream = FakeUpstream(ok(EGGS_AND_RICE))
        use_service(make_service(upstream))

        response = await client.post("/api/get-macros")

        assert response.status_code == 400
        assert response.json()["error"] == "Query is required"
        assert upstream.calls == 0

    @pytest.mark.asyncio
    async def test_missing_api_key(self, client: AsyncClient, make_service, use_service):
        upstream = FakeUpstream(ok(EGGS_AND_RICE))
        use_service(make_service(upstream, api_key=""))

        response = await client.post("/api/get-macros", json={"query": "toast"})

        assert response.status_code == 500
        assert response.json()["error"] == "API key not configured"
        assert upstream.calls == 0

    @pytest.mark.asyncio
    async def test_upstream_rejection_status_passes_through(
        self, client: AsyncClient, make_service, use_service
    ):
        upstream = FakeUpstream(httpx.Response(403, text="API key not valid"))
        use_service(make_service(upstream))

        response = await client.post("/api/get-macros", json={"query": "toast"})

        assert response.status_code == 403
        data = response.json()
        assert data["error"] == "API request failed: 403"
        assert data["details"]["body"] == "API key not valid"
        assert upstream.calls == 1

    @pytest.mark.asyncio
    async def test_malformed_upstream_response(self, client: AsyncClient, make_service, use_service):
        upstream = FakeUpstream(httpx.Response(200, json={"candidates": []}))
        use_service(make_service(upstream))

        response = await client.post("/api/get-macros", json={"query": "toast"})

        assert response.status_code == 500
        assert response.json()["error"] == "AI returned an invalid response"

    @pytest.mark.asyncio
    async def test_retries_exhausted(self, client: AsyncClient, make_service, use_service, sleeper):
        upstream = FakeUpstream(httpx.Response(503))
        use_service(make_service(upstream))

        response = await client.post("/api/get-macros", json={"query": "toast"})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to get macro data from AI"
        assert upstream.calls == 5
        assert sleeper.delays == [1.0, 2.0, 4.0, 8.0]

    @pytest.mark.asyncio
    async def test_non_string_query_is_invalid_body(self, client: AsyncClient, make_service, use_service):
        upstream = FakeUpstream(ok(EGGS_AND_RICE))
        use_service(make_service(upstream))

        response = await client.post("/api/get-macros", json={"query": {"food": "toast"}})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"
        assert upstream.calls == 0


class TestAnalyzeImageEndpoint:
    """Tests for POST /api/analyze-image."""

    @pytest.mark.asyncio
    async def test_success_with_data_url(self, client: AsyncClient, make_service, use_service):
        upstream = FakeUpstream(ok({"foodName": "pancakes", "suggestedQuantity": "3 pancakes"}))
        use_service(make_service(upstream))

        response = await client.post(
            "/api/analyze-image",
            json={"image": "data:image/png;base64,aGVsbG8="},
        )

        assert response.status_code == 200
        assert response.json() == {"foodName": "pancakes", "suggestedQuantity": "3 pancakes"}
        inline = upstream.last_payload()["contents"][0]["parts"][1]["inlineData"]
        assert inline == {"mimeType": "image/png", "data": "aGVsbG8="}

    @pytest.mark.asyncio
    async def test_missing_image(self, client: AsyncClient, make_service, use_service):
        upstream = FakeUpstream(ok({"foodName": "pancakes"}))
        use_service(make_service(upstream))

        response = await client.post("/api/analyze-image", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "Image is required"
        assert upstream.calls == 0

    @pytest.mark.asyncio
    async def test_retries_exhausted_after_three_attempts(
        self, client: AsyncClient, make_service, use_service
    ):
        upstream = FakeUpstream(httpx.Response(429))
        use_service(make_service(upstream))

        response = await client.post("/api/analyze-image", json={"image": "aGVsbG8="})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to analyze image with AI"
        assert upstream.calls == 3


class TestAppEndpoints:
    """Tests for diagnostic and static routes."""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_test_env_hides_key(self, client: AsyncClient):
        from macro_api.core.config import Settings, get_settings
        from macro_api.main import app

        app.dependency_overrides[get_settings] = lambda: Settings(gemini_api_key="super-secret", port=4321)

        response = await client.get("/api/test-env")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["api_key_configured"] is True
        assert data["port"] == 4321
        assert data["uptime_seconds"] >= 0
        assert "super-secret" not in response.text

    @pytest.mark.asyncio
    async def test_root_serves_client(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "/api/get-macros" in response.text

    @pytest.mark.asyncio
    async def test_cors_headers(self, client: AsyncClient):
        response = await client.options(
            "/api/get-macros",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert "access-control-allow-origin" in response.headers
