"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from fakes import FakeUpstream, SleepRecorder
from macro_api.main import app
from macro_api.services.nutrition import GeminiNutritionClient, get_nutrition_service

TEST_API_KEY = "test-key"


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_service(sleeper):
    """
    Build a GeminiNutritionClient wired to a FakeUpstream.

    Usage:
        async def test_x(make_service):
            upstream = FakeUpstream(ok({...}))
            service = make_service(upstream)
    """

    def _make(upstream: FakeUpstream, api_key: str = TEST_API_KEY) -> GeminiNutritionClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
        return GeminiNutritionClient(
            api_key=api_key,
            model="gemini-test",
            base_url="https://gemini.test/v1beta",
            http_client=http_client,
            sleep=sleeper,
        )

    return _make


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """
    Create async test client.

    Usage:
        async def test_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def use_service():
    """Route the API to a specific nutrition service instance."""

    def _use(service) -> None:
        app.dependency_overrides[get_nutrition_service] = lambda: service

    return _use
