from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from articles_api.config import get_settings
from articles_api.main import create_app
from articles_api.observability.metrics import reset_metrics


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ARTICLE_STORE", "memory")
    monkeypatch.setenv("SEED_FIXTURES", "true")
    monkeypatch.setenv("ENABLE_METRICS_ENDPOINT", "true")
    get_settings.cache_clear()
    reset_metrics()

    yield

    get_settings.cache_clear()
    reset_metrics()


@pytest.fixture
def app() -> FastAPI:
    return create_app(get_settings())


@pytest.fixture
async def api_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
