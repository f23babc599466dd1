from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from articles_api.__main__ import build_parser
from articles_api.api.admin import admin_only
from articles_api.config import get_settings
from articles_api.docs import routes_markdown
from articles_api.observability.metrics import get_metrics
from articles_api.observability.middleware import RequestContextMiddleware


async def test_root_and_health(api_client) -> None:
    root = await api_client.get("/")
    assert root.status_code == 200
    assert root.text == "root."

    health = await api_client.get("/health")
    assert health.json() == {"status": "ok"}


async def test_ping_counts_completed_pings(api_client) -> None:
    before = (await api_client.get("/metrics")).json()["counters"]["ping_completed_total"]

    resp = await api_client.get("/ping")
    assert resp.status_code == 200
    assert resp.text == "pong"

    after = (await api_client.get("/metrics")).json()["counters"]["ping_completed_total"]
    assert after == before + 1


async def test_metrics_endpoint_does_not_count_itself(api_client) -> None:
    m1 = (await api_client.get("/metrics")).json()
    m2 = (await api_client.get("/metrics")).json()
    assert m2["counters"]["http_requests_total"] == m1["counters"]["http_requests_total"]

    await api_client.get("/articles")
    m3 = (await api_client.get("/metrics")).json()
    assert m3["counters"]["http_requests_total"] == m1["counters"]["http_requests_total"] + 1
    assert m3["latency_ms"]["http_request_ms"]["count"] >= 1


async def test_metrics_endpoint_can_be_disabled(api_client, monkeypatch) -> None:
    monkeypatch.setenv("ENABLE_METRICS_ENDPOINT", "false")
    get_settings.cache_clear()
    resp = await api_client.get("/metrics")
    assert resp.status_code == 404
    assert resp.json() == {"status": "Not found"}


async def test_admin_routes_are_forbidden_by_default(api_client) -> None:
    for path in ("/admin/", "/admin/accounts", "/admin/users/7"):
        resp = await api_client.get(path)
        assert resp.status_code == 403
        assert resp.json() == {"status": "Forbidden"}


async def test_admin_routes_when_access_is_granted(app, api_client) -> None:
    app.dependency_overrides[admin_only] = lambda: None

    assert (await api_client.get("/admin/")).text == "admin: index"
    assert (await api_client.get("/admin/accounts")).text == "admin: list accounts.."
    assert (await api_client.get("/admin/users/7")).text == "admin: view user id 7"


async def test_panic_is_recovered_as_server_error(app) -> None:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/panic")
        assert resp.status_code == 500
        assert resp.json() == {"status": "Internal server error."}

        # The app keeps serving after a crash in a handler.
        assert (await client.get("/ping")).text == "pong"


def test_routes_markdown_lists_article_routes(app) -> None:
    doc = routes_markdown(app)
    assert "`/articles/{article_id}`" in doc
    assert "`/articles/{article_slug:slug}`" in doc
    assert "article_ctx" in doc
    assert "**DELETE**" in doc


def test_cli_defaults_come_from_settings(monkeypatch) -> None:
    monkeypatch.setenv("REST_PORT", "8080")
    get_settings.cache_clear()
    args = build_parser().parse_args([])
    assert args.port == 8080
    assert args.routes is False

    args = build_parser().parse_args(["--routes", "--host", "0.0.0.0"])
    assert args.routes is True
    assert args.host == "0.0.0.0"


async def test_middleware_counts_every_path_unless_excluded() -> None:
    bare = FastAPI()
    bare.add_middleware(RequestContextMiddleware)

    @bare.get("/metrics")
    async def fake_metrics() -> dict:
        return {}

    async with AsyncClient(transport=ASGITransport(app=bare), base_url="http://test") as client:
        before = get_metrics().snapshot()["counters"]["http_requests_total"]
        await client.get("/metrics")
        assert get_metrics().snapshot()["counters"]["http_requests_total"] == before + 1
