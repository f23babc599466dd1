from __future__ import annotations

import structlog
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from articles_api.api.admin import router as admin_router
from articles_api.api.articles import router as articles_router
from articles_api.api.errors import register_error_handlers
from articles_api.api.metrics import METRICS_PATH, router as metrics_router
from articles_api.config import Settings, get_settings
from articles_api.db.session import make_engine
from articles_api.observability.metrics import get_metrics
from articles_api.observability.middleware import RequestContextMiddleware
from articles_api.services.article_store import ArticleStore, InMemoryArticleStore, SqlArticleStore
from articles_api.services.fixtures import ARTICLE_FIXTURES, USER_FIXTURES
from articles_api.services.user_store import InMemoryUserStore, SqlUserStore, UserStore


SERVICE_NAME = "rest"


def _build_stores(settings: Settings) -> tuple[ArticleStore, UserStore]:
    if settings.article_store == "sql":
        engine = make_engine(settings.database_url)
        articles, users = SqlArticleStore(engine), SqlUserStore(engine)
    else:
        articles, users = InMemoryArticleStore(), InMemoryUserStore()

    if settings.seed_fixtures:
        articles.seed(ARTICLE_FIXTURES)
        users.seed(USER_FIXTURES)
    return articles, users


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="Articles REST", version="0.1.0")
    app.state.article_store, app.state.user_store = _build_stores(settings)

    app.add_middleware(RequestContextMiddleware, excluded_metric_paths={METRICS_PATH})
    register_error_handlers(app)

    app.include_router(articles_router)
    app.include_router(admin_router)
    app.include_router(metrics_router)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "root."

    @app.get("/ping", response_class=PlainTextResponse)
    async def ping() -> str:
        structlog.get_logger(SERVICE_NAME).info("ping")
        get_metrics().observe_ping()
        return "pong"

    @app.get("/panic")
    async def panic() -> None:
        raise RuntimeError("panic")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
