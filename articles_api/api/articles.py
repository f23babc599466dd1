from __future__ import annotations

from dataclasses import dataclass

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from starlette.convertors import Convertor, register_url_convertor

from articles_api.api.errors import ERR_NOT_FOUND, APIError
from articles_api.api.render import ArticleRenderer, bind_article_request
from articles_api.models.schemas import Article, ArticleRequest
from articles_api.services.article_store import ArticleNotFound, ArticleStore
from articles_api.services.store_dependencies import get_article_store


class SlugConvertor(Convertor):
    regex = "[a-z-]+"

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value: str) -> str:
        return value


register_url_convertor("slug", SlugConvertor())

logger = structlog.get_logger("articles")

router = APIRouter(prefix="/articles", tags=["articles"])


def article_ctx(request: Request, store: ArticleStore = Depends(get_article_store)) -> Article:
    """Load the article named by the ``article_id`` or ``article_slug`` path parameter.

    Stops the request with a 404 when the parameter is missing or matches
    nothing, so handlers depending on this always receive an article.
    """
    article_id = request.path_params.get("article_id")
    article_slug = request.path_params.get("article_slug")
    try:
        if article_id:
            return store.get(article_id)
        if article_slug:
            return store.get_by_slug(article_slug)
    except ArticleNotFound as exc:
        raise APIError(ERR_NOT_FOUND) from exc
    raise APIError(ERR_NOT_FOUND)


@dataclass
class Page:
    offset: int = 0
    limit: int | None = None

    def apply(self, articles: list[Article]) -> list[Article]:
        end = None if self.limit is None else self.offset + self.limit
        return articles[self.offset : end]


def paginate(
    offset: int = Query(default=0, ge=0),
    limit: int | None = Query(default=None, ge=1),
) -> Page:
    return Page(offset=offset, limit=limit)


@router.get("")
async def list_articles(
    page: Page = Depends(paginate),
    store: ArticleStore = Depends(get_article_store),
    renderer: ArticleRenderer = Depends(),
) -> JSONResponse:
    return renderer.many(page.apply(store.list()))


@router.post("")
async def create_article(
    data: ArticleRequest = Depends(bind_article_request),
    store: ArticleStore = Depends(get_article_store),
    renderer: ArticleRenderer = Depends(),
) -> JSONResponse:
    article = store.create(data.article)
    logger.info("article.created", article_id=article.id)
    return renderer.one(article, status_code=201)


@router.get("/search")
async def search_articles(
    store: ArticleStore = Depends(get_article_store),
    renderer: ArticleRenderer = Depends(),
) -> JSONResponse:
    # Stub: returns every article.
    return renderer.many(store.list())


# Registered ahead of the id routes: "/articles/whats-up" is a slug, "/articles/1" an id.
@router.get("/{article_slug:slug}")
async def get_article_by_slug(
    article: Article = Depends(article_ctx),
    renderer: ArticleRenderer = Depends(),
) -> JSONResponse:
    return renderer.one(article)


@router.get("/{article_id}")
async def get_article(
    article: Article = Depends(article_ctx),
    renderer: ArticleRenderer = Depends(),
) -> JSONResponse:
    return renderer.one(article)


@router.put("/{article_id}")
async def update_article(
    article: Article = Depends(article_ctx),
    data: ArticleRequest = Depends(bind_article_request),
    store: ArticleStore = Depends(get_article_store),
    renderer: ArticleRenderer = Depends(),
) -> JSONResponse:
    try:
        updated = store.update(article.id, data.article)
    except ArticleNotFound as exc:
        raise APIError(ERR_NOT_FOUND) from exc
    logger.info("article.updated", article_id=updated.id)
    return renderer.one(updated)


@router.delete("/{article_id}")
async def delete_article(
    article: Article = Depends(article_ctx),
    store: ArticleStore = Depends(get_article_store),
    renderer: ArticleRenderer = Depends(),
) -> JSONResponse:
    try:
        removed = store.delete(article.id)
    except ArticleNotFound as exc:
        raise APIError(ERR_NOT_FOUND) from exc
    logger.info("article.deleted", article_id=removed.id)
    return renderer.one(removed)
