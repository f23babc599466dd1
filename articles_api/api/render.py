"""Binding request bodies into payloads and rendering payloads into responses.

Payloads expose hooks: ``bind()`` runs after a request body is decoded,
``render()`` runs right before a response is serialized.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Protocol

from fastapi import Depends, Request
from fastapi.responses import JSONResponse
from pydantic_core import PydanticSerializationError

from articles_api.api.errors import APIError, err_invalid_request, err_render
from articles_api.models.schemas import Article, ArticleRequest, ArticleResponse, UserPayload
from articles_api.services.store_dependencies import get_user_store
from articles_api.services.user_store import UserNotFound, UserStore


class Renderer(Protocol):
    def render(self) -> None: ...

    def model_dump(self, **kwargs: Any) -> dict[str, Any]: ...


def _render_one(payload: Renderer) -> dict[str, Any]:
    payload.render()
    return payload.model_dump(mode="json")


def render(payload: Renderer, status_code: int = 200) -> JSONResponse:
    try:
        body = _render_one(payload)
    except (ValueError, TypeError, PydanticSerializationError) as exc:
        raise APIError(err_render(exc)) from exc
    return JSONResponse(body, status_code=status_code)


def render_list(payloads: Sequence[Renderer], status_code: int = 200) -> JSONResponse:
    try:
        body = [_render_one(p) for p in payloads]
    except (ValueError, TypeError, PydanticSerializationError) as exc:
        raise APIError(err_render(exc)) from exc
    return JSONResponse(body, status_code=status_code)


async def bind_article_request(request: Request) -> ArticleRequest:
    """Decode the body into an :class:`ArticleRequest` and run its bind hook."""
    # JSON decode errors and pydantic ValidationError are both ValueErrors;
    # pathologically nested JSON overflows the decoder instead.
    try:
        payload = ArticleRequest.model_validate(await request.json())
        payload.bind()
    except (ValueError, RecursionError) as exc:
        raise APIError(err_invalid_request(exc)) from exc
    return payload


def new_article_response(article: Article, users: UserStore) -> ArticleResponse:
    resp = ArticleResponse(article=article)
    if resp.user is None:
        try:
            author = users.get(article.user_id)
        except UserNotFound:
            author = None
        if author is not None:
            resp.user = UserPayload(user=author)
    return resp


def new_article_list_response(articles: Iterable[Article], users: UserStore) -> list[ArticleResponse]:
    return [new_article_response(a, users) for a in articles]


class ArticleRenderer:
    """Dependency bundling the user lookup the article responses need."""

    def __init__(self, users: UserStore = Depends(get_user_store)) -> None:
        self.users = users

    def one(self, article: Article, status_code: int = 200) -> JSONResponse:
        return render(new_article_response(article, self.users), status_code=status_code)

    def many(self, articles: Iterable[Article]) -> JSONResponse:
        return render_list(new_article_list_response(articles, self.users))

