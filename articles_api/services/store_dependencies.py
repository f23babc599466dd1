from __future__ import annotations

from fastapi import Request

from articles_api.services.article_store import ArticleStore
from articles_api.services.user_store import UserStore


def get_article_store(request: Request) -> ArticleStore:
    return request.app.state.article_store


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store
