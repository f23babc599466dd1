from __future__ import annotations

from articles_api.models.schemas import Article, User


ARTICLE_FIXTURES: tuple[Article, ...] = (
    Article(id="1", user_id=100, title="Hi", slug="hi"),
    Article(id="2", user_id=200, title="sup", slug="sup"),
    Article(id="3", user_id=300, title="alo", slug="alo"),
    Article(id="4", user_id=400, title="bonjour", slug="bonjour"),
    Article(id="5", user_id=500, title="whats up", slug="whats-up"),
)

USER_FIXTURES: tuple[User, ...] = (
    User(id=100, name="Peter"),
    User(id=200, name="Julia"),
)
