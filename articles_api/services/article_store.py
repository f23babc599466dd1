from __future__ import annotations

import uuid
from collections.abc import Iterable
from threading import Lock
from typing import Protocol

import structlog
from sqlalchemy import Engine, delete, select
from sqlalchemy.orm import Session

from articles_api.db.models import ArticleRow, Base
from articles_api.db.session import make_session_factory
from articles_api.models.schemas import Article

logger = structlog.get_logger("article_store")


class ArticleNotFound(LookupError):
    pass


class ArticleStore(Protocol):
    def list(self) -> list[Article]: ...

    def create(self, article: Article) -> Article: ...

    def get(self, article_id: str) -> Article: ...

    def get_by_slug(self, slug: str) -> Article: ...

    def update(self, article_id: str, article: Article) -> Article: ...

    def delete(self, article_id: str) -> Article: ...


def _new_article_id() -> str:
    return str(uuid.uuid4())


class InMemoryArticleStore:
    """List-backed store; every operation holds one lock.

    Articles are copied on the way in and out so callers never share state
    with the store.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._articles: list[Article] = []

    def seed(self, articles: Iterable[Article]) -> None:
        with self._lock:
            self._articles.extend(a.model_copy() for a in articles)

    def list(self) -> list[Article]:
        with self._lock:
            return [a.model_copy() for a in self._articles]

    def create(self, article: Article) -> Article:
        with self._lock:
            article_id = _new_article_id()
            while self._index(article_id) is not None:
                article_id = _new_article_id()
            stored = article.model_copy(update={"id": article_id})
            self._articles.append(stored)
        logger.info("article.stored", article_id=article_id)
        return stored.model_copy()

    def get(self, article_id: str) -> Article:
        with self._lock:
            idx = self._index(article_id)
            if idx is None:
                raise ArticleNotFound("article not found.")
            return self._articles[idx].model_copy()

    def get_by_slug(self, slug: str) -> Article:
        with self._lock:
            for a in self._articles:
                if a.slug == slug:
                    return a.model_copy()
        raise ArticleNotFound("article not found.")

    def update(self, article_id: str, article: Article) -> Article:
        with self._lock:
            idx = self._index(article_id)
            if idx is None:
                raise ArticleNotFound("article not found.")
            self._articles[idx] = article.model_copy(update={"id": article_id})
            return self._articles[idx].model_copy()

    def delete(self, article_id: str) -> Article:
        with self._lock:
            idx = self._index(article_id)
            if idx is None:
                raise ArticleNotFound("article not found.")
            return self._articles.pop(idx)

    def _index(self, article_id: str) -> int | None:
        for i, a in enumerate(self._articles):
            if a.id == article_id:
                return i
        return None


def _to_article(row: ArticleRow) -> Article:
    return Article(id=row.id, user_id=row.user_id, title=row.title, slug=row.slug)


class SqlArticleStore:
    """SQLAlchemy-backed store. One session per call."""

    def __init__(self, engine: Engine) -> None:
        Base.metadata.create_all(engine)
        self._sessions = make_session_factory(engine)

    def seed(self, articles: Iterable[Article]) -> None:
        with self._sessions() as db:
            for a in articles:
                if self._find(db, a.id) is None:
                    db.add(ArticleRow(id=a.id, user_id=a.user_id, title=a.title, slug=a.slug))
            db.commit()

    def list(self) -> list[Article]:
        with self._sessions() as db:
            rows = db.execute(select(ArticleRow).order_by(ArticleRow.pk)).scalars().all()
            return [_to_article(r) for r in rows]

    def create(self, article: Article) -> Article:
        with self._sessions() as db:
            article_id = _new_article_id()
            while self._find(db, article_id) is not None:
                article_id = _new_article_id()
            row = ArticleRow(id=article_id, user_id=article.user_id, title=article.title, slug=article.slug)
            db.add(row)
            db.commit()
            logger.info("article.stored", article_id=article_id)
            return _to_article(row)

    def get(self, article_id: str) -> Article:
        with self._sessions() as db:
            row = self._find(db, article_id)
            if row is None:
                raise ArticleNotFound("article not found.")
            return _to_article(row)

    def get_by_slug(self, slug: str) -> Article:
        with self._sessions() as db:
            row = db.execute(
                select(ArticleRow).where(ArticleRow.slug == slug).order_by(ArticleRow.pk).limit(1)
            ).scalar_one_or_none()
            if row is None:
                raise ArticleNotFound("article not found.")
            return _to_article(row)

    def update(self, article_id: str, article: Article) -> Article:
        with self._sessions() as db:
            row = self._find(db, article_id)
            if row is None:
                raise ArticleNotFound("article not found.")
            row.user_id = article.user_id
            row.title = article.title
            row.slug = article.slug
            db.add(row)
            db.commit()
            return _to_article(row)

    def delete(self, article_id: str) -> Article:
        with self._sessions() as db:
            row = self._find(db, article_id)
            if row is None:
                raise ArticleNotFound("article not found.")
            removed = _to_article(row)
            db.execute(delete(ArticleRow).where(ArticleRow.pk == row.pk))
            db.commit()
            return removed

    @staticmethod
    def _find(db: Session, article_id: str) -> ArticleRow | None:
        return db.execute(select(ArticleRow).where(ArticleRow.id == article_id)).scalar_one_or_none()
