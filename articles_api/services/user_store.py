from __future__ import annotations

from collections.abc import Iterable
from threading import Lock
from typing import Protocol

from sqlalchemy import Engine, select

from articles_api.db.models import Base, UserRow
from articles_api.db.session import make_session_factory
from articles_api.models.schemas import User


class UserNotFound(LookupError):
    pass


class UserStore(Protocol):
    def get(self, user_id: int) -> User: ...


class InMemoryUserStore:
    def __init__(self) -> None:
        self._lock = Lock()
        self._users: list[User] = []

    def seed(self, users: Iterable[User]) -> None:
        with self._lock:
            self._users.extend(u.model_copy() for u in users)

    def get(self, user_id: int) -> User:
        with self._lock:
            for u in self._users:
                if u.id == user_id:
                    return u.model_copy()
        raise UserNotFound("user not found.")


class SqlUserStore:
    def __init__(self, engine: Engine) -> None:
        Base.metadata.create_all(engine)
        self._sessions = make_session_factory(engine)

    def seed(self, users: Iterable[User]) -> None:
        with self._sessions() as db:
            for u in users:
                if db.get(UserRow, u.id) is None:
                    db.add(UserRow(id=u.id, name=u.name))
            db.commit()

    def get(self, user_id: int) -> User:
        with self._sessions() as db:
            row = db.execute(select(UserRow).where(UserRow.id == user_id)).scalar_one_or_none()
            if row is None:
                raise UserNotFound("user not found.")
            return User(id=row.id, name=row.name)
