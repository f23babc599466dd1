from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator


COLLABORATOR_ROLE = "collaborator"

# Stand-in for a real latency measurement.
ELAPSED_PLACEHOLDER = 10

ARTICLE_FIELDS = ("user_id", "title", "slug")
USER_FIELDS = ("id", "name")


class Article(BaseModel):
    id: str = ""
    user_id: int = 0  # the author
    title: str = ""
    slug: str = ""


class User(BaseModel):
    id: int = 0
    name: str = ""


class UserPayload(BaseModel):
    """User as it travels on the wire: the user fields plus a role, flattened."""

    user: User
    role: str = ""

    @model_validator(mode="before")
    @classmethod
    def _gather_user(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "user" in data:
            return data
        data = dict(data)
        data["user"] = {key: data.pop(key) for key in USER_FIELDS if key in data}
        return data

    @model_serializer
    def _flatten(self) -> dict[str, Any]:
        return {**self.user.model_dump(), "role": self.role}

    def render(self) -> None:
        self.role = COLLABORATOR_ROLE


class ArticleRequest(BaseModel):
    """Inbound article payload.

    Article fields arrive inlined at the top level. A top-level ``id`` is
    captured in ``protected_id`` and thrown away by :meth:`bind`, so clients
    can never choose or override an article id.
    """

    model_config = ConfigDict(populate_by_name=True)

    article: Article | None = None
    user: UserPayload | None = None
    protected_id: str = Field(default="", alias="id")

    @model_validator(mode="before")
    @classmethod
    def _gather_article(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        data.pop("article", None)
        fields = {key: data.pop(key) for key in ARTICLE_FIELDS if key in data}
        if fields:
            data["article"] = fields
        return data

    def bind(self) -> Article:
        """Post-decode hook: validate and normalize the decoded payload."""
        # article is None when no article fields were sent at all
        if self.article is None:
            raise ValueError("missing required Article fields.")

        self.protected_id = ""
        self.article.title = self.article.title.lower()
        return self.article


class ArticleResponse(BaseModel):
    """Outbound article payload.

    Hooks run top-down: the response's own :meth:`render` first, then the
    nested user payload's, like a handler middleware chain.
    """

    article: Article
    user: UserPayload | None = None
    elapsed: int = 0

    @model_serializer
    def _flatten(self) -> dict[str, Any]:
        out = self.article.model_dump()
        if self.user is not None:
            out["user"] = self.user.model_dump()
        out["elapsed"] = self.elapsed
        return out

    def render(self) -> None:
        self.elapsed = ELAPSED_PLACEHOLDER
        if self.user is not None:
            self.user.render()


class ErrResponse(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    err: Exception | None = Field(default=None, exclude=True)  # low-level runtime error
    http_status_code: int = Field(exclude=True)

    status_text: str = Field(serialization_alias="status")
    app_code: int | None = Field(default=None, serialization_alias="code")
    error_text: str | None = Field(default=None, serialization_alias="error")

    def body(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
