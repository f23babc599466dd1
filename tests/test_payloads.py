import json

import pytest
from pydantic import ValidationError

from articles_api.api.errors import APIError
from articles_api.api.render import new_article_list_response, new_article_response, render, render_list
from articles_api.models.schemas import Article, ArticleRequest, ArticleResponse, User, UserPayload
from articles_api.services.fixtures import USER_FIXTURES
from articles_api.services.user_store import InMemoryUserStore


@pytest.fixture
def users() -> InMemoryUserStore:
    store = InMemoryUserStore()
    store.seed(USER_FIXTURES)
    return store


def test_article_request_gathers_inlined_article_fields() -> None:
    req = ArticleRequest.model_validate({"id": "x", "title": "Hello", "slug": "hello", "user_id": 100})
    assert req.article == Article(id="", user_id=100, title="Hello", slug="hello")
    assert req.protected_id == "x"


def test_bind_clears_protected_id_and_lowercases_title() -> None:
    req = ArticleRequest.model_validate({"id": "will-be-omitted", "title": "AWESOME"})
    article = req.bind()
    assert req.protected_id == ""
    assert article.title == "awesome"
    assert article.id == ""


def test_bind_without_article_fields_fails() -> None:
    req = ArticleRequest.model_validate({"id": "5"})
    assert req.article is None
    with pytest.raises(ValueError, match="missing required Article fields."):
        req.bind()


def test_article_request_decodes_nested_user_payload() -> None:
    req = ArticleRequest.model_validate({"title": "t", "user": {"id": 200, "name": "Julia", "role": "admin"}})
    assert req.user is not None
    assert req.user.user == User(id=200, name="Julia")
    assert req.user.role == "admin"


def test_article_request_rejects_non_object_body() -> None:
    with pytest.raises(ValidationError):
        ArticleRequest.model_validate(["title"])


def test_new_article_response_looks_up_author_by_user_id(users) -> None:
    resp = new_article_response(Article(id="1", user_id=200, title="sup", slug="sup"), users)
    assert resp.user is not None
    assert resp.user.user.name == "Julia"


def test_new_article_response_omits_unknown_author(users) -> None:
    resp = new_article_response(Article(id="9", user_id=0, title="t"), users)
    assert resp.user is None
    resp.render()
    assert "user" not in resp.model_dump()


def test_render_hooks_run_top_down(users) -> None:
    resp = new_article_response(Article(id="1", user_id=100, title="Hi", slug="hi"), users)
    resp.elapsed = 12345
    resp.user.role = "owner"

    resp.render()

    assert resp.elapsed == 10
    assert resp.user.role == "collaborator"


def test_article_response_serializes_flat() -> None:
    resp = ArticleResponse(
        article=Article(id="1", user_id=100, title="Hi", slug="hi"),
        user=UserPayload(user=User(id=100, name="Peter"), role="collaborator"),
        elapsed=10,
    )
    assert resp.model_dump(mode="json") == {
        "id": "1",
        "user_id": 100,
        "title": "Hi",
        "slug": "hi",
        "user": {"id": 100, "name": "Peter", "role": "collaborator"},
        "elapsed": 10,
    }


def test_list_response_builds_one_item_per_article(users) -> None:
    articles = [Article(id="1", user_id=100), Article(id="2", user_id=300)]
    items = new_article_list_response(articles, users)
    assert [i.article.id for i in items] == ["1", "2"]
    assert items[0].user is not None
    assert items[1].user is None


def test_render_list_writes_json_array(users) -> None:
    response = render_list(new_article_list_response([Article(id="1", user_id=100)], users))
    body = json.loads(response.body)
    assert response.status_code == 200
    assert body[0]["elapsed"] == 10
    assert body[0]["user"]["role"] == "collaborator"


class _BrokenResponse(ArticleResponse):
    def render(self) -> None:
        raise ValueError("cannot compute elapsed")


def test_render_failure_becomes_render_error() -> None:
    with pytest.raises(APIError) as excinfo:
        render(_BrokenResponse(article=Article(id="1")))
    err = excinfo.value.response
    assert err.http_status_code == 422
    assert err.body() == {"status": "Error rendering response.", "error": "cannot compute elapsed"}


def test_render_sets_status_code(users) -> None:
    response = render(new_article_response(Article(id="1", user_id=100), users), status_code=201)
    assert response.status_code == 201
