"""Scenario 3: Method Guards and Validation Errors

This module tests error mapping through a FastAPI application:
- assert_method failures become 405 JSON responses with an Allow header
- HEAD requests pass a GET guard when aliasing is enabled
- Validation failures become 400 JSON responses listing the failed fields
"""

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from pydantic import BaseModel

from request_helpers.accessors import (
    get_validated_query,
    get_validated_router_params,
    read_validated_body,
)
from request_helpers.adapters.asgi import event_from_starlette, register_error_handlers
from request_helpers.methods import assert_method


class CommentRequest(BaseModel):
    """Comment body model for testing."""

    author: str
    text: str


class Pagination(BaseModel):
    page: int = 1


@pytest.fixture
def app() -> FastAPI:
    test_app = FastAPI()
    register_error_handlers(test_app)

    @test_app.api_route("/comments", methods=["GET", "POST", "PUT", "DELETE"])
    async def comments(request: Request):
        event = await event_from_starlette(request)
        assert_method(event.method, ["POST", "PUT"])
        comment = read_validated_body(event, CommentRequest)
        return {"author": comment.author}

    @test_app.api_route("/feed", methods=["GET", "HEAD", "POST"])
    async def feed(request: Request):
        event = await event_from_starlette(request)
        assert_method(event.method, "GET", allow_head_for_get=True)
        pagination = get_validated_query(event, Pagination)
        return {"page": pagination.page}

    @test_app.get("/items/{item_id}")
    async def item(request: Request):
        event = await event_from_starlette(request)
        params = get_validated_router_params(event, lambda p: p["item_id"].isdigit())
        return {"item_id": params["item_id"]}

    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


class TestMethodGuard:
    def test_allowed_method(self, client: TestClient) -> None:
        response = client.post("/comments", json={"author": "alice", "text": "hi"})

        assert response.status_code == 200
        assert response.json() == {"author": "alice"}

    def test_disallowed_method_returns_405(self, client: TestClient) -> None:
        response = client.delete("/comments")

        assert response.status_code == 405
        assert response.json() == {
            "statusCode": 405,
            "message": "HTTP method is not allowed.",
        }
        assert response.headers["allow"] == "POST, PUT"

    def test_head_passes_get_guard(self, client: TestClient) -> None:
        response = client.head("/feed")
        assert response.status_code == 200

    def test_post_fails_get_guard(self, client: TestClient) -> None:
        response = client.post("/feed")
        assert response.status_code == 405


class TestValidationErrors:
    def test_invalid_body_returns_400(self, client: TestClient) -> None:
        response = client.put("/comments", json={"author": "alice"})

        assert response.status_code == 400
        body = response.json()
        assert body["statusCode"] == 400
        assert body["message"] == "Validation Error"
        assert [error["loc"] for error in body["data"]] == [["text"]]

    def test_invalid_query_returns_400(self, client: TestClient) -> None:
        response = client.get("/feed", params={"page": "first"})

        assert response.status_code == 400
        assert response.json()["data"][0]["loc"] == ["page"]

    def test_valid_query(self, client: TestClient) -> None:
        assert client.get("/feed", params={"page": "3"}).json() == {"page": 3}

    def test_route_param_predicate(self, client: TestClient) -> None:
        assert client.get("/items/42").json() == {"item_id": "42"}
        assert client.get("/items/abc").status_code == 400
