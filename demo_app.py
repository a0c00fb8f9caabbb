"""Demo FastAPI application using the request helpers.

This application shows fingerprinting, conditional GETs and method guards.
Run with: python demo_app.py
Then try:
    curl -i http://localhost:8000/api/articles/hello-world
    curl -i -H 'If-Modified-Since: Wed, 21 Oct 2015 07:28:00 GMT' \\
        http://localhost:8000/api/articles/hello-world
"""

from datetime import UTC, datetime

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from request_helpers.accessors import get_validated_query, read_validated_body
from request_helpers.adapters.asgi import (
    RequestFingerprintMiddleware,
    apply_cache_decision,
    event_from_starlette,
    not_modified_response,
    register_error_handlers,
)
from request_helpers.cache import handle_cache_headers
from request_helpers.config import FingerprintConfig, HelpersConfig
from request_helpers.methods import assert_method
from request_helpers.models import CacheDescriptor
from request_helpers.observability.logging import configure_logging

app = FastAPI(
    title="Request Helpers Demo",
    description="Demo API showing fingerprinting and conditional requests",
    version="0.1.0",
)

config = HelpersConfig(
    trust_forwarded=False,
    fingerprint=FingerprintConfig(
        include_ip=True,
        include_user_agent=True,
        ip_anonymization_bits=8,  # /24 subnets
    ),
    fingerprint_header="X-Request-Fingerprint",
)

app.add_middleware(RequestFingerprintMiddleware, config=config)
register_error_handlers(app)

ARTICLES = {
    "hello-world": {
        "title": "Hello, world",
        "body": "First post.",
        "updated_at": datetime(2015, 10, 21, 7, 28, tzinfo=UTC),
    },
}


class Pagination(BaseModel):
    page: int = 1
    per_page: int = 20


class CommentRequest(BaseModel):
    author: str
    text: str


@app.get("/")
async def root(request: Request):
    """Root endpoint - returns API info and the caller's fingerprint."""
    return {
        "name": "Request Helpers Demo",
        "version": "0.1.0",
        "fingerprint": request.state.fingerprint,
        "endpoints": {
            "GET /api/articles": "List articles (validated pagination)",
            "GET /api/articles/{slug}": "Conditional GET with Last-Modified",
            "/api/articles/{slug}/comments": "POST only, guarded by assert_method",
        },
    }


@app.get("/api/articles")
async def list_articles(request: Request):
    event = await event_from_starlette(request)
    pagination = get_validated_query(event, Pagination)
    slugs = sorted(ARTICLES)
    start = (pagination.page - 1) * pagination.per_page
    return {"articles": slugs[start : start + pagination.per_page], "page": pagination.page}


@app.get("/api/articles/{slug}")
async def get_article(request: Request, slug: str):
    """Serve an article, answering 304 when the client's copy is current."""
    article = ARTICLES.get(slug)
    if article is None:
        return JSONResponse({"message": "Article not found"}, status_code=404)

    event = await event_from_starlette(request)
    decision = handle_cache_headers(
        event,
        CacheDescriptor(
            last_modified=article["updated_at"],
            max_age=3600,
            must_revalidate=True,
        ),
    )
    if decision.is_fresh:
        return not_modified_response(decision)

    return apply_cache_decision(
        JSONResponse({"title": article["title"], "body": article["body"]}),
        decision,
    )


@app.api_route("/api/articles/{slug}/comments", methods=["GET", "POST", "DELETE"])
async def add_comment(request: Request, slug: str):
    event = await event_from_starlette(request)
    assert_method(event.method, "POST")
    comment = read_validated_body(event, CommentRequest)
    return {"article": slug, "author": comment.author, "status": "accepted"}


if __name__ == "__main__":
    configure_logging(level="DEBUG", json_output=False)
    print("=" * 60)
    print("Request Helpers Demo Server")
    print("=" * 60)
    print("\nStarting server at http://localhost:8000")
    print("\nPress Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
