"""ASGI adapter for FastAPI and Starlette applications.

This module connects the framework-agnostic helpers to Starlette:

1. Converts Starlette requests to :class:`RequestEvent`
2. Computes a fingerprint for every request in middleware
3. Applies cache decisions to responses and builds 304 responses
4. Maps request helper errors to JSON error responses

Examples:
    FastAPI integration::

        from fastapi import FastAPI, Request
        from request_helpers.adapters.asgi import (
            RequestFingerprintMiddleware,
            apply_cache_decision,
            event_from_starlette,
            not_modified_response,
            register_error_handlers,
        )
        from request_helpers.cache import handle_cache_headers
        from request_helpers.config import HelpersConfig

        app = FastAPI()
        app.add_middleware(RequestFingerprintMiddleware, config=HelpersConfig())
        register_error_handlers(app)

        @app.get("/articles/{slug}")
        async def article(request: Request, slug: str):
            event = await event_from_starlette(request)
            decision = handle_cache_headers(event, CacheDescriptor(last_modified=...))
            if decision.is_fresh:
                return not_modified_response(decision)
            return apply_cache_decision(JSONResponse({...}), decision)
"""

from collections.abc import Awaitable, Callable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request as StarletteRequest
from starlette.responses import JSONResponse, Response

from request_helpers.accessors import RequestEvent, capture_signals
from request_helpers.config import HelpersConfig
from request_helpers.exceptions import MethodNotAllowedError, RequestHelperError
from request_helpers.fingerprint import compute_fingerprint
from request_helpers.models import CacheDecision
from request_helpers.utils.headers import NOT_MODIFIED_HEADERS, select_headers


async def event_from_starlette(
    request: StarletteRequest,
    read_body: bool = True,
) -> RequestEvent:
    """Convert a Starlette request to a RequestEvent.

    Args:
        request: Starlette request object
        read_body: Await the request body. Middleware that must leave the
            body stream untouched passes False.

    Returns:
        RequestEvent for the request
    """
    body = await request.body() if read_body else b""

    headers: dict[str, str] = {}
    for key, value in request.headers.items():
        headers[key] = value

    return RequestEvent(
        method=request.method,
        path=request.url.path,
        query_string=request.url.query or "",
        headers=headers,
        body=body,
        remote_address=request.client.host if request.client else None,
        route_params={key: str(value) for key, value in request.path_params.items()},
        scheme=request.url.scheme,
    )


class RequestFingerprintMiddleware(BaseHTTPMiddleware):
    """ASGI middleware that fingerprints every request.

    The fingerprint is stored on ``request.state.fingerprint`` for handlers,
    rate limiters and access logs. When ``config.fingerprint_header`` is set
    the fingerprint is also echoed in that response header.

    Attributes:
        config: Adapter configuration
    """

    def __init__(self, app: Any, config: HelpersConfig | None = None) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application
            config: Configuration object (uses defaults if not provided)
        """
        super().__init__(app)
        self.config = config or HelpersConfig()

    async def dispatch(
        self,
        request: StarletteRequest,
        call_next: Callable[[StarletteRequest], Awaitable[Response]],
    ) -> Response:
        event = await event_from_starlette(request, read_body=False)
        signals = capture_signals(event, trust_forwarded=self.config.trust_forwarded)
        fingerprint = compute_fingerprint(signals, self.config.fingerprint)
        request.state.fingerprint = fingerprint

        response = await call_next(request)

        if self.config.fingerprint_header:
            response.headers[self.config.fingerprint_header] = fingerprint
        return response


def apply_cache_decision(response: Response, decision: CacheDecision) -> Response:
    """Set the decision's caching headers on ``response`` and return it."""
    for name, value in decision.headers_to_set:
        response.headers[name] = value
    return response


def not_modified_response(decision: CacheDecision) -> Response:
    """Build a bodiless 304 Not Modified response for a fresh decision.

    Only validator and caching headers are carried over; Last-Modified is
    kept only when the decision has no ETag.
    """
    allowed = set(NOT_MODIFIED_HEADERS)
    if "etag" not in {name.lower() for name, _ in decision.headers_to_set}:
        allowed.add("last-modified")

    return Response(
        status_code=304,
        headers=dict(select_headers(decision.headers_to_set, allowed)),
    )


async def request_helper_error_handler(request: StarletteRequest, exc: Exception) -> Response:
    """Render a RequestHelperError as a JSON error response.

    405 responses carry an ``Allow`` header listing the accepted methods.
    """
    if not isinstance(exc, RequestHelperError):
        raise exc

    headers: dict[str, str] = {}
    if isinstance(exc, MethodNotAllowedError) and exc.allowed:
        headers["Allow"] = ", ".join(exc.allowed)

    return JSONResponse(exc.to_dict(), status_code=exc.status_code, headers=headers)


def register_error_handlers(app: Any) -> None:
    """Install :func:`request_helper_error_handler` on a Starlette/FastAPI app."""
    app.add_exception_handler(RequestHelperError, request_helper_error_handler)
