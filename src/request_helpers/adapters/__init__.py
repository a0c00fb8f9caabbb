"""Framework adapters for the request helpers.

- asgi.py: Starlette/FastAPI integration (request conversion, fingerprint
  middleware, cache response helpers, error handlers)
"""

from request_helpers.adapters.asgi import (
    RequestFingerprintMiddleware,
    apply_cache_decision,
    event_from_starlette,
    not_modified_response,
    register_error_handlers,
)

__all__ = [
    "RequestFingerprintMiddleware",
    "apply_cache_decision",
    "event_from_starlette",
    "not_modified_response",
    "register_error_handlers",
]
