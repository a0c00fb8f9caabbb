"""HTTP method guards.

Case-insensitive method matching with an optional rule that lets ``HEAD``
requests through wherever ``GET`` is accepted.
"""

from collections.abc import Iterable

from request_helpers.exceptions import MethodNotAllowedError
from request_helpers.observability.logging import get_logger
from request_helpers.observability.metrics import record_method_rejection

logger = get_logger(__name__)


def _normalize_expected(expected: str | Iterable[str]) -> list[str]:
    if isinstance(expected, str):
        expected = [expected]
    return [method.upper() for method in expected]


def is_method(
    actual: str,
    expected: str | Iterable[str],
    allow_head_for_get: bool = False,
) -> bool:
    """Check whether a request method matches one or more expected methods.

    Args:
        actual: Method of the incoming request
        expected: A single method or a collection of methods
        allow_head_for_get: Also accept ``HEAD`` when ``GET`` is expected

    Returns:
        True if the method matches

    Examples:
        >>> is_method("HEAD", "GET", allow_head_for_get=True)
        True
        >>> is_method("HEAD", "GET")
        False
        >>> is_method("post", ["POST", "PUT"])
        True
    """
    method = actual.upper()
    allowed = _normalize_expected(expected)

    if method in allowed:
        return True

    return allow_head_for_get and method == "HEAD" and "GET" in allowed


def assert_method(
    actual: str,
    expected: str | Iterable[str],
    allow_head_for_get: bool = False,
) -> None:
    """Raise unless the request method matches.

    Raises:
        MethodNotAllowedError: The method does not match (HTTP 405).
    """
    allowed = _normalize_expected(expected)
    if is_method(actual, allowed, allow_head_for_get):
        return

    record_method_rejection(actual)
    logger.info("method.rejected", method=actual.upper(), allowed=allowed)
    raise MethodNotAllowedError(method=actual.upper(), allowed=allowed)
