"""Conditional-cache negotiation.

Given the caching properties of a resource and the validators sent by the
client, decide whether the client's copy is still fresh and which caching
headers the response should carry. Negotiation is pure: nothing is written to
a response here. The caller applies ``headers_to_set`` and, when the decision
is fresh, answers 304 Not Modified without generating a body.

Freshness rules:
- ``If-None-Match`` takes precedence when both the request and the resource
  carry an entity tag (RFC 7232 section 6); tags are compared weakly.
- Otherwise the client's copy is fresh when ``If-Modified-Since`` is at or
  after the resource's ``Last-Modified`` time, compared to the second.
- Without a ``Last-Modified`` baseline nothing is ever fresh.

Examples:
    Negotiating inside a handler::

        from request_helpers.cache import handle_cache_headers
        from request_helpers.models import CacheDescriptor

        decision = handle_cache_headers(
            event,
            CacheDescriptor(last_modified=article.updated_at, max_age=3600),
        )
        if decision.is_fresh:
            return not_modified_response(decision)
"""

import re
from datetime import datetime

from request_helpers.accessors import RequestEvent, get_header, get_if_modified_since
from request_helpers.models import CacheDecision, CacheDescriptor, Cacheability
from request_helpers.observability.logging import get_logger
from request_helpers.observability.metrics import record_cache_decision
from request_helpers.timespec import format_http_date, is_after_or_equal

logger = get_logger(__name__)

# One entry of an If-None-Match list; commas may appear inside the quotes
_ETAG_LIST_ITEM = re.compile(r'\*|(?:W/)?"[^"]*"')


def build_cache_control(descriptor: CacheDescriptor) -> str:
    """Assemble the Cache-Control header value.

    Directives always appear in the same order: cacheability, ``max-age``,
    ``must-revalidate``, ``immutable``. ``max-age`` is left out for
    ``no-store`` responses and when no max age was given.

    Example:
        >>> build_cache_control(CacheDescriptor(max_age=3600, must_revalidate=True))
        'public, max-age=3600, must-revalidate'
    """
    directives = [descriptor.cacheability.value]

    if descriptor.max_age is not None and descriptor.cacheability is not Cacheability.NO_STORE:
        directives.append(f"max-age={descriptor.max_age}")

    if descriptor.must_revalidate:
        directives.append("must-revalidate")

    if descriptor.immutable:
        directives.append("immutable")

    return ", ".join(directives)


def evaluate(
    request_conditional: datetime | None,
    descriptor: CacheDescriptor,
    if_none_match: str | None = None,
) -> CacheDecision:
    """Decide freshness and the caching headers for a response.

    Args:
        request_conditional: Parsed ``If-Modified-Since`` value, None if the
            header was absent or malformed
        descriptor: Caching properties of the resource
        if_none_match: Raw ``If-None-Match`` header value, if any

    Returns:
        The cache decision. Headers are ordered Last-Modified, ETag,
        Cache-Control, with the first two only present when known.

    Examples:
        >>> from datetime import UTC
        >>> t = datetime(2015, 10, 21, 7, 28, tzinfo=UTC)
        >>> decision = evaluate(t, CacheDescriptor(last_modified=t))
        >>> decision.is_fresh
        True
        >>> decision.headers_to_set
        [('Last-Modified', 'Wed, 21 Oct 2015 07:28:00 GMT'), ('Cache-Control', 'public')]
    """
    if if_none_match and descriptor.etag is not None:
        is_fresh = etag_matches(if_none_match, descriptor.etag)
    else:
        is_fresh = (
            request_conditional is not None
            and descriptor.last_modified is not None
            and is_after_or_equal(request_conditional, descriptor.last_modified)
        )

    headers_to_set: list[tuple[str, str]] = []
    if descriptor.last_modified is not None:
        headers_to_set.append(("Last-Modified", format_http_date(descriptor.last_modified)))
    if descriptor.etag is not None:
        headers_to_set.append(("ETag", descriptor.etag))
    headers_to_set.append(("Cache-Control", build_cache_control(descriptor)))

    record_cache_decision(is_fresh)
    logger.debug(
        "cache.evaluated",
        is_fresh=is_fresh,
        has_conditional=request_conditional is not None,
        has_etag=descriptor.etag is not None,
    )
    return CacheDecision(is_fresh=is_fresh, headers_to_set=headers_to_set)


def handle_cache_headers(event: RequestEvent, descriptor: CacheDescriptor) -> CacheDecision:
    """Read the request's validators and negotiate against ``descriptor``.

    A malformed ``If-Modified-Since`` header counts as absent.
    """
    return evaluate(
        get_if_modified_since(event),
        descriptor,
        if_none_match=get_header(event, "if-none-match"),
    )


def etag_matches(if_none_match: str, etag: str) -> bool:
    """Weakly compare an ``If-None-Match`` list against an entity tag.

    Examples:
        >>> etag_matches('"a", W/"b"', '"b"')
        True
        >>> etag_matches("*", '"anything"')
        True
        >>> etag_matches('"a"', '"b"')
        False
        >>> etag_matches('"a,b", "c"', '"a,b"')
        True
    """
    candidates = _ETAG_LIST_ITEM.findall(if_none_match)
    if "*" in candidates:
        return True

    opaque = _opaque_tag(etag)
    return any(_opaque_tag(tag) == opaque for tag in candidates)


def _opaque_tag(tag: str) -> str:
    if tag.startswith("W/"):
        tag = tag[2:]
    return tag
