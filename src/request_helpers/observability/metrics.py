"""Prometheus metrics for the request helpers.

This module provides counters that show how the helpers are used in
production:

- Fingerprints computed, by hash algorithm
- Cache negotiation outcomes (fresh or stale)
- Requests rejected by the method guard, by method

Examples:
    Recording a cache decision::

        from request_helpers.observability.metrics import record_cache_decision

        record_cache_decision(is_fresh=True)

    Recording a rejected method::

        from request_helpers.observability.metrics import record_method_rejection

        record_method_rejection("DELETE")
"""

from prometheus_client import Counter

# Labels: algorithm (simple-checksum, cryptographic-digest)
fingerprints_total = Counter(
    "request_helpers_fingerprints_total",
    "Total number of request fingerprints computed",
    ["algorithm"],
)

# Labels: result (fresh, stale)
cache_decisions_total = Counter(
    "request_helpers_cache_decisions_total",
    "Total number of conditional-cache negotiations by outcome",
    ["result"],
)

# Labels: method (upper-cased request method)
method_rejections_total = Counter(
    "request_helpers_method_rejections_total",
    "Total number of requests rejected by the method guard",
    ["method"],
)


def record_fingerprint(algorithm: str) -> None:
    """Record a computed fingerprint.

    Examples:
        >>> record_fingerprint("cryptographic-digest")
    """
    fingerprints_total.labels(algorithm=algorithm).inc()


def record_cache_decision(is_fresh: bool) -> None:
    """Record the outcome of a cache negotiation.

    Args:
        is_fresh: Whether the client's cached copy was still valid
    """
    cache_decisions_total.labels(result="fresh" if is_fresh else "stale").inc()


def record_method_rejection(method: str) -> None:
    """Record a request rejected with 405 Method Not Allowed."""
    method_rejections_total.labels(method=method.upper()).inc()
