"""Observability utilities for the request helpers.

This package provides monitoring and debugging capabilities:
- Prometheus counters for fingerprints, cache decisions and method rejections
- Structured logging with contextual information
"""

from request_helpers.observability.logging import configure_logging, get_logger
from request_helpers.observability.metrics import (
    record_cache_decision,
    record_fingerprint,
    record_method_rejection,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "record_cache_decision",
    "record_fingerprint",
    "record_method_rejection",
]
