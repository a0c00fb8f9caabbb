"""
HTTP request helpers for Python web applications.

This package provides request fingerprinting, conditional-cache negotiation,
HTTP method guards and request accessors that operate on a framework-agnostic
request event.
"""

__version__ = "0.1.0"

from request_helpers.cache import build_cache_control, evaluate, handle_cache_headers
from request_helpers.config import FingerprintConfig, HelpersConfig
from request_helpers.exceptions import (
    MethodNotAllowedError,
    RequestHelperError,
    ValidationFailedError,
)
from request_helpers.fingerprint import compute_fingerprint
from request_helpers.methods import assert_method, is_method
from request_helpers.models import (
    CacheDecision,
    CacheDescriptor,
    Cacheability,
    HashAlgorithm,
    RequestSignals,
)
from request_helpers.timespec import format_http_date, is_after_or_equal, parse_http_date

__all__ = [
    "__version__",
    "CacheDecision",
    "CacheDescriptor",
    "Cacheability",
    "FingerprintConfig",
    "HashAlgorithm",
    "HelpersConfig",
    "MethodNotAllowedError",
    "RequestHelperError",
    "RequestSignals",
    "ValidationFailedError",
    "assert_method",
    "build_cache_control",
    "compute_fingerprint",
    "evaluate",
    "format_http_date",
    "handle_cache_headers",
    "is_after_or_equal",
    "is_method",
    "parse_http_date",
]
