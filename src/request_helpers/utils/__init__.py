"""Utility modules for the request helpers."""

from .headers import (
    NOT_MODIFIED_HEADERS,
    canonicalize_headers,
    get_header_value,
    select_headers,
)

__all__ = [
    "canonicalize_headers",
    "get_header_value",
    "select_headers",
    "NOT_MODIFIED_HEADERS",
]
