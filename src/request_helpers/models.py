"""Core type definitions for the request helpers.

This module provides the request-scoped value objects the helpers exchange:
the signal snapshot used for fingerprinting, the cache descriptor supplied by
a handler, and the cache decision derived from both. All models are frozen;
a new instance is built for every request and never mutated afterwards.

Examples:
    Capturing request signals::

        from request_helpers.models import RequestSignals

        signals = RequestSignals(
            method="GET",
            path="/api/articles",
            remote_address="203.0.113.7",
            user_agent="curl/8.4.0",
        )

    Describing a cacheable resource::

        from datetime import UTC, datetime
        from request_helpers.models import CacheDescriptor, Cacheability

        descriptor = CacheDescriptor(
            last_modified=datetime(2015, 10, 21, 7, 28, tzinfo=UTC),
            max_age=3600,
            cacheability=Cacheability.PUBLIC,
            must_revalidate=True,
        )
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from request_helpers.timespec import truncate_to_second


class Cacheability(str, Enum):
    """Who may store a response.

    Attributes:
        PUBLIC: Shared and private caches may store the response.
        PRIVATE: Only the client's own cache may store the response.
        NO_STORE: No cache may store the response.
    """

    PUBLIC = "public"
    PRIVATE = "private"
    NO_STORE = "no-store"


class HashAlgorithm(str, Enum):
    """Digest used to reduce fingerprint components.

    Attributes:
        SIMPLE_CHECKSUM: 64-bit FNV-1a, fast and non-cryptographic (16 hex chars).
        CRYPTOGRAPHIC_DIGEST: SHA-256 (64 hex chars).
    """

    SIMPLE_CHECKSUM = "simple-checksum"
    CRYPTOGRAPHIC_DIGEST = "cryptographic-digest"


class RequestSignals(BaseModel):
    """Snapshot of the volatile request signals used for fingerprinting.

    Attributes:
        method: HTTP method as received.
        path: URL path, without query string.
        remote_address: Client IP address, None when unknown.
        user_agent: User-Agent header value, None when not sent.
        extra_headers: Additional header values keyed by lower-cased name.
    """

    method: str = Field(..., description="HTTP method", examples=["GET", "POST"])
    path: str = Field(default="/", description="URL path", examples=["/api/users"])
    remote_address: str | None = Field(
        default=None,
        description="Client IP address",
        examples=["203.0.113.7", "2001:db8::1"],
    )
    user_agent: str | None = Field(
        default=None,
        description="User-Agent header value",
        examples=["Mozilla/5.0", "curl/8.4.0"],
    )
    extra_headers: dict[str, str] = Field(
        default_factory=dict,
        description="Additional request headers keyed by lower-cased name",
    )

    model_config = {"frozen": True}

    @field_validator("extra_headers")
    @classmethod
    def lowercase_header_names(cls, v: dict[str, str]) -> dict[str, str]:
        """Normalize header names to lower case."""
        return {key.lower(): value for key, value in v.items()}


class CacheDescriptor(BaseModel):
    """Caching properties of the resource a handler is about to serve.

    Attributes:
        last_modified: Last modification time of the resource, None if unknown.
            Truncated to whole seconds and normalized to UTC.
        max_age: Freshness lifetime in seconds, None to omit ``max-age``.
        cacheability: Cache-Control cacheability keyword. Defaults to public.
        must_revalidate: Append ``must-revalidate`` to Cache-Control.
        immutable: Append ``immutable`` to Cache-Control.
        etag: Entity tag of the current representation, quoted or bare.
    """

    last_modified: datetime | None = Field(
        default=None,
        description="Last modification time of the resource",
        examples=["2015-10-21T07:28:00Z"],
    )
    max_age: int | None = Field(
        default=None,
        description="Freshness lifetime in seconds",
        ge=0,
        examples=[0, 60, 3600],
    )
    cacheability: Cacheability = Field(
        default=Cacheability.PUBLIC,
        description="Cache-Control cacheability keyword",
    )
    must_revalidate: bool = Field(default=False, description="Append must-revalidate")
    immutable: bool = Field(default=False, description="Append immutable")
    etag: str | None = Field(
        default=None,
        description="Entity tag of the current representation",
        examples=['"33a64df5"', 'W/"0815"'],
    )

    model_config = {"frozen": True}

    @field_validator("last_modified")
    @classmethod
    def truncate_last_modified(cls, v: datetime | None) -> datetime | None:
        """HTTP dates carry no sub-second precision."""
        if v is None:
            return v
        return truncate_to_second(v)

    @field_validator("etag")
    @classmethod
    def quote_etag(cls, v: str | None) -> str | None:
        """Wrap bare entity tags in double quotes.

        Example:
            >>> CacheDescriptor(etag="abc").etag
            '"abc"'
        """
        if v is None:
            return v
        v = v.strip()
        if v.startswith('W/"') or (len(v) >= 2 and v.startswith('"') and v.endswith('"')):
            return v
        return f'"{v}"'


class CacheDecision(BaseModel):
    """Outcome of conditional-cache negotiation.

    Attributes:
        is_fresh: The client's copy is still valid; the caller should answer
            304 Not Modified and skip body generation.
        headers_to_set: Response headers in the order they should be applied.
    """

    is_fresh: bool = Field(..., description="Whether the client's copy is still valid")
    headers_to_set: list[tuple[str, str]] = Field(
        default_factory=list,
        description="Ordered response headers to apply",
    )

    model_config = {"frozen": True}

    @property
    def headers(self) -> dict[str, str]:
        """Headers to set as a dictionary, preserving order."""
        return dict(self.headers_to_set)
