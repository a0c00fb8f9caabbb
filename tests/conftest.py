"""
Pytest configuration and shared fixtures for request_helpers tests.
"""

from datetime import UTC, datetime

import pytest

from request_helpers.accessors import RequestEvent
from request_helpers.models import RequestSignals


@pytest.fixture
def last_modified() -> datetime:
    """The instant used throughout RFC 7232 examples."""
    return datetime(2015, 10, 21, 7, 28, 0, tzinfo=UTC)


@pytest.fixture
def sample_signals() -> RequestSignals:
    """Provide a representative set of request signals."""
    return RequestSignals(
        method="GET",
        path="/api/articles",
        remote_address="203.0.113.7",
        user_agent="Mozilla/5.0 (X11; Linux x86_64)",
        extra_headers={"Accept-Language": "en-US"},
    )


@pytest.fixture
def sample_event() -> RequestEvent:
    """Provide a JSON POST request event."""
    return RequestEvent(
        method="POST",
        path="/api/comments",
        query_string="page=2&tag=a&tag=b",
        headers={
            "Content-Type": "application/json",
            "Host": "example.com",
            "User-Agent": "curl/8.4.0",
        },
        body=b'{"author": "alice", "text": "hi"}',
        remote_address="198.51.100.23",
        route_params={"slug": "hello%20world"},
    )
