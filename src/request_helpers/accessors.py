"""Request accessors over a framework-agnostic request event.

Framework adapters convert their native request objects into a
:class:`RequestEvent`; the functions in this module read query parameters,
bodies, route parameters and connection details from it, optionally running
a validator over the result.

Forwarding headers (``x-forwarded-for``, ``x-forwarded-host``,
``x-forwarded-proto``) are only consulted when the caller passes
``trust_forwarded=True``.

Examples:
    Reading and validating a JSON body::

        from request_helpers.accessors import RequestEvent, read_validated_body

        event = RequestEvent(
            method="POST",
            path="/api/payments",
            headers={"Content-Type": "application/json"},
            body=b'{"amount": 100}',
        )
        payment = read_validated_body(event, PaymentRequest)

    Capturing fingerprint signals behind a proxy::

        signals = capture_signals(event, trust_forwarded=True)
"""

import json
from datetime import datetime
from typing import Any
from urllib.parse import parse_qs, unquote

from request_helpers.models import RequestSignals
from request_helpers.observability.logging import get_logger
from request_helpers.timespec import parse_http_date
from request_helpers.utils.headers import canonicalize_headers, get_header_value
from request_helpers.validation import run_validation

logger = get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class RequestEvent:
    """Framework-agnostic request representation.

    Framework adapters convert their request objects into this format.
    Header names are lower-cased on construction so lookups are
    case-insensitive.

    Attributes:
        method: HTTP method (GET, POST, etc.)
        path: URL path
        query_string: Query string without leading '?'
        headers: Request headers with lower-cased names
        body: Request body as bytes
        remote_address: Address of the connected peer, if known
        route_params: Raw (still percent-encoded) matched route parameters
        scheme: URL scheme the request arrived on
    """

    def __init__(
        self,
        method: str,
        path: str,
        query_string: str = "",
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        remote_address: str | None = None,
        route_params: dict[str, str] | None = None,
        scheme: str = "http",
    ) -> None:
        self.method = method
        self.path = path or "/"
        self.query_string = query_string
        self.headers = canonicalize_headers(headers or {})
        self.body = body
        self.remote_address = remote_address
        self.route_params = route_params or {}
        self.scheme = scheme


# Headers


def get_header(event: RequestEvent, name: str, default: str | None = None) -> str | None:
    """Get a request header, case-insensitively."""
    return get_header_value(event.headers, name, default)


def get_request_headers(event: RequestEvent) -> dict[str, str]:
    """Return a copy of the request headers keyed by lower-cased name."""
    return dict(event.headers)


def get_if_modified_since(event: RequestEvent) -> datetime | None:
    """Parse the ``If-Modified-Since`` header.

    Returns:
        The parsed date, or None if the header is absent or malformed
    """
    return parse_http_date(get_header(event, "if-modified-since"))


# Query


def get_query(event: RequestEvent) -> dict[str, str | list[str]]:
    """Parse the query string.

    Repeated keys become lists; single keys map to plain strings.

    Example:
        >>> get_query(RequestEvent("GET", "/", query_string="tag=a&tag=b&page=2"))
        {'tag': ['a', 'b'], 'page': '2'}
    """
    if not event.query_string:
        return {}

    parsed = parse_qs(event.query_string, keep_blank_values=True)
    return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


def get_validated_query(event: RequestEvent, validator: Any) -> Any:
    """Parse the query string and validate it.

    Raises:
        ValidationFailedError: The query failed validation (HTTP 400).
    """
    return run_validation(get_query(event), validator)


# Body


def read_raw_body(event: RequestEvent) -> bytes | None:
    """Return the raw body, or None when the request has no body."""
    return event.body or None


def read_body(event: RequestEvent) -> Any:
    """Read and parse the request body.

    JSON bodies (by content type, or starting with ``{`` or ``[``) are
    decoded; form-encoded bodies become a dictionary; anything else is
    returned as text. Malformed JSON is logged and read as None.

    Returns:
        Parsed body, or None when the body is empty or unparsable
    """
    raw = read_raw_body(event)
    if raw is None:
        return None

    content_type = (get_header(event, "content-type") or "").split(";")[0].strip().lower()

    if content_type == FORM_CONTENT_TYPE:
        parsed = parse_qs(raw.decode("utf-8", errors="replace"), keep_blank_values=True)
        return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}

    text = raw.decode("utf-8", errors="replace")
    if content_type.endswith("json") or text.lstrip()[:1] in ("{", "["):
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("body.invalid_json", path=event.path, error=str(e))
            return None

    return text


def read_validated_body(event: RequestEvent, validator: Any) -> Any:
    """Read the request body and validate it.

    Raises:
        ValidationFailedError: The body failed validation (HTTP 400).
    """
    return run_validation(read_body(event), validator)


# Route parameters


def get_router_params(event: RequestEvent, decode: bool = False) -> dict[str, str]:
    """Return matched route parameters.

    Args:
        event: Request event
        decode: Percent-decode the raw parameter values
    """
    if not decode:
        return dict(event.route_params)
    return {key: unquote(value) for key, value in event.route_params.items()}


def get_router_param(event: RequestEvent, name: str, decode: bool = False) -> str | None:
    """Return a single route parameter, or None if it was not matched."""
    return get_router_params(event, decode=decode).get(name)


def get_validated_router_params(
    event: RequestEvent,
    validator: Any,
    decode: bool = False,
) -> Any:
    """Return route parameters after validation.

    Raises:
        ValidationFailedError: The parameters failed validation (HTTP 400).
    """
    return run_validation(get_router_params(event, decode=decode), validator)


# Connection details


def get_request_ip(event: RequestEvent, trust_forwarded: bool = False) -> str | None:
    """Return the client IP address.

    With ``trust_forwarded`` the first ``x-forwarded-for`` entry wins over
    the connected peer address.
    """
    if trust_forwarded:
        forwarded_for = get_header(event, "x-forwarded-for")
        if forwarded_for:
            client = forwarded_for.split(",")[0].strip()
            if client:
                return client
    return event.remote_address


def get_request_host(event: RequestEvent, trust_forwarded: bool = False) -> str:
    """Return the requested host, falling back to ``localhost``."""
    if trust_forwarded:
        forwarded_host = get_header(event, "x-forwarded-host")
        if forwarded_host:
            return forwarded_host.split(",")[0].strip()
    return get_header(event, "host") or "localhost"


def get_request_protocol(event: RequestEvent, trust_forwarded: bool = False) -> str:
    """Return ``http`` or ``https``."""
    if trust_forwarded:
        forwarded_proto = (get_header(event, "x-forwarded-proto") or "").split(",")[0]
        forwarded_proto = forwarded_proto.strip().lower()
        if forwarded_proto in ("http", "https"):
            return forwarded_proto
    return "https" if event.scheme.lower() in ("https", "wss") else "http"


def get_request_url(event: RequestEvent, trust_forwarded: bool = False) -> str:
    """Reconstruct the full request URL.

    Example:
        >>> event = RequestEvent("GET", "/a", query_string="b=1", headers={"Host": "example.com"})
        >>> get_request_url(event)
        'http://example.com/a?b=1'
    """
    protocol = get_request_protocol(event, trust_forwarded)
    host = get_request_host(event, trust_forwarded)
    url = f"{protocol}://{host}{event.path}"
    if event.query_string:
        url = f"{url}?{event.query_string}"
    return url


def capture_signals(event: RequestEvent, trust_forwarded: bool = False) -> RequestSignals:
    """Snapshot the request signals used for fingerprinting."""
    return RequestSignals(
        method=event.method,
        path=event.path,
        remote_address=get_request_ip(event, trust_forwarded),
        user_agent=get_header(event, "user-agent"),
        extra_headers=event.headers,
    )
