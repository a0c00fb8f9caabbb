"""Header normalization and selection utilities.

This module provides functions for:
- Normalizing request header names for case-insensitive lookup
- Looking up a header by name regardless of case
- Selecting the headers a 304 Not Modified response may carry
"""

# Headers a 304 response repeats from the 200 it stands in for
# (RFC 7232 section 4.1). Last-Modified is only repeated when there is no ETag.
NOT_MODIFIED_HEADERS = {
    "cache-control",
    "content-location",
    "date",
    "etag",
    "expires",
    "vary",
}


def canonicalize_headers(headers: dict[str, str]) -> dict[str, str]:
    """Canonicalize request headers.

    Normalizes headers by:
    1. Converting keys to lowercase
    2. Stripping whitespace from values

    Args:
        headers: Raw headers dictionary

    Returns:
        Canonicalized headers

    Example:
        >>> canonicalize_headers({"If-Modified-Since": "Wed, 21 Oct 2015 07:28:00 GMT  "})
        {'if-modified-since': 'Wed, 21 Oct 2015 07:28:00 GMT'}
    """
    return {key.lower(): value.strip() for key, value in headers.items()}


def get_header_value(
    headers: dict[str, str],
    header_name: str,
    default: str | None = None,
) -> str | None:
    """Get header value with case-insensitive lookup.

    Args:
        headers: Headers dictionary
        header_name: Name of header to find (case-insensitive)
        default: Default value if header not found

    Returns:
        Header value or default

    Example:
        >>> headers = {"Content-Type": "application/json"}
        >>> get_header_value(headers, "content-type")
        'application/json'
        >>> get_header_value(headers, "missing", "default")
        'default'
    """
    header_name_lower = header_name.lower()

    for key, value in headers.items():
        if key.lower() == header_name_lower:
            return value

    return default


def select_headers(
    headers: list[tuple[str, str]],
    allowed: set[str],
) -> list[tuple[str, str]]:
    """Keep only headers whose names are in ``allowed`` (case-insensitive).

    Order is preserved.

    Example:
        >>> select_headers(
        ...     [("Content-Type", "text/html"), ("ETag", '"a"')],
        ...     NOT_MODIFIED_HEADERS,
        ... )
        [('ETag', '"a"')]
    """
    allowed_lower = {name.lower() for name in allowed}
    return [(name, value) for name, value in headers if name.lower() in allowed_lower]
