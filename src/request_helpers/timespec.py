"""HTTP-date parsing, formatting and comparison.

HTTP dates have one-second resolution and are always expressed in UTC. On
input, servers must accept the three formats allowed by RFC 7231 section
7.1.1.1::

    Sun, 06 Nov 1994 08:49:37 GMT    ; IMF-fixdate
    Sunday, 06-Nov-94 08:49:37 GMT   ; obsolete RFC 850 format
    Sun Nov  6 08:49:37 1994         ; ANSI C's asctime() format

On output only IMF-fixdate is ever produced.
"""

import re
from datetime import UTC, datetime

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
_MONTH_NUMBERS = {name.lower(): number for number, name in enumerate(_MONTHS, start=1)}

_TIME = r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"

# Matching on month names instead of strptime keeps parsing independent of the
# process locale.
_IMF_FIXDATE = re.compile(
    r"^[A-Za-z]{3}, (?P<day>\d{2}) (?P<month>[A-Za-z]{3}) (?P<year>\d{4}) " + _TIME + r" GMT$"
)
_RFC850_DATE = re.compile(
    r"^[A-Za-z]{6,9}, (?P<day>\d{2})-(?P<month>[A-Za-z]{3})-(?P<year>\d{2}) " + _TIME + r" GMT$"
)
_ASCTIME_DATE = re.compile(
    r"^[A-Za-z]{3} (?P<month>[A-Za-z]{3}) (?P<day>[ \d]\d) " + _TIME + r" (?P<year>\d{4})$"
)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def truncate_to_second(value: datetime) -> datetime:
    """Drop the sub-second part of a timestamp and normalize it to UTC.

    Naive datetimes are taken to be UTC already.

    Example:
        >>> truncate_to_second(datetime(2015, 10, 21, 7, 28, 0, 999999, tzinfo=UTC))
        datetime.datetime(2015, 10, 21, 7, 28, tzinfo=datetime.timezone.utc)
    """
    return _as_utc(value).replace(microsecond=0)


def format_http_date(value: datetime) -> str:
    """Format a timestamp as an RFC 7231 IMF-fixdate.

    Args:
        value: Timestamp to format. Naive values are treated as UTC; aware
            values are converted to UTC.

    Returns:
        The date string, e.g. ``"Wed, 21 Oct 2015 07:28:00 GMT"``.
    """
    value = _as_utc(value)
    return (
        f"{_WEEKDAYS[value.weekday()]}, {value.day:02d} {_MONTHS[value.month - 1]} "
        f"{value.year:04d} {value.hour:02d}:{value.minute:02d}:{value.second:02d} GMT"
    )


def _resolve_two_digit_year(year: int, now: datetime | None = None) -> int:
    # RFC 7231: a two-digit year that appears to be more than 50 years in the
    # future is in the most recent past year with the same last two digits.
    now = now or datetime.now(UTC)
    candidate = now.year - now.year % 100 + year
    if candidate > now.year + 50:
        candidate -= 100
    return candidate


def parse_http_date(value: str | None) -> datetime | None:
    """Parse an HTTP-date in any of the three formats HTTP/1.1 allows.

    Args:
        value: Header value, e.g. the contents of ``If-Modified-Since``.

    Returns:
        An aware UTC datetime, or None when the value is missing or malformed.
        Malformed dates are never an error: callers treat them as if no
        conditional header had been sent.

    Examples:
        >>> parse_http_date("Sun, 06 Nov 1994 08:49:37 GMT")
        datetime.datetime(1994, 11, 6, 8, 49, 37, tzinfo=datetime.timezone.utc)
        >>> parse_http_date("Sun Nov  6 08:49:37 1994")
        datetime.datetime(1994, 11, 6, 8, 49, 37, tzinfo=datetime.timezone.utc)
        >>> parse_http_date("yesterday") is None
        True
    """
    if not value:
        return None
    value = value.strip()

    match = _IMF_FIXDATE.match(value) or _ASCTIME_DATE.match(value)
    two_digit_year = False
    if match is None:
        match = _RFC850_DATE.match(value)
        two_digit_year = True
    if match is None:
        return None

    month = _MONTH_NUMBERS.get(match.group("month").lower())
    if month is None:
        return None

    year = int(match.group("year"))
    if two_digit_year:
        year = _resolve_two_digit_year(year)

    try:
        return datetime(
            year,
            month,
            int(match.group("day").strip()),
            int(match.group("hour")),
            int(match.group("minute")),
            int(match.group("second")),
            tzinfo=UTC,
        )
    except ValueError:
        # Out-of-range fields such as "31 Feb" or "25:00:00"
        return None


def is_after_or_equal(a: datetime, b: datetime) -> bool:
    """Return True if ``a`` is at or after ``b`` at one-second granularity.

    Both sides are truncated to the second, never rounded, so that a
    sub-second resource timestamp compares equal to the HTTP date that was
    formatted from it.

    Example:
        >>> t = datetime(2015, 10, 21, 7, 28, 0, 500000, tzinfo=UTC)
        >>> is_after_or_equal(t.replace(microsecond=0), t)
        True
    """
    return truncate_to_second(a) >= truncate_to_second(b)
