"""Property-based tests for HTTP-date handling using Hypothesis."""

from datetime import UTC, datetime

from hypothesis import given
from hypothesis import strategies as st

from request_helpers.timespec import (
    format_http_date,
    is_after_or_equal,
    parse_http_date,
    truncate_to_second,
)

# Four-digit years only; IMF-fixdate has no representation for others
timepoint_strategy = st.datetimes(
    min_value=datetime(1000, 1, 1),
    max_value=datetime(9999, 12, 31, 23, 59, 59),
    timezones=st.just(UTC),
)


class TestHttpDateProperties:
    """Property-based tests for parse/format."""

    @given(value=timepoint_strategy)
    def test_format_then_parse_truncates_to_second(self, value: datetime) -> None:
        """Formatting and parsing back yields the timestamp truncated to the second."""
        assert parse_http_date(format_http_date(value)) == truncate_to_second(value)

    @given(value=timepoint_strategy)
    def test_formatted_length_is_fixed(self, value: datetime) -> None:
        """IMF-fixdate is a fixed-length format."""
        assert len(format_http_date(value)) == 29

    @given(text=st.text(max_size=60))
    def test_parse_never_raises(self, text: str) -> None:
        result = parse_http_date(text)
        assert result is None or result.tzinfo is UTC

    @given(a=timepoint_strategy, b=timepoint_strategy)
    def test_comparison_is_total(self, a: datetime, b: datetime) -> None:
        """At least one direction holds; both hold only within the same second."""
        assert is_after_or_equal(a, b) or is_after_or_equal(b, a)
        if is_after_or_equal(a, b) and is_after_or_equal(b, a):
            assert truncate_to_second(a) == truncate_to_second(b)
