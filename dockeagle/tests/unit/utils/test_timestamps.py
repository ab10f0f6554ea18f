"""Tests for timestamp parsing."""

from __future__ import annotations

from datetime import timezone

import pytest

from dockeagle.utils.timestamps import parse_datetime, parse_timestamp


class TestParseDatetime:
    """Tests for parse_datetime."""

    def test_nanosecond_precision(self) -> None:
        """Test fractions beyond microseconds are truncated."""
        parsed = parse_datetime("2024-05-01T12:00:00.123456789Z")
        assert parsed is not None
        assert parsed.microsecond == 123456
        assert parsed.tzinfo == timezone.utc

    def test_offset(self) -> None:
        parsed = parse_datetime("2024-05-01T14:00:00+02:00")
        assert parsed is not None
        assert parsed.timestamp() == pytest.approx(1714564800.0)

    @pytest.mark.parametrize(
        "value", [None, "", "not a date", 12, "0001-01-01T00:00:00Z"]
    )
    def test_absent_values(self, value: object) -> None:
        """Test missing, malformed and zero times map to None."""
        assert parse_datetime(value) is None


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_unix_seconds(self) -> None:
        assert parse_timestamp("2024-05-01T12:00:01Z") == pytest.approx(1714564801.0)

    def test_zero_time(self) -> None:
        assert parse_timestamp("0001-01-01T00:00:00Z") == 0.0
