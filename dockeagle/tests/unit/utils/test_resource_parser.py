"""Tests for resource formatting helpers."""

from __future__ import annotations

import math

import pytest

from dockeagle.utils.resource_parser import format_bytes, format_percent


class TestFormatBytes:
    """Tests for format_bytes."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, "0 B"),
            (512, "512 B"),
            (1536, "1.5 KiB"),
            (1024**2, "1.0 MiB"),
            (1024**3, "1.0 GiB"),
            (5 * 1024**4, "5.0 TiB"),
            (2048 * 1024**4, "2048.0 TiB"),
        ],
    )
    def test_units(self, value: float, expected: str) -> None:
        assert format_bytes(value) == expected

    @pytest.mark.parametrize("value", [-1, math.nan, math.inf])
    def test_invalid(self, value: float) -> None:
        assert format_bytes(value) == "-"


class TestFormatPercent:
    """Tests for format_percent."""

    def test_precision(self) -> None:
        assert format_percent(12.345) == "12.3%"
        assert format_percent(12.3456, precision=2) == "12.35%"
        assert format_percent(0.0) == "0.0%"

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite(self, value: float) -> None:
        assert format_percent(value) == "-"
