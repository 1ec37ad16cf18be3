"""
Tests for sectorgen formatters.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

import pytest

from sectorgen.core.formatters import format_datetime, format_percent, get_utc_now, get_utc_timestamp


class TestTimestamps:
    """Test timestamp helpers."""

    def test_format_datetime(self):
        """Datetimes render as ISO with a Z suffix."""
        dt = datetime(2026, 1, 15, 12, 30, 0, tzinfo=timezone.utc)

        assert format_datetime(dt) == "2026-01-15T12:30:00Z"

    def test_utc_now_is_aware(self):
        """get_utc_now returns an aware UTC datetime."""
        assert get_utc_now().tzinfo is timezone.utc

    def test_timestamp_shape(self):
        """get_utc_timestamp matches the ISO pattern."""
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", get_utc_timestamp())


class TestFormatPercent:
    """Test format_percent."""

    @pytest.mark.parametrize(
        "part,whole,expected",
        [(1, 3, 33.3), (5, 5, 100.0), (0, 10, 0.0), (3, 0, 0.0), (2, 3, 66.7)],
    )
    def test_values(self, part, whole, expected):
        """Percentages round to one decimal."""
        assert format_percent(part, whole) == expected
