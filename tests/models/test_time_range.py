"""Unit tests for time-of-day helpers and TimeRange.

This module tests:
- Conversion between HH:MM strings and minutes
- Half-open overlap (touching intervals do not overlap)
- 12-hour <-> 24-hour conversion
- TimeRange validation and display
"""

import pytest
from pydantic import ValidationError

from models.time_range import (
    TimeRange,
    convert_to_24_hour,
    format_time_12_hour,
    minutes_to_time,
    normalize_time,
    time_to_minutes,
    times_overlap,
    validate_time_range,
)


class TestMinuteConversion:
    """Test HH:MM <-> minutes conversion."""

    def test_time_to_minutes(self):
        """Verify minutes since midnight are computed."""
        assert time_to_minutes("00:00") == 0
        assert time_to_minutes("09:30") == 570
        assert time_to_minutes("23:59") == 1439

    def test_single_digit_hour_accepted(self):
        """Verify "9:05" parses like "09:05"."""
        assert time_to_minutes("9:05") == 545

    @pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "", "9"])
    def test_invalid_time_raises(self, value):
        """Verify malformed times raise ValueError."""
        with pytest.raises(ValueError):
            time_to_minutes(value)

    def test_minutes_to_time_pads(self):
        """Verify output is zero-padded."""
        assert minutes_to_time(0) == "00:00"
        assert minutes_to_time(545) == "09:05"

    def test_minutes_out_of_range(self):
        """Verify minutes outside a day raise ValueError."""
        with pytest.raises(ValueError):
            minutes_to_time(1440)
        with pytest.raises(ValueError):
            minutes_to_time(-1)

    def test_normalize_time(self):
        assert normalize_time("9:05") == "09:05"
        assert normalize_time("14:30") == "14:30"


class TestTimesOverlap:
    """Test half-open interval intersection."""

    def test_partial_overlap(self):
        assert times_overlap("09:00", "10:00", "09:30", "10:30")

    def test_containment(self):
        assert times_overlap("09:00", "12:00", "10:00", "11:00")

    def test_touching_boundaries_do_not_overlap(self):
        """Verify 09:00-10:00 and 10:00-11:00 are compatible."""
        assert not times_overlap("09:00", "10:00", "10:00", "11:00")
        assert not times_overlap("10:00", "11:00", "09:00", "10:00")

    def test_disjoint(self):
        assert not times_overlap("08:00", "09:00", "13:00", "14:00")

    def test_symmetric(self):
        """Verify argument order does not change the answer."""
        assert times_overlap("09:30", "10:30", "09:00", "10:00") == times_overlap(
            "09:00", "10:00", "09:30", "10:30"
        )


class TestValidateTimeRange:
    """Test end-after-start validation."""

    def test_valid_range(self):
        assert validate_time_range("09:00", "10:00") is None

    def test_reversed_range(self):
        assert validate_time_range("10:00", "09:00") == "End time must be after start time"

    def test_empty_range(self):
        """Verify a zero-length range is rejected."""
        assert validate_time_range("10:00", "10:00") == "End time must be after start time"


class TestTwelveHourConversion:
    """Test 12-hour display and parsing."""

    @pytest.mark.parametrize(
        "time_24,expected",
        [
            ("00:00", "12:00 AM"),
            ("09:30", "9:30 AM"),
            ("12:00", "12:00 PM"),
            ("13:05", "1:05 PM"),
            ("23:59", "11:59 PM"),
        ],
    )
    def test_format_time_12_hour(self, time_24, expected):
        assert format_time_12_hour(time_24) == expected

    @pytest.mark.parametrize(
        "time_12,expected",
        [
            ("2:30 PM", "14:30"),
            ("12:00 AM", "00:00"),
            ("12:15 PM", "12:15"),
            ("9:00 am", "09:00"),
            ("11:45pm", "23:45"),
        ],
    )
    def test_convert_to_24_hour(self, time_12, expected):
        assert convert_to_24_hour(time_12) == expected

    def test_24_hour_input_is_normalized(self):
        """Verify values without AM/PM pass through as 24-hour times."""
        assert convert_to_24_hour("9:00") == "09:00"
        assert convert_to_24_hour("17:45") == "17:45"

    @pytest.mark.parametrize("value", ["13:00 PM", "0:30 AM", "soon pm", ""])
    def test_invalid_12_hour(self, value):
        with pytest.raises(ValueError):
            convert_to_24_hour(value)


class TestTimeRange:
    """Test the TimeRange model."""

    def test_normalizes_values(self):
        time_range = TimeRange(start="9:00", end="10:30")
        assert time_range.start == "09:00"
        assert time_range.end == "10:30"

    def test_rejects_reversed(self):
        with pytest.raises(ValidationError):
            TimeRange(start="11:00", end="10:00")

    def test_duration(self):
        assert TimeRange(start="09:15", end="10:45").duration_minutes == 90

    def test_overlaps(self):
        morning = TimeRange(start="09:00", end="10:00")
        assert morning.overlaps(TimeRange(start="09:59", end="11:00"))
        assert not morning.overlaps(TimeRange(start="10:00", end="11:00"))

    def test_str_uses_12_hour(self):
        assert str(TimeRange(start="09:00", end="13:30")) == "9:00 AM - 1:30 PM"
