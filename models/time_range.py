"""Wall-clock time-of-day helpers.

Times are carried as 24-hour ``HH:MM`` strings throughout the engine. This
module converts them to integer minutes for comparison, tests half-open
interval overlap, and converts between 12-hour and 24-hour notation.
"""

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

MINUTES_PER_DAY = 24 * 60

_TIME_24_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")
_TIME_12_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")


def time_to_minutes(value: str) -> int:
    """Convert a 24-hour ``HH:MM`` string to minutes since midnight.

    Args:
        value: Time string such as "09:30".

    Returns:
        Minutes since midnight.

    Raises:
        ValueError: If value is not a valid 24-hour time.
    """
    match = _TIME_24_PATTERN.match(value.strip()) if value else None
    if match is None:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to a zero-padded ``HH:MM`` string."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minutes out of range for a single day: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_time(value: str) -> str:
    """Return value as a zero-padded 24-hour string ("9:05" -> "09:05")."""
    return minutes_to_time(time_to_minutes(value))


def times_overlap(start1: str, end1: str, start2: str, end2: str) -> bool:
    """Check whether two half-open time-of-day intervals intersect.

    Intervals touching at a boundary (10:00-11:00 and 11:00-12:00) do not
    overlap.
    """
    return time_to_minutes(start1) < time_to_minutes(end2) and time_to_minutes(
        end1
    ) > time_to_minutes(start2)


def validate_time_range(start_time: str, end_time: str) -> Optional[str]:
    """Return an error message when end_time is not after start_time.

    Args:
        start_time: Range start (HH:MM).
        end_time: Range end (HH:MM).

    Returns:
        None when the range is valid, otherwise a user-facing message.
    """
    if time_to_minutes(end_time) <= time_to_minutes(start_time):
        return "End time must be after start time"
    return None


def format_time_12_hour(time_24: str) -> str:
    """Format a 24-hour time for display, e.g. "13:05" -> "1:05 PM"."""
    minutes = time_to_minutes(time_24)
    hours, mins = divmod(minutes, 60)
    period = "PM" if hours >= 12 else "AM"
    hours_12 = 12 if hours == 0 else hours - 12 if hours > 12 else hours
    return f"{hours_12}:{mins:02d} {period}"


def convert_to_24_hour(time_12: str) -> str:
    """Convert a 12-hour time ("2:30 PM") to 24-hour notation ("14:30").

    Values without an AM/PM marker are treated as already being 24-hour and
    are only normalized.

    Raises:
        ValueError: If the value cannot be parsed.
    """
    if not time_12 or not time_12.strip():
        raise ValueError("Time value cannot be empty")

    lowered = time_12.lower()
    if "am" not in lowered and "pm" not in lowered:
        return normalize_time(time_12)

    match = _TIME_12_PATTERN.match(time_12)
    if match is None:
        raise ValueError(f"Invalid 12-hour time '{time_12}'")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3).lower()
    if not 1 <= hours <= 12 or minutes > 59:
        raise ValueError(f"Invalid 12-hour time '{time_12}'")

    if period == "pm" and hours != 12:
        hours += 12
    elif period == "am" and hours == 12:
        hours = 0

    return f"{hours:02d}:{minutes:02d}"


class TimeRange(BaseModel):
    """A half-open time-of-day interval ``[start, end)`` within one day.

    Args:
        start: Start time (HH:MM, 24-hour).
        end: End time (HH:MM, 24-hour), strictly after start.
    """

    model_config = {"frozen": True}

    start: str = Field(description="Start time (HH:MM)")
    end: str = Field(description="End time (HH:MM)")

    @field_validator("start", "end")
    @classmethod
    def validate_time_format(cls, v: str) -> str:
        """Normalize to zero-padded HH:MM."""
        return normalize_time(v)

    @model_validator(mode="after")
    def validate_order(self) -> "TimeRange":
        """Ensure end is after start."""
        error = validate_time_range(self.start, self.end)
        if error:
            raise ValueError(error)
        return self

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.end)

    @property
    def duration_minutes(self) -> int:
        """Length of the range in minutes."""
        return self.end_minutes - self.start_minutes

    def overlaps(self, other: "TimeRange") -> bool:
        """Check whether this range intersects another."""
        return self.start_minutes < other.end_minutes and self.end_minutes > other.start_minutes

    def __str__(self) -> str:
        return f"{format_time_12_hour(self.start)} - {format_time_12_hour(self.end)}"
