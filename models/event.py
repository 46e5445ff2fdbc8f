"""Calendar event models.

This module defines the unit entity of the engine:
- EventCategory: closed set of event categories
- CategoryStyle / CATEGORY_CONFIG: exhaustive display table per category
- DateRange: inclusive calendar-day range
- CalendarEvent: an immutable, validated event record
- EventDraft: user-submitted fields before an identity is assigned

Events are frozen so that a collection snapshot held in history can never be
changed underneath it. Edits produce new instances via ``model_copy``.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from models.time_range import TimeRange, normalize_time, validate_time_range

DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "10:00"


class EventCategory(str, Enum):
    """Category of a calendar event."""

    WORK = "work"
    PERSONAL = "personal"
    MEETING = "meeting"
    OTHER = "other"


class CategoryStyle(BaseModel):
    """Display attributes for a category.

    Args:
        color: Hex color used for the event chip.
        label: Human-readable category name.
    """

    model_config = {"frozen": True}

    color: str
    label: str


CATEGORY_CONFIG: dict[EventCategory, CategoryStyle] = {
    EventCategory.WORK: CategoryStyle(color="#3b82f6", label="Work"),
    EventCategory.PERSONAL: CategoryStyle(color="#10b981", label="Personal"),
    EventCategory.MEETING: CategoryStyle(color="#8b5cf6", label="Meeting"),
    EventCategory.OTHER: CategoryStyle(color="#f59e0b", label="Other"),
}

_missing_styles = set(EventCategory) - set(CATEGORY_CONFIG)
if _missing_styles:
    raise RuntimeError(f"CATEGORY_CONFIG is missing categories: {sorted(_missing_styles)}")


def category_style(category: EventCategory) -> CategoryStyle:
    """Look up the display style for a category."""
    return CATEGORY_CONFIG[EventCategory(category)]


class DateRange(BaseModel):
    """An inclusive range of calendar days.

    Args:
        start: First day of the range.
        end: Last day of the range (on or after start).
    """

    model_config = {"frozen": True}

    start: date = Field(description="First day (inclusive)")
    end: date = Field(description="Last day (inclusive)")

    @model_validator(mode="after")
    def validate_order(self) -> "DateRange":
        """Ensure start is not after end."""
        if self.start > self.end:
            raise ValueError("start date must be on or before end date")
        return self

    @classmethod
    def single(cls, day: date) -> "DateRange":
        """Create a one-day range."""
        return cls(start=day, end=day)

    @property
    def length_days(self) -> int:
        """Number of days covered, inclusive."""
        return (self.end - self.start).days + 1

    def days(self) -> Iterator[date]:
        """Iterate every calendar day in the range, in order."""
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def contains(self, day: date) -> bool:
        """Check whether a day falls inside the range."""
        return self.start <= day <= self.end

    def overlaps(self, other: "DateRange") -> bool:
        """Check whether two ranges share at least one day."""
        return self.start <= other.end and other.start <= self.end


class CalendarEvent(BaseModel):
    """A titled, categorized activity occupying a date range and a daily time range.

    Field names are snake_case in Python and camelCase on the wire, so stored
    and exported JSON reads ``startDate``/``endDate``/``startTime``/``endTime``
    and ``type`` for the category.

    Args:
        id: Opaque unique identity, never changes.
        title: Non-empty (after trim) title.
        description: Optional free text.
        start_date: First day the event occupies.
        end_date: Last day the event occupies (inclusive).
        start_time: Daily start time (HH:MM).
        end_time: Daily end time (HH:MM), after start_time.
        category: Event category.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="Unique event identifier")
    title: str = Field(description="Event title")
    description: str = Field(default="", description="Event description")
    start_date: date = Field(alias="startDate", description="First day (inclusive)")
    end_date: date = Field(alias="endDate", description="Last day (inclusive)")
    start_time: str = Field(
        default=DEFAULT_START_TIME, alias="startTime", description="Daily start (HH:MM)"
    )
    end_time: str = Field(
        default=DEFAULT_END_TIME, alias="endTime", description="Daily end (HH:MM)"
    )
    category: EventCategory = Field(
        default=EventCategory.OTHER, alias="type", description="Event category"
    )

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Validate that id is non-empty."""
        if not v or not v.strip():
            raise ValueError("id cannot be empty")
        return v

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Trim the title and reject blank values."""
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def normalize_description(cls, v: Optional[str]) -> str:
        return (v or "").strip()

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return normalize_time(v)

    @model_validator(mode="after")
    def validate_ranges(self) -> "CalendarEvent":
        """Ensure the date and time ranges are ordered."""
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        error = validate_time_range(self.start_time, self.end_time)
        if error:
            raise ValueError(error)
        return self

    @computed_field(alias="isMultiDay")
    @property
    def is_multi_day(self) -> bool:
        """Whether the event spans more than one calendar day."""
        return self.end_date != self.start_date

    @property
    def date_range(self) -> DateRange:
        return DateRange(start=self.start_date, end=self.end_date)

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start_time, end=self.end_time)

    @property
    def duration_days(self) -> int:
        """Days between start and end date (0 for a single-day event)."""
        return (self.end_date - self.start_date).days

    @property
    def style(self) -> CategoryStyle:
        return category_style(self.category)

    def occupies(self, day: date) -> bool:
        """Check whether the event is shown on the given day."""
        return self.start_date <= day <= self.end_date

    def with_dates(self, start_date: date, end_date: date) -> "CalendarEvent":
        """Return a copy of this event placed on a new date range.

        Raises:
            ValueError: If start_date is after end_date.
        """
        if start_date > end_date:
            raise ValueError("start_date must be on or before end_date")
        return self.model_copy(update={"start_date": start_date, "end_date": end_date})

    def to_record(self) -> dict:
        """Serialize to the camelCase JSON record used for storage and export."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_record(cls, data: dict) -> "CalendarEvent":
        """Create an event from a stored record (camelCase or snake_case keys)."""
        data = {k: v for k, v in data.items() if k not in ("isMultiDay", "is_multi_day")}
        return cls.model_validate(data)


class EventDraft(BaseModel):
    """Fields submitted by the user when creating or editing an event.

    Every field is optional. On create EventStore fills in defaults and
    requires a title; on edit an unset (None) field keeps its current value.
    Times may be given in 12-hour ("2:30 PM") or 24-hour notation.

    Args:
        title: Event title. A blank title is rejected by EventStore.
        description: Optional description.
        start_time: Optional daily start time.
        end_time: Optional daily end time.
        category: Optional category (defaults to "other").
        start_date: Optional first day (defaults to the requested day).
        end_date: Optional last day (defaults to start_date).
    """

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(default=None, description="Event title")
    description: Optional[str] = Field(default=None, description="Event description")
    start_time: Optional[str] = Field(default=None, alias="startTime")
    end_time: Optional[str] = Field(default=None, alias="endTime")
    category: Optional[EventCategory] = Field(default=None, alias="type")
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")
