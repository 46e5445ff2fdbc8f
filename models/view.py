"""Month view state.

Tracks which month is displayed (drag destinations are days of this month),
the free-text search, and the category filter. The category filter can never
become empty: deselecting the last selected category is ignored.
"""

import calendar
from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator

from models import store
from models.event import CATEGORY_CONFIG, CalendarEvent, EventCategory
from models.store import EventCollection


class ViewState(BaseModel):
    """What the month grid is showing.

    Args:
        year: Displayed year.
        month: Displayed month (1-12).
        search_query: Free-text filter over title and description.
        selected_categories: Categories currently shown.
    """

    year: int = Field(ge=1, le=9999)
    month: int = Field(ge=1, le=12)
    search_query: str = ""
    selected_categories: list[EventCategory] = Field(
        default_factory=lambda: list(EventCategory)
    )

    @field_validator("selected_categories")
    @classmethod
    def validate_selected_categories(cls, v: list[EventCategory]) -> list[EventCategory]:
        """Keep the filter non-empty and free of duplicates."""
        if not v:
            raise ValueError("at least one category must be selected")
        return list(dict.fromkeys(v))

    @classmethod
    def for_day(cls, day: date) -> "ViewState":
        return cls(year=day.year, month=day.month)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def first_weekday(self) -> int:
        """Weekday of the 1st, Sunday = 0 (grid column of day 1)."""
        return (calendar.monthrange(self.year, self.month)[0] + 1) % 7

    def day(self, day_of_month: int) -> date:
        """Date of a day in the displayed month.

        Raises:
            ValueError: If the day does not exist in this month.
        """
        return date(self.year, self.month, day_of_month)

    def previous_month(self) -> None:
        if self.month == 1:
            self.year, self.month = self.year - 1, 12
        else:
            self.month -= 1

    def next_month(self) -> None:
        if self.month == 12:
            self.year, self.month = self.year + 1, 1
        else:
            self.month += 1

    def go_to(self, day: date) -> None:
        self.year, self.month = day.year, day.month

    def toggle_category(self, category: EventCategory) -> bool:
        """Toggle a category in the filter.

        Returns:
            False if the toggle was ignored (it was the last selected one).
        """
        category = EventCategory(category)
        if category in self.selected_categories:
            if len(self.selected_categories) == 1:
                return False
            self.selected_categories = [c for c in self.selected_categories if c != category]
        else:
            self.selected_categories = [*self.selected_categories, category]
        return True

    def visible_events(self, collection: EventCollection) -> list[CalendarEvent]:
        """Events passing the search and category filters."""
        return store.filter_events(collection, self.search_query, self.selected_categories)

    def events_for_day(self, collection: EventCollection, day_of_month: int) -> list[CalendarEvent]:
        """Visible events occupying a day of the displayed month."""
        target = self.day(day_of_month)
        return [event for event in self.visible_events(collection) if event.occupies(target)]


def category_statistics(collection: EventCollection) -> list[dict[str, Any]]:
    """Per-category counts and percentages (of all events, unfiltered)."""
    counts = store.category_counts(collection)
    total = sum(counts.values())
    return [
        {
            "category": category.value,
            "label": CATEGORY_CONFIG[category].label,
            "color": CATEGORY_CONFIG[category].color,
            "count": count,
            "percentage": round(count / total * 100) if total else 0,
        }
        for category, count in counts.items()
    ]
