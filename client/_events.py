"""Events sub-client for the calendar API.

This module provides EventsClient for the event management endpoints
(/events/*).

This is an internal module. Import from `client` instead.
"""

from datetime import date
from typing import Any

from client._base import BaseClient, _filter_none_params
from client.models import (
    CalendarEvent,
    EventCategory,
    EventListResponse,
    PlacementResult,
    StatisticsResponse,
)


def _event_fields(
    title: str | None = None,
    description: str | None = None,
    start_time: str | None = None,
    end_time: str | None = None,
    category: EventCategory | str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> dict[str, Any]:
    """Build a camelCase request body, leaving out omitted fields."""
    return _filter_none_params(
        title=title,
        description=description,
        startTime=start_time,
        endTime=end_time,
        type=EventCategory(category).value if category is not None else None,
        startDate=start_date.isoformat() if start_date else None,
        endDate=end_date.isoformat() if end_date else None,
    )


class EventsClient(BaseClient):
    """Client for event management endpoints (/events/*).

    Example:
        with CalendarClient() as client:
            event = client.events.create(
                title="Planning",
                on_date=date(2025, 3, 10),
                start_time="2:00 PM",
                end_time="3:00 PM",
                category="meeting",
            )
            client.events.update(event.id, title="Quarterly planning")
    """

    _BASE_PATH = "/events"

    def list(
        self,
        search: str | None = None,
        categories: list[EventCategory | str] | None = None,
        day: date | None = None,
    ) -> EventListResponse:
        """List events, optionally filtered by text, category or day.

        Args:
            search: Case-insensitive text matched against title and description.
            categories: Only include these categories.
            day: Only events that occupy this day.

        Returns:
            EventListResponse with the matching events.
        """
        params = _filter_none_params(
            search=search,
            categories=[EventCategory(c).value for c in categories] if categories else None,
            day=day.isoformat() if day else None,
        )
        data = self._get(self._BASE_PATH, params=params)
        return EventListResponse(**data)

    def get(self, event_id: str) -> CalendarEvent:
        """Get an event by id.

        Raises:
            NotFoundError: If the event doesn't exist.
        """
        data = self._get(f"{self._BASE_PATH}/{event_id}")
        return CalendarEvent.from_record(data)

    def create(
        self,
        title: str,
        on_date: date | None = None,
        description: str | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
        category: EventCategory | str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> CalendarEvent:
        """Create an event.

        Args:
            title: Event title (required, non-blank).
            on_date: The day the event is created on (server's today if omitted).
            description: Optional description.
            start_time: Daily start, 24-hour or 12-hour notation.
            end_time: Daily end, 24-hour or 12-hour notation.
            category: work, personal, meeting or other.
            start_date: First day (defaults to on_date).
            end_date: Last day (defaults to start_date).

        Returns:
            The created event.

        Raises:
            ValidationError: If a scheduling rule is violated; ``kind`` names it.
        """
        body = _event_fields(
            title=title,
            description=description,
            start_time=start_time,
            end_time=end_time,
            category=category,
            start_date=start_date,
            end_date=end_date,
        )
        body["title"] = title
        if on_date is not None:
            body["on_date"] = on_date.isoformat()
        data = self._post(self._BASE_PATH, json=body)
        return CalendarEvent.from_record(data)

    def update(
        self,
        event_id: str,
        title: str | None = None,
        description: str | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
        category: EventCategory | str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> CalendarEvent:
        """Edit an event. Omitted fields keep their current values.

        Raises:
            NotFoundError: If the event doesn't exist.
            ValidationError: If the edited event violates a scheduling rule.
        """
        body = _event_fields(
            title=title,
            description=description,
            start_time=start_time,
            end_time=end_time,
            category=category,
            start_date=start_date,
            end_date=end_date,
        )
        data = self._put(f"{self._BASE_PATH}/{event_id}", json=body)
        return CalendarEvent.from_record(data)

    def delete(self, event_id: str) -> None:
        """Delete an event. Deleting an unknown id is not an error."""
        self._delete(f"{self._BASE_PATH}/{event_id}")

    def check_placement(
        self, event_id: str, start_date: date, end_date: date | None = None
    ) -> PlacementResult:
        """Ask whether an event could be placed on a date range, without moving it."""
        body = _filter_none_params(
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat() if end_date else None,
        )
        data = self._post(f"{self._BASE_PATH}/{event_id}/placement", json=body)
        return PlacementResult(**data)

    def statistics(self) -> StatisticsResponse:
        """Get per-category event counts."""
        data = self._get(f"{self._BASE_PATH}/stats")
        return StatisticsResponse(**data)
