"""View sub-client for the calendar API (/view/*).

This is an internal module. Import from `client` instead.
"""

from client._base import BaseClient, _filter_none_params
from client.models import CalendarEvent, EventCategory, ViewState


class ViewClient(BaseClient):
    """Client for month navigation and filter endpoints."""

    _BASE_PATH = "/view"

    def get(self) -> ViewState:
        """Get the displayed month and filters."""
        return ViewState(**self._get(self._BASE_PATH))

    def previous_month(self) -> ViewState:
        return ViewState(**self._post(f"{self._BASE_PATH}/previous"))

    def next_month(self) -> ViewState:
        return ViewState(**self._post(f"{self._BASE_PATH}/next"))

    def today(self) -> ViewState:
        """Jump to the month containing the server's today."""
        return ViewState(**self._post(f"{self._BASE_PATH}/today"))

    def set_filters(
        self,
        search_query: str | None = None,
        toggle_category: EventCategory | str | None = None,
    ) -> ViewState:
        """Change the search text and/or toggle a category.

        Deselecting the last selected category is ignored by the server.
        """
        body = _filter_none_params(
            search_query=search_query,
            toggle_category=(
                EventCategory(toggle_category).value if toggle_category is not None else None
            ),
        )
        return ViewState(**self._post(f"{self._BASE_PATH}/filters", json=body))

    def day_events(self, day: int) -> list[CalendarEvent]:
        """Visible events on a day of the displayed month."""
        data = self._get(f"{self._BASE_PATH}/days/{day}")
        return [CalendarEvent.from_record(item) for item in data]
