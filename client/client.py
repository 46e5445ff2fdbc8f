"""Main calendar client class.

CalendarClient is the entry point for talking to the calendar service. It
provides namespaced access to the API through sub-client properties
(client.events, client.gestures, client.history, client.view).

Example:
    with CalendarClient(base_url="http://localhost:8000") as client:
        event = client.events.create(title="Standup", on_date=date(2025, 3, 10))
        client.gestures.move(event.id, destination_day=11)
        client.history.undo()
        csv_bytes = client.export("csv")
"""

from typing import Any

from client._events import EventsClient
from client._gestures import GesturesClient
from client._history import HistoryClient
from client._http import HTTPClient
from client._view import ViewClient
from client.models import HealthResponse, Notification
from models.export import ExportFormat


class CalendarClient:
    """Synchronous client for the calendar REST API.

    Attributes:
        base_url: The base URL of the calendar server.
        timeout: Request timeout in seconds.
        retry_enabled: Whether automatic retry is enabled.
        max_retries: Maximum number of retry attempts.

    Example:
        Manual lifecycle management::

            client = CalendarClient()
            try:
                client.events.list(search="review")
            finally:
                client.close()
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: Any = None,
    ) -> None:
        """Initialize the calendar client.

        Args:
            base_url: The base URL of the calendar server.
            timeout: Request timeout in seconds (default: 30.0).
            retry_enabled: Whether to retry connection errors, timeouts and
                HTTP 502/503/504 with exponential backoff (default: False).
            max_retries: Maximum number of retry attempts when retry is enabled.
            transport: Custom HTTP transport (e.g., MockTransport for testing).
        """
        self.base_url = base_url
        self.timeout = timeout
        self.retry_enabled = retry_enabled
        self.max_retries = max_retries

        self._http = HTTPClient(
            base_url=base_url,
            timeout=timeout,
            retry_enabled=retry_enabled,
            max_retries=max_retries,
            transport=transport,
        )

        # Sub-clients (lazy initialization via properties)
        self._events: EventsClient | None = None
        self._gestures: GesturesClient | None = None
        self._history: HistoryClient | None = None
        self._view: ViewClient | None = None

    def __enter__(self) -> "CalendarClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the client and release resources."""
        self._http.close()

    @property
    def events(self) -> EventsClient:
        """Access event management endpoints (/events/*)."""
        if self._events is None:
            self._events = EventsClient(self._http)
        return self._events

    @property
    def gestures(self) -> GesturesClient:
        """Access drag and resize endpoints (/gestures/*)."""
        if self._gestures is None:
            self._gestures = GesturesClient(self._http)
        return self._gestures

    @property
    def history(self) -> HistoryClient:
        """Access undo/redo endpoints (/history/*)."""
        if self._history is None:
            self._history = HistoryClient(self._http)
        return self._history

    @property
    def view(self) -> ViewClient:
        """Access month navigation and filter endpoints (/view/*)."""
        if self._view is None:
            self._view = ViewClient(self._http)
        return self._view

    def export(self, fmt: ExportFormat | str = ExportFormat.JSON) -> bytes:
        """Download the whole collection as CSV or JSON.

        Args:
            fmt: "csv" or "json".

        Returns:
            The document bytes.
        """
        return self._http.get_bytes("/export", params={"format": ExportFormat(fmt).value})

    def notifications(self) -> list[Notification]:
        """Fetch and clear pending server notifications (e.g. failed saves)."""
        data = self._http.get("/notifications")
        return [Notification(**item) for item in data]

    def health(self) -> HealthResponse:
        """Check server health."""
        return HealthResponse(**self._http.get("/health"))
