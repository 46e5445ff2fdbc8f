"""Calendar API Client Library.

A type-safe Python client for the event calendar REST API.

Example:
    from client import CalendarClient

    with CalendarClient(base_url="http://localhost:8000") as client:
        event = client.events.create(title="Standup", on_date=date(2025, 3, 10))
        outcome = client.gestures.move(event.id, destination_day=12)
        client.history.undo()

Exports:
    CalendarClient: Synchronous client for the calendar REST API.

    Exceptions:
        CalendarClientError: Base exception for all client errors.
        ConnectionError: Failed to connect to the server.
        TimeoutError: Request timed out.
        APIError: Server returned an error response.
        BadRequestError: Unusable value (HTTP 400).
        ValidationError: Rule violation or malformed request (HTTP 422).
        NotFoundError: Event not found (HTTP 404).
        ConflictError: State conflict (HTTP 409).
        ServerError: Server-side error (HTTP 5xx).
"""

from client._events import EventsClient
from client._gestures import GesturesClient
from client._history import HistoryClient
from client._view import ViewClient
from client.client import CalendarClient
from client.exceptions import (
    APIError,
    BadRequestError,
    CalendarClientError,
    ConflictError,
    ConnectionError,
    NotFoundError,
    ServerError,
    TimeoutError,
    ValidationError,
)
from client.models import (
    CategoryStatistic,
    GestureStateResponse,
    HealthResponse,
    ShortcutResponse,
    StatisticsResponse,
)

__all__ = [
    # Main client
    "CalendarClient",
    # Sub-clients
    "EventsClient",
    "GesturesClient",
    "HistoryClient",
    "ViewClient",
    # Exceptions
    "APIError",
    "BadRequestError",
    "CalendarClientError",
    "ConflictError",
    "ConnectionError",
    "NotFoundError",
    "ServerError",
    "TimeoutError",
    "ValidationError",
    # Models
    "CategoryStatistic",
    "GestureStateResponse",
    "HealthResponse",
    "ShortcutResponse",
    "StatisticsResponse",
]
