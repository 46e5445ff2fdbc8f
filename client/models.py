"""Client response models for the calendar API client.

This module re-exports commonly used models from the API and domain layers
and defines client-specific response models that don't exist there.
"""

from typing import Optional

from pydantic import BaseModel, Field

# Re-export common models for client convenience
from api.models import ErrorResponse, EventListResponse, HistoryStatusResponse
from models.calendar import Notification
from models.drag import GestureOutcome, GestureStatus, ManipulationState
from models.event import CalendarEvent, EventCategory
from models.validation import PlacementResult
from models.view import ViewState

__all__ = [
    # Re-exported
    "CalendarEvent",
    "ErrorResponse",
    "EventCategory",
    "EventListResponse",
    "GestureOutcome",
    "GestureStatus",
    "HistoryStatusResponse",
    "ManipulationState",
    "Notification",
    "PlacementResult",
    "ViewState",
    # Client-specific models
    "CategoryStatistic",
    "GestureStateResponse",
    "HealthResponse",
    "ShortcutResponse",
    "StatisticsResponse",
]


class CategoryStatistic(BaseModel):
    """Event count for one category.

    Attributes:
        category: Category identifier.
        label: Display label.
        color: Display colour (hex).
        count: Number of events in the category.
        percentage: Share of all events, 0-100.
    """

    category: EventCategory
    label: str
    color: str
    count: int
    percentage: float


class StatisticsResponse(BaseModel):
    """Response model for /events/stats."""

    total: int = Field(..., description="Number of events")
    categories: list[CategoryStatistic]


class GestureStateResponse(BaseModel):
    """Response model for the in-flight gesture.

    Attributes:
        state: idle, dragging or resizing.
        event_id: Event being manipulated.
        edge: For resizing, which edge.
        candidate: The uncommitted placement as a stored record.
    """

    state: ManipulationState
    event_id: Optional[str] = None
    edge: Optional[str] = None
    candidate: Optional[dict] = None


class ShortcutResponse(BaseModel):
    """Response model for a forwarded key press.

    Attributes:
        handled: Whether the key is bound to a history action.
        action: "undo" or "redo" when handled.
        changed: Whether the collection changed.
    """

    handled: bool
    action: Optional[str] = None
    changed: Optional[bool] = None
    can_undo: Optional[bool] = None
    can_redo: Optional[bool] = None


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str = Field(..., description="Health status")
