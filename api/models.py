"""Shared request and response models for API endpoints.

This module contains models used by more than one router.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from models.event import CalendarEvent


class EventListResponse(BaseModel):
    """Response model for event listings.

    Attributes:
        events: The matching events.
        total_count: Number of events in the whole collection.
        returned_count: Number of events returned after filtering.
    """

    events: list[CalendarEvent]
    total_count: int
    returned_count: int


class HistoryStatusResponse(BaseModel):
    """Undo/redo availability.

    Attributes:
        can_undo: Whether undo would change anything.
        can_redo: Whether redo would change anything.
        undo_depth: Number of snapshots available to undo.
        redo_depth: Number of snapshots available to redo.
        present_count: Number of events in the present collection.
        changed: For undo/redo calls, whether present changed.
        action: For shortcut calls, which action ran.
    """

    can_undo: bool
    can_redo: bool
    undo_depth: int
    redo_depth: int
    present_count: int
    changed: Optional[bool] = None
    action: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response model.

    Attributes:
        error: Error type or code.
        detail: Human-readable error message.
        kind: For scheduling rule violations, which rule.
    """

    error: str
    detail: str
    kind: Optional[str] = None
    extra: dict[str, Any] = Field(default_factory=dict)
