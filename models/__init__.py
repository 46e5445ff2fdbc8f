"""Event calendar data models package.

This package contains the event model, the pure collection transformations,
scheduling validation, undo/redo history, gesture reconciliation and the
engine that ties them together.
"""

from models.calendar import CalendarEngine, Notification
from models.drag import DragReconciler, GestureOutcome, GestureStatus, ManipulationState, ResizeEdge
from models.errors import (
    CalendarError,
    EventNotFoundError,
    SchedulingValidationError,
    StorageError,
    ValidationErrorKind,
)
from models.event import CATEGORY_CONFIG, CalendarEvent, DateRange, EventCategory, EventDraft
from models.export import ExportFormat
from models.history import HistoryLog, HistoryState
from models.persistence import EventRepository, InMemoryRepository, JsonFileRepository
from models.store import EventCollection
from models.time_range import TimeRange
from models.validation import ConflictValidator, PlacementResult
from models.view import ViewState

__all__ = [
    "CalendarEngine",
    "Notification",
    "DragReconciler",
    "GestureOutcome",
    "GestureStatus",
    "ManipulationState",
    "ResizeEdge",
    "CalendarError",
    "EventNotFoundError",
    "SchedulingValidationError",
    "StorageError",
    "ValidationErrorKind",
    "CATEGORY_CONFIG",
    "CalendarEvent",
    "DateRange",
    "EventCategory",
    "EventDraft",
    "ExportFormat",
    "HistoryLog",
    "HistoryState",
    "EventRepository",
    "InMemoryRepository",
    "JsonFileRepository",
    "EventCollection",
    "TimeRange",
    "ConflictValidator",
    "PlacementResult",
    "ViewState",
]
