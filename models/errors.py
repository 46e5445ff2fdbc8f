"""Error types raised by the calendar engine.

Exception Hierarchy:
    CalendarError (base)
    ├── SchedulingValidationError - a placement or edit breaks a scheduling rule
    ├── EventNotFoundError - update/lookup on an identity that is not present
    └── StorageError - the persistence collaborator failed to read or write

None of these are fatal: the engine stays usable after any of them.
"""

from enum import Enum
from typing import Optional


class ValidationErrorKind(str, Enum):
    """Why a scheduling action was refused."""

    PAST_DATE = "past_date"
    HORIZON_EXCEEDED = "horizon_exceeded"
    TIME_CONFLICT = "time_conflict"
    INVALID_TIME_RANGE = "invalid_time_range"
    EMPTY_TITLE = "empty_title"


DEFAULT_MESSAGES: dict[ValidationErrorKind, str] = {
    ValidationErrorKind.PAST_DATE: "Cannot schedule events in the past",
    ValidationErrorKind.HORIZON_EXCEEDED: "Cannot schedule events more than a year in advance",
    ValidationErrorKind.TIME_CONFLICT: "Time conflict with existing event",
    ValidationErrorKind.INVALID_TIME_RANGE: "End time must be after start time",
    ValidationErrorKind.EMPTY_TITLE: "Title is required",
}


class CalendarError(Exception):
    """Base exception for all calendar engine errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class SchedulingValidationError(CalendarError):
    """Raised when an event or placement violates a scheduling rule.

    Attributes:
        kind: Which rule was violated.
        message: User-facing description.
        conflicting_event_id: For TIME_CONFLICT, the event that was hit.
    """

    def __init__(
        self,
        kind: ValidationErrorKind,
        message: Optional[str] = None,
        conflicting_event_id: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.conflicting_event_id = conflicting_event_id
        super().__init__(message or DEFAULT_MESSAGES[kind])


class EventNotFoundError(CalendarError):
    """Raised when an event identity is not in the collection.

    Args:
        event_id: The identity that was looked up.
    """

    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Event '{event_id}' not found")


class StorageError(CalendarError):
    """Raised when the persistence collaborator fails.

    Args:
        message: Description of the failed operation.
        cause: The underlying exception, if any.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        super().__init__(message)
