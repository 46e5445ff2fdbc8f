"""Scheduling-conflict validation.

ConflictValidator decides whether an event may occupy a proposed date range:

1. the range may not start before today (day granularity),
2. it may not start more than one year after today,
3. on every day of the range, the event's time-of-day may not overlap the
   time-of-day of any other event occupying that same day.

Multi-day events are checked on every day they occupy, not only on their
first day: two multi-day events may share only their tail or interior days.
"""

import logging
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from models.errors import DEFAULT_MESSAGES, SchedulingValidationError, ValidationErrorKind
from models.event import CalendarEvent, DateRange
from models.store import EventCollection
from models.time_range import format_time_12_hour, time_to_minutes, validate_time_range
from models.timers import Clock, SystemClock

logger = logging.getLogger(__name__)


def one_year_after(day: date) -> date:
    """Return the same month/day in the following year (Feb 29 -> Feb 28)."""
    try:
        return day.replace(year=day.year + 1)
    except ValueError:
        return day.replace(year=day.year + 1, day=28)


class PlacementResult(BaseModel):
    """Outcome of a placement check: Accept, or Reject with a reason.

    Args:
        accepted: Whether the placement is allowed.
        reason: Why it was rejected (None when accepted).
        message: User-facing message (None when accepted).
        conflicting_event_id: For TIME_CONFLICT, the witness event.
        conflict_date: For TIME_CONFLICT, the first day the conflict occurs.
    """

    model_config = {"frozen": True}

    accepted: bool = Field(description="Whether the placement is allowed")
    reason: Optional[ValidationErrorKind] = Field(default=None, description="Rejection reason")
    message: Optional[str] = Field(default=None, description="User-facing message")
    conflicting_event_id: Optional[str] = Field(
        default=None, description="Event that caused a time conflict"
    )
    conflict_date: Optional[date] = Field(
        default=None, description="First day on which the conflict occurs"
    )

    @model_validator(mode="after")
    def validate_rejection_reason(self) -> "PlacementResult":
        if not self.accepted and self.reason is None:
            raise ValueError("a rejected placement needs a reason")
        return self

    @classmethod
    def accept(cls) -> "PlacementResult":
        return cls(accepted=True)

    @classmethod
    def reject(
        cls,
        reason: ValidationErrorKind,
        message: Optional[str] = None,
        conflicting_event_id: Optional[str] = None,
        conflict_date: Optional[date] = None,
    ) -> "PlacementResult":
        return cls(
            accepted=False,
            reason=reason,
            message=message or DEFAULT_MESSAGES[reason],
            conflicting_event_id=conflicting_event_id,
            conflict_date=conflict_date,
        )

    def raise_for_rejection(self) -> None:
        """Raise SchedulingValidationError if this result is a rejection."""
        if not self.accepted and self.reason is not None:
            raise SchedulingValidationError(
                self.reason,
                self.message,
                conflicting_event_id=self.conflicting_event_id,
            )


class ConflictValidator:
    """Checks candidate placements against the collection and the current day.

    Args:
        clock: Source of "today" (defaults to the system clock).
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock = clock or SystemClock()

    def horizon(self) -> date:
        """The last day on which an event may start."""
        return one_year_after(self.clock.today())

    def is_valid_placement(
        self,
        candidate: CalendarEvent,
        proposed: DateRange,
        collection: EventCollection,
        check_bounds: bool = True,
    ) -> PlacementResult:
        """Decide whether candidate may occupy the proposed date range.

        The candidate's own identity is excluded from the conflict scan, so
        an event never conflicts with its previous placement.

        Args:
            candidate: The event being placed (its time-of-day is used).
            proposed: The date range it would occupy.
            collection: The current collection snapshot.
            check_bounds: Apply the past-date and horizon rules. Only the
                conflict scan runs when False.

        Returns:
            PlacementResult.accept() or a rejection. For TIME_CONFLICT the
            first conflicting day in date order is reported, with the first
            conflicting event in collection order on that day.
        """
        today = self.clock.today()

        if check_bounds and proposed.start < today:
            return PlacementResult.reject(ValidationErrorKind.PAST_DATE)

        if check_bounds and proposed.start > one_year_after(today):
            return PlacementResult.reject(ValidationErrorKind.HORIZON_EXCEEDED)

        cand_start = time_to_minutes(candidate.start_time)
        cand_end = time_to_minutes(candidate.end_time)

        others = [
            event
            for event in collection
            if event.id != candidate.id
            and event.start_date <= proposed.end
            and event.end_date >= proposed.start
        ]
        if not others:
            return PlacementResult.accept()

        for day in proposed.days():
            for other in others:
                if not other.occupies(day):
                    continue
                other_start = time_to_minutes(other.start_time)
                other_end = time_to_minutes(other.end_time)
                if cand_start < other_end and cand_end > other_start:
                    logger.debug(
                        f"Placement of {candidate.id} on {day} conflicts with {other.id}"
                    )
                    return PlacementResult.reject(
                        ValidationErrorKind.TIME_CONFLICT,
                        message=(
                            f'Overlaps with "{other.title}" '
                            f"({format_time_12_hour(other.start_time)} - "
                            f"{format_time_12_hour(other.end_time)}) on {day.isoformat()}"
                        ),
                        conflicting_event_id=other.id,
                        conflict_date=day,
                    )

        return PlacementResult.accept()

    def validate_event(
        self,
        candidate: CalendarEvent,
        collection: EventCollection,
        check_bounds: bool = True,
    ) -> PlacementResult:
        """Validate a created or edited event at its own date range.

        Runs the field rules (non-empty title, ordered time range) before the
        placement rules. check_bounds is passed on to is_valid_placement.
        """
        if not candidate.title.strip():
            return PlacementResult.reject(ValidationErrorKind.EMPTY_TITLE)

        error = validate_time_range(candidate.start_time, candidate.end_time)
        if error:
            return PlacementResult.reject(ValidationErrorKind.INVALID_TIME_RANGE, error)

        return self.is_valid_placement(
            candidate, candidate.date_range, collection, check_bounds=check_bounds
        )
