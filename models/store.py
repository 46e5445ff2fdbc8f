"""Event collection transformations.

Every function here is pure: the input collection is never mutated and a new
tuple is returned. Collection order is stable: updates replace in place and
creates append, so snapshots taken before and after a change line up.
"""

import uuid
from datetime import date, timedelta
from typing import Iterable, Optional

from models.errors import EventNotFoundError, SchedulingValidationError, ValidationErrorKind
from models.event import (
    DEFAULT_END_TIME,
    DEFAULT_START_TIME,
    CalendarEvent,
    EventCategory,
    EventDraft,
)
from models.time_range import convert_to_24_hour, validate_time_range

EventCollection = tuple[CalendarEvent, ...]


def new_event_id() -> str:
    """Generate a fresh opaque event identity."""
    return uuid.uuid4().hex


def create(draft: EventDraft, on_date: date, event_id: Optional[str] = None) -> CalendarEvent:
    """Build a new event from a draft.

    Trims title and description, defaults the category to ``other``, the
    date range to ``[on_date, on_date]`` and the time range to 09:00-10:00.

    Args:
        draft: User-submitted fields.
        on_date: The day the creation was requested for.
        event_id: Identity to use (a fresh one is generated when omitted).

    Returns:
        The new CalendarEvent.

    Raises:
        SchedulingValidationError: EMPTY_TITLE for a missing or blank title,
            INVALID_TIME_RANGE when the end time is not after the start time.
        ValueError: If a time value cannot be parsed.
    """
    title = (draft.title or "").strip()
    if not title:
        raise SchedulingValidationError(ValidationErrorKind.EMPTY_TITLE)

    start_time = convert_to_24_hour(draft.start_time) if draft.start_time else DEFAULT_START_TIME
    end_time = convert_to_24_hour(draft.end_time) if draft.end_time else DEFAULT_END_TIME
    error = validate_time_range(start_time, end_time)
    if error:
        raise SchedulingValidationError(ValidationErrorKind.INVALID_TIME_RANGE, error)

    start_date = draft.start_date or on_date
    end_date = draft.end_date or start_date
    if end_date < start_date:
        raise ValueError("end_date must be on or after start_date")

    return CalendarEvent(
        id=event_id or new_event_id(),
        title=title,
        description=(draft.description or "").strip(),
        start_date=start_date,
        end_date=end_date,
        start_time=start_time,
        end_time=end_time,
        category=draft.category or EventCategory.OTHER,
    )


def apply_draft(event: CalendarEvent, draft: EventDraft) -> CalendarEvent:
    """Return a copy of event with the draft's fields applied.

    Unset draft fields keep the event's current values; identity never
    changes.

    Raises:
        SchedulingValidationError: Same rules as create().
    """
    merged = EventDraft(
        title=event.title if draft.title is None else draft.title,
        description=event.description if draft.description is None else draft.description,
        start_time=draft.start_time or event.start_time,
        end_time=draft.end_time or event.end_time,
        category=draft.category or event.category,
        start_date=draft.start_date or event.start_date,
        end_date=draft.end_date or _shifted_end(event, draft.start_date),
    )
    return create(merged, merged.start_date, event_id=event.id)


def _shifted_end(event: CalendarEvent, new_start: Optional[date]) -> date:
    # Moving the start without an explicit end keeps the event's length.
    if new_start is None:
        return event.end_date
    return new_start + timedelta(days=event.duration_days)


def find(collection: EventCollection, event_id: str) -> Optional[CalendarEvent]:
    """Look up an event by identity."""
    for event in collection:
        if event.id == event_id:
            return event
    return None


def get(collection: EventCollection, event_id: str) -> CalendarEvent:
    """Look up an event by identity.

    Raises:
        EventNotFoundError: If no event has that identity.
    """
    event = find(collection, event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return event


def add(collection: EventCollection, event: CalendarEvent) -> EventCollection:
    """Append an event to the collection.

    Raises:
        ValueError: If an event with the same identity already exists.
    """
    if find(collection, event.id) is not None:
        raise ValueError(f"Event '{event.id}' already exists")
    return (*collection, event)


def update(collection: EventCollection, event: CalendarEvent) -> EventCollection:
    """Replace the event with the same identity.

    Raises:
        EventNotFoundError: If the identity is not in the collection.
    """
    if find(collection, event.id) is None:
        raise EventNotFoundError(event.id)
    return tuple(event if existing.id == event.id else existing for existing in collection)


def delete(collection: EventCollection, event_id: str) -> EventCollection:
    """Remove the event with the given identity.

    Deleting an absent identity is a no-op, so ``delete`` is idempotent.
    """
    return tuple(event for event in collection if event.id != event_id)


def events_on(collection: EventCollection, day: date) -> list[CalendarEvent]:
    """Return every event occupying the given day, in collection order."""
    return [event for event in collection if event.occupies(day)]


def filter_events(
    collection: EventCollection,
    query: Optional[str] = None,
    categories: Optional[Iterable[EventCategory]] = None,
) -> list[CalendarEvent]:
    """Filter events by a text query and/or a set of categories.

    The query is matched case-insensitively against title and description.
    A blank query matches everything; ``categories=None`` keeps every category.
    """
    results = list(collection)

    if query and query.strip():
        needle = query.strip().lower()
        results = [
            event
            for event in results
            if needle in event.title.lower() or needle in event.description.lower()
        ]

    if categories is not None:
        allowed = {EventCategory(c) for c in categories}
        results = [event for event in results if event.category in allowed]

    return results


def category_counts(collection: EventCollection) -> dict[EventCategory, int]:
    """Count events per category; every category is present in the result."""
    counts = {category: 0 for category in EventCategory}
    for event in collection:
        counts[event.category] += 1
    return counts
