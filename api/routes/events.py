"""Event management endpoints.

Provides REST API for creating, editing, deleting and querying calendar
events. Every mutation is validated by the engine before it is applied;
rule violations come back as 422 responses naming the violated rule.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import CalendarEngineDep
from api.models import ErrorResponse, EventListResponse
from models.event import CalendarEvent, EventCategory, EventDraft
from models.validation import PlacementResult

router = APIRouter(
    prefix="/events",
    tags=["events"],
)


# Request Models


class EventFieldsRequest(BaseModel):
    """Editable event fields.

    Times may be 24-hour ("14:30") or 12-hour ("2:30 PM").

    Attributes:
        title: Event title (required on create; omit to keep it on update).
        description: Event description.
        start_time: Daily start time.
        end_time: Daily end time.
        category: Event category.
        start_date: First day (defaults to on_date for creation).
        end_date: Last day (defaults to start_date).
    """

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(default=None, description="Event title")
    description: Optional[str] = Field(default=None, description="Event description")
    start_time: Optional[str] = Field(default=None, alias="startTime")
    end_time: Optional[str] = Field(default=None, alias="endTime")
    category: Optional[EventCategory] = Field(default=None, alias="type")
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")

    def to_draft(self) -> EventDraft:
        return EventDraft(**self.model_dump())


class CreateEventRequest(EventFieldsRequest):
    """Request to create an event.

    Attributes:
        on_date: The day the user clicked (defaults to today).
    """

    on_date: Optional[date] = Field(default=None, description="Day the event is created on")

    def to_draft(self) -> EventDraft:
        return EventDraft(**self.model_dump(exclude={"on_date"}))


class PlacementCheckRequest(BaseModel):
    """Request to dry-run a placement.

    Attributes:
        start_date: Proposed first day.
        end_date: Proposed last day (defaults to start_date).
    """

    start_date: date
    end_date: Optional[date] = None


# Route Handlers


@router.get("", response_model=EventListResponse)
async def list_events(
    engine: CalendarEngineDep,
    search: Optional[str] = Query(default=None, description="Text in title/description"),
    categories: Optional[list[EventCategory]] = Query(default=None),
    day: Optional[date] = Query(default=None, description="Only events occupying this day"),
):
    """List events, optionally filtered.

    Args:
        engine: The CalendarEngine instance (injected by FastAPI).
        search: Case-insensitive text filter.
        categories: Categories to include.
        day: Only events that occupy this day.

    Returns:
        Matching events plus counts.
    """
    events = engine.list_events(search=search, categories=categories, day=day)
    return EventListResponse(
        events=events,
        total_count=len(engine.present),
        returned_count=len(events),
    )


@router.get("/stats")
async def get_statistics(engine: CalendarEngineDep):
    """Per-category event counts and percentages."""
    stats = engine.statistics()
    return {"total": sum(s["count"] for s in stats), "categories": stats}


@router.get(
    "/{event_id}",
    response_model=CalendarEvent,
    responses={404: {"model": ErrorResponse}},
)
async def get_event(event_id: str, engine: CalendarEngineDep):
    """Get a single event by id."""
    return engine.get_event(event_id)


@router.post(
    "",
    response_model=CalendarEvent,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_event(request: CreateEventRequest, engine: CalendarEngineDep):
    """Create an event.

    Title is required; the time range defaults to 09:00-10:00 and the
    category to "other". The placement must not be in the past, beyond one
    year, or overlap another event on any day it occupies.

    Args:
        request: Event fields and the day it was created on.
        engine: The CalendarEngine instance (injected by FastAPI).

    Returns:
        The created event.
    """
    return engine.create_event(request.to_draft(), request.on_date)


@router.put(
    "/{event_id}",
    response_model=CalendarEvent,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def update_event(event_id: str, request: EventFieldsRequest, engine: CalendarEngineDep):
    """Edit an event. Omitted fields keep their current values."""
    return engine.update_event(event_id, request.to_draft())


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: str, engine: CalendarEngineDep):
    """Delete an event. Deleting an unknown id succeeds without effect."""
    engine.delete_event(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{event_id}/placement",
    response_model=PlacementResult,
    responses={404: {"model": ErrorResponse}},
)
async def check_placement(
    event_id: str, request: PlacementCheckRequest, engine: CalendarEngineDep
):
    """Check whether an event could be moved to a date range, without moving it."""
    return engine.check_placement(
        event_id, request.start_date, request.end_date or request.start_date
    )
