"""Month view endpoints.

The displayed month determines which dates drag destinations refer to.
Search and category filters only affect what is listed, never validation.
"""

from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from api.dependencies import CalendarEngineDep
from models.event import CalendarEvent, EventCategory
from models.view import ViewState

router = APIRouter(
    prefix="/view",
    tags=["view"],
)


class FilterRequest(BaseModel):
    """Update search text and/or toggle a category.

    Attributes:
        search_query: New search text (unchanged when omitted).
        toggle_category: Category to toggle in the filter.
    """

    search_query: Optional[str] = None
    toggle_category: Optional[EventCategory] = None


@router.get("", response_model=ViewState)
async def get_view(engine: CalendarEngineDep):
    """Get the displayed month and filters."""
    return engine.view


@router.post("/previous", response_model=ViewState)
async def previous_month(engine: CalendarEngineDep):
    """Show the previous month."""
    engine.view.previous_month()
    return engine.view


@router.post("/next", response_model=ViewState)
async def next_month(engine: CalendarEngineDep):
    """Show the next month."""
    engine.view.next_month()
    return engine.view


@router.post("/today", response_model=ViewState)
async def current_month(engine: CalendarEngineDep):
    """Show the month containing today."""
    engine.view.go_to(engine.clock.today())
    return engine.view


@router.post("/filters", response_model=ViewState)
async def update_filters(request: FilterRequest, engine: CalendarEngineDep):
    """Change the search text or toggle a category.

    Deselecting the last selected category is ignored.
    """
    if request.search_query is not None:
        engine.view.search_query = request.search_query
    if request.toggle_category is not None:
        engine.view.toggle_category(request.toggle_category)
    return engine.view


@router.get("/days/{day}", response_model=list[CalendarEvent])
async def events_for_day(day: int, engine: CalendarEngineDep):
    """Visible events on a day of the displayed month."""
    return engine.view.events_for_day(engine.present, day)
