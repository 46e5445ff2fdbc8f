"""Drag and resize gesture endpoints.

The UI forwards raw gesture signals here: a drop on a day of the displayed
month, a stream of resize deltas, and the resize release. Rejections are
normal outcomes and are returned with status 200 and ``status: "rejected"``.
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from api.dependencies import CalendarEngineDep
from api.models import ErrorResponse
from models.drag import GestureOutcome, ResizeEdge

router = APIRouter(
    prefix="/gestures",
    tags=["gestures"],
)


# Request Models


class MoveRequest(BaseModel):
    """A drop of an event onto a calendar cell.

    Attributes:
        event_id: Event being dragged.
        destination_day: Day of the displayed month it was dropped on.
    """

    event_id: str
    destination_day: int = Field(ge=1, le=31)


class ResizeRequest(BaseModel):
    """One resize delta.

    Attributes:
        event_id: Event being resized.
        edge: Which edge is being dragged.
        pixel_delta: Displacement since the gesture began (positive = later).
    """

    event_id: str
    edge: ResizeEdge
    pixel_delta: float


# Route Handlers


@router.post("/move", response_model=GestureOutcome, responses={404: {"model": ErrorResponse}})
async def move_event(request: MoveRequest, engine: CalendarEngineDep):
    """Drop an event on a day of the displayed month.

    The event keeps its length in days. Returns "committed" or "pending"
    (committed after the settle delay) on acceptance, "rejected" with the
    reason otherwise.
    """
    return engine.move_event(request.event_id, request.destination_day)


@router.post("/resize", response_model=GestureOutcome, responses={404: {"model": ErrorResponse}})
async def resize_event(request: ResizeRequest, engine: CalendarEngineDep):
    """Feed a resize delta. Deltas within the debounce window collapse into one."""
    return engine.resize_event(request.event_id, request.edge, request.pixel_delta)


@router.post("/resize/release", response_model=GestureOutcome)
async def release_resize(engine: CalendarEngineDep):
    """End the resize gesture: validate and commit the last delta now."""
    return engine.release_resize()


@router.post("/cancel")
async def cancel_gesture(engine: CalendarEngineDep):
    """Cancel any pending drop commit or resize."""
    return {"cancelled": engine.cancel_gesture()}


@router.get("/state")
async def get_gesture_state(engine: CalendarEngineDep):
    """Describe the in-flight manipulation, if any."""
    return engine.reconciler.describe()
