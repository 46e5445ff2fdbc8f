"""Export and notification endpoints."""

from fastapi import APIRouter, Query, Response

from api.dependencies import CalendarEngineDep
from models.calendar import Notification
from models.export import ExportFormat

router = APIRouter(
    tags=["export"],
)


@router.get("/export")
async def export_events(
    engine: CalendarEngineDep,
    format: ExportFormat = Query(default=ExportFormat.JSON, description="csv or json"),
):
    """Download the current collection as CSV or JSON.

    Args:
        engine: The CalendarEngine instance (injected by FastAPI).
        format: Output format.

    Returns:
        The document as an attachment named calendar-events-YYYY-MM-DD.<ext>.
    """
    payload = engine.export(format)
    filename = engine.export_filename(format)
    return Response(
        content=payload,
        media_type=format.media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/notifications", response_model=list[Notification])
async def get_notifications(engine: CalendarEngineDep):
    """Return and clear pending notifications (e.g. failed saves)."""
    return engine.drain_notifications()
