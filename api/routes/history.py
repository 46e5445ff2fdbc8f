"""Undo/redo endpoints.

Undo and redo step through whole-collection snapshots. The shortcut
endpoint accepts raw key presses so the UI can forward its global key
handler without knowing the bindings.
"""

from fastapi import APIRouter

from api.dependencies import CalendarEngineDep
from api.models import HistoryStatusResponse
from models.shortcuts import KeyPress

router = APIRouter(
    prefix="/history",
    tags=["history"],
)


@router.get("", response_model=HistoryStatusResponse)
async def get_history(engine: CalendarEngineDep):
    """Get undo/redo availability."""
    return HistoryStatusResponse(**engine.history.summary())


@router.post("/undo", response_model=HistoryStatusResponse)
async def undo(engine: CalendarEngineDep):
    """Undo the most recent change. A no-op when there is nothing to undo.

    Args:
        engine: The CalendarEngine instance (injected by FastAPI).

    Returns:
        Whether present changed and the new undo/redo availability.
    """
    return HistoryStatusResponse(**engine.undo())


@router.post("/redo", response_model=HistoryStatusResponse)
async def redo(engine: CalendarEngineDep):
    """Redo the most recently undone change. A no-op when there is nothing to redo."""
    return HistoryStatusResponse(**engine.redo())


@router.post("/shortcut")
async def handle_shortcut(press: KeyPress, engine: CalendarEngineDep):
    """Run the history action bound to a key press.

    Ctrl/Cmd+Z undoes; Ctrl/Cmd+Shift+Z and Ctrl/Cmd+Y redo.

    Returns:
        {"handled": false} for unbound keys, otherwise the history status.
    """
    result = engine.handle_shortcut(press)
    if result is None:
        return {"handled": False}
    return {"handled": True, **HistoryStatusResponse(**result).model_dump()}
