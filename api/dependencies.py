"""Dependency injection providers for the FastAPI application.

This module defines dependencies that can be injected into route handlers,
providing access to the shared CalendarEngine.
"""

from typing import Annotated, Optional

from fastapi import Depends

from config import Settings, load_settings
from models.calendar import CalendarEngine
from models.persistence import JsonFileRepository


# Global state
# The engine is created once when the app starts and shared by all requests
_calendar_engine: Optional[CalendarEngine] = None


def get_calendar_engine() -> CalendarEngine:
    """Get the shared CalendarEngine instance.

    This function is a FastAPI dependency. When you add it to a route
    handler's parameters, FastAPI calls it and injects the result.

    Returns:
        The shared CalendarEngine instance.

    Raises:
        RuntimeError: If the engine hasn't been initialized yet.
    """
    if _calendar_engine is None:
        raise RuntimeError(
            "CalendarEngine not initialized. Call initialize_calendar_engine() first."
        )

    return _calendar_engine


def initialize_calendar_engine(settings: Optional[Settings] = None) -> CalendarEngine:
    """Initialize the shared CalendarEngine and load persisted events.

    Should be called once when the FastAPI app starts up.

    Args:
        settings: Settings to use (loaded from the environment when omitted).

    Returns:
        The newly created CalendarEngine instance.
    """
    global _calendar_engine

    settings = settings or load_settings()
    engine = CalendarEngine(
        repository=JsonFileRepository(settings.storage_path),
        history_max_depth=settings.history_max_depth,
        commit_delay=settings.drag_commit_delay,
        resize_debounce=settings.resize_debounce,
        pixels_per_day=settings.pixels_per_day,
        export_dir=settings.auto_export_dir,
    )
    engine.start()

    _calendar_engine = engine
    return engine


def shutdown_calendar_engine() -> None:
    """Shut down the CalendarEngine, cancelling any pending gesture timers."""
    global _calendar_engine

    if _calendar_engine is not None:
        _calendar_engine.shutdown()

    _calendar_engine = None


# Type alias for dependency injection
# This makes the type annotation cleaner in route handlers
CalendarEngineDep = Annotated[CalendarEngine, Depends(get_calendar_engine)]
