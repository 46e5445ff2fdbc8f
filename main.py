"""Main entry point for the event calendar FastAPI application.

This module creates and configures the FastAPI app instance that serves the
REST API over the calendar engine.

To run the development server:
    uv run uvicorn main:app --reload

To run in production:
    uv run uvicorn main:app --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import ValidationError

from api.dependencies import initialize_calendar_engine, shutdown_calendar_engine
from api.exceptions import (
    event_not_found_handler,
    generic_exception_handler,
    scheduling_validation_handler,
    storage_error_handler,
    validation_exception_handler,
    value_error_handler,
)
from api.routes import events as events_routes
from api.routes import export as export_routes
from api.routes import gestures as gestures_routes
from api.routes import history as history_routes
from api.routes import view as view_routes
from config import load_settings
from models.errors import EventNotFoundError, SchedulingValidationError, StorageError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events.

    Loads settings, configures logging, initializes the engine (loading the
    persisted collection) before serving, and cancels pending gesture timers
    on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to FastAPI to handle requests.
    """
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logger.info("Starting calendar service - initializing CalendarEngine...")
    engine = initialize_calendar_engine(settings)
    logger.info(f"CalendarEngine initialized with {len(engine.present)} events")

    yield  # App runs and handles requests here

    logger.info("Shutting down calendar service...")
    shutdown_calendar_engine()
    logger.info("Shutdown complete")


# Create the FastAPI application instance
app = FastAPI(
    title="Event Calendar",
    description="Month-grid event scheduling with conflict validation and undo/redo",
    version="0.1.0",
    lifespan=lifespan,
)

# Register exception handlers
# These convert Python exceptions into clean JSON responses
app.add_exception_handler(SchedulingValidationError, scheduling_validation_handler)
app.add_exception_handler(EventNotFoundError, event_not_found_handler)
app.add_exception_handler(StorageError, storage_error_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(ValueError, value_error_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Register route modules
app.include_router(events_routes.router)
app.include_router(gestures_routes.router)
app.include_router(history_routes.router)
app.include_router(view_routes.router)
app.include_router(export_routes.router)


@app.get("/")
async def root():
    """Root endpoint - returns a welcome message."""
    return {
        "message": "Welcome to the Event Calendar API",
        "version": "0.1.0",
        "docs_url": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}
