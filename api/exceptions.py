"""Exception handlers for the calendar service.

Each handler turns an engine or validation exception into a JSON body of the
form ``{"error": <label>, "detail": <message>, ...}``. A broken scheduling
rule is an ordinary outcome for the UI, so it is answered with 422 and the
rule's ``kind`` rather than treated as a failure.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from models.errors import EventNotFoundError, SchedulingValidationError, StorageError

logger = logging.getLogger(__name__)


def _error_json(status_code: int, error: str, detail: str, **fields: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "detail": detail, **fields},
    )


async def scheduling_validation_handler(request: Request, exc: SchedulingValidationError):
    """Answer a broken scheduling rule with 422.

    The body names the rule (``kind``) and, for time conflicts, the event
    that was overlapped, so the UI can show the message inline.
    """
    return _error_json(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Scheduling Rule Violated",
        exc.message,
        kind=exc.kind.value,
        conflicting_event_id=exc.conflicting_event_id,
    )


async def event_not_found_handler(request: Request, exc: EventNotFoundError):
    """Answer an unknown event id with 404."""
    return _error_json(
        status.HTTP_404_NOT_FOUND,
        "Event Not Found",
        exc.message,
        event_id=exc.event_id,
    )


async def storage_error_handler(request: Request, exc: StorageError):
    """Answer a storage failure that reached a route with 503.

    Saves after a commit never get here; the engine turns those into
    notifications.
    """
    logger.error(f"Storage error on {request.url.path}: {exc}")
    return _error_json(status.HTTP_503_SERVICE_UNAVAILABLE, "Storage Unavailable", exc.message)


async def validation_exception_handler(request: Request, exc: ValidationError):
    """Answer a pydantic ValidationError raised inside a handler with 422.

    Args:
        request: The request being served.
        exc: The pydantic error.

    Returns:
        JSONResponse listing the individual validation errors.
    """
    return _error_json(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation Error",
        "The request data failed validation",
        validation_errors=exc.errors(include_url=False, include_context=False),
    )


async def value_error_handler(request: Request, exc: ValueError):
    """Answer a value that passed request parsing but cannot be used with 400.

    Typical causes are an unparseable time such as "13:00 PM" or a drop on
    a day that does not exist in the displayed month.
    """
    return _error_json(
        status.HTTP_400_BAD_REQUEST,
        "Invalid Value",
        str(exc),
        type=type(exc).__name__,
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Answer anything unexpected with 500, logging the traceback server-side only."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=exc)
    return _error_json(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "An unexpected error occurred",
        type=type(exc).__name__,
    )
