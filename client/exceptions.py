"""Exceptions raised by the calendar client.

Transport failures (ConnectionError, TimeoutError) and error responses
(APIError and its status-specific subclasses) share CalendarClientError as
their base:

    CalendarClientError
    ├── ConnectionError
    ├── TimeoutError
    └── APIError
        ├── BadRequestError      400
        ├── NotFoundError        404
        ├── ConflictError        409
        ├── ValidationError      422
        └── ServerError          5xx

Example:
    try:
        client.events.create(title="Standup", on_date=date(2025, 3, 10))
    except ValidationError as e:
        if e.kind == "time_conflict":
            print(f"Clashes with {e.conflicting_event_id}: {e.message}")
"""

from typing import Any


class CalendarClientError(Exception):
    """Base class for every client error.

    Attributes:
        message: Human-readable description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class ConnectionError(CalendarClientError):
    """The server could not be reached.

    Attributes:
        url: Address that was tried.
        cause: The httpx exception behind the failure.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.url = url
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message} (url: {self.url})" if self.url else self.message


class TimeoutError(CalendarClientError):
    """No response arrived within the configured timeout.

    Attributes:
        timeout: The timeout in seconds.
        url: Address that was tried.
    """

    def __init__(
        self,
        message: str,
        timeout: float | None = None,
        url: str | None = None,
    ) -> None:
        self.timeout = timeout
        self.url = url
        super().__init__(message)

    def __str__(self) -> str:
        context = [f"timeout: {self.timeout}s"] if self.timeout is not None else []
        if self.url:
            context.append(f"url: {self.url}")
        return f"{self.message} ({', '.join(context)})" if context else self.message


class APIError(CalendarClientError):
    """The server answered with an error status.

    Attributes:
        status_code: HTTP status.
        error_type: Short label for the failure.
        details: Extra fields of the error body (e.g. ``kind``, ``event_id``).
        response_body: Decoded body, or its text when it was not JSON.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        error_type: str | None = None,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        self.status_code = status_code
        self.error_type = error_type
        self.details = details
        self.response_body = response_body
        super().__init__(message)

    def __str__(self) -> str:
        label = f" [{self.error_type}]" if self.error_type else ""
        return f"[HTTP {self.status_code}]{label} {self.message}"


class _FixedStatusError(APIError):
    """APIError whose status and label are set by the subclass."""

    STATUS_CODE = 0
    ERROR_TYPE = ""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=self.STATUS_CODE,
            error_type=self.ERROR_TYPE,
            details=details,
            response_body=response_body,
        )


class BadRequestError(_FixedStatusError):
    """A value was well-formed but unusable, such as an unparseable time or a
    day number missing from the displayed month."""

    STATUS_CODE = 400
    ERROR_TYPE = "bad_request"


class NotFoundError(_FixedStatusError):
    """The event does not exist.

    Attributes:
        resource_id: The missing event id, when the server reported it.
    """

    STATUS_CODE = 404
    ERROR_TYPE = "not_found"

    def __init__(
        self,
        message: str,
        resource_id: str | None = None,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        self.resource_id = resource_id
        super().__init__(message, details=details, response_body=response_body)


class ConflictError(_FixedStatusError):
    STATUS_CODE = 409
    ERROR_TYPE = "conflict"


class ValidationError(_FixedStatusError):
    """The request was refused (422).

    This covers malformed bodies and broken scheduling rules. For a rule,
    ``kind`` is one of past_date, horizon_exceeded, time_conflict,
    invalid_time_range or empty_title.
    """

    STATUS_CODE = 422
    ERROR_TYPE = "validation_error"

    @property
    def kind(self) -> str | None:
        return (self.details or {}).get("kind")

    @property
    def conflicting_event_id(self) -> str | None:
        """For time_conflict, the event that was overlapped."""
        return (self.details or {}).get("conflicting_event_id")


class ServerError(APIError):
    """The server failed (5xx). Storage outages arrive as 503."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_type="server_error",
            details=details,
            response_body=response_body,
        )
