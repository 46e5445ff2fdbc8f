"""Helper functions for API tests."""

from typing import Any, Optional


def event_body(
    title: str = "Team sync",
    on_date: Optional[str] = "2025-01-10",
    start_time: str = "09:00",
    end_time: str = "10:00",
    category: str = "other",
    **extra: Any,
) -> dict[str, Any]:
    """Build a POST /events body using the wire (camelCase) field names.

    Args:
        title: Event title.
        on_date: Day the event is created on (ISO format, None to omit).
        start_time: Daily start.
        end_time: Daily end.
        category: Category value.
        **extra: Additional fields, e.g. endDate or description.

    Returns:
        Request body dict.
    """
    body = {
        "title": title,
        "startTime": start_time,
        "endTime": end_time,
        "type": category,
        **extra,
    }
    if on_date is not None:
        body["on_date"] = on_date
    return body


def create_via_api(client, **kwargs) -> dict[str, Any]:
    """POST an event and return the created record, asserting success."""
    response = client.post("/events", json=event_body(**kwargs))
    assert response.status_code == 201, response.text
    return response.json()
