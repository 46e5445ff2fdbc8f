"""Unit tests for the calendar client HTTP utilities.

This module tests the HTTP handling layer defined in client/_http.py:
- _parse_error_response: extracting error info from server error bodies
- _raise_for_status: mapping HTTP status codes to exception types
- _calculate_backoff: exponential backoff for retries
- HTTPClient: request methods, parameter filtering and retry

Note: These tests use httpx's mock transport to avoid real network calls.
"""

import httpx
import pytest

from client._http import (
    DEFAULT_RETRY_BACKOFF_BASE,
    DEFAULT_RETRY_BACKOFF_MAX,
    HTTPClient,
    _calculate_backoff,
    _parse_error_response,
    _raise_for_status,
)
from client.exceptions import (
    APIError,
    BadRequestError,
    ConflictError,
    ConnectionError,
    NotFoundError,
    ServerError,
    TimeoutError,
    ValidationError,
)

BASE_URL = "http://calendar.test"


@pytest.fixture
def no_sleep(monkeypatch):
    """Record backoff delays instead of sleeping."""
    delays = []
    monkeypatch.setattr("client._http.time.sleep", delays.append)
    return delays


def make_client(handler, **kwargs) -> HTTPClient:
    return HTTPClient(BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


# =============================================================================
# Helper Function Tests
# =============================================================================


class TestParseErrorResponse:
    """Tests for _parse_error_response."""

    def test_rule_violation_body(self) -> None:
        response = httpx.Response(
            422,
            json={
                "error": "Scheduling Rule Violated",
                "kind": "time_conflict",
                "detail": "Overlaps with \"A\"",
                "conflicting_event_id": "evt-a",
            },
        )
        message, error_type, details = _parse_error_response(response)
        assert message == "Overlaps with \"A\""
        assert error_type == "Scheduling Rule Violated"
        assert details == {"kind": "time_conflict", "conflicting_event_id": "evt-a"}

    def test_request_validation_list(self) -> None:
        """FastAPI reports malformed bodies as a list under detail."""
        errors = [{"loc": ["body", "type"], "msg": "Input should be 'work'"}]
        response = httpx.Response(422, json={"detail": errors})
        message, error_type, details = _parse_error_response(response)
        assert message == "type: Input should be 'work'"
        assert error_type == "validation_error"
        assert details == {"errors": errors}

    def test_plain_text(self) -> None:
        response = httpx.Response(502, text="Bad Gateway")
        assert _parse_error_response(response) == ("Bad Gateway", None, None)

    def test_empty_body(self) -> None:
        response = httpx.Response(500)
        assert _parse_error_response(response) == ("HTTP 500 error", None, None)


class TestRaiseForStatus:
    """Tests for _raise_for_status."""

    def test_success_does_not_raise(self) -> None:
        _raise_for_status(httpx.Response(200, json={}))
        _raise_for_status(httpx.Response(204))

    @pytest.mark.parametrize(
        "status_code,exc_type",
        [
            (400, BadRequestError),
            (404, NotFoundError),
            (409, ConflictError),
            (422, ValidationError),
            (500, ServerError),
            (503, ServerError),
            (418, APIError),
        ],
    )
    def test_status_mapping(self, status_code, exc_type) -> None:
        with pytest.raises(exc_type) as exc_info:
            _raise_for_status(httpx.Response(status_code, json={"detail": "nope"}))
        assert exc_info.value.status_code == status_code
        assert exc_info.value.message == "nope"

    def test_validation_error_exposes_rule(self) -> None:
        response = httpx.Response(
            422,
            json={
                "error": "Scheduling Rule Violated",
                "kind": "past_date",
                "detail": "Cannot create events in the past",
                "conflicting_event_id": None,
            },
        )
        with pytest.raises(ValidationError) as exc_info:
            _raise_for_status(response)
        assert exc_info.value.kind == "past_date"
        assert exc_info.value.conflicting_event_id is None

    def test_not_found_exposes_event_id(self) -> None:
        response = httpx.Response(
            404, json={"error": "Event Not Found", "detail": "missing", "event_id": "ghost"}
        )
        with pytest.raises(NotFoundError) as exc_info:
            _raise_for_status(response)
        assert exc_info.value.resource_id == "ghost"
        assert str(exc_info.value) == "[HTTP 404] [not_found] missing"


class TestCalculateBackoff:
    def test_doubles_per_attempt(self) -> None:
        assert _calculate_backoff(0) == DEFAULT_RETRY_BACKOFF_BASE
        assert _calculate_backoff(2) == DEFAULT_RETRY_BACKOFF_BASE * 4

    def test_capped(self) -> None:
        assert _calculate_backoff(50) == DEFAULT_RETRY_BACKOFF_MAX

    def test_retry_after_header_wins(self) -> None:
        assert _calculate_backoff(0, retry_after="3") == 3.0
        assert _calculate_backoff(0, retry_after="soon") == DEFAULT_RETRY_BACKOFF_BASE
        assert _calculate_backoff(0, retry_after="120") == DEFAULT_RETRY_BACKOFF_MAX


# =============================================================================
# HTTPClient Tests
# =============================================================================


class TestHTTPClientRequests:
    """Tests for request building and response parsing."""

    def test_get_drops_none_params(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            return httpx.Response(200, json={"ok": True})

        with make_client(handler) as client:
            assert client.get("/events", params={"search": "x", "day": None}) == {"ok": True}
        assert seen["url"].path == "/events"
        assert dict(seen["url"].params) == {"search": "x"}

    def test_post_sends_json(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = request.content
            return httpx.Response(201, json={"id": "evt-1"})

        with make_client(handler) as client:
            assert client.post("/events", json={"title": "A"}) == {"id": "evt-1"}
        assert seen["method"] == "POST"
        assert b'"title"' in seen["body"]

    def test_empty_response_returns_none(self) -> None:
        with make_client(lambda request: httpx.Response(204)) as client:
            assert client.delete("/events/evt-1") is None

    def test_get_bytes(self) -> None:
        handler = lambda request: httpx.Response(200, content=b'"Date"\r\n')
        with make_client(handler) as client:
            assert client.get_bytes("/export") == b'"Date"\r\n'

    def test_error_response_raises(self) -> None:
        handler = lambda request: httpx.Response(404, json={"detail": "missing"})
        with make_client(handler) as client:
            with pytest.raises(NotFoundError):
                client.get("/events/ghost")


class TestHTTPClientRetry:
    """Tests for retry with exponential backoff."""

    def test_no_retry_by_default(self, no_sleep) -> None:
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503, json={"detail": "storage down"})

        with make_client(handler) as client:
            with pytest.raises(ServerError):
                client.get("/events")
        assert len(calls) == 1
        assert no_sleep == []

    def test_retries_transient_status(self, no_sleep) -> None:
        responses = iter([httpx.Response(503), httpx.Response(502), httpx.Response(200, json=[])])

        with make_client(lambda request: next(responses), retry_enabled=True) as client:
            assert client.get("/notifications") == []
        assert no_sleep == [0.5, 1.0]

    def test_gives_up_after_max_retries(self, no_sleep) -> None:
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(504)

        with make_client(handler, retry_enabled=True, max_retries=2) as client:
            with pytest.raises(ServerError) as exc_info:
                client.get("/events")
        assert exc_info.value.status_code == 504
        assert len(calls) == 3

    def test_client_errors_are_not_retried(self, no_sleep) -> None:
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(422, json={"detail": "bad", "kind": "empty_title"})

        with make_client(handler, retry_enabled=True) as client:
            with pytest.raises(ValidationError):
                client.post("/events", json={})
        assert len(calls) == 1

    def test_connect_error(self, no_sleep) -> None:
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with make_client(handler, retry_enabled=True, max_retries=1) as client:
            with pytest.raises(ConnectionError) as exc_info:
                client.get("/health")
        assert exc_info.value.url == f"{BASE_URL}/health"
        assert len(no_sleep) == 1

    def test_timeout(self, no_sleep) -> None:
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with make_client(handler, timeout=2.0) as client:
            with pytest.raises(TimeoutError) as exc_info:
                client.get("/health")
        assert exc_info.value.timeout == 2.0

    def test_honours_retry_after(self, no_sleep) -> None:
        responses = iter(
            [httpx.Response(503, headers={"Retry-After": "2"}), httpx.Response(200, json={})]
        )
        with make_client(lambda request: next(responses), retry_enabled=True) as client:
            assert client.get("/events") == {}
        assert no_sleep == [2.0]
