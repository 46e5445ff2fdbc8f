"""HTTP transport for the calendar client.

HTTPClient wraps httpx.Client. Error responses become the exceptions in
client.exceptions, and when retry is enabled, connection errors, timeouts
and 502/503/504 answers are retried with exponential backoff. A numeric
``Retry-After`` header on a retryable answer replaces the computed delay.

This is an internal module; sub-clients reach it through BaseClient.
"""

import logging
import time
from typing import Any, Literal

import httpx

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

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]

RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})

DEFAULT_RETRY_BACKOFF_BASE = 0.5  # seconds
DEFAULT_RETRY_BACKOFF_MAX = 30.0  # seconds

# Errors constructed from (message, details, response_body) alone.
_ERRORS_BY_STATUS: dict[int, type[APIError]] = {
    400: BadRequestError,
    409: ConflictError,
    422: ValidationError,
}


def _body_or_text(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _parse_error_response(response: httpx.Response) -> tuple[str, str | None, dict | None]:
    """Split an error body into (message, error label, remaining fields).

    Calendar errors look like ``{"error": label, "detail": text, ...}``.
    FastAPI request validation failures carry a list under ``detail``.
    Bodies that are not JSON objects yield their text.
    """
    body = _body_or_text(response)
    if not isinstance(body, dict):
        text = str(body).strip()
        return text or f"HTTP {response.status_code} error", None, None

    detail = body.get("detail")
    extras = {k: v for k, v in body.items() if k not in ("detail", "error")} or None

    if isinstance(detail, list):
        issues = "; ".join(
            f"{issue.get('loc', ['unknown'])[-1]}: {issue.get('msg', 'invalid')}"
            for issue in detail
        )
        return issues, "validation_error", {"errors": detail}
    if detail is not None:
        return str(detail), body.get("error"), extras
    if "error" in body:
        return str(body["error"]), None, extras
    return str(body), None, None


def _raise_for_status(response: httpx.Response) -> None:
    """Raise the client exception that matches an error response.

    Raises:
        BadRequestError: 400.
        NotFoundError: 404, with the reported event id as ``resource_id``.
        ConflictError: 409.
        ValidationError: 422.
        ServerError: 5xx.
        APIError: Any other non-success status.
    """
    if response.is_success:
        return

    message, error_type, details = _parse_error_response(response)
    body = _body_or_text(response)
    code = response.status_code

    if code in _ERRORS_BY_STATUS:
        raise _ERRORS_BY_STATUS[code](message=message, details=details, response_body=body)
    if code == 404:
        raise NotFoundError(
            message=message,
            resource_id=(details or {}).get("event_id"),
            details=details,
            response_body=body,
        )
    if code >= 500:
        raise ServerError(
            message=message, status_code=code, details=details, response_body=body
        )
    raise APIError(
        message=message,
        status_code=code,
        error_type=error_type,
        details=details,
        response_body=body,
    )


def _calculate_backoff(
    attempt: int,
    base: float = DEFAULT_RETRY_BACKOFF_BASE,
    retry_after: str | None = None,
) -> float:
    """Seconds to wait before retry number ``attempt`` (0-indexed).

    Exponential (``base * 2**attempt``) unless the server sent a whole-second
    Retry-After value. Capped at DEFAULT_RETRY_BACKOFF_MAX.
    """
    if retry_after and retry_after.strip().isdigit():
        delay = float(retry_after)
    else:
        delay = base * (2 ** attempt)
    return min(delay, DEFAULT_RETRY_BACKOFF_MAX)


class HTTPClient:
    """Blocking transport shared by all sub-clients.

    Attributes:
        base_url: Server root, without a trailing slash.
        timeout: Per-request timeout in seconds.
        retry_enabled: Whether transient failures are retried.
        max_retries: Retries allowed after the first attempt.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_enabled = retry_enabled
        self.max_retries = max_retries

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def _attempts(self) -> int:
        return self.max_retries + 1 if self.retry_enabled else 1

    def send(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send one logical request, retrying transient failures if enabled.

        Args:
            method: HTTP method.
            path: Path below base_url.
            params: Query parameters; None values are dropped.
            json: JSON body.

        Returns:
            The successful response.

        Raises:
            ConnectionError: The server could not be reached.
            TimeoutError: No response within ``timeout``.
            APIError: The server answered with an error status.
        """
        url = f"{self.base_url}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        for attempt in range(self._attempts):
            last_attempt = attempt == self._attempts - 1
            try:
                response = self._client.request(method, path, params=params, json=json)
            except httpx.ConnectError as e:
                if last_attempt:
                    raise ConnectionError(
                        f"Failed to connect to {url}", url=url, cause=e
                    ) from e
                self._wait(attempt, f"{method} {path} could not connect")
                continue
            except httpx.TimeoutException as e:
                if last_attempt:
                    raise TimeoutError(
                        f"Request to {url} timed out", timeout=self.timeout, url=url
                    ) from e
                self._wait(attempt, f"{method} {path} timed out")
                continue

            if response.status_code in RETRYABLE_STATUS_CODES and not last_attempt:
                self._wait(
                    attempt,
                    f"{method} {path} returned {response.status_code}",
                    response.headers.get("Retry-After"),
                )
                continue

            _raise_for_status(response)
            return response

        raise RuntimeError(f"Retry loop for {method} {path} ended without a response")

    def _wait(self, attempt: int, reason: str, retry_after: str | None = None) -> None:
        delay = _calculate_backoff(attempt, retry_after=retry_after)
        logger.warning(
            f"{reason}; retry {attempt + 1}/{self.max_retries} in {delay:.1f}s"
        )
        time.sleep(delay)

    def request(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and decode the JSON body (None when the body is empty)."""
        response = self.send(method, path, params=params, json=json)
        return response.json() if response.content else None

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def get_bytes(self, path: str, params: dict[str, Any] | None = None) -> bytes:
        """GET a download and return the raw body."""
        return self.send("GET", path, params=params).content

    def post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return self.request("POST", path, params=params, json=json)

    def put(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return self.request("PUT", path, params=params, json=json)

    def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("DELETE", path, params=params)
