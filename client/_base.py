"""Shared base for the events, gestures, history and view sub-clients.

This is an internal module and should not be imported directly by users.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from client._http import HTTPClient


def _filter_none_params(**params: Any) -> dict[str, Any]:
    """Filter out None values from a parameters dict."""
    return {k: v for k, v in params.items() if v is not None}


class BaseClient:
    """Gives a sub-client its path-level request helpers over the shared HTTPClient.

    Attributes:
        _http: The shared HTTP client for making requests.
    """

    def __init__(self, http_client: "HTTPClient") -> None:
        self._http = http_client

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self._http.get(path, params=params)

    def _post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return self._http.post(path, json=json, params=params)

    def _put(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return self._http.put(path, json=json, params=params)

    def _delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self._http.delete(path, params=params)
