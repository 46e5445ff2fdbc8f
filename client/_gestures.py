"""Gestures sub-client for the calendar API (/gestures/*).

This is an internal module. Import from `client` instead.
"""

from client._base import BaseClient
from client.models import GestureOutcome, GestureStateResponse
from models.drag import ResizeEdge


class GesturesClient(BaseClient):
    """Client for drag and resize endpoints.

    A drop names a day of the month the server is currently displaying, so
    navigate with ``client.view`` first when dropping into another month.

    Example:
        with CalendarClient() as client:
            outcome = client.gestures.move(event.id, destination_day=12)
            if outcome.status == "rejected":
                print(outcome.placement.message)
    """

    _BASE_PATH = "/gestures"

    def move(self, event_id: str, destination_day: int) -> GestureOutcome:
        """Drop an event on a day of the displayed month.

        Returns:
            The outcome: committed, pending (committed after the settle
            delay) or rejected with the placement result.
        """
        data = self._post(
            f"{self._BASE_PATH}/move",
            json={"event_id": event_id, "destination_day": destination_day},
        )
        return GestureOutcome(**data)

    def resize(
        self, event_id: str, edge: ResizeEdge | str, pixel_delta: float
    ) -> GestureOutcome:
        """Feed one resize delta (cumulative since the gesture began)."""
        data = self._post(
            f"{self._BASE_PATH}/resize",
            json={
                "event_id": event_id,
                "edge": ResizeEdge(edge).value,
                "pixel_delta": pixel_delta,
            },
        )
        return GestureOutcome(**data)

    def release_resize(self) -> GestureOutcome:
        """End the resize gesture and commit the last delta."""
        data = self._post(f"{self._BASE_PATH}/resize/release")
        return GestureOutcome(**data)

    def cancel(self) -> bool:
        """Cancel any pending gesture. Returns whether one was pending."""
        data = self._post(f"{self._BASE_PATH}/cancel")
        return bool(data["cancelled"])

    def state(self) -> GestureStateResponse:
        data = self._get(f"{self._BASE_PATH}/state")
        return GestureStateResponse(**data)
