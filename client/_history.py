"""History sub-client for the calendar API (/history/*).

This is an internal module. Import from `client` instead.
"""

from client._base import BaseClient
from client.models import HistoryStatusResponse, ShortcutResponse


class HistoryClient(BaseClient):
    """Client for undo/redo endpoints.

    Example:
        with CalendarClient() as client:
            status = client.history.undo()
            if not status.changed:
                print("Nothing to undo")
    """

    _BASE_PATH = "/history"

    def status(self) -> HistoryStatusResponse:
        """Get undo/redo availability."""
        data = self._get(self._BASE_PATH)
        return HistoryStatusResponse(**data)

    def undo(self) -> HistoryStatusResponse:
        """Undo the most recent change. A no-op when there is nothing to undo."""
        data = self._post(f"{self._BASE_PATH}/undo")
        return HistoryStatusResponse(**data)

    def redo(self) -> HistoryStatusResponse:
        """Redo the most recently undone change."""
        data = self._post(f"{self._BASE_PATH}/redo")
        return HistoryStatusResponse(**data)

    def shortcut(
        self, key: str, ctrl: bool = False, meta: bool = False, shift: bool = False
    ) -> ShortcutResponse:
        """Forward a key press; bound keys run undo or redo.

        Args:
            key: The key value (e.g. "z").
            ctrl: Whether Ctrl was held.
            meta: Whether Cmd/Meta was held.
            shift: Whether Shift was held.
        """
        data = self._post(
            f"{self._BASE_PATH}/shortcut",
            json={"key": key, "ctrl": ctrl, "meta": meta, "shift": shift},
        )
        return ShortcutResponse(**data)
