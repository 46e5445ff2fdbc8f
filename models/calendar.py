"""Calendar engine orchestration.

CalendarEngine is the single owner of the event collection. It wires the
pure EventStore transformations, the ConflictValidator, the HistoryLog and
the DragReconciler together, mirrors every committed change to the
persistence collaborator, and keeps the month view state.

Every mutation (API call, timer callback, undo/redo) takes the same
re-entrant lock, so an undo can never interleave with the validation of a
pending drop.
"""

import logging
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from models import store
from models.drag import (
    DEFAULT_COMMIT_DELAY,
    DEFAULT_PIXELS_PER_DAY,
    DEFAULT_RESIZE_DEBOUNCE,
    DragReconciler,
    GestureOutcome,
    ManipulationState,
    ResizeEdge,
)
from models.errors import StorageError
from models.event import CalendarEvent, DateRange, EventCategory, EventDraft
from models.export import ExportFormat, export_filename, serialize
from models.history import HistoryLog
from models.persistence import EventRepository, InMemoryRepository
from models.shortcuts import KeyPress, ShortcutAction, resolve_shortcut
from models.store import EventCollection
from models.timers import Clock, SystemClock, ThreadingTimerScheduler, TimerScheduler
from models.validation import ConflictValidator, PlacementResult
from models.view import ViewState, category_statistics

logger = logging.getLogger(__name__)


class Notification(BaseModel):
    """A non-blocking message for the user.

    Args:
        level: Severity.
        message: Text to show.
        created_at: When it was raised.
        kind: Optional machine-readable category (e.g. "storage_error").
    """

    level: Literal["info", "warning", "error"] = "info"
    message: str
    created_at: datetime = Field(default_factory=datetime.now)
    kind: Optional[str] = None


class CalendarEngine:
    """Main orchestrator for the event calendar.

    Responsibilities:
    - Startup load from the repository (not an undoable action)
    - Create, edit and delete with validation before any mutation
    - Drag/resize gestures through DragReconciler
    - Undo/redo, including keyboard shortcuts
    - Best-effort persistence and optional CSV auto-export after edits
    - Month view navigation, search and category filtering

    Attributes:
        repository: Persistence collaborator.
        clock: Source of "today".
        history: Snapshot history; its present is the collection.
        validator: Placement validator.
        reconciler: Gesture reconciler.
        view: Month view state.
    """

    def __init__(
        self,
        repository: Optional[EventRepository] = None,
        clock: Optional[Clock] = None,
        scheduler: Optional[TimerScheduler] = None,
        history_max_depth: Optional[int] = None,
        commit_delay: float = DEFAULT_COMMIT_DELAY,
        resize_debounce: float = DEFAULT_RESIZE_DEBOUNCE,
        pixels_per_day: float = DEFAULT_PIXELS_PER_DAY,
        export_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        self.repository = repository or InMemoryRepository()
        self.clock = clock or SystemClock()
        self.scheduler = scheduler or ThreadingTimerScheduler()
        self.history = HistoryLog(max_depth=history_max_depth)
        self.validator = ConflictValidator(self.clock)
        self.export_dir = Path(export_dir) if export_dir else None
        self.view = ViewState.for_day(self.clock.today())
        self.is_loaded = False

        self._operation_lock = threading.RLock()
        self._notifications: list[Notification] = []

        self.reconciler = DragReconciler(
            history=self.history,
            validator=self.validator,
            scheduler=self.scheduler,
            lock=self._operation_lock,
            after_commit=self._after_gesture_commit,
            on_rejected=self._on_gesture_rejected,
            commit_delay=commit_delay,
            resize_debounce=resize_debounce,
            pixels_per_day=pixels_per_day,
        )

    # ===== Lifecycle Methods =====

    def start(self) -> int:
        """Load the persisted collection into present.

        Runs once; later calls are no-ops. A read failure is logged and
        reported as a notification, and the engine starts empty.

        Returns:
            Number of events loaded.
        """
        with self._operation_lock:
            if self.is_loaded:
                return len(self.history.present)
            try:
                loaded = self.repository.load()
            except StorageError as e:
                logger.error(f"Failed to load events, starting empty: {e}", exc_info=True)
                self._notify("error", f"Could not load saved events: {e.message}", "storage_error")
                loaded = ()
            self.history.reset(tuple(loaded))
            self.is_loaded = True
            logger.info(f"Calendar engine started with {len(loaded)} events")
            return len(loaded)

    def shutdown(self) -> None:
        """Cancel any in-flight gesture and stop timers."""
        with self._operation_lock:
            self.reconciler.cancel()
        self.scheduler.shutdown()
        logger.info("Calendar engine shut down")

    # ===== Queries =====

    @property
    def present(self) -> EventCollection:
        return self.history.present

    def get_event(self, event_id: str) -> CalendarEvent:
        """Look up an event.

        Raises:
            EventNotFoundError: If it does not exist.
        """
        return store.get(self.history.present, event_id)

    def list_events(
        self,
        search: Optional[str] = None,
        categories: Optional[list[EventCategory]] = None,
        day: Optional[date] = None,
    ) -> list[CalendarEvent]:
        """List events, optionally filtered by text, category and day."""
        events = store.filter_events(self.history.present, search, categories)
        if day is not None:
            events = [event for event in events if event.occupies(day)]
        return events

    def statistics(self) -> list[dict[str, Any]]:
        return category_statistics(self.history.present)

    def check_placement(self, event_id: str, start: date, end: date) -> PlacementResult:
        """Dry-run the placement rules for moving an event to [start, end].

        Raises:
            EventNotFoundError: If the event does not exist.
            ValueError: If start is after end.
        """
        with self._operation_lock:
            event = store.get(self.history.present, event_id)
            return self.validator.is_valid_placement(
                event, DateRange(start=start, end=end), self.history.present
            )

    # ===== Event Management =====

    def create_event(self, draft: EventDraft, on_date: Optional[date] = None) -> CalendarEvent:
        """Create an event on a day (today when omitted).

        Raises:
            SchedulingValidationError: EMPTY_TITLE, INVALID_TIME_RANGE,
                PAST_DATE, HORIZON_EXCEEDED or TIME_CONFLICT. Nothing is
                mutated in that case.
        """
        with self._operation_lock:
            self._settle_gestures()
            event = store.create(draft, on_date or self.clock.today())
            present = self.history.present
            self.validator.validate_event(event, present).raise_for_rejection()

            self._commit(store.add(present, event))
            logger.info(f"Created event {event.id} '{event.title}' on {event.start_date}")
            self._auto_export()
            return event

    def update_event(self, event_id: str, draft: EventDraft) -> CalendarEvent:
        """Apply edited fields to an existing event.

        The past-date and horizon rules only apply when the edit changes the
        event's dates, so an event that has already started can still have
        its title or description corrected.

        Raises:
            EventNotFoundError: If the event does not exist.
            SchedulingValidationError: If the edited event breaks a rule.
        """
        with self._operation_lock:
            self._settle_gestures()
            present = self.history.present
            existing = store.get(present, event_id)
            updated = store.apply_draft(existing, draft)
            self.validator.validate_event(
                updated, present, check_bounds=updated.date_range != existing.date_range
            ).raise_for_rejection()

            self._commit(store.update(present, updated))
            logger.info(f"Updated event {event_id}")
            self._auto_export()
            return updated

    def delete_event(self, event_id: str) -> bool:
        """Delete an event. Deleting an absent event is a no-op.

        Returns:
            True if an event was removed.
        """
        with self._operation_lock:
            self._settle_gestures()
            present = self.history.present
            if store.find(present, event_id) is None:
                logger.debug(f"Delete of absent event {event_id} ignored")
                return False
            self._commit(store.delete(present, event_id))
            logger.info(f"Deleted event {event_id}")
            return True

    # ===== Gestures =====

    def move_event(self, event_id: str, destination_day: int) -> GestureOutcome:
        """Drop an event on a day of the displayed month."""
        with self._operation_lock:
            return self.reconciler.move(
                event_id, destination_day, self.view.year, self.view.month
            )

    def resize_event(self, event_id: str, edge: ResizeEdge, pixel_delta: float) -> GestureOutcome:
        """Feed one resize delta for an edge of an event."""
        with self._operation_lock:
            return self.reconciler.resize(event_id, edge, pixel_delta)

    def release_resize(self) -> GestureOutcome:
        """Signal the end of a resize gesture."""
        with self._operation_lock:
            return self.reconciler.release_resize()

    def cancel_gesture(self) -> bool:
        with self._operation_lock:
            return self.reconciler.cancel()

    # ===== Undo/Redo =====

    def undo(self) -> dict[str, Any]:
        """Step back one snapshot.

        A drop that is waiting for its settle delay was already accepted,
        so it is committed first and becomes what gets undone. A resize that
        was never released is discarded.

        Returns:
            Dict with "changed" plus the history summary.
        """
        with self._operation_lock:
            self._settle_gestures()
            changed = self.history.undo()
            if changed:
                logger.info("Undo")
                self._persist()
            return {"changed": changed, **self.history.summary()}

    def redo(self) -> dict[str, Any]:
        """Step forward one snapshot.

        Returns:
            Dict with "changed" plus the history summary.
        """
        with self._operation_lock:
            self._settle_gestures()
            changed = self.history.redo()
            if changed:
                logger.info("Redo")
                self._persist()
            return {"changed": changed, **self.history.summary()}

    def handle_shortcut(self, press: KeyPress) -> Optional[dict[str, Any]]:
        """Run the history action bound to a key press.

        Returns:
            The undo/redo result, or None if the key press is not bound.
        """
        action = resolve_shortcut(press)
        if action == ShortcutAction.UNDO:
            return {"action": action.value, **self.undo()}
        if action == ShortcutAction.REDO:
            return {"action": action.value, **self.redo()}
        return None

    def _settle_gestures(self) -> None:
        # Runs before every mutation so a pending drop is validated and
        # committed against the collection it was made on.
        if self.reconciler.state == ManipulationState.DRAGGING:
            self.reconciler.flush_move()
        elif self.reconciler.state == ManipulationState.RESIZING:
            self.reconciler.cancel()

    # ===== Export =====

    def export(self, fmt: ExportFormat) -> bytes:
        """Serialize the present collection."""
        with self._operation_lock:
            snapshot = self.history.present
        return serialize(snapshot, fmt)

    def export_filename(self, fmt: ExportFormat) -> str:
        return export_filename(fmt, self.clock.today())

    # ===== Notifications =====

    def drain_notifications(self) -> list[Notification]:
        """Return and clear pending notifications."""
        with self._operation_lock:
            notes, self._notifications = self._notifications, []
            return notes

    @property
    def pending_notifications(self) -> int:
        return len(self._notifications)

    # ===== Internals =====

    def _commit(self, collection: EventCollection) -> None:
        self.history.commit(collection)
        self._persist()

    def _persist(self) -> None:
        try:
            self.repository.save(self.history.present)
        except StorageError as e:
            # In-memory state stays authoritative; storage is a mirror.
            logger.error(f"Failed to save events: {e}", exc_info=True)
            self._notify("error", f"Changes could not be saved: {e.message}", "storage_error")

    def _auto_export(self) -> None:
        if self.export_dir is None:
            return
        target = self.export_dir / export_filename(ExportFormat.CSV, self.clock.today())
        try:
            self.export_dir.mkdir(parents=True, exist_ok=True)
            target.write_bytes(serialize(self.history.present, ExportFormat.CSV))
        except OSError as e:
            logger.error(f"Auto-export to {target} failed: {e}", exc_info=True)
            self._notify("warning", f"Could not export events: {e}", "export_error")

    def _after_gesture_commit(self, event_id: str) -> None:
        self._persist()

    def _on_gesture_rejected(self, event_id: str, placement: PlacementResult) -> None:
        self._notify("warning", placement.message or "Change was rejected", "rejected")

    def _notify(self, level: str, message: str, kind: Optional[str] = None) -> None:
        self._notifications.append(Notification(level=level, message=message, kind=kind))
