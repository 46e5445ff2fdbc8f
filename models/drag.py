"""Drag and resize reconciliation.

DragReconciler turns raw gesture input into committed history changes:

- move: an event is dropped on a day of the displayed month. Its length in
  days is preserved, the new range is validated, and on acceptance the
  update is committed, optionally after a short settle delay. A deferred
  commit is validated again against the collection as it is at that moment.
- resize: one edge of an event is dragged by a pixel delta. The delta is
  quantized into whole days, intermediate deltas are debounced so only the
  last one in the window is validated and committed, and a rejected resize
  reverts to the pre-resize event.

Only one manipulation is in flight at a time. Starting any new gesture
cancels whatever is pending, without side effects.
"""

import logging
import math
import threading
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, Field

from models import store
from models.event import CalendarEvent, DateRange
from models.history import HistoryLog
from models.store import EventCollection
from models.timers import TimerHandle, TimerScheduler
from models.validation import ConflictValidator, PlacementResult

logger = logging.getLogger(__name__)

DEFAULT_COMMIT_DELAY = 0.05
DEFAULT_RESIZE_DEBOUNCE = 0.1
DEFAULT_PIXELS_PER_DAY = 50


class ResizeEdge(str, Enum):
    """Which edge of an event is being dragged."""

    START = "start"
    END = "end"


class ManipulationState(str, Enum):
    """In-flight manipulation state of the reconciler."""

    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"


class GestureStatus(str, Enum):
    """What happened to a gesture."""

    COMMITTED = "committed"
    PENDING = "pending"
    REJECTED = "rejected"
    IGNORED = "ignored"
    CANCELLED = "cancelled"


class GestureOutcome(BaseModel):
    """Result of feeding one gesture signal to the reconciler.

    Args:
        status: What happened.
        event_id: The event the gesture targeted.
        event: The committed event, or the pending candidate for PENDING.
        placement: The validation result, when validation ran.
        detail: Short explanation for IGNORED/CANCELLED outcomes.
    """

    status: GestureStatus
    event_id: Optional[str] = None
    event: Optional[CalendarEvent] = None
    placement: Optional[PlacementResult] = None
    detail: Optional[str] = Field(default=None)


@dataclass
class _Pending:
    kind: ManipulationState
    event_id: str
    original: CalendarEvent
    candidate: CalendarEvent
    handle: Optional[TimerHandle] = None
    edge: Optional[ResizeEdge] = None


def quantize_days(pixel_delta: float, pixels_per_day: float) -> int:
    """Convert a pixel displacement into whole days, rounding halves up."""
    return math.floor(pixel_delta / pixels_per_day + 0.5)


class DragReconciler:
    """Validates gesture-driven placements and commits them through HistoryLog.

    Args:
        history: The history log to commit to.
        validator: Placement validator.
        scheduler: Timer source for the settle delay and the resize debounce.
        lock: Lock serializing gestures with other mutations (undo/redo).
        after_commit: Called with the event id after every commit made here.
        on_rejected: Called when a deferred validation (debounced resize or
            settled drop) rejects, since there is no caller left to return the result to.
        commit_delay: Seconds between drop and commit (0 = synchronous).
        resize_debounce: Debounce window for resize deltas (0 = immediate).
        pixels_per_day: Horizontal pixels per calendar day.
    """

    def __init__(
        self,
        history: HistoryLog,
        validator: ConflictValidator,
        scheduler: TimerScheduler,
        lock: Optional[threading.RLock] = None,
        after_commit: Optional[Callable[[str], None]] = None,
        on_rejected: Optional[Callable[[str, PlacementResult], None]] = None,
        commit_delay: float = DEFAULT_COMMIT_DELAY,
        resize_debounce: float = DEFAULT_RESIZE_DEBOUNCE,
        pixels_per_day: float = DEFAULT_PIXELS_PER_DAY,
    ) -> None:
        if pixels_per_day <= 0:
            raise ValueError("pixels_per_day must be positive")
        if commit_delay < 0 or resize_debounce < 0:
            raise ValueError("delays must be non-negative")

        self.history = history
        self.validator = validator
        self.scheduler = scheduler
        self.after_commit = after_commit
        self.on_rejected = on_rejected
        self.commit_delay = commit_delay
        self.resize_debounce = resize_debounce
        self.pixels_per_day = pixels_per_day

        self._lock = lock or threading.RLock()
        self._pending: Optional[_Pending] = None

    # ===== State =====

    @property
    def state(self) -> ManipulationState:
        with self._lock:
            return self._pending.kind if self._pending else ManipulationState.IDLE

    @property
    def pending_event(self) -> Optional[CalendarEvent]:
        """The uncommitted candidate, for previewing an in-flight gesture."""
        with self._lock:
            return self._pending.candidate if self._pending else None

    def describe(self) -> dict:
        """Summarize the in-flight manipulation."""
        with self._lock:
            pending = self._pending
            return {
                "state": (pending.kind if pending else ManipulationState.IDLE).value,
                "event_id": pending.event_id if pending else None,
                "edge": pending.edge.value if pending and pending.edge else None,
                "candidate": pending.candidate.to_record() if pending else None,
            }

    def cancel(self) -> bool:
        """Cancel any pending drag commit or resize without side effects.

        Returns:
            True if something was pending.
        """
        with self._lock:
            pending = self._pending
            if pending is None:
                return False
            if pending.handle is not None:
                pending.handle.cancel()
            self._pending = None
            logger.debug(f"Cancelled pending {pending.kind.value} of {pending.event_id}")
            return True

    # ===== Move =====

    def move(self, event_id: str, destination_day: int, year: int, month: int) -> GestureOutcome:
        """Drop an event on a day of the displayed month.

        The event keeps its length in days: the new end date is the new start
        date plus the original start-to-end distance.

        Args:
            event_id: Event being dragged.
            destination_day: Day of month it was dropped on.
            year: Displayed year.
            month: Displayed month (1-12).

        Returns:
            COMMITTED (synchronous commit), PENDING (commit after the settle
            delay) or REJECTED with the placement result.

        Raises:
            EventNotFoundError: If the event is not in the present collection.
            ValueError: If the destination is not a valid date.
        """
        with self._lock:
            self.cancel()
            present = self.history.present
            event = store.get(present, event_id)

            new_start = date(year, month, destination_day)
            new_end = new_start + timedelta(days=event.duration_days)
            placement = self.validator.is_valid_placement(
                event, DateRange(start=new_start, end=new_end), present
            )
            if not placement.accepted:
                logger.info(f"Rejected move of {event_id} to {new_start}: {placement.message}")
                return GestureOutcome(
                    status=GestureStatus.REJECTED, event_id=event_id, placement=placement
                )

            candidate = event.with_dates(new_start, new_end)
            if self.commit_delay <= 0:
                committed = self._apply(candidate)
                return self._committed_outcome(candidate, placement, committed)

            pending = _Pending(
                kind=ManipulationState.DRAGGING,
                event_id=event_id,
                original=event,
                candidate=candidate,
            )
            pending.handle = self.scheduler.schedule(
                lambda: self._fire_drag(pending), self.commit_delay
            )
            self._pending = pending
            return GestureOutcome(
                status=GestureStatus.PENDING,
                event_id=event_id,
                event=candidate,
                placement=placement,
            )

    def flush_move(self) -> Optional[GestureOutcome]:
        """Commit a pending drag now instead of waiting for the delay.

        Returns:
            None if no drag is pending. Otherwise COMMITTED, REJECTED when
            the drop no longer fits the current collection, or CANCELLED
            when the event was deleted meanwhile.
        """
        with self._lock:
            pending = self._pending
            if pending is None or pending.kind != ManipulationState.DRAGGING:
                return None
            if pending.handle is not None:
                pending.handle.cancel()
            return self._flush_drag(pending)

    def _fire_drag(self, pending: _Pending) -> None:
        with self._lock:
            if self._pending is not pending:
                return
            self._flush_drag(pending)

    def _flush_drag(self, pending: _Pending) -> GestureOutcome:
        # The collection may have changed since the drop.
        self._pending = None
        present = self.history.present
        current = store.find(present, pending.event_id)
        if current is None:
            logger.warning(f"Dropping gesture commit: event {pending.event_id} no longer exists")
            return self._committed_outcome(pending.candidate, None, committed=False)

        candidate = current.with_dates(pending.candidate.start_date, pending.candidate.end_date)
        placement = self.validator.is_valid_placement(candidate, candidate.date_range, present)
        if not placement.accepted:
            logger.info(
                f"Rejected deferred move of {pending.event_id}: {placement.message}"
            )
            if self.on_rejected is not None:
                self.on_rejected(pending.event_id, placement)
            return GestureOutcome(
                status=GestureStatus.REJECTED,
                event_id=pending.event_id,
                event=current,
                placement=placement,
            )

        committed = self._apply(candidate)
        return self._committed_outcome(candidate, placement, committed)

    # ===== Resize =====

    def resize(self, event_id: str, edge: ResizeEdge, pixel_delta: float) -> GestureOutcome:
        """Feed one resize delta for an edge of an event.

        pixel_delta is the cumulative displacement since the gesture began
        (positive = later). Deltas are measured from the pre-resize event, so
        only the most recent one matters.

        Returns:
            PENDING with the candidate while debouncing, IGNORED for a zero
            step or a step that would make start >= end, or the final
            outcome when debouncing is disabled.

        Raises:
            EventNotFoundError: If the event is not in the present collection.
        """
        edge = ResizeEdge(edge)
        with self._lock:
            pending = self._pending
            same_gesture = (
                pending is not None
                and pending.kind == ManipulationState.RESIZING
                and pending.event_id == event_id
                and pending.edge == edge
            )
            if not same_gesture:
                self.cancel()
                pending = None
                original = store.get(self.history.present, event_id)
            else:
                original = pending.original

            day_delta = quantize_days(pixel_delta, self.pixels_per_day)
            if day_delta == 0:
                if pending is not None:
                    self.cancel()
                return GestureOutcome(
                    status=GestureStatus.IGNORED,
                    event_id=event_id,
                    event=original,
                    detail="Delta below one day",
                )

            new_start, new_end = original.start_date, original.end_date
            if edge == ResizeEdge.START:
                new_start = new_start + timedelta(days=day_delta)
            else:
                new_end = new_end + timedelta(days=day_delta)

            if new_start >= new_end:
                return GestureOutcome(
                    status=GestureStatus.IGNORED,
                    event_id=event_id,
                    event=pending.candidate if pending else original,
                    detail="Start date must stay before end date",
                )

            candidate = original.with_dates(new_start, new_end)
            if pending is not None and pending.handle is not None:
                pending.handle.cancel()

            pending = _Pending(
                kind=ManipulationState.RESIZING,
                event_id=event_id,
                original=original,
                candidate=candidate,
                edge=edge,
            )
            self._pending = pending

            if self.resize_debounce <= 0:
                return self._flush_resize(pending)

            pending.handle = self.scheduler.schedule(
                lambda: self._fire_resize(pending), self.resize_debounce
            )
            return GestureOutcome(
                status=GestureStatus.PENDING, event_id=event_id, event=candidate
            )

    def release_resize(self) -> GestureOutcome:
        """Gesture release: validate and commit the pending resize now."""
        with self._lock:
            pending = self._pending
            if pending is None or pending.kind != ManipulationState.RESIZING:
                return GestureOutcome(status=GestureStatus.IGNORED, detail="No resize in progress")
            if pending.handle is not None:
                pending.handle.cancel()
            return self._flush_resize(pending)

    def _fire_resize(self, pending: _Pending) -> None:
        with self._lock:
            if self._pending is not pending:
                return
            self._flush_resize(pending)

    def _flush_resize(self, pending: _Pending) -> GestureOutcome:
        self._pending = None
        candidate = pending.candidate
        placement = self.validator.is_valid_placement(
            candidate, candidate.date_range, self.history.present
        )
        if not placement.accepted:
            logger.info(
                f"Rejected resize of {pending.event_id}, reverting: {placement.message}"
            )
            if self.on_rejected is not None:
                self.on_rejected(pending.event_id, placement)
            return GestureOutcome(
                status=GestureStatus.REJECTED,
                event_id=pending.event_id,
                event=pending.original,
                placement=placement,
            )

        committed = self._apply(candidate)
        return self._committed_outcome(candidate, placement, committed)

    # ===== Commit =====

    def _apply(self, candidate: CalendarEvent) -> bool:
        present: EventCollection = self.history.present
        if store.find(present, candidate.id) is None:
            logger.warning(f"Dropping gesture commit: event {candidate.id} no longer exists")
            return False
        self.history.commit(store.update(present, candidate))
        logger.info(
            f"Committed {candidate.id} at {candidate.start_date}..{candidate.end_date}"
        )
        if self.after_commit is not None:
            self.after_commit(candidate.id)
        return True

    @staticmethod
    def _committed_outcome(
        candidate: CalendarEvent, placement: Optional[PlacementResult], committed: bool
    ) -> GestureOutcome:
        if committed:
            return GestureOutcome(
                status=GestureStatus.COMMITTED,
                event_id=candidate.id,
                event=candidate,
                placement=placement,
            )
        return GestureOutcome(
            status=GestureStatus.CANCELLED,
            event_id=candidate.id,
            detail="Event no longer exists",
        )
