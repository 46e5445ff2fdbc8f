"""Undo/redo history over event collection snapshots.

This module provides:
- HistoryState: immutable value holding past snapshots, the present
  collection and undone (future) snapshots
- HistoryAction / reduce(): the single update function over HistoryState
- HistoryLog: owner of the current HistoryState with an optional depth cap

History is linear: committing after an undo discards every future entry
(a new timeline), there is no branching.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from models.event import CalendarEvent
from models.store import EventCollection


class HistoryAction(str, Enum):
    """Transitions understood by reduce()."""

    COMMIT = "commit"
    UNDO = "undo"
    REDO = "redo"
    RESET = "reset"


class HistoryState(BaseModel):
    """Snapshot history around the present collection.

    Args:
        past: Earlier snapshots, oldest first.
        present: The current collection.
        future: Undone snapshots, nearest-undone first.
    """

    model_config = {"frozen": True}

    past: tuple[EventCollection, ...] = Field(
        default=(), description="Earlier snapshots, oldest first"
    )
    present: EventCollection = Field(default=(), description="Current collection")
    future: tuple[EventCollection, ...] = Field(
        default=(), description="Undone snapshots, nearest first"
    )

    @property
    def can_undo(self) -> bool:
        return len(self.past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self.future) > 0


def reduce(
    state: HistoryState,
    action: HistoryAction,
    collection: Optional[EventCollection] = None,
    max_depth: Optional[int] = None,
) -> HistoryState:
    """Apply one history transition and return the new state.

    Args:
        state: Current history.
        action: Which transition to apply.
        collection: New present for COMMIT and RESET.
        max_depth: Optional cap on past/future length; oldest entries drop.

    Returns:
        The new HistoryState. UNDO with empty past and REDO with empty
        future return state unchanged.
        Snapshots are already validated events, so the new state is built
        without re-validating them.

    Raises:
        ValueError: If COMMIT/RESET is given no collection.
    """
    if action in (HistoryAction.COMMIT, HistoryAction.RESET) and collection is None:
        raise ValueError(f"{action.value} requires a collection")

    if action == HistoryAction.COMMIT:
        past = (*state.past, state.present)
        if max_depth is not None and len(past) > max_depth:
            past = past[-max_depth:]
        return HistoryState.model_construct(past=past, present=tuple(collection), future=())

    if action == HistoryAction.UNDO:
        if not state.past:
            return state
        future = (state.present, *state.future)
        if max_depth is not None and len(future) > max_depth:
            future = future[:max_depth]
        return HistoryState.model_construct(
            past=state.past[:-1], present=state.past[-1], future=future
        )

    if action == HistoryAction.REDO:
        if not state.future:
            return state
        past = (*state.past, state.present)
        if max_depth is not None and len(past) > max_depth:
            past = past[-max_depth:]
        return HistoryState.model_construct(
            past=past, present=state.future[0], future=state.future[1:]
        )

    if action == HistoryAction.RESET:
        return HistoryState.model_construct(
            past=state.past, present=tuple(collection), future=state.future
        )

    raise ValueError(f"Unknown history action: {action}")


class HistoryLog(BaseModel):
    """Owns the current HistoryState.

    The log is the single source of truth for the event collection; other
    components read ``present`` from it rather than keeping copies.

    Args:
        state: Current history state.
        max_depth: Maximum number of past (and future) snapshots to keep
            (None = unlimited).

    Examples:
        log = HistoryLog()
        log.commit((event_a,))
        log.commit((event_a, event_b))
        log.undo()      # present == (event_a,)
        log.redo()      # present == (event_a, event_b)
    """

    state: HistoryState = Field(default_factory=HistoryState)
    max_depth: Optional[int] = Field(
        default=None,
        description="Maximum snapshots kept on each side (None = unlimited)",
    )

    @field_validator("max_depth")
    @classmethod
    def validate_max_depth(cls, v: Optional[int]) -> Optional[int]:
        """Validate that max_depth is positive if provided."""
        if v is not None and v <= 0:
            raise ValueError("max_depth must be positive")
        return v

    @property
    def present(self) -> EventCollection:
        return self.state.present

    @property
    def can_undo(self) -> bool:
        return self.state.can_undo

    @property
    def can_redo(self) -> bool:
        return self.state.can_redo

    @property
    def undo_depth(self) -> int:
        return len(self.state.past)

    @property
    def redo_depth(self) -> int:
        return len(self.state.future)

    def commit(self, collection: EventCollection) -> None:
        """Make collection the present, recording the previous present.

        Unconditional: the caller has already validated the mutation.
        Clears the redo future.
        """
        self.state = reduce(self.state, HistoryAction.COMMIT, collection, self.max_depth)

    def undo(self) -> bool:
        """Step back one snapshot.

        Returns:
            True if something was undone, False if past was empty.
        """
        if not self.state.can_undo:
            return False
        self.state = reduce(self.state, HistoryAction.UNDO, max_depth=self.max_depth)
        return True

    def redo(self) -> bool:
        """Step forward one snapshot.

        Returns:
            True if something was redone, False if future was empty.
        """
        if not self.state.can_redo:
            return False
        self.state = reduce(self.state, HistoryAction.REDO, max_depth=self.max_depth)
        return True

    def reset(self, collection: EventCollection) -> None:
        """Replace present without recording history (used for the initial load)."""
        self.state = reduce(self.state, HistoryAction.RESET, collection)

    def clear(self) -> None:
        """Drop past and future, keeping present."""
        self.state = HistoryState(present=self.state.present)

    def summary(self) -> dict[str, Any]:
        """Summarize depths and the sizes of the adjacent snapshots."""
        return {
            "can_undo": self.can_undo,
            "can_redo": self.can_redo,
            "undo_depth": self.undo_depth,
            "redo_depth": self.redo_depth,
            "present_count": len(self.state.present),
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert the history to a JSON-compatible dictionary."""
        return {
            "past": [[e.to_record() for e in snap] for snap in self.state.past],
            "present": [e.to_record() for e in self.state.present],
            "future": [[e.to_record() for e in snap] for snap in self.state.future],
            "max_depth": self.max_depth,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryLog":
        """Create a HistoryLog from a dictionary produced by to_dict()."""

        def snapshot(records: list[dict]) -> EventCollection:
            return tuple(CalendarEvent.from_record(r) for r in records)

        return cls(
            state=HistoryState(
                past=tuple(snapshot(s) for s in data.get("past", [])),
                present=snapshot(data.get("present", [])),
                future=tuple(snapshot(s) for s in data.get("future", [])),
            ),
            max_depth=data.get("max_depth"),
        )
