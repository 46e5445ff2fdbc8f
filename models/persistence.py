"""Persistence collaborators for the event collection.

The engine treats storage as an opaque put/get of the whole collection:
``save`` after every committed mutation, ``load`` once at startup. Storage
is a mirror of the in-memory state, so a failed save is reported but never
undoes the mutation that triggered it.

- EventRepository: abstract save/load
- InMemoryRepository: keeps the last saved snapshot in memory
- JsonFileRepository: writes camelCase event records to a JSON file
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from models.errors import StorageError
from models.event import CalendarEvent
from models.store import EventCollection

logger = logging.getLogger(__name__)


class EventRepository(ABC):
    """Durable storage for the event collection."""

    @abstractmethod
    def save(self, collection: EventCollection) -> None:
        """Store the whole collection, replacing what was stored before.

        Raises:
            StorageError: If the write fails.
        """

    @abstractmethod
    def load(self) -> EventCollection:
        """Load the stored collection (empty if nothing has been stored).

        Raises:
            StorageError: If stored data exists but cannot be read.
        """


class InMemoryRepository(EventRepository):
    """Repository that keeps the last saved collection in memory.

    Args:
        initial: Collection returned by load() before the first save.
    """

    def __init__(self, initial: Optional[EventCollection] = None) -> None:
        self._stored: EventCollection = tuple(initial or ())
        self.save_count = 0

    def save(self, collection: EventCollection) -> None:
        self._stored = tuple(collection)
        self.save_count += 1

    def load(self) -> EventCollection:
        return self._stored


class JsonFileRepository(EventRepository):
    """Repository backed by a JSON file of event records.

    Writes go to a temporary file in the same directory which is then
    renamed over the target, so a crash mid-write leaves the previous file
    intact.

    Args:
        path: Location of the JSON file. Parent directories are created on
            first save.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def save(self, collection: EventCollection) -> None:
        records = [event.to_record() for event in collection]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(records, f, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to save events to {self.path}: {e}", cause=e) from e

        logger.debug(f"Saved {len(records)} events to {self.path}")

    def load(self) -> EventCollection:
        if not self.path.exists():
            return ()

        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read events from {self.path}: {e}", cause=e) from e

        if not isinstance(raw, list):
            raise StorageError(f"Expected a list of events in {self.path}")

        try:
            events = tuple(CalendarEvent.from_record(record) for record in raw)
        except (ValidationError, TypeError, AttributeError) as e:
            raise StorageError(f"Invalid event record in {self.path}: {e}", cause=e) from e

        logger.info(f"Loaded {len(events)} events from {self.path}")
        return events
