"""Export serializers for the event collection.

serialize() is pure: it consumes a snapshot and returns bytes, never
touching engine state.

- CSV: one row per event with the columns Date, Title, Start Time,
  End Time, Type, Description. Every cell is double-quoted, dates are
  DD/MM/YYYY and Type is the category label.
- JSON: a list of full event records (the same shape storage uses), which
  deserialize_json() reads back.
"""

import csv
import io
import json
from datetime import date
from enum import Enum

from models.event import CalendarEvent
from models.store import EventCollection

CSV_HEADERS = ["Date", "Title", "Start Time", "End Time", "Type", "Description"]


class ExportFormat(str, Enum):
    """Supported export formats."""

    CSV = "csv"
    JSON = "json"

    @property
    def media_type(self) -> str:
        return "text/csv" if self is ExportFormat.CSV else "application/json"


def format_display_date(day: date) -> str:
    """Format a date as DD/MM/YYYY."""
    return day.strftime("%d/%m/%Y")


def _to_csv(collection: EventCollection) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for event in collection:
        writer.writerow(
            [
                format_display_date(event.start_date),
                event.title,
                event.start_time,
                event.end_time,
                event.style.label,
                event.description,
            ]
        )
    return buffer.getvalue()


def _to_json(collection: EventCollection) -> str:
    return json.dumps([event.to_record() for event in collection], indent=2)


def serialize(collection: EventCollection, fmt: ExportFormat) -> bytes:
    """Serialize a collection snapshot.

    Args:
        collection: Events to export.
        fmt: Output format.

    Returns:
        UTF-8 encoded document.
    """
    fmt = ExportFormat(fmt)
    if fmt is ExportFormat.CSV:
        return _to_csv(collection).encode("utf-8")
    return _to_json(collection).encode("utf-8")


def deserialize_json(payload: bytes) -> EventCollection:
    """Read a JSON export back into a collection.

    Raises:
        ValueError: If the payload is not a list of valid event records.
    """
    raw = json.loads(payload.decode("utf-8"))
    if not isinstance(raw, list):
        raise ValueError("Expected a JSON list of events")
    return tuple(CalendarEvent.from_record(record) for record in raw)


def export_filename(fmt: ExportFormat, today: date) -> str:
    """Download filename, e.g. calendar-events-2025-01-15.csv."""
    return f"calendar-events-{today.isoformat()}.{ExportFormat(fmt).value}"
