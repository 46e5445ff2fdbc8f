"""Shared test fixtures and factory helpers."""

from tests.fixtures.engine import FIXED_NOW, TODAY, FailingRepository, create_engine
from tests.fixtures.events import MEETING_EVENT, SIMPLE_EVENT, create_draft, create_event

__all__ = [
    "FIXED_NOW",
    "TODAY",
    "FailingRepository",
    "create_engine",
    "MEETING_EVENT",
    "SIMPLE_EVENT",
    "create_draft",
    "create_event",
]
