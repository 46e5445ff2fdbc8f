"""Centralized configuration.

Loads settings from the environment (and a .env file in the project root,
if present) and validates them with pydantic.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

_ENV_PATH = Path(__file__).resolve().parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables.

    Args:
        storage_path: JSON file the event collection is mirrored to.
        auto_export_dir: Directory for CSV snapshots after edits (None disables).
        drag_commit_delay: Seconds between a drop and its commit.
        resize_debounce: Debounce window for resize deltas, in seconds.
        pixels_per_day: Resize sensitivity.
        history_max_depth: Cap on undo/redo depth (None = unlimited).
        log_level: Root logging level.
    """

    storage_path: Path = Field(default=Path("data/calendar_events.json"))
    auto_export_dir: Optional[Path] = None
    drag_commit_delay: float = Field(default=0.05, ge=0)
    resize_debounce: float = Field(default=0.1, ge=0)
    pixels_per_day: float = Field(default=50.0, gt=0)
    history_max_depth: Optional[int] = Field(default=None, gt=0)
    log_level: str = "INFO"

    @field_validator("auto_export_dir", "history_max_depth", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


def load_settings() -> Settings:
    """Build Settings from CALENDAR_* environment variables.

    Raises:
        pydantic.ValidationError: If a variable holds an invalid value.
    """
    return Settings(
        storage_path=os.getenv("CALENDAR_STORAGE_PATH", "data/calendar_events.json"),
        auto_export_dir=os.getenv("CALENDAR_AUTO_EXPORT_DIR", ""),
        drag_commit_delay=os.getenv("CALENDAR_DRAG_COMMIT_DELAY", "0.05"),
        resize_debounce=os.getenv("CALENDAR_RESIZE_DEBOUNCE", "0.1"),
        pixels_per_day=os.getenv("CALENDAR_PIXELS_PER_DAY", "50"),
        history_max_depth=os.getenv("CALENDAR_HISTORY_MAX_DEPTH", ""),
        log_level=os.getenv("CALENDAR_LOG_LEVEL", "INFO"),
    )
