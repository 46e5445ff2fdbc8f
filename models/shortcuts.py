"""Keyboard shortcut mapping for history navigation."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ShortcutAction(str, Enum):
    """History actions reachable from the keyboard."""

    UNDO = "undo"
    REDO = "redo"


class KeyPress(BaseModel):
    """A key press with its modifier state.

    Args:
        key: The key value (e.g. "z").
        ctrl: Control held.
        meta: Command/Meta held.
        shift: Shift held.
    """

    key: str = Field(description="Key value")
    ctrl: bool = False
    meta: bool = False
    shift: bool = False


def resolve_shortcut(press: KeyPress) -> Optional[ShortcutAction]:
    """Map a key press to a history action.

    Ctrl/Cmd+Z undoes, Ctrl/Cmd+Shift+Z and Ctrl/Cmd+Y redo. Anything else
    returns None.
    """
    if not (press.ctrl or press.meta):
        return None

    key = press.key.lower()
    if key == "z":
        return ShortcutAction.REDO if press.shift else ShortcutAction.UNDO
    if key == "y" and not press.shift:
        return ShortcutAction.REDO
    return None
