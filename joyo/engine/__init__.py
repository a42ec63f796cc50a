"""
Session engine: owned session context and the input action table.
"""

from .context import SessionContext, advance, open_stats, return_home, select_option_at, start_session
from .dispatcher import (
    ACTION_TABLE,
    POINTER_BINDINGS,
    Action,
    ActionDispatcher,
    Command,
    Control,
    enable_gesture_mode,
    resolve,
)

__all__ = [
    "ACTION_TABLE",
    "POINTER_BINDINGS",
    "Action",
    "ActionDispatcher",
    "Command",
    "Control",
    "SessionContext",
    "advance",
    "enable_gesture_mode",
    "open_stats",
    "resolve",
    "return_home",
    "select_option_at",
    "start_session",
]
