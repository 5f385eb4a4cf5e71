"""Focus mode - split timer, session controller and terminal UI."""

from .controller import (
    AppState,
    ControllerSnapshot,
    Intent,
    SessionController,
    SetupStep,
    generate_session_name,
    parse_minutes,
)
from .keyboard import KeyboardHandler, KeyMapper
from .notifier import BellNotifier
from .timer import Phase, TickResult, TimerEngine
from .ui import TimerDisplay, show_goodbye_message

__all__ = [
    "AppState",
    "BellNotifier",
    "ControllerSnapshot",
    "Intent",
    "KeyboardHandler",
    "KeyMapper",
    "Phase",
    "SessionController",
    "SetupStep",
    "TickResult",
    "TimerDisplay",
    "TimerEngine",
    "generate_session_name",
    "parse_minutes",
    "show_goodbye_message",
]
