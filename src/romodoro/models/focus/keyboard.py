"""Keyboard input for the interactive timer.

``KeyboardHandler`` reads single keypresses without blocking;
``KeyMapper`` turns them into controller intents for the current state.
"""

import select
import sys
import termios
import tty
from typing import Optional

from .controller import AppState, Intent

ENTER_KEYS = ("\r", "\n")
BACKSPACE_KEYS = ("\x7f", "\b")
ESCAPE_SEQUENCES = {
    "[A": "up",
    "[B": "down",
}

# Focus/rest entries are at most three digits
MAX_INPUT_LENGTH = 3

QUIT_KEYS = ("q", "\x03")

KEY_BINDINGS: dict[AppState, dict[str, Intent]] = {
    AppState.MAIN_MENU: {
        "1": Intent.CONTINUE_LAST,
        "2": Intent.BROWSE,
        "3": Intent.NEW_SESSION,
    },
    AppState.TIMER_SETUP: {
        "m": Intent.MAIN_MENU,
    },
    AppState.RUNNING: {
        "p": Intent.PAUSE,
        "b": Intent.BACK,
        "m": Intent.MAIN_MENU,
    },
    AppState.PAUSED: {
        "s": Intent.RESUME,
        "c": Intent.RESUME,
        "b": Intent.BACK,
        "m": Intent.MAIN_MENU,
    },
    AppState.BROWSER: {
        "up": Intent.UP,
        "k": Intent.UP,
        "down": Intent.DOWN,
        "j": Intent.DOWN,
        "x": Intent.DELETE,
        "b": Intent.BACK,
        "m": Intent.MAIN_MENU,
    },
}


class KeyboardHandler:
    """Non-blocking keyboard input handler."""

    def __init__(self):
        self.fd = sys.stdin.fileno()
        self.old_settings = None
        self._setup()

    def _setup(self):
        """Setup terminal for non-blocking input."""
        try:
            self.old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except (termios.error, OSError):
            # Not a TTY (pipes, CI)
            self.old_settings = None

    def _ready(self, timeout: float = 0) -> bool:
        return bool(select.select([sys.stdin], [], [], timeout)[0])

    def get_key(self, timeout: float = 0) -> Optional[str]:
        """
        Get a single keypress, waiting at most *timeout* seconds.

        Arrow keys are returned as ``"up"``/``"down"``; other keys as their
        lower-cased character. Returns None if no key was pressed.
        """
        try:
            if not self._ready(timeout):
                return None
            key = sys.stdin.read(1)
            if key == "\x1b" and self._ready(0.01):
                sequence = sys.stdin.read(2)
                return ESCAPE_SEQUENCES.get(sequence)
            return key.lower()
        except (OSError, ValueError):
            return None

    def stop(self):
        """Restore terminal settings."""
        if self.old_settings:
            try:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
            except termios.error:
                pass


class KeyMapper:
    """Maps raw keys to intents, buffering digits typed during timer setup."""

    def __init__(self):
        self.buffer = ""

    def clear(self) -> None:
        self.buffer = ""

    def map_key(
        self, state: AppState, key: str | None
    ) -> tuple[Intent, str | None] | None:
        """Translate *key* for *state*; None when the key has no meaning there."""
        if key is None:
            return None
        if key in QUIT_KEYS:
            return Intent.QUIT, None

        if state == AppState.TIMER_SETUP:
            if key in ENTER_KEYS:
                value, self.buffer = self.buffer, ""
                return Intent.SUBMIT, value
            if key in BACKSPACE_KEYS:
                self.buffer = self.buffer[:-1]
                return None
            if key.isdigit() and len(key) == 1:
                if len(self.buffer) < MAX_INPUT_LENGTH:
                    self.buffer += key
                return None

        intent = KEY_BINDINGS.get(state, {}).get(key)
        if intent is None:
            return None
        if state == AppState.TIMER_SETUP:
            self.clear()
        return intent, None
