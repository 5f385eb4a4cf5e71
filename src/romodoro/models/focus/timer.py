"""Countdown engine for a single focus/rest split."""

from dataclasses import dataclass
from enum import Enum


class Phase(str, Enum):
    """Which half of a split is counting down."""

    FOCUS = "focus"
    REST = "rest"


class TickResult(str, Enum):
    """Outcome of delivering one tick."""

    CONTINUE = "continue"
    PHASE_ADVANCED = "phase_advanced"
    SPLIT_COMPLETE = "split_complete"


@dataclass
class TimerEngine:
    """Logical countdown for the active split.

    Each ``tick()`` is one second of logical time, regardless of how much
    wall-clock time passed. The engine is a counter consulted by the
    controller: it never suppresses ticks itself while paused, and it never
    touches storage.
    """

    focus_minutes: int = 0
    rest_minutes: int = 0
    phase: Phase = Phase.FOCUS
    total_seconds: int = 0
    remaining_seconds: int = 0
    paused: bool = False
    elapsed_focus_seconds: int = 0
    elapsed_rest_seconds: int = 0
    running: bool = False

    def start(self, focus_minutes: int, rest_minutes: int) -> None:
        """Begin the focus phase of a new split."""
        self.focus_minutes = focus_minutes
        self.rest_minutes = rest_minutes
        self.phase = Phase.FOCUS
        self.total_seconds = focus_minutes * 60
        self.remaining_seconds = self.total_seconds
        self.paused = False
        self.elapsed_focus_seconds = 0
        self.elapsed_rest_seconds = 0
        self.running = True

    def tick(self) -> TickResult:
        """Advance one logical second."""
        if not self.running:
            raise RuntimeError("Timer is not running")

        self.remaining_seconds -= 1
        if self.remaining_seconds > 0:
            return TickResult.CONTINUE

        if self.phase == Phase.FOCUS:
            # The full planned focus duration was consumed
            self.elapsed_focus_seconds = self.total_seconds
            self.phase = Phase.REST
            self.total_seconds = self.rest_minutes * 60
            self.remaining_seconds = self.total_seconds
            return TickResult.PHASE_ADVANCED

        self.elapsed_rest_seconds = self.total_seconds
        self.running = False
        return TickResult.SPLIT_COMPLETE

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def progress(self) -> float:
        """Fraction of the current phase consumed; an empty phase counts as done."""
        if self.total_seconds <= 0:
            return 1.0
        consumed = self.total_seconds - max(0, self.remaining_seconds)
        return min(1.0, max(0.0, consumed / self.total_seconds))

    def elapsed_seconds(self) -> tuple[int, int]:
        """Actual (focus, rest) seconds accrued so far.

        Reaching the rest phase means the whole focus phase was consumed.
        """
        consumed = max(0, self.total_seconds - max(0, self.remaining_seconds))
        if self.phase == Phase.FOCUS:
            return consumed, 0
        return self.focus_minutes * 60, consumed

    def reset(self) -> None:
        """Discard all runtime state."""
        self.focus_minutes = 0
        self.rest_minutes = 0
        self.phase = Phase.FOCUS
        self.total_seconds = 0
        self.remaining_seconds = 0
        self.paused = False
        self.elapsed_focus_seconds = 0
        self.elapsed_rest_seconds = 0
        self.running = False
