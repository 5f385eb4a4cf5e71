"""Session controller: the state machine behind the interactive timer.

The controller receives user intents and tick signals, drives the
``TimerEngine`` and issues ``SessionStore`` calls. It is the only bridge
between the two; rendering reads ``snapshot()`` after each transition.

States::

    MAIN_MENU --continue/new--> TIMER_SETUP(focus) --submit--> TIMER_SETUP(rest)
    TIMER_SETUP(rest) --submit--> RUNNING <--pause/resume--> PAUSED
    RUNNING/PAUSED --back--> TIMER_SETUP(focus)     (split cancelled)
    RUNNING/PAUSED --menu--> MAIN_MENU              (split cancelled)
    RUNNING --tick, split complete--> TIMER_SETUP(focus)
    MAIN_MENU --browse--> BROWSER --back/menu--> MAIN_MENU

Storage errors never escape a transition: they are logged, recorded in
``last_error`` and the controller falls back to a safe state.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from romodoro.models import PomodoroSplit, Session, SplitStatus
from romodoro.models.focus.timer import Phase, TickResult, TimerEngine
from romodoro.repositories import SessionStore

logger = logging.getLogger(__name__)

DEFAULT_SESSION_NAME_FORMAT = "Session_%Y-%m-%d_%H-%M-%S"


class AppState(str, Enum):
    MAIN_MENU = "main_menu"
    TIMER_SETUP = "timer_setup"
    RUNNING = "running"
    PAUSED = "paused"
    BROWSER = "browser"


class SetupStep(str, Enum):
    FOCUS = "focus"
    REST = "rest"


class Intent(str, Enum):
    """Discrete user intents produced by the input layer."""

    CONTINUE_LAST = "continue_last"
    BROWSE = "browse"
    NEW_SESSION = "new_session"
    SUBMIT = "submit"
    BACK = "back"
    MAIN_MENU = "main_menu"
    PAUSE = "pause"
    RESUME = "resume"
    UP = "up"
    DOWN = "down"
    DELETE = "delete"
    QUIT = "quit"


@dataclass(frozen=True)
class ControllerSnapshot:
    """Read-only view of the controller for the rendering layer."""

    state: AppState
    setup_step: SetupStep
    pending_focus_minutes: int | None
    input_error: str | None
    session: Session | None
    split: PomodoroSplit | None
    phase: Phase
    remaining_seconds: int
    total_seconds: int
    progress: float
    paused: bool
    sessions: tuple[Session, ...]
    selected_index: int
    last_error: str | None
    finished: bool


def parse_minutes(value: str | None, *, allow_zero: bool) -> int | None:
    """Parse a minutes entry; None when it is not an integer in range."""
    try:
        minutes = int((value or "").strip())
    except ValueError:
        return None
    if minutes < 0 or (minutes == 0 and not allow_zero):
        return None
    return minutes


def generate_session_name(
    now: datetime | None = None, fmt: str = DEFAULT_SESSION_NAME_FORMAT
) -> str:
    """Timestamp-derived session name, e.g. ``Session_2024-01-31_09-15-00``."""
    return (now or datetime.now()).strftime(fmt)


class SessionController:
    """Drives one user's sessions through setup, countdown and browsing.

    Args:
        store: Persistence port, injected by the composition root.
        engine: Countdown engine; a fresh one is created when omitted.
        on_phase_complete: Called with the finished ``Phase`` each time a
            phase runs out (twice per completed split).
        name_factory: Produces names for new sessions.
        clock: Returns the current time for split end stamps.
    """

    def __init__(
        self,
        store: SessionStore,
        engine: TimerEngine | None = None,
        on_phase_complete: Callable[[Phase], None] | None = None,
        name_factory: Callable[[], str] = generate_session_name,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self.store = store
        self.engine = engine or TimerEngine()
        self.on_phase_complete = on_phase_complete
        self.name_factory = name_factory
        self.clock = clock

        self.state = AppState.MAIN_MENU
        self.setup_step = SetupStep.FOCUS
        self.pending_focus_minutes: int | None = None
        self.input_error: str | None = None

        self.session: Session | None = None
        self.split: PomodoroSplit | None = None

        self.sessions: list[Session] = []
        self.selected_index = 0

        self.last_error: str | None = None
        self.finished = False

        self._handlers = {
            AppState.MAIN_MENU: self._on_main_menu,
            AppState.TIMER_SETUP: self._on_timer_setup,
            AppState.RUNNING: self._on_running,
            AppState.PAUSED: self._on_paused,
            AppState.BROWSER: self._on_browser,
        }

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def dispatch(self, intent: Intent, value: str | None = None) -> AppState:
        """Process one intent to completion and return the new state.

        Intents with no meaning in the current state are ignored.
        """
        if self.finished:
            return self.state

        self.last_error = None
        if intent == Intent.QUIT:
            self.shutdown()
            return self.state

        self._handlers[self.state](intent, value)
        return self.state

    def tick(self) -> TickResult | None:
        """Deliver one tick; ignored unless a split is running unpaused."""
        if self.finished or self.state != AppState.RUNNING or self.engine.paused:
            return None
        if self.split is None:
            return None

        result = self.engine.tick()
        if result == TickResult.PHASE_ADVANCED:
            self.split = self.split.model_copy(
                update={"actual_focus_seconds": self.engine.elapsed_focus_seconds}
            )
            self._notify(Phase.FOCUS)
        elif result == TickResult.SPLIT_COMPLETE:
            self._notify(Phase.REST)
            self.finalize_split("completed")
            self._enter_setup()
        return result

    def shutdown(self) -> None:
        """Quit: cancel any active split and close the current session."""
        if self.finished:
            return
        if self.split is not None:
            self.finalize_split("cancelled")
        if self.session is not None:
            try:
                self.store.close_session(self.session.id)
            except sqlite3.Error as e:
                logger.error("failed to close session %d: %s", self.session.id, e)
                self.last_error = f"Could not close session: {e}"
        self.finished = True
        logger.info("controller shut down")

    def snapshot(self) -> ControllerSnapshot:
        return ControllerSnapshot(
            state=self.state,
            setup_step=self.setup_step,
            pending_focus_minutes=self.pending_focus_minutes,
            input_error=self.input_error,
            session=self.session,
            split=self.split,
            phase=self.engine.phase,
            remaining_seconds=max(0, self.engine.remaining_seconds),
            total_seconds=self.engine.total_seconds,
            progress=self.engine.progress(),
            paused=self.engine.paused,
            sessions=tuple(self.sessions),
            selected_index=self.selected_index,
            last_error=self.last_error,
            finished=self.finished,
        )

    # ------------------------------------------------------------------
    # Split finalization
    # ------------------------------------------------------------------

    def finalize_split(self, status: SplitStatus) -> PomodoroSplit | None:
        """Write the active split's terminal status once, then refresh totals.

        Completed splits record the engine's full phase durations; cancelled
        splits record whatever had accrued at the moment of interruption.
        The split and engine state are discarded afterwards whatever the
        outcome of the writes.
        """
        split = self.split
        if split is None or split.is_terminal:
            return None

        if status == "completed":
            focus_seconds = self.engine.elapsed_focus_seconds
            rest_seconds = self.engine.elapsed_rest_seconds
        else:
            focus_seconds, rest_seconds = self.engine.elapsed_seconds()

        final = split.model_copy(
            update={
                "end_time": self.clock(),
                "status": status,
                "actual_focus_seconds": min(focus_seconds, split.planned_focus_seconds),
                "actual_rest_seconds": min(rest_seconds, split.planned_rest_seconds),
            }
        )

        try:
            self.store.update_pomodoro_split(final)
        except sqlite3.Error as e:
            logger.error("failed to finalize split %d as %s: %s", split.id, status, e)
            self.last_error = f"Could not save split: {e}"
        else:
            logger.info(
                "split %d %s: focus=%ds rest=%ds",
                final.id,
                status,
                final.actual_focus_seconds,
                final.actual_rest_seconds,
            )
            self._refresh_session()
        finally:
            self.split = None
            self.engine.reset()

        return final

    def _refresh_session(self) -> None:
        """Best-effort totals refresh; stale totals are kept on failure."""
        if self.session is None:
            return
        try:
            self.store.update_session_totals(self.session.id)
            refreshed = self.store.get_session(self.session.id)
        except sqlite3.Error as e:
            logger.warning("failed to refresh session %d totals: %s", self.session.id, e)
            return
        if refreshed is not None:
            self.session = refreshed

    def _notify(self, phase: Phase) -> None:
        if self.on_phase_complete is not None:
            self.on_phase_complete(phase)

    # ------------------------------------------------------------------
    # State handlers
    # ------------------------------------------------------------------

    def _on_main_menu(self, intent: Intent, value: str | None) -> None:
        if intent == Intent.CONTINUE_LAST:
            try:
                session = self.store.get_last_session()
            except sqlite3.Error as e:
                self._storage_failure("load the last session", e)
                return
            if session is None:
                self._start_new_session()
                return
            self.session = session
            logger.info("continuing session %d", session.id)
            self._enter_setup()
        elif intent == Intent.NEW_SESSION:
            self._start_new_session()
        elif intent == Intent.BROWSE:
            self._load_browser(reset_selection=True)

    def _on_timer_setup(self, intent: Intent, value: str | None) -> None:
        if intent in (Intent.BACK, Intent.MAIN_MENU):
            self._reset_setup()
            self.state = AppState.MAIN_MENU
            return
        if intent != Intent.SUBMIT:
            return

        if self.setup_step == SetupStep.FOCUS:
            minutes = parse_minutes(value, allow_zero=False)
            if minutes is None:
                self.input_error = "Invalid focus time. Enter a whole number of minutes above 0."
                return
            self.pending_focus_minutes = minutes
            self.setup_step = SetupStep.REST
            self.input_error = None
            return

        rest_minutes = parse_minutes(value, allow_zero=True)
        if rest_minutes is None:
            self.input_error = "Invalid rest time. Enter a whole number of minutes (0 or more)."
            return
        self._start_split(self.pending_focus_minutes, rest_minutes)

    def _on_running(self, intent: Intent, value: str | None) -> None:
        if intent == Intent.PAUSE:
            self.engine.pause()
            self.state = AppState.PAUSED
        else:
            self._interrupt(intent)

    def _on_paused(self, intent: Intent, value: str | None) -> None:
        if intent == Intent.RESUME:
            self.engine.resume()
            self.state = AppState.RUNNING
        else:
            self._interrupt(intent)

    def _on_browser(self, intent: Intent, value: str | None) -> None:
        if intent == Intent.UP:
            self.selected_index = self._clamp(self.selected_index - 1)
        elif intent == Intent.DOWN:
            self.selected_index = self._clamp(self.selected_index + 1)
        elif intent == Intent.DELETE:
            self._delete_selected()
        elif intent in (Intent.BACK, Intent.MAIN_MENU):
            self.state = AppState.MAIN_MENU

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _interrupt(self, intent: Intent) -> None:
        """Cancel the active split on back/menu and leave the countdown."""
        if intent == Intent.BACK:
            self.finalize_split("cancelled")
            self._enter_setup()
        elif intent == Intent.MAIN_MENU:
            self.finalize_split("cancelled")
            self._reset_setup()
            self.state = AppState.MAIN_MENU

    def _start_new_session(self) -> None:
        name = self.name_factory()
        try:
            self.session = self.store.create_session(name)
        except sqlite3.Error as e:
            self._storage_failure("create a session", e)
            return
        self._enter_setup()

    def _start_split(self, focus_minutes: int | None, rest_minutes: int) -> None:
        if self.session is None or focus_minutes is None:
            # Setup without a session or a focus plan cannot happen through
            # dispatch; restart the setup rather than invent values.
            self._enter_setup()
            return
        try:
            split = self.store.create_pomodoro_split(
                self.session.id, focus_minutes, rest_minutes
            )
        except sqlite3.Error as e:
            self._storage_failure("start a split", e)
            return

        self.split = split
        self.engine.start(focus_minutes, rest_minutes)
        self._reset_setup()
        self.state = AppState.RUNNING
        logger.info(
            "split %d started: %dm focus / %dm rest", split.id, focus_minutes, rest_minutes
        )

    def _load_browser(self, reset_selection: bool) -> bool:
        try:
            self.sessions = self.store.get_all_sessions()
        except sqlite3.Error as e:
            self._storage_failure("load sessions", e)
            return False
        self.selected_index = 0 if reset_selection else self._clamp(self.selected_index)
        self.state = AppState.BROWSER
        return True

    def _delete_selected(self) -> None:
        if not self.sessions:
            return
        target = self.sessions[self.selected_index]
        try:
            self.store.delete_session(target.id)
        except sqlite3.Error as e:
            logger.error("failed to delete session %d: %s", target.id, e)
            self.last_error = f"Could not delete session: {e}"
            return

        if self.session is not None and self.session.id == target.id:
            self.session = None
        self._load_browser(reset_selection=False)

    def _clamp(self, index: int) -> int:
        if not self.sessions:
            return 0
        return min(max(index, 0), len(self.sessions) - 1)

    def _enter_setup(self) -> None:
        self._reset_setup()
        self.state = AppState.TIMER_SETUP

    def _reset_setup(self) -> None:
        self.setup_step = SetupStep.FOCUS
        self.pending_focus_minutes = None
        self.input_error = None

    def _storage_failure(self, action: str, error: sqlite3.Error) -> None:
        """Fall back to the main menu after a failed storage call."""
        logger.error("failed to %s: %s", action, error)
        self.last_error = f"Could not {action}: {error}"
        self._reset_setup()
        self.state = AppState.MAIN_MENU
