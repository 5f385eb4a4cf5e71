"""Repository abstraction layer for Romodoro.

Defines the storage port the session controller depends on. Concrete
adapters (see ``romodoro.adapters.sqlite``) implement it; the controller
never sees SQL.

Every method may raise the backend's storage error unchanged (for SQLite,
``sqlite3.Error``). Nothing is retried.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from romodoro.models import PomodoroSplit, Session


class SessionStore(ABC):
    """Abstract base class for session and split persistence."""

    # -- sessions -----------------------------------------------------------

    @abstractmethod
    def create_session(self, name: str) -> Session:
        """Insert a session with start = end = now and zero totals."""

    @abstractmethod
    def get_last_session(self) -> Session | None:
        """Return the most recently started session, or None if there is none."""

    @abstractmethod
    def get_session(self, session_id: int) -> Session | None:
        """Return a session by id, or None if it does not exist."""

    @abstractmethod
    def get_all_sessions(self, limit: int | None = None) -> list[Session]:
        """Return sessions most-recent-first; an empty list when none exist."""

    @abstractmethod
    def delete_session(self, session_id: int) -> None:
        """Delete a session and all of its splits as one unit.

        Splits are removed before the session so no split ever references a
        missing session.
        """

    @abstractmethod
    def close_session(self, session_id: int) -> None:
        """Stamp the session end time with now; totals are untouched."""

    @abstractmethod
    def update_session_totals(self, session_id: int) -> None:
        """Recompute end time and focus/rest totals from the session's splits."""

    # -- splits -------------------------------------------------------------

    @abstractmethod
    def create_pomodoro_split(
        self, session_id: int, focus_minutes: int, rest_minutes: int
    ) -> PomodoroSplit:
        """Insert an in-progress split with zero actual seconds.

        The plan is validated by the caller.
        """

    @abstractmethod
    def update_pomodoro_split(self, split: PomodoroSplit) -> None:
        """Overwrite end time, status and actual seconds of a split by id."""

    @abstractmethod
    def get_splits(self, session_id: int) -> list[PomodoroSplit]:
        """Return a session's splits, oldest first."""

    @abstractmethod
    def reconcile_orphaned_splits(self) -> list[int]:
        """Cancel splits left in progress and refresh their sessions' totals.

        Returns:
            Ids of the sessions whose splits were reconciled
        """
