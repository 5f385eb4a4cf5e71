"""SQLite implementation of SessionStore."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable
from datetime import datetime

from romodoro.adapters.sqlite.utils import (
    parse_datetime,
    row_to_dict,
    to_db_time,
    utc_now,
)
from romodoro.models import PomodoroSplit, Session
from romodoro.repositories import SessionStore

logger = logging.getLogger(__name__)

_SESSION_COLUMNS = (
    "id, name, start_time, end_time, total_focus_seconds, total_rest_seconds"
)

_TIME_COLUMNS = ("start_time", "end_time")


def _parse_row(row: sqlite3.Row) -> dict:
    """Row as a dict with timestamp columns parsed to aware datetimes."""
    data = row_to_dict(row)
    for column in _TIME_COLUMNS:
        data[column] = parse_datetime(data.get(column))
    return data


_REFRESH_TOTALS_SQL = """
UPDATE sessions
SET end_time = ?,
    total_focus_seconds = (
        SELECT COALESCE(SUM(actual_focus_seconds), 0)
        FROM pomodoro_splits
        WHERE session_id = ?
    ),
    total_rest_seconds = (
        SELECT COALESCE(SUM(actual_rest_seconds), 0)
        FROM pomodoro_splits
        WHERE session_id = ?
    )
WHERE id = ?
"""


class SqliteSessionStore(SessionStore):
    """SQLite implementation of the session store.

    Args:
        connection: An open connection (see ``DatabaseConnection``); the store
            does not own it and never closes it.
        clock: Returns the current time; defaults to UTC now.
    """

    def __init__(
        self,
        connection: sqlite3.Connection,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.connection = connection
        self._clock = clock

    def _now(self) -> datetime:
        return self._clock()

    # -- sessions -----------------------------------------------------------

    def create_session(self, name: str) -> Session:
        now = self._now()
        with self.connection:
            cursor = self.connection.execute(
                "INSERT INTO sessions (name, start_time, end_time) VALUES (?, ?, ?)",
                (name, to_db_time(now), to_db_time(now)),
            )
        logger.info("created session %d (%s)", cursor.lastrowid, name)
        return Session(id=cursor.lastrowid, name=name, start_time=now, end_time=now)

    def get_last_session(self) -> Session | None:
        row = self.connection.execute(
            f"""
            SELECT {_SESSION_COLUMNS}
            FROM sessions
            ORDER BY start_time DESC, id DESC
            LIMIT 1
            """
        ).fetchone()
        return Session(**_parse_row(row)) if row else None

    def get_session(self, session_id: int) -> Session | None:
        row = self.connection.execute(
            f"SELECT {_SESSION_COLUMNS} FROM sessions WHERE id = ?", (session_id,)
        ).fetchone()
        return Session(**_parse_row(row)) if row else None

    def get_all_sessions(self, limit: int | None = None) -> list[Session]:
        sql = f"""
            SELECT {_SESSION_COLUMNS}
            FROM sessions
            ORDER BY start_time DESC, id DESC
        """
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (limit,)

        rows = self.connection.execute(sql, params).fetchall()
        return [Session(**_parse_row(row)) for row in rows]

    def delete_session(self, session_id: int) -> None:
        # One transaction: both deletes commit together or neither does
        with self.connection:
            self.connection.execute(
                "DELETE FROM pomodoro_splits WHERE session_id = ?", (session_id,)
            )
            self.connection.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
        logger.info("deleted session %d", session_id)

    def close_session(self, session_id: int) -> None:
        with self.connection:
            self.connection.execute(
                "UPDATE sessions SET end_time = ? WHERE id = ?",
                (to_db_time(self._now()), session_id),
            )

    def update_session_totals(self, session_id: int) -> None:
        with self.connection:
            self._refresh_totals(session_id, self._now())

    def _refresh_totals(self, session_id: int, now: datetime) -> None:
        """Recompute totals without committing."""
        self.connection.execute(
            _REFRESH_TOTALS_SQL,
            (to_db_time(now), session_id, session_id, session_id),
        )

    # -- splits -------------------------------------------------------------

    def create_pomodoro_split(
        self, session_id: int, focus_minutes: int, rest_minutes: int
    ) -> PomodoroSplit:
        now = self._now()
        with self.connection:
            cursor = self.connection.execute(
                """
                INSERT INTO pomodoro_splits
                    (session_id, focus_minutes, rest_minutes, start_time)
                VALUES (?, ?, ?, ?)
                """,
                (session_id, focus_minutes, rest_minutes, to_db_time(now)),
            )
        return PomodoroSplit(
            id=cursor.lastrowid,
            session_id=session_id,
            focus_minutes=focus_minutes,
            rest_minutes=rest_minutes,
            start_time=now,
        )

    def update_pomodoro_split(self, split: PomodoroSplit) -> None:
        with self.connection:
            self.connection.execute(
                """
                UPDATE pomodoro_splits
                SET end_time = ?, status = ?,
                    actual_focus_seconds = ?, actual_rest_seconds = ?
                WHERE id = ?
                """,
                (
                    to_db_time(split.end_time),
                    split.status,
                    split.actual_focus_seconds,
                    split.actual_rest_seconds,
                    split.id,
                ),
            )

    def get_splits(self, session_id: int) -> list[PomodoroSplit]:
        rows = self.connection.execute(
            """
            SELECT id, session_id, focus_minutes, rest_minutes, start_time,
                   end_time, status, actual_focus_seconds, actual_rest_seconds
            FROM pomodoro_splits
            WHERE session_id = ?
            ORDER BY start_time, id
            """,
            (session_id,),
        ).fetchall()
        return [PomodoroSplit(**_parse_row(row)) for row in rows]

    def reconcile_orphaned_splits(self) -> list[int]:
        now = self._now()
        with self.connection:
            session_ids = [
                row[0]
                for row in self.connection.execute(
                    """
                    SELECT DISTINCT session_id FROM pomodoro_splits
                    WHERE status = 'in_progress'
                    ORDER BY session_id
                    """
                ).fetchall()
            ]
            if not session_ids:
                return []

            self.connection.execute(
                """
                UPDATE pomodoro_splits
                SET status = 'cancelled', end_time = ?
                WHERE status = 'in_progress'
                """,
                (to_db_time(now),),
            )
            for session_id in session_ids:
                self._refresh_totals(session_id, now)

        logger.warning(
            "reconciled orphaned splits in %d session(s): %s",
            len(session_ids),
            session_ids,
        )
        return session_ids
