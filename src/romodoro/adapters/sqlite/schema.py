"""Database schema definitions for the session database.

Two tables: ``sessions`` and ``pomodoro_splits``. Every split belongs to a
session; splits are always deleted before their session.
"""

from __future__ import annotations

# Schema version tracking
SCHEMA_VERSION = 1

# Sessions table - one row per named block of work
CREATE_SESSIONS_TABLE = """
CREATE TABLE IF NOT EXISTS sessions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    start_time DATETIME NOT NULL,
    end_time DATETIME DEFAULT CURRENT_TIMESTAMP,
    total_focus_seconds INTEGER NOT NULL DEFAULT 0,
    total_rest_seconds INTEGER NOT NULL DEFAULT 0
)
"""

# Splits table - planned focus/rest minutes and the actual outcome
CREATE_POMODORO_SPLITS_TABLE = """
CREATE TABLE IF NOT EXISTS pomodoro_splits (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id INTEGER NOT NULL,
    focus_minutes INTEGER NOT NULL,
    rest_minutes INTEGER NOT NULL,
    start_time DATETIME NOT NULL,
    end_time DATETIME,
    status TEXT NOT NULL DEFAULT 'in_progress'
        CHECK (status IN ('in_progress', 'completed', 'cancelled')),
    actual_focus_seconds INTEGER NOT NULL DEFAULT 0,
    actual_rest_seconds INTEGER NOT NULL DEFAULT 0,
    FOREIGN KEY (session_id) REFERENCES sessions(id)
)
"""

CREATE_INDEX_SESSIONS_START = """
CREATE INDEX IF NOT EXISTS idx_sessions_start_time
ON sessions(start_time)
"""

CREATE_INDEX_SPLITS_SESSION = """
CREATE INDEX IF NOT EXISTS idx_pomodoro_splits_session
ON pomodoro_splits(session_id)
"""

CREATE_INDEX_SPLITS_STATUS = """
CREATE INDEX IF NOT EXISTS idx_pomodoro_splits_status
ON pomodoro_splits(status)
"""

ALL_TABLES = [
    CREATE_SESSIONS_TABLE,
    CREATE_POMODORO_SPLITS_TABLE,
]

ALL_INDEXES = [
    CREATE_INDEX_SESSIONS_START,
    CREATE_INDEX_SPLITS_SESSION,
    CREATE_INDEX_SPLITS_STATUS,
]
