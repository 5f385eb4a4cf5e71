"""Unit tests for DatabaseConnection (connection.py)."""

from __future__ import annotations

import sqlite3
import stat

import pytest

from romodoro.adapters.sqlite.connection import DatabaseConnection
from romodoro.adapters.sqlite.schema import SCHEMA_VERSION


def _tables(connection: sqlite3.Connection) -> set[str]:
    rows = connection.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    return {row[0] for row in rows}


class TestOpen:
    def test_creates_parent_directory_and_file(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "sessions.db"
        db = DatabaseConnection(db_path)

        db.connection
        db.close()

        assert db_path.exists()

    def test_applies_schema(self, tmp_path):
        with DatabaseConnection(tmp_path / "s.db") as conn:
            assert {"sessions", "pomodoro_splits", "schema_version"} <= _tables(conn)
            version = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()[0]
            assert version == SCHEMA_VERSION

    def test_row_factory(self, tmp_path):
        with DatabaseConnection(tmp_path / "s.db") as conn:
            assert conn.row_factory is sqlite3.Row

    def test_foreign_keys_enabled(self, tmp_path):
        with DatabaseConnection(tmp_path / "s.db") as conn:
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1

    def test_wal_mode(self, tmp_path):
        with DatabaseConnection(tmp_path / "s.db") as conn:
            assert conn.execute("PRAGMA journal_mode").fetchone()[0].lower() == "wal"

    def test_new_file_is_owner_only(self, tmp_path):
        db_path = tmp_path / "private.db"
        with DatabaseConnection(db_path):
            pass
        assert stat.S_IMODE(db_path.stat().st_mode) == 0o600

    def test_reopen_does_not_rerun_migrations(self, tmp_path):
        db_path = tmp_path / "s.db"
        with DatabaseConnection(db_path):
            pass
        with DatabaseConnection(db_path) as conn:
            count = conn.execute("SELECT COUNT(*) FROM schema_version").fetchone()[0]
        assert count == 1

    def test_in_memory(self):
        with DatabaseConnection(":memory:") as conn:
            assert "sessions" in _tables(conn)


class TestLifecycle:
    def test_connection_is_reused(self, tmp_path):
        db = DatabaseConnection(tmp_path / "s.db")
        try:
            assert db.connection is db.connection
        finally:
            db.close()

    def test_close_is_idempotent(self, tmp_path):
        db = DatabaseConnection(tmp_path / "s.db")
        db.connection
        db.close()
        db.close()
        assert db._connection is None

    def test_context_manager_closes(self, tmp_path):
        db = DatabaseConnection(tmp_path / "s.db")
        with db as conn:
            conn.execute("SELECT 1")
        assert db._connection is None
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")

    def test_close_commits_pending_writes(self, tmp_path):
        db_path = tmp_path / "s.db"
        db = DatabaseConnection(db_path)
        db.connection.execute(
            "INSERT INTO sessions (name, start_time) VALUES ('x', '2024-01-01T00:00:00+00:00')"
        )
        db.close()

        with DatabaseConnection(db_path) as conn:
            assert conn.execute("SELECT COUNT(*) FROM sessions").fetchone()[0] == 1


def test_open_failure_propagates(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("file in the way")

    with pytest.raises((OSError, sqlite3.Error)):
        DatabaseConnection(blocker / "s.db").open()
