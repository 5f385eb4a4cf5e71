"""Tests for the migration runner and the initial schema migration."""

from __future__ import annotations

import sqlite3

import pytest

from romodoro.adapters.sqlite.migrations import ALL_MIGRATIONS, Migration, MigrationRunner


class _FailingMigration(Migration):
    version = 2
    description = "Always fails"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute(
            "INSERT INTO sessions (name, start_time) VALUES ('s', '2024-01-01T00:00:00+00:00')"
        )
        raise sqlite3.OperationalError("boom")


class _AddNotesColumn(Migration):
    version = 2
    description = "Add notes column"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute("ALTER TABLE sessions ADD COLUMN notes TEXT")


@pytest.fixture()
def conn():
    connection = sqlite3.connect(":memory:")
    yield connection
    connection.close()


def _tables(connection: sqlite3.Connection) -> set[str]:
    rows = connection.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    return {row[0] for row in rows}


def test_fresh_database_is_version_zero(conn):
    assert MigrationRunner(conn).current_version == 0


def test_upgrade_creates_schema(conn):
    applied = MigrationRunner(conn).upgrade(ALL_MIGRATIONS)

    assert applied == [1]
    assert {"sessions", "pomodoro_splits", "schema_version"} <= _tables(conn)


def test_upgrade_records_version(conn):
    MigrationRunner(conn).upgrade(ALL_MIGRATIONS)

    version, description, applied_at = conn.execute(
        "SELECT version, description, applied_at FROM schema_version"
    ).fetchone()
    assert version == 1
    assert description == "Initial session and split tables"
    assert applied_at


def test_second_upgrade_applies_nothing(conn):
    runner = MigrationRunner(conn)
    runner.upgrade(ALL_MIGRATIONS)

    assert runner.upgrade(ALL_MIGRATIONS) == []


def test_pending_migrations_applied_in_version_order(conn):
    runner = MigrationRunner(conn)

    applied = runner.upgrade([_AddNotesColumn(), *ALL_MIGRATIONS])

    assert applied == [1, 2]
    assert runner.current_version == 2
    columns = {row[1] for row in conn.execute("PRAGMA table_info(sessions)")}
    assert "notes" in columns


def test_apply_rejects_old_version(conn):
    runner = MigrationRunner(conn)
    runner.upgrade(ALL_MIGRATIONS)

    with pytest.raises(ValueError, match="not greater than"):
        runner.apply(ALL_MIGRATIONS[0])


def test_failed_migration_is_rolled_back(conn):
    runner = MigrationRunner(conn)
    runner.upgrade(ALL_MIGRATIONS)

    with pytest.raises(RuntimeError, match="Migration 2 failed"):
        runner.apply(_FailingMigration())

    assert runner.current_version == 1
    assert conn.execute("SELECT COUNT(*) FROM sessions").fetchone()[0] == 0


def test_status_check_constraint(conn):
    MigrationRunner(conn).upgrade(ALL_MIGRATIONS)
    conn.execute(
        "INSERT INTO sessions (name, start_time) VALUES ('s', '2024-01-01T00:00:00+00:00')"
    )

    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            """
            INSERT INTO pomodoro_splits
                (session_id, focus_minutes, rest_minutes, start_time, status)
            VALUES (1, 25, 5, '2024-01-01T00:00:00+00:00', 'paused')
            """
        )
