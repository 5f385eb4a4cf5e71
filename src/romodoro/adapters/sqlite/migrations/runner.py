"""Schema upgrades for the session database.

Each ``Migration`` carries a version number. Applied versions are recorded
in ``schema_version``; opening a database applies every migration newer than
the recorded maximum, oldest first, one transaction per migration.
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from collections.abc import Iterable
from operator import attrgetter

from romodoro.adapters.sqlite.utils import to_db_time, utc_now

logger = logging.getLogger(__name__)

_CREATE_VERSION_TABLE = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    description TEXT NOT NULL,
    applied_at DATETIME NOT NULL
)
"""


class Migration(ABC):
    """One forward-only schema change."""

    version: int
    description: str

    @abstractmethod
    def up(self, connection: sqlite3.Connection) -> None:
        """Apply the change; the runner commits or rolls back."""


class MigrationRunner:
    """Brings a session database up to the latest schema version."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection
        with self.connection:
            self.connection.execute(_CREATE_VERSION_TABLE)

    @property
    def current_version(self) -> int:
        """Highest applied version, 0 for an empty database."""
        row = self.connection.execute(
            "SELECT COALESCE(MAX(version), 0) FROM schema_version"
        ).fetchone()
        return row[0]

    def apply(self, migration: Migration) -> None:
        """Apply one migration and record it.

        Raises:
            ValueError: If the database is already at or past its version.
            RuntimeError: If the migration fails; nothing is recorded.
        """
        current = self.current_version
        if migration.version <= current:
            raise ValueError(
                f"Schema is at version {current}; "
                f"migration {migration.version} is not greater than it"
            )

        try:
            with self.connection:
                migration.up(self.connection)
                self.connection.execute(
                    "INSERT INTO schema_version (version, description, applied_at) "
                    "VALUES (?, ?, ?)",
                    (migration.version, migration.description, to_db_time(utc_now())),
                )
        except sqlite3.Error as e:
            raise RuntimeError(f"Migration {migration.version} failed: {e}") from e

        logger.info("schema migrated to version %d (%s)", migration.version, migration.description)

    def upgrade(self, migrations: Iterable[Migration]) -> list[int]:
        """Apply every pending migration; returns the versions applied."""
        current = self.current_version
        pending = sorted(
            (m for m in migrations if m.version > current), key=attrgetter("version")
        )
        for migration in pending:
            self.apply(migration)
        return [m.version for m in pending]
