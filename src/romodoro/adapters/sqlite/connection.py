"""Database connection management for the session database.

Opens a configured ``sqlite3.Connection`` (foreign keys, WAL, row factory,
owner-only file permissions) and brings the schema up to date. The
connection is an explicit handle owned by whoever opened it; there is no
process-wide instance.
"""

from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path

from romodoro.adapters.sqlite.migrations import ALL_MIGRATIONS, MigrationRunner

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Owns one SQLite connection for the lifetime of the process.

    Usable as a context manager::

        with DatabaseConnection(path) as conn:
            store = SqliteSessionStore(conn)
    """

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self._connection: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or open the database connection."""
        if self._connection is None:
            self._connection = self.open()
        return self._connection

    def open(self) -> sqlite3.Connection:
        """Open and configure a connection, running pending migrations."""
        if self.db_path != Path(":memory:"):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not self.db_path.exists()

        connection = sqlite3.connect(str(self.db_path), timeout=30.0)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        connection.execute("PRAGMA journal_mode = WAL")

        if is_new_database and self.db_path.exists():
            os.chmod(self.db_path, 0o600)

        applied = MigrationRunner(connection).upgrade(ALL_MIGRATIONS)
        if applied:
            logger.info("applied migration(s) %s to %s", applied, self.db_path)

        return connection

    def close(self) -> None:
        """Commit and close the connection if it is open."""
        if self._connection is None:
            return
        try:
            self._connection.commit()
            self._connection.close()
        finally:
            self._connection = None

    def __enter__(self) -> sqlite3.Connection:
        return self.connection

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
