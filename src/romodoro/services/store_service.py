"""Opens the session store for commands.

This is the composition root for persistence: it resolves the database path
from configuration, owns the connection for the duration of a command, and
optionally closes splits orphaned by an abnormal exit.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from romodoro.adapters.sqlite import DatabaseConnection, SqliteSessionStore
from romodoro.commands.decorators import AppError
from romodoro.services.config_service import ConfigService, get_config_service
from romodoro.utils.exit_codes import ERROR_STORAGE

logger = logging.getLogger(__name__)


@contextmanager
def open_session_store(
    config_service: ConfigService | None = None,
    reconcile: bool = False,
) -> Iterator[SqliteSessionStore]:
    """Yield a store over the configured database and close it afterwards.

    Args:
        config_service: Defaults to the cached application config service.
        reconcile: Cancel splits orphaned by an abnormal exit before
            yielding. Only the interactive timer asks for this at startup;
            a split another process is still counting looks the same.

    Raises:
        AppError: If the database cannot be opened or migrated.
    """
    config_service = config_service or get_config_service()

    db_path = config_service.database_path
    database = DatabaseConnection(db_path)
    try:
        connection = database.connection
    except (sqlite3.Error, RuntimeError, OSError) as e:
        logger.error("could not open database %s: %s", db_path, e)
        raise AppError(f"Could not open session database {db_path}: {e}", ERROR_STORAGE) from e

    try:
        store = SqliteSessionStore(connection)
        if reconcile:
            store.reconcile_orphaned_splits()
        yield store
    finally:
        database.close()
