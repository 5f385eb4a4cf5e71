"""SQLite adapter module - local session database."""

from romodoro.adapters.sqlite.connection import DatabaseConnection
from romodoro.adapters.sqlite.session_store import SqliteSessionStore

__all__ = [
    "DatabaseConnection",
    "SqliteSessionStore",
]
