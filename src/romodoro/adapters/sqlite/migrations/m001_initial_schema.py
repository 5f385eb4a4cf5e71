"""Version 1: the ``sessions`` and ``pomodoro_splits`` tables and their indexes."""

import sqlite3

from romodoro.adapters.sqlite import schema

from .runner import Migration


class InitialSchemaMigration(Migration):
    version = 1
    description = "Initial session and split tables"

    def up(self, connection: sqlite3.Connection) -> None:
        for statement in (*schema.ALL_TABLES, *schema.ALL_INDEXES):
            connection.execute(statement)
