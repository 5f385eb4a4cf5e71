"""Forward-only schema migrations for the session database."""

from .m001_initial_schema import InitialSchemaMigration
from .runner import Migration, MigrationRunner

ALL_MIGRATIONS: list[Migration] = [
    InitialSchemaMigration(),
]

__all__ = [
    "ALL_MIGRATIONS",
    "InitialSchemaMigration",
    "Migration",
    "MigrationRunner",
]
