"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state: the
config, data and log directories all point into ``tmp_path``.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest

from romodoro.adapters.sqlite import DatabaseConnection, SqliteSessionStore


class FakeClock:
    """Deterministic clock; call it for the current time, advance it explicitly."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 15, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolate_user_dirs(tmp_path):
    """Redirect platformdirs lookups and reset cached singletons."""
    import romodoro.utils.logger as logger_mod
    from romodoro.services.config_service import get_config_service

    app_logger = logging.getLogger("romodoro")

    def _reset():
        logger_mod._logger = None
        for handler in list(app_logger.handlers):
            handler.close()
            app_logger.removeHandler(handler)
        get_config_service.cache_clear()

    _reset()
    config_dir = str(tmp_path / "config")
    data_dir = str(tmp_path / "data")
    log_dir = str(tmp_path / "logs")
    with patch("romodoro.services.config_service.user_config_dir", return_value=config_dir):
        with patch("romodoro.services.config_service.user_data_dir", return_value=data_dir):
            with patch("romodoro.utils.logger.user_log_dir", return_value=log_dir):
                yield tmp_path
    _reset()


@pytest.fixture()
def tmp_config():
    """Provide a real ConfigService backed by the temporary directories."""
    from romodoro.services.config_service import ConfigService

    svc = ConfigService()
    svc.load_config()
    return svc


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def database(tmp_path):
    """A migrated database file that is closed after the test."""
    db = DatabaseConnection(tmp_path / "test.db")
    yield db
    db.close()


@pytest.fixture()
def store(database, clock):
    """SqliteSessionStore over a fresh database with a controllable clock."""
    return SqliteSessionStore(database.connection, clock=clock)
