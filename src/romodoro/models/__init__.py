"""Romodoro domain models.

Pydantic models for the persisted entities (sessions and their splits) and
the application configuration.
"""

from .config_models import AppConfig
from .core import TERMINAL_STATUSES, PomodoroSplit, Session, SplitStatus

__all__ = [
    "Session",
    "PomodoroSplit",
    "SplitStatus",
    "TERMINAL_STATUSES",
    "AppConfig",
]
