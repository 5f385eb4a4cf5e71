"""Session and split data models."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SplitStatus = Literal["in_progress", "completed", "cancelled"]

TERMINAL_STATUSES: frozenset[str] = frozenset({"completed", "cancelled"})


class Session(BaseModel):
    """A named block of work made of one or more splits."""

    model_config = ConfigDict(
        json_encoders={datetime: lambda v: v.isoformat()},
    )

    id: int
    name: str
    start_time: datetime
    end_time: datetime | None = None
    total_focus_seconds: int = Field(default=0, ge=0)
    total_rest_seconds: int = Field(default=0, ge=0)

    @property
    def total_seconds(self) -> int:
        return self.total_focus_seconds + self.total_rest_seconds

    @property
    def duration(self) -> timedelta | None:
        """Wall-clock span of the session, or None while it has no end time."""
        if self.end_time is None:
            return None
        return self.end_time - self.start_time


class PomodoroSplit(BaseModel):
    """One focus-then-rest interval pair within a session.

    ``focus_minutes`` and ``rest_minutes`` are the plan; the ``actual_*``
    fields are the outcome, which is shorter than the plan when the split
    was interrupted.
    """

    model_config = ConfigDict(
        json_encoders={datetime: lambda v: v.isoformat()},
    )

    id: int
    session_id: int
    focus_minutes: int
    rest_minutes: int
    start_time: datetime
    end_time: datetime | None = None
    status: SplitStatus = "in_progress"
    actual_focus_seconds: int = Field(default=0, ge=0)
    actual_rest_seconds: int = Field(default=0, ge=0)

    @property
    def planned_focus_seconds(self) -> int:
        return self.focus_minutes * 60

    @property
    def planned_rest_seconds(self) -> int:
        return self.rest_minutes * 60

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
