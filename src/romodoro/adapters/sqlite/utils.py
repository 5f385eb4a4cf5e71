"""Utility functions for SQLite adapter."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any


def utc_now() -> datetime:
    """Get the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def to_db_time(value: datetime | None) -> str | None:
    """Serialize a datetime for storage as an ISO-8601 UTC string.

    Naive datetimes are assumed to be local time.
    """
    if value is None:
        return None
    return value.astimezone(UTC).isoformat()


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert sqlite3.Row to dictionary."""
    if row is None:
        return {}
    return dict(row)


def parse_datetime(value: str | datetime | None) -> datetime | None:
    """Parse datetime from various formats.

    Accepts ISO strings (with ``Z`` or offsets) and SQLite's
    ``CURRENT_TIMESTAMP`` format, which is UTC without an offset.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed

    return None
