"""Tests for SQLite adapter utilities."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from romodoro.adapters.sqlite.utils import parse_datetime, row_to_dict, to_db_time, utc_now


def test_utc_now_is_aware():
    assert utc_now().utcoffset() == timedelta(0)


def test_to_db_time_none():
    assert to_db_time(None) is None


def test_to_db_time_converts_to_utc():
    value = datetime(2024, 1, 15, 10, 30, tzinfo=timezone(timedelta(hours=2)))
    assert to_db_time(value) == "2024-01-15T08:30:00+00:00"


def test_parse_datetime_none():
    assert parse_datetime(None) is None


def test_parse_datetime_passthrough():
    value = datetime(2024, 1, 15, tzinfo=UTC)
    assert parse_datetime(value) is value


def test_parse_datetime_z_suffix():
    assert parse_datetime("2024-01-15T08:30:00Z") == datetime(2024, 1, 15, 8, 30, tzinfo=UTC)


def test_parse_datetime_sqlite_current_timestamp():
    parsed = parse_datetime("2024-01-15 08:30:00")
    assert parsed == datetime(2024, 1, 15, 8, 30, tzinfo=UTC)


def test_parse_datetime_keeps_offset():
    parsed = parse_datetime("2024-01-15T10:30:00+02:00")
    assert parsed == datetime(2024, 1, 15, 8, 30, tzinfo=UTC)


def test_parse_datetime_unsupported_type():
    assert parse_datetime(12345) is None


def test_row_to_dict():
    assert row_to_dict(None) == {}
    assert row_to_dict({"id": 1}) == {"id": 1}
