"""Unit tests for the sessions commands."""

from __future__ import annotations

from typer.testing import CliRunner

from romodoro.main import app
from romodoro.services.config_service import get_config_service
from romodoro.services.store_service import open_session_store
from romodoro.utils.exit_codes import ERROR_NOT_FOUND, ERROR_STORAGE

runner = CliRunner()


def _seed_session(name: str = "alpha", finished: bool = True) -> int:
    """Create a session with one split; completed unless *finished* is False."""
    with open_session_store() as store:
        session = store.create_session(name)
        split = store.create_pomodoro_split(session.id, 25, 5)
        if finished:
            store.update_pomodoro_split(
                split.model_copy(
                    update={
                        "status": "completed",
                        "actual_focus_seconds": 1500,
                        "actual_rest_seconds": 300,
                        "end_time": session.start_time,
                    }
                )
            )
            store.update_session_totals(session.id)
        return session.id


def _split_status(session_id: int) -> str:
    with open_session_store() as store:
        (split,) = store.get_splits(session_id)
    return split.status


class TestListSessions:
    def test_list_leaves_live_split_in_progress(self):
        """Listing while a timer runs elsewhere must not finalize its split."""
        session_id = _seed_session("live", finished=False)

        result = runner.invoke(app, ["sessions", "list"])

        assert result.exit_code == 0
        assert _split_status(session_id) == "in_progress"

    def test_empty(self):
        result = runner.invoke(app, ["sessions", "list"])

        assert result.exit_code == 0
        assert "No sessions found" in result.output

    def test_lists_sessions(self):
        _seed_session("alpha")
        _seed_session("beta")

        result = runner.invoke(app, ["sessions", "list"])

        assert result.exit_code == 0
        assert "alpha" in result.output
        assert "beta" in result.output
        assert "25:00" in result.output

    def test_limit(self):
        _seed_session("alpha")
        _seed_session("beta")

        result = runner.invoke(app, ["sessions", "list", "--limit", "1"])

        assert result.exit_code == 0
        assert "beta" in result.output
        assert "alpha" not in result.output

    def test_storage_error(self, tmp_path):
        """An unopenable database exits with the storage code."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        get_config_service().set_value("storage.database_path", str(blocker / "s.db"))

        result = runner.invoke(app, ["sessions", "list"])

        assert result.exit_code == ERROR_STORAGE
        assert "Could not open session database" in result.output


class TestShowSession:
    def test_show_with_splits(self):
        session_id = _seed_session("alpha")

        result = runner.invoke(app, ["sessions", "show", str(session_id)])

        assert result.exit_code == 0
        assert "alpha" in result.output
        assert "25m" in result.output
        assert "completed" in result.output

    def test_show_without_splits(self):
        with open_session_store() as store:
            session = store.create_session("empty")

        result = runner.invoke(app, ["sessions", "show", str(session.id)])

        assert result.exit_code == 0
        assert "No splits recorded" in result.output

    def test_show_missing(self):
        result = runner.invoke(app, ["sessions", "show", "99"])

        assert result.exit_code == ERROR_NOT_FOUND
        assert "Session 99 not found" in result.output

    def test_show_leaves_live_split_in_progress(self):
        session_id = _seed_session("live", finished=False)

        result = runner.invoke(app, ["sessions", "show", str(session_id)])

        assert result.exit_code == 0
        assert _split_status(session_id) == "in_progress"


class TestDeleteSession:
    def test_delete_with_yes(self):
        session_id = _seed_session("alpha")

        result = runner.invoke(app, ["sessions", "delete", str(session_id), "--yes"])

        assert result.exit_code == 0
        assert f"Deleted session {session_id}" in result.output
        with open_session_store() as store:
            assert store.get_session(session_id) is None
            assert store.get_splits(session_id) == []

    def test_delete_confirmed(self):
        session_id = _seed_session("alpha")

        result = runner.invoke(app, ["sessions", "delete", str(session_id)], input="y\n")

        assert result.exit_code == 0
        with open_session_store() as store:
            assert store.get_session(session_id) is None

    def test_delete_declined(self):
        session_id = _seed_session("alpha")

        result = runner.invoke(app, ["sessions", "delete", str(session_id)], input="n\n")

        assert result.exit_code == 0
        assert "Cancelled" in result.output
        with open_session_store() as store:
            assert store.get_session(session_id) is not None

    def test_delete_missing(self):
        result = runner.invoke(app, ["sessions", "delete", "42", "--yes"])

        assert result.exit_code == ERROR_NOT_FOUND


class TestReconcile:
    def test_nothing_to_reconcile(self):
        _seed_session("alpha")

        result = runner.invoke(app, ["sessions", "reconcile"])

        assert result.exit_code == 0
        assert "No orphaned splits found" in result.output

    def test_reconciles_orphans(self):
        session_id = _seed_session("crashed", finished=False)

        result = runner.invoke(app, ["sessions", "reconcile"])

        assert result.exit_code == 0
        assert f"Reconciled splits in 1 session(s): {session_id}" in result.output
        assert _split_status(session_id) == "cancelled"
