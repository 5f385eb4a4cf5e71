"""Session history commands: list, show, delete, reconcile."""

import typer

from romodoro.services.store_service import open_session_store
from romodoro.utils.exit_codes import ERROR_NOT_FOUND
from romodoro.utils.ui.console import get_console
from romodoro.utils.ui.formatters import (
    build_sessions_table,
    build_splits_table,
    format_duration,
    format_success,
    format_timestamp,
)

from .decorators import AppError, command_wrapper

console = get_console()
app = typer.Typer(help="Browse and manage recorded sessions")


@app.command("list")
@command_wrapper
def list_sessions(
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Number of sessions to show"),
):
    """List sessions, most recent first."""
    with open_session_store() as store:
        sessions = store.get_all_sessions(limit=limit)

    if not sessions:
        console.print("[yellow]No sessions found[/yellow]")
        return

    console.print(build_sessions_table(sessions, title=f"Sessions ({len(sessions)})"))


@app.command("show")
@command_wrapper
def show_session(
    session_id: int = typer.Argument(..., help="Session ID"),
):
    """Show a session and its splits."""
    with open_session_store() as store:
        session = store.get_session(session_id)
        if session is None:
            raise AppError(f"Session {session_id} not found", ERROR_NOT_FOUND)
        splits = store.get_splits(session_id)

    console.print(f"\n[bold cyan]{session.name}[/bold cyan] [dim](#{session.id})[/dim]")
    console.print(f"Started: {format_timestamp(session.start_time, '%Y-%m-%d %H:%M')}")
    console.print(f"Ended:   {format_timestamp(session.end_time, '%Y-%m-%d %H:%M')}")
    console.print(
        f"Focus: [red]{format_duration(session.total_focus_seconds)}[/red]  "
        f"Rest: [green]{format_duration(session.total_rest_seconds)}[/green]\n"
    )

    if not splits:
        console.print("[dim]No splits recorded[/dim]")
        return
    console.print(build_splits_table(splits))


@app.command("delete")
@command_wrapper
def delete_session(
    session_id: int = typer.Argument(..., help="Session ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
):
    """Delete a session and all of its splits."""
    with open_session_store() as store:
        session = store.get_session(session_id)
        if session is None:
            raise AppError(f"Session {session_id} not found", ERROR_NOT_FOUND)

        if not yes and not typer.confirm(
            f"Delete session '{session.name}' and all of its splits?", default=False
        ):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

        store.delete_session(session_id)

    format_success(f"Deleted session {session_id}")


@app.command("reconcile")
@command_wrapper
def reconcile_sessions():
    """Cancel splits left in progress by a crash and refresh session totals."""
    with open_session_store() as store:
        session_ids = store.reconcile_orphaned_splits()

    if not session_ids:
        console.print("[green]No orphaned splits found[/green]")
        return
    ids = ", ".join(str(i) for i in session_ids)
    format_success(f"Reconciled splits in {len(session_ids)} session(s): {ids}")
