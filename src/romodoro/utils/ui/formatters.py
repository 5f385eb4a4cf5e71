"""Output formatters for sessions, durations and status messages."""

from datetime import datetime

from rich.table import Table

from romodoro.utils.ui.console import get_console

console = get_console()


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_duration(seconds: int) -> str:
    """Format seconds as MM:SS; minutes are not wrapped into hours."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def format_timestamp(value: datetime | None, fmt: str = "%m-%d %H:%M") -> str:
    """Format an optional timestamp, using a dash placeholder when absent."""
    if value is None:
        return "—"
    return value.astimezone().strftime(fmt)


def get_progress_bar(fraction: float, width: int = 40) -> str:
    """Get a progress bar for a fraction in [0, 1]."""
    fraction = min(1.0, max(0.0, fraction))
    filled = int(width * fraction)
    return "▓" * filled + "░" * (width - filled)


def build_sessions_table(sessions, title: str | None = None) -> Table:
    """Build a table of sessions, most recent first as given."""
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Started")
    table.add_column("Ended")
    table.add_column("Focus", justify="right", style="red")
    table.add_column("Rest", justify="right", style="green")

    for session in sessions:
        table.add_row(
            str(session.id),
            session.name,
            format_timestamp(session.start_time),
            format_timestamp(session.end_time),
            format_duration(session.total_focus_seconds),
            format_duration(session.total_rest_seconds),
        )
    return table


def build_splits_table(splits) -> Table:
    """Build a table of a session's splits, plan against outcome."""
    status_styles = {
        "completed": "[green]✓ completed[/green]",
        "cancelled": "[yellow]✗ cancelled[/yellow]",
        "in_progress": "[dim]○ in progress[/dim]",
    }

    table = Table(show_header=True)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Plan")
    table.add_column("Started")
    table.add_column("Ended")
    table.add_column("Focus", justify="right", style="red")
    table.add_column("Rest", justify="right", style="green")
    table.add_column("Status", justify="center")

    for index, split in enumerate(splits, start=1):
        table.add_row(
            str(index),
            f"{split.focus_minutes}m / {split.rest_minutes}m",
            format_timestamp(split.start_time),
            format_timestamp(split.end_time),
            format_duration(split.actual_focus_seconds),
            format_duration(split.actual_rest_seconds),
            status_styles.get(split.status, split.status),
        )
    return table
