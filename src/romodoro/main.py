"""Main entry point for Romodoro."""

import typer

from romodoro import __version__
from romodoro.commands import config, sessions
from romodoro.commands.timer import run_timer
from romodoro.utils.typer_helpers import SuggestingGroup
from romodoro.utils.ui.console import get_console

app = typer.Typer(
    name="romodoro",
    cls=SuggestingGroup,
    help="A terminal focus timer that records focus/rest splits per session",
    invoke_without_command=True,
)

console = get_console()

app.add_typer(sessions.app, name="sessions", help="Browse and manage recorded sessions")
app.add_typer(config.app, name="config", help="Configuration management")


@app.callback()
def main(ctx: typer.Context) -> None:
    """Run the interactive timer when no command is given."""
    if ctx.invoked_subcommand is None:
        run_timer()


@app.command()
def run() -> None:
    """Start the interactive focus timer."""
    run_timer()


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Romodoro[/bold] version [cyan]{__version__}[/cyan]")


if __name__ == "__main__":
    app()
