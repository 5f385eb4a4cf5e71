"""Configuration commands."""

import json

import typer
from pydantic import ValidationError

from romodoro.services.config_service import get_config_service
from romodoro.utils.exit_codes import ERROR_INVALID_ARGS
from romodoro.utils.ui.console import get_console
from romodoro.utils.ui.formatters import format_success

from .decorators import AppError, command_wrapper

console = get_console()
app = typer.Typer(help="Configuration management")


@app.command("show")
@command_wrapper
def show_config():
    """Show the current configuration."""
    svc = get_config_service()
    console.print_json(json.dumps(svc.config.model_dump()))
    console.print(f"[dim]Config file: {svc.config_path}[/dim]")
    console.print(f"[dim]Database:    {svc.database_path}[/dim]")


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Dotted key, e.g. timer.bell"),
    value: str = typer.Argument(..., help="New value"),
):
    """Set a configuration value."""
    svc = get_config_service()
    try:
        svc.set_value(key, value)
    except (ValueError, ValidationError) as e:
        raise AppError(f"Invalid value for '{key}': {e}", ERROR_INVALID_ARGS) from e
    format_success(f"Set {key} = {svc.config.get_value(key)!r}")


@app.command("reset")
@command_wrapper
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
):
    """Reset configuration to defaults."""
    if not yes and not typer.confirm("Reset configuration to defaults?", default=False):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)
    get_config_service().reset_config()
    format_success("Configuration reset")
