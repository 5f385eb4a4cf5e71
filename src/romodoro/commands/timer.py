"""Interactive focus timer command."""

from datetime import datetime

from romodoro.models.focus.controller import SessionController, generate_session_name
from romodoro.models.focus.notifier import BellNotifier
from romodoro.models.focus.ui import TimerDisplay, show_goodbye_message
from romodoro.services.config_service import get_config_service
from romodoro.services.store_service import open_session_store
from romodoro.utils.ui.console import get_console

from .decorators import command_wrapper


@command_wrapper
def run_timer():
    """Start the interactive focus timer."""
    console = get_console()
    config = get_config_service().config

    with open_session_store(reconcile=config.storage.reconcile_on_startup) as store:
        controller = SessionController(
            store,
            on_phase_complete=BellNotifier(console, enabled=config.timer.bell),
            name_factory=lambda: generate_session_name(
                datetime.now(), config.session_name_format
            ),
        )
        display = TimerDisplay(console)
        try:
            display.run(
                controller,
                tick_interval=config.timer.tick_interval,
                refresh_per_second=config.timer.refresh_per_second,
            )
        finally:
            # Any exit path still finalizes the active split
            controller.shutdown()

    show_goodbye_message(controller.snapshot(), console)
