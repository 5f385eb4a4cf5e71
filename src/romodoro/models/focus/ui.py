"""Full-screen timer UI."""

import time
from collections.abc import Callable

from rich.align import Align
from rich.console import Console, Group, RenderableType
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from romodoro.utils.ui.formatters import format_duration, format_timestamp, get_progress_bar

from .controller import AppState, ControllerSnapshot, SessionController, SetupStep
from .keyboard import KeyboardHandler, KeyMapper
from .timer import Phase

# Poll the keyboard often enough for snappy input between ticks
_POLL_SECONDS = 0.1

FOOTER_HINTS = {
    AppState.MAIN_MENU: "Press '1', '2' or '3'  •  'q' to quit",
    AppState.TIMER_SETUP: "Type minutes and press Enter  •  'm' main menu  •  'q' to quit",
    AppState.RUNNING: "Press 'p' to pause  •  'b' back to session  •  'm' main menu",
    AppState.PAUSED: "Press 's' or 'c' to continue  •  'b' back to session  •  'm' main menu",
    AppState.BROWSER: "↑/↓ or j/k to navigate  •  'x' to delete  •  'm' to go back",
}


class TimerDisplay:
    """Renders controller snapshots and runs the interactive loop."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def create_layout(self, snapshot: ControllerSnapshot, input_buffer: str = "") -> Layout:
        """Create the screen layout for a snapshot."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        header_text = Text("🍅  ROMODORO", style="bold #FAFAFA on #7D56F4", justify="center")
        layout["header"].update(Align.center(header_text, vertical="middle"))

        layout["body"].update(
            Align.center(self._create_body_content(snapshot, input_buffer), vertical="middle")
        )

        layout["footer"].update(
            Align.center(self._create_footer_text(snapshot), vertical="middle")
        )
        return layout

    def _create_body_content(
        self, snapshot: ControllerSnapshot, input_buffer: str = ""
    ) -> RenderableType:
        components: list[RenderableType] = []

        if snapshot.state in (AppState.TIMER_SETUP, AppState.RUNNING, AppState.PAUSED):
            header = self._create_session_header(snapshot)
            if header is not None:
                components.append(header)

        if snapshot.state == AppState.MAIN_MENU:
            components.append(self._create_main_menu())
        elif snapshot.state == AppState.TIMER_SETUP:
            components.append(self._create_setup(snapshot, input_buffer))
        elif snapshot.state == AppState.RUNNING:
            components.append(self._create_timer(snapshot))
        elif snapshot.state == AppState.PAUSED:
            components.append(self._create_paused(snapshot))
        elif snapshot.state == AppState.BROWSER:
            components.append(self._create_browser(snapshot))

        if snapshot.last_error:
            components.append(Text(snapshot.last_error, style="bold red", justify="center"))

        return Group(*components)

    def _create_main_menu(self) -> Panel:
        menu = Text(justify="left")
        menu.append("Welcome to Romodoro!\n\n", style="bold")
        menu.append("1. Continue Session\n")
        menu.append("2. Browse Previous Sessions\n")
        menu.append("3. Create New Session")
        return Panel(menu, padding=(2, 4), width=50)

    def _create_session_header(self, snapshot: ControllerSnapshot) -> Panel | None:
        session = snapshot.session
        if session is None:
            return None
        content = Text(justify="center")
        content.append(f"📝 Session: {session.name}\n")
        content.append(f"🎯 Total Focus Time: {format_duration(session.total_focus_seconds)}\n")
        content.append(f"☕ Total Rest Time: {format_duration(session.total_rest_seconds)}")
        return Panel(content, style="bold #04B575", padding=(1, 2), width=60)

    def _create_setup(self, snapshot: ControllerSnapshot, input_buffer: str) -> Panel:
        content = Text()
        if snapshot.setup_step == SetupStep.FOCUS:
            content.append("🎯 Set Focus Time\n\n", style="bold")
            label = "Enter focus time in minutes..."
        else:
            content.append("☕ Set Rest Time\n\n", style="bold")
            content.append(f"Focus: {snapshot.pending_focus_minutes} minutes\n")
            label = "Enter rest time in minutes..."

        if snapshot.input_error:
            content.append(f"{snapshot.input_error}\n", style="red")
        if input_buffer:
            content.append(f"> {input_buffer}", style="bold cyan")
        else:
            content.append(f"> {label}", style="dim")
        return Panel(content, padding=(1, 2), width=60)

    def _create_timer(self, snapshot: ControllerSnapshot) -> Panel:
        if snapshot.phase == Phase.FOCUS:
            title, color = "🎯 FOCUS TIME", "#FF6B6B"
        else:
            title, color = "☕ REST TIME", "#4ECDC4"

        content = Text(justify="center")
        content.append(f"{title}\n\n", style="bold")
        pct = int(snapshot.progress * 100)
        content.append(f"{get_progress_bar(snapshot.progress)}  {pct}%\n\n")
        content.append(f"Time Remaining: {format_duration(snapshot.remaining_seconds)}\n\n")
        if snapshot.split is not None:
            content.append(
                f"Current Split: {snapshot.split.focus_minutes}m focus / "
                f"{snapshot.split.rest_minutes}m rest"
            )
        return Panel(content, style=f"bold white on {color}", padding=(1, 2), width=70)

    def _create_paused(self, snapshot: ControllerSnapshot) -> Panel:
        phase = "🎯 Focus" if snapshot.phase == Phase.FOCUS else "☕ Rest"
        content = Text(justify="center")
        content.append("⏸️  PAUSED\n\n", style="bold")
        content.append(f"Time Remaining: {format_duration(snapshot.remaining_seconds)}\n\n")
        content.append(f"Phase: {phase}")
        return Panel(content, style="bold white on #FFE66D", padding=(1, 2), width=70)

    def _create_browser(self, snapshot: ControllerSnapshot) -> Panel:
        content = Text()
        content.append("📊 Session History\n\n", style="bold")

        if not snapshot.sessions:
            content.append("No sessions found.")
            return Panel(content, padding=(1, 2), width=70)

        content.append(f"  {'Started':<15} {'Ended':<15} {'Focus':<12} {'Rest':<12}\n")
        content.append("─" * 60 + "\n")
        for index, session in enumerate(snapshot.sessions):
            row = (
                f"{format_timestamp(session.start_time):<15} "
                f"{format_timestamp(session.end_time):<15} "
                f"{format_duration(session.total_focus_seconds):<12} "
                f"{format_duration(session.total_rest_seconds):<12}"
            )
            if index == snapshot.selected_index:
                content.append(f"→ {row}\n", style="#FFFFFF on #7D56F4")
            else:
                content.append(f"  {row}\n")
        return Panel(content, padding=(1, 2), width=70)

    def _create_footer_text(self, snapshot: ControllerSnapshot) -> Text:
        return Text(FOOTER_HINTS.get(snapshot.state, ""), style="dim", justify="center")

    def run(
        self,
        controller: SessionController,
        keyboard: KeyboardHandler | None = None,
        mapper: KeyMapper | None = None,
        tick_interval: float = 1.0,
        refresh_per_second: int = 4,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Run the interactive loop until the controller finishes.

        Keys are polled continuously; one tick is delivered each time
        *tick_interval* elapses while the controller is running. Missed
        ticks are not caught up.
        """
        keyboard = keyboard or KeyboardHandler()
        mapper = mapper or KeyMapper()
        next_tick: float | None = None

        try:
            with Live(
                self.create_layout(controller.snapshot(), mapper.buffer),
                console=self.console,
                refresh_per_second=refresh_per_second,
                screen=True,
            ) as live:
                while not controller.finished:
                    mapped = mapper.map_key(controller.state, keyboard.get_key(_POLL_SECONDS))
                    if mapped is not None:
                        controller.dispatch(*mapped)

                    now = clock()
                    if controller.state == AppState.RUNNING:
                        if next_tick is None:
                            next_tick = now + tick_interval
                        elif now >= next_tick:
                            controller.tick()
                            next_tick = now + tick_interval
                    else:
                        next_tick = None

                    live.update(self.create_layout(controller.snapshot(), mapper.buffer))

        except KeyboardInterrupt:
            controller.shutdown()
        finally:
            keyboard.stop()


def show_goodbye_message(snapshot: ControllerSnapshot, console: Console | None = None):
    """Summarize the session the user was working on when they quit."""
    console = console or Console()
    session = snapshot.session
    if session is None:
        console.print("[dim]Goodbye.[/dim]")
        return

    panel = Panel(
        f"""[bold green]Session saved[/bold green]

Session: {session.name}
Focus time: {format_duration(session.total_focus_seconds)}
Rest time: {format_duration(session.total_rest_seconds)}""",
        border_style="green",
        padding=(1, 2),
    )
    console.print(panel)
