"""Phase-completion notifications."""

import logging

from rich.console import Console

from .timer import Phase

logger = logging.getLogger(__name__)


class BellNotifier:
    """Rings the terminal bell when a focus or rest phase runs out."""

    def __init__(self, console: Console | None = None, enabled: bool = True):
        self.console = console or Console()
        self.enabled = enabled
        self.count = 0

    def __call__(self, phase: Phase) -> None:
        self.count += 1
        logger.info("%s phase completed", phase.value)
        if self.enabled:
            self.console.bell()
