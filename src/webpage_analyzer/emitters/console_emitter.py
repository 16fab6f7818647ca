"""Console emitter using Rich library.

Prints each message as it arrives, styled by status.
"""

import threading

from rich.console import Console
from rich.markup import escape

from ..analyses.protocol import AnalyzeStatus, ResultMessage, VerbosityLevel
from .base import ResultEmitter


class ConsoleEmitter(ResultEmitter):
    """
    Renders messages to the terminal.

    Maps status to Rich markup:
    - success -> green check
    - failure -> red cross
    - complete -> bold blue
    """

    STYLE_MAP = {
        AnalyzeStatus.SUCCESS: ("green", "✓"),
        AnalyzeStatus.FAILURE: ("red", "✗"),
        AnalyzeStatus.COMPLETE: ("bold blue", "●"),
    }

    def __init__(
        self,
        verbosity: VerbosityLevel = VerbosityLevel.NORMAL,
        color: bool = True,
        console: Console | None = None,
    ):
        """
        Initialize console emitter.

        Args:
            verbosity: Output verbosity level
            color: Enable colored output
            console: Console to print to (created if None)
        """
        super().__init__(verbosity)
        self.console = console or Console(color_system="auto" if color else None)
        self._print_lock = threading.Lock()

    def deliver(self, message: ResultMessage) -> None:
        # Quiet mode only shows failures and the final summary
        if self.verbosity == VerbosityLevel.QUIET and message.status == AnalyzeStatus.SUCCESS:
            return

        style, icon = self.STYLE_MAP[message.status]
        with self._print_lock:
            self.console.print(f"[{style}]{icon}[/{style}] {escape(message.text)}")
