"""Concurrent analyzer coordinator.

Launches every analysis of a run on its own thread, waits for all of them
through a join counter and finishes the run with a single Complete message.
"""

import logging
import threading
import time
from dataclasses import dataclass

from ..analyses.protocol import PageAnalysis, ResultMessage, RunState
from ..emitters.base import ResultEmitter
from ..utils.escaping import escape_html
from .document import Document
from .errors import DeliveryError
from .waitgroup import WaitGroup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisRequest:
    """One page to analyze."""

    source_url: str
    document: Document


def format_duration(seconds: float) -> str:
    """
    Format a duration the way it is reported to clients.

    Args:
        seconds: Duration in seconds

    Returns:
        Human readable duration, e.g. "850µs", "12.5ms", "1.204s"
    """
    if seconds < 0.001:
        return f"{seconds * 1_000_000:.3g}µs"
    if seconds < 1:
        return f"{seconds * 1000:.6g}ms"
    return f"{seconds:.6g}s"


class PageAnalyzer:
    """
    Runs a set of analyses concurrently against one document.

    Usage:
        analyzer = PageAnalyzer(request, emitter, analyses)
        analyzer.start()
        analyzer.wait()
        analyzer.complete()

    Every message goes through one gate so that nothing reaches the emitter
    after the Complete message, even when a wait timeout leaves analyses
    running. Sends run outside the gate lock, so a slow listener only stalls
    the thread that is sending; complete() waits for sends already admitted.
    """

    def __init__(
        self,
        request: AnalysisRequest,
        emitter: ResultEmitter,
        analyses: list[PageAnalysis],
        wait_timeout: float | None = None,
    ):
        """
        Initialize analyzer.

        Args:
            request: Page to analyze
            emitter: Sink for result messages
            analyses: Analyses to launch, in launch order
            wait_timeout: Max seconds wait() blocks (None waits forever)
        """
        self.request = request
        self.emitter = emitter
        self.analyses = list(analyses)
        self.wait_timeout = wait_timeout
        self.state = RunState()

        self._pending = WaitGroup()
        self._running: set[str] = set()
        self._running_lock = threading.Lock()
        self._gate = threading.Condition()
        self._in_flight = 0
        self._completed = False
        self._started = False

    @property
    def pending(self) -> int:
        """Number of launched analyses that have not finished yet."""
        return self._pending.count

    def start(self) -> "PageAnalyzer":
        """
        Launch all analyses.

        Returns:
            Self, to be used as the run handle

        Raises:
            RuntimeError: If the run was already started or a thread cannot start
        """
        if self._started:
            raise RuntimeError("Analyzer already started")
        self._started = True

        self.state.started_at = time.monotonic()
        logger.info(
            f"Analyzing {self.request.source_url} with {len(self.analyses)} analyses"
        )

        for analysis in self.analyses:
            self._launch(analysis)

        return self

    def wait(self) -> bool:
        """
        Block until every launched analysis has finished.

        Returns:
            True if all analyses finished, False if the wait timed out
        """
        finished = self._pending.wait(self.wait_timeout)
        self.state.processing_duration = time.monotonic() - self.state.started_at

        if not finished:
            with self._running_lock:
                still_running = sorted(self._running)
            logger.warning(
                f"Timed out after {self.wait_timeout}s waiting for: {', '.join(still_running)}"
            )
            self._emit(
                ResultMessage.failure(
                    f"analyzing timed out after {self.wait_timeout}s : "
                    f"{', '.join(still_running)} did not finish"
                )
            )

        return finished

    def complete(self) -> None:
        """Send the Complete message and close the run to further messages."""
        if self.state.processing_duration is None:
            self.state.processing_duration = time.monotonic() - self.state.started_at

        duration = format_duration(self.state.processing_duration)
        with self._gate:
            if self._completed:
                logger.warning("complete() called twice, ignoring")
                return
            self._completed = True
            self._gate.wait_for(lambda: self._in_flight == 0)

        self._send(ResultMessage.complete(f"analyzing completed : total processing time {duration}"))

        logger.info(f"Finished {self.request.source_url} in {duration}")

    def run(self) -> RunState:
        """
        Start, wait for and complete the run.

        Returns:
            Final run state
        """
        self.start()
        self.wait()
        self.complete()
        return self.state

    # ========================================================================
    # Helper Methods
    # ========================================================================

    def _launch(self, analysis: PageAnalysis) -> None:
        """Count the analysis as in flight, then start its thread."""
        self._pending.add(1)
        with self._running_lock:
            self._running.add(analysis.analysis_id)

        thread = threading.Thread(
            target=self._run_analysis,
            args=(analysis,),
            name=f"analysis-{analysis.analysis_id}",
            daemon=True,
        )
        try:
            thread.start()
        except RuntimeError:
            self._finish(analysis)
            raise

    def _run_analysis(self, analysis: PageAnalysis) -> None:
        try:
            analysis.run(self.request.document, self._emit, self.state)
        except Exception as e:
            logger.error(f"Analysis '{analysis.analysis_id}' failed: {e}", exc_info=True)
            self._emit(ResultMessage.failure(f"{analysis.name} failed : {escape_html(str(e))}"))
        finally:
            self._finish(analysis)

    def _finish(self, analysis: PageAnalysis) -> None:
        with self._running_lock:
            self._running.discard(analysis.analysis_id)
        self._pending.done()

    def _emit(self, message: ResultMessage) -> None:
        with self._gate:
            if self._completed:
                logger.warning(f"Dropping message after completion: {message.text}")
                return
            self._in_flight += 1

        try:
            self._send(message)
        finally:
            with self._gate:
                self._in_flight -= 1
                self._gate.notify_all()

    def _send(self, message: ResultMessage) -> None:
        try:
            self.emitter.send(message)
        except DeliveryError as e:
            logger.warning(f"Couldn't deliver result {message.text!r}: {e}")
