"""Logging configuration for the analyzer.

Every analysis runs on a thread named ``analysis-<id>``; log records carry
that id so interleaved output from one run can be told apart.
"""

import logging
import sys
import threading
from typing import TextIO

from ..analyses.protocol import VerbosityLevel

ANALYSIS_THREAD_PREFIX = "analysis-"

VERBOSITY_LEVELS = {
    VerbosityLevel.QUIET: logging.ERROR,
    VerbosityLevel.NORMAL: logging.WARNING,
    VerbosityLevel.VERBOSE: logging.INFO,
    VerbosityLevel.DEBUG: logging.DEBUG,
}

# Libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "selenium", "uvicorn.access")


class AnalysisContextFilter(logging.Filter):
    """Adds ``record.analysis``: the analysis id of the logging thread, or "-"."""

    def filter(self, record: logging.LogRecord) -> bool:
        thread_name = record.threadName or threading.current_thread().name
        if thread_name.startswith(ANALYSIS_THREAD_PREFIX):
            record.analysis = thread_name[len(ANALYSIS_THREAD_PREFIX) :]
        else:
            record.analysis = "-"
        return True


def setup_logger(
    name: str = "webpage_analyzer",
    level: VerbosityLevel = VerbosityLevel.NORMAL,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure the analyzer's logger for a verbosity level.

    Logs go to stderr by default so JSON Lines output on stdout stays clean.
    Below DEBUG, request logging from the HTTP and browser libraries is
    held at WARNING.

    Args:
        name: Logger name
        level: Verbosity level enum
        stream: Output stream (stderr when None)

    Returns:
        Configured logger
    """
    log_level = VERBOSITY_LEVELS[level]

    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(log_level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(log_level)
    handler.addFilter(AnalysisContextFilter())

    if level == VerbosityLevel.DEBUG:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s.%(msecs)03d %(levelname)-7s [%(analysis)s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s [%(analysis)s]: %(message)s"))

    logger.addHandler(handler)

    third_party_level = logging.DEBUG if level == VerbosityLevel.DEBUG else logging.WARNING
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(third_party_level)

    return logger
