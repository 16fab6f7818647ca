"""Base emitter protocol.

Emitters deliver result messages to a listener. They are completely
decoupled from analyses - they only know about ResultMessage.
"""

import logging
import threading
from abc import ABC, abstractmethod

from ..analyses.protocol import AnalyzeStatus, ResultMessage, VerbosityLevel
from ..core.errors import DeliveryError

logger = logging.getLogger(__name__)


class ResultEmitter(ABC):
    """
    Base class for all result emitters.

    ``send`` may be called from several analysis threads at once.
    Implementations raise DeliveryError when a message cannot be delivered;
    callers log that and carry on.
    """

    def __init__(self, verbosity: VerbosityLevel = VerbosityLevel.NORMAL):
        """
        Initialize emitter.

        Args:
            verbosity: Output verbosity level
        """
        self.verbosity = verbosity
        self.failures: list[str] = []
        self._stats_lock = threading.Lock()

    def send(self, message: ResultMessage) -> None:
        """
        Deliver a message.

        Args:
            message: Message to deliver

        Raises:
            DeliveryError: If the transport failed
        """
        if message.status == AnalyzeStatus.FAILURE:
            with self._stats_lock:
                self.failures.append(message.text)
        self.deliver(message)

    @abstractmethod
    def deliver(self, message: ResultMessage) -> None:
        """Write the message to the underlying transport."""
        ...


def send_safely(emitter: ResultEmitter, message: ResultMessage) -> bool:
    """
    Send a message, logging instead of raising on delivery failure.

    Args:
        emitter: Target emitter
        message: Message to send

    Returns:
        True if delivered
    """
    try:
        emitter.send(message)
        return True
    except DeliveryError as e:
        logger.warning(f"Couldn't deliver result {message.text!r}: {e}")
        return False
