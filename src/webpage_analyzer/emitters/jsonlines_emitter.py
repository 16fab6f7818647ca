"""JSON Lines emitter.

Writes one JSON object per message, suitable for streaming results to
another process.

JSON Lines format: http://jsonlines.org/
"""

import json
import sys
import threading
from typing import TextIO

from ..analyses.protocol import ResultMessage
from ..core.errors import DeliveryError
from .base import ResultEmitter


class JSONLinesEmitter(ResultEmitter):
    """
    Emits messages in wire format, one per line.

    Example output:
        {"Result": "title : Example Domain", "Status": 0}
        {"Result": "analyzing completed : total processing time 3.2ms", "Status": 2}
    """

    def __init__(self, stream: TextIO | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.stream = stream if stream is not None else sys.stdout
        self._write_lock = threading.Lock()

    def deliver(self, message: ResultMessage) -> None:
        line = json.dumps(message.to_wire(), ensure_ascii=False)
        with self._write_lock:
            try:
                self.stream.write(line + "\n")
                self.stream.flush()
            except (OSError, ValueError) as e:
                raise DeliveryError(f"couldn't write result: {e}") from e
