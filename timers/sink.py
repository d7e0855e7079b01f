from __future__ import annotations

import logging
import sys
from threading import Lock
from typing import List, Protocol, TextIO

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def put(self, message: str) -> None: ...


class ConsoleSink:
    """Writes notifications to a text stream, one per line."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdout
        self._lock = Lock()

    def put(self, message: str) -> None:
        logger.debug("Notify: %s", message)
        # the scheduler thread and the command thread both write here
        with self._lock:
            self.stream.write(message + "\n")
            self.stream.flush()


class MemorySink:
    """Collects notifications in a list; handy for embedding and tests."""

    def __init__(self) -> None:
        self.messages: List[str] = []
        self._lock = Lock()

    def put(self, message: str) -> None:
        with self._lock:
            self.messages.append(message)

    def snapshot(self) -> List[str]:
        with self._lock:
            return list(self.messages)
