import logging
import threading
from dataclasses import dataclass, field
from typing import Optional, List

from doodle_guess.orchestrator.contracts import AnalyzeResult

logger = logging.getLogger("doodle_guess")

MAX_LOG_LINES = 200


@dataclass
class StatusStore:
    in_flight: int = 0
    last_guess: Optional[AnalyzeResult] = None
    last_error: Optional[str] = None
    logs: List[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def enter(self):
        with self._lock:
            self.in_flight += 1

    def leave(self):
        with self._lock:
            self.in_flight = max(0, self.in_flight - 1)

    def log(self, msg: str, level: int = logging.INFO):
        logger.log(level, msg)
        with self._lock:
            self.logs.append(msg)
            if len(self.logs) > MAX_LOG_LINES:
                self.logs = self.logs[-MAX_LOG_LINES:]
