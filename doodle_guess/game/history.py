from collections import deque
from typing import Iterator

from doodle_guess.orchestrator.contracts import GuessResult

HISTORY_CAPACITY = 10


class GuessHistory:
    """Most-recent-first guess log, capped at `capacity` entries."""

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._items: deque[GuessResult] = deque(maxlen=capacity)

    def push(self, result: GuessResult):
        # appendleft on a bounded deque drops the oldest entry from the right
        self._items.appendleft(result)

    def clear(self):
        self._items.clear()

    def latest(self) -> GuessResult | None:
        return self._items[0] if self._items else None

    def items(self) -> list[GuessResult]:
        return list(self._items)

    def __iter__(self) -> Iterator[GuessResult]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)
