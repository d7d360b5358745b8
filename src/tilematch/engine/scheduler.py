from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Callable


@dataclass(order=True)
class _Timer:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)


class Scheduler:
    """Game-loop driven timers.

    The clock only moves when ``advance`` is called, so the engine stays
    deterministic and tests can step time explicitly. Scheduled callbacks
    always run once they are due; there is no cancellation.
    """

    def __init__(self, now: float = 0.0) -> None:
        self.now = now
        self._timers: list[_Timer] = []
        self._seq = 0

    @property
    def pending(self) -> int:
        return len(self._timers)

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        self._seq += 1
        heapq.heappush(self._timers, _Timer(due=self.now + max(0.0, delay), seq=self._seq, callback=callback))

    def advance(self, dt: float) -> int:
        """Move the clock forward by ``dt`` seconds and run every due callback.

        Returns the number of callbacks fired.
        """
        target = self.now + max(0.0, dt)
        fired = 0
        while self._timers and self._timers[0].due <= target:
            timer = heapq.heappop(self._timers)
            # Callbacks observe the time they were due at
            self.now = max(self.now, timer.due)
            timer.callback()
            fired += 1
        self.now = target
        return fired
