"""Elapsed-seconds game clock."""
import math
import time
from typing import Callable, Optional

MAX_ELAPSED = 999


class GameTimer:
    """Counts whole seconds from the first reveal, saturating at 999.

    The clock is injected so the same timer runs on wall time in plain
    Python and on deterministic workflow time inside Temporal.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time
        self.start_time: Optional[float] = None
        self.elapsed: int = 0
        self.running: bool = False
        self.started: bool = False

    def start(self) -> None:
        """Anchor the clock. Only the first call has any effect."""
        if self.started:
            return
        self.start_time = self._clock()
        self.running = True
        self.started = True
        self.tick()

    def tick(self) -> int:
        """Refresh elapsed from the clock; a stopped timer keeps its value."""
        if not self.running or self.start_time is None:
            return self.elapsed
        seconds = math.floor(self._clock() - self.start_time)
        self.elapsed = min(max(seconds, 0), MAX_ELAPSED)
        return self.elapsed

    def stop(self) -> int:
        """Freeze elapsed at its current value. Stopping twice is a no-op."""
        if self.running:
            self.tick()
            self.running = False
        return self.elapsed

    def reset(self) -> None:
        self.elapsed = 0
        if self.running:
            self.start_time = self._clock()
        else:
            self.start_time = None
