"""Frame rate over a sliding window of frame timestamps."""

from collections import deque
from time import time
import math


class FpsCounter:
    def __init__(self, num_samples: int = 120) -> None:
        self._times: deque[float] = deque(maxlen=num_samples)

    @property
    def num_samples(self) -> int:
        return self._times.maxlen or 0

    def tick(self, now: float | None = None) -> None:
        self._times.append(time() if now is None else now)

    def get_fps(self) -> int:
        """Mean rate over the window"""
        if len(self._times) < 2:
            return 0
        elapsed: float = self._times[-1] - self._times[0]
        if elapsed <= 0:
            return 0
        return int(math.floor((len(self._times) - 1) / elapsed))

    def get_min_fps(self) -> int:
        """Rate implied by the slowest frame in the window"""
        if len(self._times) < 2:
            return 0
        times = list(self._times)
        longest: float = max(b - a for a, b in zip(times, times[1:]))
        if longest <= 0:
            return 0
        return int(math.floor(1.0 / longest))
