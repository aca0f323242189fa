from __future__ import annotations
from collections import deque
from typing import Deque, Tuple

class TemporalSmoother:
    """Arithmetic mean over the last `window` accepted samples (FIFO)."""
    def __init__(self, window: int=6):
        if window < 1: raise ValueError("window must be >= 1")
        self.buf: Deque[Tuple[float,float]] = deque(maxlen=window)

    def push(self, x: float, y: float) -> Tuple[float,float]:
        self.buf.append((x, y))
        n = len(self.buf)
        # first push returns the sample itself
        return sum(p[0] for p in self.buf)/n, sum(p[1] for p in self.buf)/n

    def __len__(self): return len(self.buf)
