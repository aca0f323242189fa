from __future__ import annotations
import math
import numpy as np
from collections import deque
from typing import Deque, Optional, Tuple, Union
from ..runtime.events import INSUFFICIENT

# (mean jitter upper bound px, rating); anything above the last bound rates 1
BANDS = ((4.0, 5), (10.0, 4), (20.0, 3), (40.0, 2))

class StabilityScorer:
    """Rolling jitter (distance between consecutive logical positions) -> 1..5 rating."""
    def __init__(self, capacity: int=60, min_samples: int=5):
        self.buf: Deque[float] = deque(maxlen=capacity)
        self.min_samples = min_samples
        self._last: Optional[Tuple[float,float]] = None

    def push(self, x: float, y: float):
        if self._last is not None:
            self.buf.append(math.hypot(x - self._last[0], y - self._last[1]))
        self._last = (x, y)

    def mean_jitter(self) -> Optional[float]:
        return float(np.mean(self.buf)) if self.buf else None

    def rating(self) -> Union[int,str]:
        if len(self.buf) < self.min_samples: return INSUFFICIENT
        m = self.mean_jitter()
        for bound, r in BANDS:
            if m < bound: return r
        return 1
