from __future__ import annotations
import math
from typing import Optional

class SampleFilter:
    """
    Drops blink / tracking-loss spikes: a candidate further than `threshold` px from
    the previous accepted sample is rejected. The first finite sample is always accepted;
    non-finite coordinates never are. Stateless; the caller keeps "last accepted" and
    updates it only on acceptance.
    """
    def __init__(self, threshold: float=700.0):
        self.threshold = threshold

    def accept(self, prev, candidate) -> bool:
        if not (math.isfinite(candidate.x) and math.isfinite(candidate.y)): return False
        if prev is None: return True
        return math.hypot(candidate.x - prev.x, candidate.y - prev.y) <= self.threshold
