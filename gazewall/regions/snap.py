from __future__ import annotations
from typing import Tuple
from .index import RegionIndex

class RegionSnapper:
    """Pull a smoothed point onto the nearest region center when closer than `threshold`."""
    def __init__(self, index: RegionIndex, threshold: float=120.0):
        self.index = index; self.threshold = threshold

    def snap(self, x: float, y: float) -> Tuple[float,float]:
        region, d = self.index.nearest(x, y)
        if region is not None and d < self.threshold:
            return region.bounds.center
        return x, y  # d == threshold is "not snapped"
