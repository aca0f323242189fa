from __future__ import annotations
import logging
from typing import Dict, Union
from ..regions.index import RegionCategory
from ..runtime.events import AttentionProfile, INSUFFICIENT
from .fixation import FixationTracker

logger = logging.getLogger(__name__)

CATEGORY_LABELS = {
    RegionCategory.PRIVATE: "VOYEUR",
    RegionCategory.DOMESTIC: "CARETAKER",
    RegionCategory.TRANSIT: "PATROLLER",
}
DIFFUSE_LABEL = "DIFFUSE ATTENTION"
NEUTRAL_LABEL = "OBSERVER"

def classify(category: RegionCategory, share: float) -> str:
    if share > 0.4: return CATEGORY_LABELS.get(category, NEUTRAL_LABEL)
    if share < 0.35: return DIFFUSE_LABEL
    return NEUTRAL_LABEL

class AttentionAggregator:
    """Dominant-category profile over the tracker's lifetime fixation totals."""
    def __init__(self, tracker: FixationTracker, min_total: float=1.0):
        self.tracker = tracker; self.min_total = min_total

    def category_totals(self) -> Dict[RegionCategory,float]:
        out: Dict[RegionCategory,float] = {}
        for region in self.tracker.index:
            out[region.category] = out.get(region.category, 0.0) + self.tracker.fixation_time(region.id)
        return out

    def profile(self) -> Union[AttentionProfile,str]:
        totals = self.category_totals()
        grand = sum(totals.values())
        if grand <= 0 or grand < self.min_total: return INSUFFICIENT
        dominant, best = None, -1.0
        for cat, total in totals.items():
            if total > best: dominant, best = cat, total
        share = best / grand
        return AttentionProfile(dominant=dominant.value, share=share, label=classify(dominant, share))

class Score:
    """Monotonic score accumulator."""
    def __init__(self, value: float=0.0):
        self.value = float(value)

    def add(self, points: float=1.0) -> float:
        if points < 0: raise ValueError(f"score can only grow, got {points}")
        self.value += points
        logger.debug("score +%s -> %s", points, self.value)
        return self.value

    def __float__(self): return self.value
