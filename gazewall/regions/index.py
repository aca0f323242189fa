from __future__ import annotations
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

class RegionCategory(str, Enum):
    PRIVATE = "private"
    DOMESTIC = "domestic"
    TRANSIT = "transit"

@dataclass(frozen=True)
class Rect:
    x: float; y: float; w: float; h: float

    @property
    def center(self) -> Tuple[float,float]:
        return self.x + self.w/2.0, self.y + self.h/2.0

    def contains(self, px: float, py: float, margin: float=0.0) -> bool:
        return (self.x - margin <= px <= self.x + self.w + margin and
                self.y - margin <= py <= self.y + self.h + margin)

@dataclass
class Region:
    id: str
    label: str
    category: RegionCategory
    bounds: Rect = field(default_factory=lambda: Rect(0, 0, 0, 0))

class RegionIndex:
    """
    Fixed, ordered set of trackable regions. Registration order is canonical: it decides
    nearest-region ties and which region wins a hit-test when expanded bounds overlap.
    Membership never changes after construction; only bounds are refreshed (on resize).
    """
    def __init__(self, regions: List[Region], hit_margin: float=80.0):
        if hit_margin <= 0:
            raise ValueError("hit_margin must be > 0")
        ids = [r.id for r in regions]
        if len(set(ids)) != len(ids):
            raise ValueError(f"duplicate region ids: {ids}")
        self._regions: Tuple[Region,...] = tuple(regions)
        self._by_id: Dict[str,Region] = {r.id: r for r in regions}
        self.hit_margin = hit_margin

    def __iter__(self) -> Iterator[Region]: return iter(self._regions)
    def __len__(self) -> int: return len(self._regions)
    def __getitem__(self, rid: str) -> Region: return self._by_id[rid]

    @property
    def ids(self) -> List[str]: return [r.id for r in self._regions]

    def refresh(self, bounds: Dict[str,Rect]):
        """Replace bounds for the given ids. Unknown ids raise KeyError."""
        for rid in bounds:
            if rid not in self._by_id: raise KeyError(rid)
        for rid, rect in bounds.items():
            self._by_id[rid].bounds = replace(rect)

    def nearest(self, x: float, y: float) -> Tuple[Optional[Region], float]:
        best, best_d = None, math.inf
        for r in self._regions:
            cx, cy = r.bounds.center
            d = math.hypot(x - cx, y - cy)
            if d < best_d:  # strict: earlier registration wins ties
                best, best_d = r, d
        return best, best_d

    def hit_test(self, x: float, y: float, region: Region) -> bool:
        return region.bounds.contains(x, y, self.hit_margin)

    def first_hit(self, x: float, y: float) -> Optional[Region]:
        for r in self._regions:
            if self.hit_test(x, y, r): return r
        return None
