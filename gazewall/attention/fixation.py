from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Tuple
from ..regions.index import RegionIndex

@dataclass
class RegionFixationState:
    fixation_ticks: int = 0      # lifetime ticks spent hitting the region
    hold: float = 0.0            # decaying recent-attention counter (s)
    stage: int = 0               # reaction ordinal, owned by ReactionStateMachine
    markers: Set[str] = field(default_factory=set)

@dataclass
class TickResult:
    hit: Optional[str]
    focused: Optional[str]
    focus_changed: bool = False
    scored: bool = False

class FixationTracker:
    """
    Per-region dwell accounting at a fixed tick `dt`.

    The hit region gains `dt` of hold and fixation time; every other region's hold
    drains at `dt * decay`. Fixation time is kept as an integer tick count so totals are
    exact multiples of `dt`. Focus moves only when the hit region changes identity; a tick
    without a hit keeps the previous focus. Every `score_every` hits on the focused region
    (counted since focus last changed) the tick is flagged as `scored`.
    """
    def __init__(self, index: RegionIndex, dt: float=0.12, decay: float=2.0, score_every: int=25):
        if decay <= 1.0: raise ValueError("decay must be > 1")
        self.index = index; self.dt = dt; self.decay = decay; self.score_every = score_every
        self.states: Dict[str,RegionFixationState] = {rid: RegionFixationState() for rid in index.ids}
        self.focused: Optional[str] = None
        self._streak = 0

    def fixation_time(self, rid: str) -> float:
        return self.states[rid].fixation_ticks * self.dt

    def totals(self) -> Dict[str,float]:
        return {rid: self.fixation_time(rid) for rid in self.states}

    def update(self, pos: Optional[Tuple[float,float]]) -> TickResult:
        hit = self.index.first_hit(*pos) if pos is not None else None
        hit_id = hit.id if hit is not None else None
        for rid, st in self.states.items():
            if rid == hit_id:
                st.hold += self.dt; st.fixation_ticks += 1
            else:
                st.hold = max(0.0, st.hold - self.dt*self.decay)
        res = TickResult(hit=hit_id, focused=self.focused)
        if hit_id is None:
            return res
        if hit_id != self.focused:
            self.focused = hit_id; self._streak = 0
            res.focused = hit_id; res.focus_changed = True
        self._streak += 1
        res.scored = bool(self.score_every) and self._streak % self.score_every == 0
        return res
