from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List
from .fixation import RegionFixationState

class Stage(IntEnum):
    NONE = 0
    WATCHED = 1   # soft glow, escalated to strong by the second threshold
    LOGGED = 2
    GHOST = 3

@dataclass
class Reaction:
    region_id: str
    kind: str     # soft | strong | logged | ghost | reset
    stage: int
    hold: float

class ReactionStateMachine:
    """
    Staged reaction per region keyed purely on hold time.

    Within one accrual episode the stage only rises and each threshold fires once.
    The episode ends (stage 0, markers and flash cleared) when hold drops below soft/2.
    Ghost additionally starts a short transient flash that clears itself.
    """
    def __init__(self, soft: float=0.4, strong: float=0.9, logged: float=1.4, ghost: float=2.2, ghost_flash: float=0.22):
        th = (soft, strong, logged, ghost)
        if any(t <= 0 for t in th) or any(a >= b for a, b in zip(th, th[1:])):
            raise ValueError(f"reaction thresholds must be positive and strictly increasing: {th}")
        self.soft, self.strong, self.logged, self.ghost = th
        self.ghost_flash = ghost_flash
        self._flash_until: Dict[str,float] = {}

    def step(self, rid: str, st: RegionFixationState, now: float) -> List[Reaction]:
        out: List[Reaction] = []
        h = st.hold
        if h < self.soft/2.0:
            if st.stage or st.markers or rid in self._flash_until:
                st.stage = Stage.NONE; st.markers.clear(); self._flash_until.pop(rid, None)
                out.append(Reaction(rid, "reset", 0, h))
            return out
        if h >= self.soft and st.stage < Stage.WATCHED:
            st.stage = Stage.WATCHED; st.markers.add("soft")
            out.append(Reaction(rid, "soft", st.stage, h))
        if h >= self.strong and "strong" not in st.markers:
            st.markers.add("strong")
            out.append(Reaction(rid, "strong", st.stage, h))
        if h >= self.logged and st.stage < Stage.LOGGED:
            st.stage = Stage.LOGGED; st.markers.add("logged")
            out.append(Reaction(rid, "logged", st.stage, h))
        if h >= self.ghost and st.stage < Stage.GHOST:
            st.stage = Stage.GHOST; st.markers.add("ghost")
            self._flash_until[rid] = now + self.ghost_flash
            out.append(Reaction(rid, "ghost", st.stage, h))
        return out

    def step_all(self, states: Dict[str,RegionFixationState], now: float) -> List[Reaction]:
        out: List[Reaction] = []
        for rid, st in states.items():
            out.extend(self.step(rid, st, now))
        return out

    def transients(self, now: float) -> List[str]:
        for rid in [r for r, until in self._flash_until.items() if until <= now]:
            del self._flash_until[rid]
        return list(self._flash_until)
