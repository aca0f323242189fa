from __future__ import annotations
import math
from typing import Optional, Tuple

def _lowpass_gain(rate_hz: float, cutoff_hz: float) -> float:
    tau = 1.0/(2*math.pi*cutoff_hz)
    return 1.0/(1.0 + tau*rate_hz)

class _AdaptiveAxis:
    """One coordinate of a 1-euro filter: cutoff rises with the filtered speed."""
    def __init__(self, min_cutoff: float, beta: float, d_cutoff: float=1.0):
        self.min_cutoff = min_cutoff; self.beta = beta; self.d_cutoff = d_cutoff
        self.value: Optional[float] = None; self.speed = 0.0; self.t: Optional[float] = None

    def __call__(self, v: float, t: float) -> float:
        if self.value is None:
            self.value, self.t = v, t
            return v
        rate = 1.0/max(t - self.t, 1e-6); self.t = t
        g = _lowpass_gain(rate, self.d_cutoff)
        self.speed += g*((v - self.value)*rate - self.speed)
        g = _lowpass_gain(rate, self.min_cutoff + self.beta*abs(self.speed))
        self.value += g*(v - self.value)
        return self.value

class DisplaySmoother:
    """
    Visual-only cursor filter. Its output is never fed back into hit-testing, so any
    lag it adds only affects what is drawn.

    mode="ema": exponential moving average with factor `alpha` (new = old + (x-old)*alpha).
    mode="one_euro": speed-adaptive 1-euro filter per axis, driven by sample timestamps.
    """
    def __init__(self, alpha: float=0.25, mode: str="ema", enabled: bool=True, min_cutoff=1.0, beta=0.0):
        if mode not in ("ema","one_euro"):
            raise ValueError(f"unknown display smoothing mode: {mode}")
        self.alpha = alpha; self.mode = mode; self.enabled = enabled
        self.fx = _AdaptiveAxis(min_cutoff, beta)
        self.fy = _AdaptiveAxis(min_cutoff, beta)
        self._pos: Optional[Tuple[float,float]] = None

    def push(self, x: float, y: float, t: float=0.0) -> Tuple[float,float]:
        if self.mode == "one_euro":
            self._pos = (self.fx(x, t), self.fy(y, t))
        elif self._pos is None:
            self._pos = (x, y)
        else:
            px, py = self._pos
            self._pos = (px + (x-px)*self.alpha, py + (y-py)*self.alpha)
        return self._pos

    def position(self) -> Optional[Tuple[float,float]]:
        # disabled -> nothing for the presentation layer to draw
        return self._pos if self.enabled else None
