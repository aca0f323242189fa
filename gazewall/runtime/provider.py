from __future__ import annotations
import asyncio, logging, math
import numpy as np
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Tuple
from .events import RawSample

logger = logging.getLogger(__name__)

SampleCallback = Callable[[float, float, float], None]

class GazeProvider(ABC):
    """
    Opaque source of screen-space gaze predictions. `begin` reports whether tracking
    started; afterwards samples arrive through the callback at the provider's own pace.
    `stop` must be safe to call repeatedly.
    """
    @abstractmethod
    async def begin(self, callback: SampleCallback) -> bool: ...

    @abstractmethod
    def stop(self): ...

class _TaskProvider(GazeProvider):
    def __init__(self):
        self._task: Optional[asyncio.Task] = None

    def stop(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

def load_samples(path: str|Path) -> List[RawSample]:
    """JSONL, one {"x":..,"y":..,"t":..} object per line; blank lines are skipped."""
    out = []
    with open(path, "r") as f:
        for line in f:
            line = line.strip()
            if line: out.append(RawSample.model_validate_json(line))
    return out

class ReplayProvider(_TaskProvider):
    """Replays a recorded JSONL stream, paced by its timestamps (speed<=0: as fast as possible)."""
    def __init__(self, path: str|Path, speed: float=1.0):
        super().__init__()
        self.path = Path(path); self.speed = speed

    async def begin(self, callback: SampleCallback) -> bool:
        try:
            samples = load_samples(self.path)
        except (OSError, ValueError) as e:
            logger.warning("cannot replay %s: %s", self.path, e)
            return False
        if not samples:
            logger.warning("replay file %s is empty", self.path)
            return False
        self._task = asyncio.create_task(self._play(samples, callback))
        return True

    async def _play(self, samples: List[RawSample], callback: SampleCallback):
        loop = asyncio.get_running_loop()
        t0 = samples[0].t; start = loop.time()
        for s in samples:
            if self.speed > 0:
                wait = (s.t - t0)/self.speed - (loop.time() - start)
                if wait > 0: await asyncio.sleep(wait)
            else:
                await asyncio.sleep(0)
            callback(s.x, s.y, s.t)
        logger.info("replay of %s finished (%d samples)", self.path, len(samples))

class SyntheticProvider(_TaskProvider):
    """
    Random fixation walk over target centers: dwell on one target for an exponentially
    distributed time, Gaussian jitter around it, and occasional blink-like spikes.
    """
    def __init__(self, centers: Sequence[Tuple[float,float]], seed: Optional[int]=None, rate_hz: float=30.0,
                 dwell_s: float=2.5, noise_px: float=25.0, spike_prob: float=0.02, spike_px: float=900.0):
        super().__init__()
        self.centers = [tuple(c) for c in centers]
        self.seed = seed; self.rate_hz = rate_hz; self.dwell_s = dwell_s
        self.noise_px = noise_px; self.spike_prob = spike_prob; self.spike_px = spike_px

    def stream(self) -> Iterator[Tuple[float,float,float]]:
        rng = np.random.default_rng(self.seed)
        step = 1.0/self.rate_hz; t = 0.0; until = -1.0
        target = np.zeros(2)
        while True:
            if t >= until:
                target = np.asarray(self.centers[int(rng.integers(len(self.centers)))], dtype=float)
                until = t + rng.exponential(self.dwell_s)
            x, y = target + rng.normal(0.0, self.noise_px, 2)
            if rng.random() < self.spike_prob:
                ang = rng.uniform(0, 2*math.pi)
                x += self.spike_px*math.cos(ang); y += self.spike_px*math.sin(ang)
            yield float(x), float(y), t
            t += step

    async def begin(self, callback: SampleCallback) -> bool:
        if not self.centers:
            logger.warning("synthetic provider has no targets")
            return False
        self._task = asyncio.create_task(self._run(callback))
        return True

    async def _run(self, callback: SampleCallback):
        for x, y, t in self.stream():
            callback(x, y, t)
            await asyncio.sleep(1.0/self.rate_hz)
