from __future__ import annotations
import asyncio, logging, time
from typing import Callable, Dict, List, Optional, Tuple
from ..attention.fixation import FixationTracker
from ..attention.profile import AttentionAggregator, Score
from ..attention.reaction import ReactionStateMachine
from ..attention.stability import StabilityScorer
from ..filters.display import DisplaySmoother
from ..filters.moving_average import TemporalSmoother
from ..filters.outlier import SampleFilter
from ..regions.index import Rect, RegionIndex
from ..regions.layout import grid_layout
from ..regions.snap import RegionSnapper
from .config import Settings
from .events import LogEvent, Position, RawSample, Snapshot, log_event_for
from .provider import GazeProvider

logger = logging.getLogger(__name__)

class Session:
    """
    One viewing session: owns every pipeline stage and all mutable state.

    Two paths touch the state, both on the event loop:
      - `on_sample` (provider callback) only enqueues raw samples;
      - `tick` (every `tick_s`) drains the queue through filter -> smoother -> snapper,
        then advances fixation, reactions, score and publishes a Snapshot.
    Providers living on other threads must use `threadsafe_callback()`.
    """
    def __init__(self, settings: Optional[Settings]=None, provider: Optional[GazeProvider]=None,
                 bounds: Optional[Dict[str,Rect]]=None, clock: Callable[[], float]=time.monotonic,
                 on_snapshot: Optional[Callable[[Snapshot], None]]=None):
        s = self.settings = settings or Settings()
        self.provider = provider; self.clock = clock; self.on_snapshot = on_snapshot
        self.index = RegionIndex(s.build_regions(), hit_margin=s.hit_margin)
        self.viewport: Tuple[float,float] = (s.width, s.height)
        self.index.refresh(bounds if bounds is not None else self._grid(s.width, s.height))

        self.filter = SampleFilter(s.outlier_px)
        self.smoother = TemporalSmoother(s.smooth_window)
        self.snapper = RegionSnapper(self.index, s.snap_px)
        self.display = DisplaySmoother(s.display_alpha, mode=s.display_mode, enabled=s.display_enabled)
        self.tracker = FixationTracker(self.index, dt=s.tick_s, decay=s.decay, score_every=s.score_every)
        self.reactions = ReactionStateMachine(s.soft, s.strong, s.logged, s.ghost, s.ghost_flash)
        self.stability = StabilityScorer(s.stability_capacity, s.stability_min_samples)
        self.aggregator = AttentionAggregator(self.tracker, s.profile_min_total)
        self.score = Score()
        self.log: List[LogEvent] = []

        self.queue: "asyncio.Queue[RawSample]" = asyncio.Queue()
        self.subscribers: List["asyncio.Queue[str]"] = []
        self.last_raw: Optional[RawSample] = None
        self.logical: Optional[Tuple[float,float]] = None
        self.rejected = 0
        self.gaze_enabled = False
        self._running = False
        self._task: Optional[asyncio.Task] = None

    def _grid(self, width: float, height: float) -> Dict[str,Rect]:
        return grid_layout(self.index.ids, width, height, self.settings.cols, self.settings.gap)

    # provider path
    def on_sample(self, x: float, y: float, t: float):
        self.queue.put_nowait(RawSample(x=x, y=y, t=t))

    def threadsafe_callback(self) -> Callable[[float,float,float], None]:
        loop = asyncio.get_running_loop()
        def cb(x: float, y: float, t: float):
            loop.call_soon_threadsafe(self.on_sample, x, y, t)
        return cb

    def _ingest(self, s: RawSample):
        if not self.filter.accept(self.last_raw, s):
            self.rejected += 1
            logger.debug("dropped outlier sample (%.0f, %.0f)", s.x, s.y)
            return
        self.last_raw = s
        x, y = self.smoother.push(s.x, s.y)
        x, y = self.snapper.snap(x, y)
        w, h = self.viewport
        self.logical = (min(max(x, 0.0), w), min(max(y, 0.0), h))
        self.display.push(*self.logical, t=s.t)
        self.stability.push(*self.logical)

    # tick path
    def tick(self) -> Snapshot:
        now = self.clock()
        while True:
            try: s = self.queue.get_nowait()
            except asyncio.QueueEmpty: break
            self._ingest(s)
        res = self.tracker.update(self.logical)
        if res.focus_changed:
            logger.info("focus -> %s", self.index[res.focused].label)
        if res.scored:
            self.score.add(self.settings.score_step)
        for r in self.reactions.step_all(self.tracker.states, now):
            ev = log_event_for(r, self.index[r.region_id].label)
            if ev is not None:
                self.log.append(ev)
                logger.info(ev.line())
        snap = self.snapshot(now)
        self._publish(snap)
        return snap

    def snapshot(self, now: Optional[float]=None) -> Snapshot:
        now = self.clock() if now is None else now
        pos = self.display.position()
        return Snapshot(
            gaze_enabled=self.gaze_enabled,
            display=Position(x=pos[0], y=pos[1]) if pos is not None else None,
            focused=self.tracker.focused,
            stages={rid: int(st.stage) for rid, st in self.tracker.states.items()},
            markers={rid: sorted(st.markers) for rid, st in self.tracker.states.items()},
            transients=self.reactions.transients(now),
            score=self.score.value,
            stability=self.stability.rating(),
            profile=self.aggregator.profile(),
        )

    def _publish(self, snap: Snapshot):
        if self.on_snapshot is not None: self.on_snapshot(snap)
        if self.subscribers:
            line = snap.model_dump_json()
            for q in self.subscribers: q.put_nowait(line)

    def subscribe(self) -> "asyncio.Queue[str]":
        q: "asyncio.Queue[str]" = asyncio.Queue()
        self.subscribers.append(q)
        return q

    # presentation-layer inputs
    def manual_score(self, points: float=1.0) -> float:
        return self.score.add(points)

    def resize(self, width: float, height: float, bounds: Optional[Dict[str,Rect]]=None):
        self.viewport = (width, height)
        self.index.refresh(bounds if bounds is not None else self._grid(width, height))
        logger.debug("viewport resized to %sx%s", width, height)

    # lifecycle
    async def start(self) -> bool:
        if self._running: return self.gaze_enabled
        self._running = True
        ok = False
        if self.provider is not None:
            try:
                ok = bool(await self.provider.begin(self.on_sample))
            except Exception as e:
                logger.warning("gaze provider failed to start: %s", e)
        self.gaze_enabled = ok
        if not ok: logger.warning("gaze tracking disabled; regions will not react")
        self._task = asyncio.create_task(self._loop())
        return ok

    async def _loop(self):
        while True:
            try:
                self.tick()
            except Exception:
                # a failing tick (e.g. an on_snapshot consumer) must not end the session
                logger.exception("tick failed")
            await asyncio.sleep(self.settings.tick_s)

    def stop(self):
        if not self._running: return
        self._running = False
        if self._task is not None:
            self._task.cancel(); self._task = None
        if self.provider is not None: self.provider.stop()
        self.gaze_enabled = False
        logger.info("session stopped")

    async def run(self, duration: Optional[float]=None):
        await self.start()
        try:
            await asyncio.wait([self._task], timeout=duration)
        finally:
            self.stop()
