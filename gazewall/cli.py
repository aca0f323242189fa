from __future__ import annotations
import typer, asyncio, logging
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from typing import Optional, Iterable, Tuple
from .regions.layout import centers
from .runtime.config import load_config, Settings
from .runtime.events import Snapshot, ws_broadcast
from .runtime.provider import ReplayProvider, SyntheticProvider, load_samples
from .runtime.session import Session

app = typer.Typer(add_completion=False, help="gazewall CLI: gaze attention tracking over a wall of regions")

def _setup_logging(verbose: bool):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s",
                        handlers=[RichHandler(console=Console(stderr=True), show_path=False)])

def _settings(config: Optional[str]) -> Settings:
    return load_config(config)

@app.command()
def layout(config: Optional[str]=typer.Option(None, help="YAML settings file"),
           width: Optional[float]=None, height: Optional[float]=None):
    """
    Print the region grid computed for the viewport.
    """
    s = _settings(config)
    sess = Session(s)
    if width or height:
        sess.resize(width or s.width, height or s.height)
    t = Table(title=f"viewport {sess.viewport[0]:.0f}x{sess.viewport[1]:.0f}")
    for col in ("id","label","category","x","y","w","h"): t.add_column(col)
    for r in sess.index:
        b = r.bounds
        t.add_row(r.id, r.label, r.category.value, f"{b.x:.0f}", f"{b.y:.0f}", f"{b.w:.0f}", f"{b.h:.0f}")
    print(t)

@app.command()
def run(config: Optional[str]=typer.Option(None, help="YAML settings file"),
        replay: Optional[str]=typer.Option(None, help="JSONL gaze recording; synthetic gaze if omitted"),
        speed: float=1.0, seed: Optional[int]=None, duration: Optional[float]=typer.Option(None, help="seconds; forever if omitted"),
        ws: bool=typer.Option(False, help="broadcast snapshots over WebSocket"), port: int=8765,
        every: int=typer.Option(1, help="print every n-th snapshot"), verbose: bool=False):
    """
    Run the live pipeline and print JSONL snapshots; optionally broadcast over WebSocket.
    """
    _setup_logging(verbose)
    s = _settings(config)
    counter = {"n": 0}
    def emit(snap: Snapshot):
        counter["n"] += 1
        if every > 0 and counter["n"] % every == 0:
            typer.echo(snap.model_dump_json())

    async def main():
        sess = Session(s, on_snapshot=emit)
        sess.provider = ReplayProvider(replay, speed=speed) if replay else \
            SyntheticProvider(centers({r.id: r.bounds for r in sess.index}), seed=seed)
        if ws:
            bcast = asyncio.create_task(ws_broadcast(sess.subscribe(), "0.0.0.0", port))
        try:
            await sess.run(duration)
        finally:
            if ws: bcast.cancel()
        _report(sess)

    asyncio.run(main())

def _ticked(sess: Session, samples: Iterable[Tuple[float,float,float]], now: dict):
    """Offline driver: interleave samples and ticks on the sample timeline (now["t"] is the session clock)."""
    next_tick = None
    for x, y, t in samples:
        if next_tick is None: next_tick = t + sess.settings.tick_s
        while t >= next_tick:
            now["t"] = next_tick; sess.tick(); next_tick += sess.settings.tick_s
        sess.on_sample(x, y, t)
    if next_tick is not None: now["t"] = next_tick
    sess.tick()

@app.command()
def profile(replay: Optional[str]=typer.Argument(None, help="JSONL gaze recording"),
            config: Optional[str]=typer.Option(None, help="YAML settings file"),
            synthetic: float=typer.Option(30.0, help="seconds of synthetic gaze when no recording is given"),
            seed: Optional[int]=0):
    """
    Replay gaze offline at full speed and print the resulting attention profile.
    """
    _setup_logging(False)
    s = _settings(config)
    now = {"t": 0.0}
    sess = Session(s, clock=lambda: now["t"])
    sess.gaze_enabled = True
    if replay:
        samples = [(r.x, r.y, r.t) for r in load_samples(replay)]
    else:
        gen = SyntheticProvider(centers({r.id: r.bounds for r in sess.index}), seed=seed).stream()
        samples = []
        for x, y, t in gen:
            if t > synthetic: break
            samples.append((x, y, t))
    _ticked(sess, samples, now)
    _report(sess)

def _report(sess: Session):
    snap = sess.snapshot()
    prof = snap.profile
    print(f"[bold]score[/bold] {snap.score:.0f}  [bold]stability[/bold] {snap.stability}  "
          f"[bold]rejected[/bold] {sess.rejected}")
    if isinstance(prof, str):
        print(f"[yellow]profile: {prof}[/yellow]")
    else:
        print(f"[green]profile[/green] {prof.label} ({prof.dominant} {prof.share:.0%})")
    for ev in sess.log:
        typer.echo(ev.line())

if __name__ == "__main__":
    app()
