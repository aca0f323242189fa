from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Optional, Literal, Dict, List, Union
import asyncio, logging, time, websockets

logger = logging.getLogger(__name__)

# explicit "insufficient data" sentinel for derived metrics; never 0, never raised
INSUFFICIENT: Literal["insufficient"] = "insufficient"

class RawSample(BaseModel):
    x: float; y: float; t: float

class Position(BaseModel):
    x: float; y: float

class AttentionProfile(BaseModel):
    dominant: str
    share: float
    label: str

class LogEvent(BaseModel):
    ts: float = Field(default_factory=lambda: time.time())
    region_id: str
    label: str
    stage: int
    severity: Literal["notice","alert"] = "notice"
    sensitive: bool = False
    text: str

    def line(self) -> str:
        flag = "!" if self.sensitive else "-"
        return f"[{self.severity.upper()}]{flag} {self.text}"

class Snapshot(BaseModel):
    ts: float = Field(default_factory=lambda: time.time())
    gaze_enabled: bool = False
    display: Optional[Position] = None
    focused: Optional[str] = None
    stages: Dict[str,int] = {}
    markers: Dict[str,List[str]] = {}
    transients: List[str] = []
    score: float = 0.0
    stability: Union[int, Literal["insufficient"]] = INSUFFICIENT
    profile: Union[AttentionProfile, Literal["insufficient"]] = INSUFFICIENT

def log_event_for(reaction, label: str, ts: Optional[float]=None) -> Optional[LogEvent]:
    """Stage crossings that leave an audit line: logged (notice) and ghost (sensitive alert)."""
    ts = time.time() if ts is None else ts
    if reaction.kind == "logged":
        return LogEvent(ts=ts, region_id=reaction.region_id, label=label, stage=reaction.stage,
                        text=f"{label} held for {reaction.hold:.2f}s, recorded")
    if reaction.kind == "ghost":
        return LogEvent(ts=ts, region_id=reaction.region_id, label=label, stage=reaction.stage,
                        severity="alert", sensitive=True,
                        text=f"{label} held for {reaction.hold:.2f}s, viewer presence detected")
    return None

async def ws_broadcast(queue: "asyncio.Queue[str]", host="0.0.0.0", port=8765):
    clients=set()
    async def handler(websocket):
        clients.add(websocket)
        try:
            await websocket.wait_closed()
        finally:
            clients.discard(websocket)
    async def pump():
        while True:
            msg = await queue.get()
            if clients:
                # a client dropping mid-send must not stop the others
                res = await asyncio.gather(*[c.send(msg) for c in list(clients)], return_exceptions=True)
                for r in res:
                    if isinstance(r, Exception): logger.debug("ws send failed: %s", r)
    async with websockets.serve(handler, host, port):
        logger.info("broadcasting snapshots on ws://%s:%s", host, port)
        await pump()
