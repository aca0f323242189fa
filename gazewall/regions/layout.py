from __future__ import annotations
import math
import numpy as np
from typing import Dict, List, Sequence
from .index import Rect

def grid_layout(ids: Sequence[str], width: float, height: float, cols: int=3, gap: float=16.0) -> Dict[str,Rect]:
    """
    Lay regions out row-major on a cols x rows grid filling the viewport, with `gap`
    px between cells and around the edge. Used by the CLI and on resize.
    """
    if not ids: return {}
    cols = max(1, min(cols, len(ids)))
    rows = int(math.ceil(len(ids)/cols))
    cw = (width - gap*(cols+1)) / cols
    ch = (height - gap*(rows+1)) / rows
    xs = gap + np.arange(cols)*(cw + gap)
    ys = gap + np.arange(rows)*(ch + gap)
    out: Dict[str,Rect] = {}
    for i, rid in enumerate(ids):
        r, c = divmod(i, cols)
        out[rid] = Rect(float(xs[c]), float(ys[r]), float(max(cw, 0.0)), float(max(ch, 0.0)))
    return out

def centers(bounds: Dict[str,Rect]) -> List[tuple]:
    return [rect.center for rect in bounds.values()]
