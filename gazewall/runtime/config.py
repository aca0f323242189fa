from __future__ import annotations
import logging
import yaml
from pathlib import Path
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator
from ..regions.index import Region, RegionCategory

logger = logging.getLogger(__name__)

class RegionSpec(BaseModel):
    id: str
    label: str
    category: RegionCategory

def _default_regions() -> List[RegionSpec]:
    rooms = [("BEDROOM","private"), ("KITCHEN","domestic"), ("STAIRCASE","transit"),
             ("GARAGE","transit"), ("HALLWAY","transit"), ("STORAGE","private")]
    return [RegionSpec(id=f"cam{i+1}", label=f"{name} // CAM_0{i+1}", category=cat)
            for i, (name, cat) in enumerate(rooms)]

class Settings(BaseModel):
    """All tunable constants of the pipeline plus the wall layout."""
    width: float = 1280.0
    height: float = 720.0
    cols: int = 3
    gap: float = 16.0
    regions: List[RegionSpec] = Field(default_factory=_default_regions)

    outlier_px: float = 700.0
    smooth_window: int = 6
    snap_px: float = 120.0
    hit_margin: float = 80.0
    display_alpha: float = 0.25
    display_mode: Literal["ema","one_euro"] = "ema"
    display_enabled: bool = True

    tick_s: float = 0.12
    decay: float = 2.0
    score_every: int = 25
    score_step: float = 1.0

    soft: float = 0.4
    strong: float = 0.9
    logged: float = 1.4
    ghost: float = 2.2
    ghost_flash: float = 0.22

    stability_capacity: int = 60
    stability_min_samples: int = 5
    profile_min_total: float = 1.0

    @field_validator("smooth_window", "stability_capacity", "stability_min_samples", "score_every", "cols")
    @classmethod
    def _at_least_one(cls, v):
        if v < 1: raise ValueError("must be >= 1")
        return v

    @field_validator("hit_margin", "tick_s", "outlier_px", "ghost_flash", "profile_min_total")
    @classmethod
    def _positive(cls, v):
        if v <= 0: raise ValueError("must be > 0")
        return v

    @field_validator("decay")
    @classmethod
    def _drains_faster(cls, v):
        if v <= 1: raise ValueError("decay must be > 1")
        return v

    @field_validator("display_alpha")
    @classmethod
    def _alpha(cls, v):
        if not 0 < v <= 1: raise ValueError("display_alpha must be in (0, 1]")
        return v

    @model_validator(mode="after")
    def _thresholds(self):
        th = (self.soft, self.strong, self.logged, self.ghost)
        if any(t <= 0 for t in th) or any(a >= b for a, b in zip(th, th[1:])):
            raise ValueError(f"soft < strong < logged < ghost, all > 0 (got {th})")
        ids = [r.id for r in self.regions]
        if len(set(ids)) != len(ids):
            raise ValueError(f"duplicate region ids: {ids}")
        return self

    def build_regions(self) -> List[Region]:
        return [Region(id=r.id, label=r.label, category=r.category) for r in self.regions]

def load_config(path: Optional[str|Path]) -> Settings:
    """Read a YAML settings file; `None` gives the defaults."""
    if path is None:
        return Settings()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    logger.info("loading settings from %s", path)
    with open(path, "r") as f: cfg = yaml.safe_load(f) or {}
    return Settings.model_validate(cfg)
