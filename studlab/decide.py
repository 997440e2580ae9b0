# decide.py
# Decision rules: ROI containment and the stud-density classification.
# All run parameters live in Thresholds so they can be tuned here (or loaded
# from JSON) without touching the stage implementations.

from __future__ import annotations
from dataclasses import dataclass, fields, replace as _replace
from typing import List, Sequence
import numpy as np

from .circles import Candidate

# ---------------------------
# Tunable thresholds (one place)
# ---------------------------

@dataclass(frozen=True)
class Thresholds:
    # Background suppression: top-hat disk, must exceed the largest stud radius
    tophat_radius: int = 12

    # ROI segmentation: noise floor for filled mask components (pixels)
    min_component_area: int = 1000

    # Circle detector
    radius_min: float = 4.0
    radius_max: float = 8.0
    radius_step: float = 0.5
    sensitivity: float = 0.90
    edge_threshold: float = 0.1

    # Classification: one stud per 10,000 ROI pixels
    density_threshold: float = 0.0001

    @property
    def radius_range(self) -> tuple:
        return (self.radius_min, self.radius_max)

    def replace(self, **overrides) -> "Thresholds":
        return _replace(self, **overrides)

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

T = Thresholds()

def validate_thresholds(t: Thresholds) -> Thresholds:
    """Raise ValueError naming every out-of-range field; return t unchanged otherwise."""
    problems = []
    if t.radius_min <= 0:
        problems.append(f"radius_min must be > 0 (got {t.radius_min})")
    if t.radius_max < t.radius_min:
        problems.append(f"radius_max ({t.radius_max}) must be >= radius_min ({t.radius_min})")
    if t.radius_step <= 0:
        problems.append(f"radius_step must be > 0 (got {t.radius_step})")
    if not 0 < t.sensitivity < 1:
        problems.append(f"sensitivity must lie in (0, 1) (got {t.sensitivity})")
    if not 0 < t.edge_threshold < 1:
        problems.append(f"edge_threshold must lie in (0, 1) (got {t.edge_threshold})")
    if t.tophat_radius <= t.radius_max:
        problems.append(f"tophat_radius ({t.tophat_radius}) must exceed radius_max ({t.radius_max})")
    if t.min_component_area < 0:
        problems.append(f"min_component_area must be >= 0 (got {t.min_component_area})")
    if t.density_threshold < 0:
        problems.append(f"density_threshold must be >= 0 (got {t.density_threshold})")
    if problems:
        raise ValueError("invalid thresholds: " + "; ".join(problems))
    return t

# ---------------------------
# Containment filter
# ---------------------------

def center_pixels(candidates: Sequence[Candidate], shape) -> tuple[np.ndarray,np.ndarray]:
    """Round centres half-up and clamp them into the image; returns (rows, cols)."""
    H, W = shape[:2]
    xs = np.floor(np.array([c.x for c in candidates], dtype=np.float64) + 0.5).astype(np.intp)
    ys = np.floor(np.array([c.y for c in candidates], dtype=np.float64) + 0.5).astype(np.intp)
    return np.clip(ys, 0, H - 1), np.clip(xs, 0, W - 1)

def inside_roi(candidates: Sequence[Candidate], mask: np.ndarray) -> List[Candidate]:
    """Keep candidates whose (rounded, clamped) centre pixel is inside the mask."""
    if len(candidates) == 0:
        return []
    rows, cols = center_pixels(candidates, mask.shape)
    inside = mask[rows, cols]
    return [c for c, ok in zip(candidates, inside) if ok]

# ---------------------------
# Density classifier
# ---------------------------

@dataclass(frozen=True)
class Classification:
    stud_count: int
    stud_density: float
    is_studded: bool

    @property
    def label(self) -> str:
        return "STUDDED" if self.is_studded else "NON-STUDDED"

NO_STUDS = Classification(stud_count=0, stud_density=0.0, is_studded=False)

def classify_density(valid: Sequence[Candidate], area: int, thresholds: Thresholds = T) -> Classification:
    """Studded iff count/area > density_threshold; area 0 gives density 0."""
    count = len(valid)
    density = count / area if area > 0 else 0.0
    return Classification(
        stud_count=count,
        stud_density=float(density),
        is_studded=bool(density > thresholds.density_threshold),
    )
