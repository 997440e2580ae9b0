# classify.py
# one image in, one StudAnalysis out; no state shared between calls

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import List, Optional
import numpy as np

from .circles import Candidate, detect_circles
from .decide import Classification, NO_STUDS, Thresholds, T, classify_density, inside_roi
from .segment import segment
from .suppress import suppress

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class SegmentationFailure:
    reason: str

@dataclass
class StudAnalysis:
    mask: np.ndarray                      # bool (H,W)
    area: int
    classification: Classification
    suppressed: Optional[np.ndarray] = None   # float (H,W), None when segmentation failed
    candidates: List[Candidate] = field(default_factory=list)  # raw detector output
    valid: List[Candidate] = field(default_factory=list)       # centres inside the mask
    failure: Optional[SegmentationFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def summary(self) -> dict:
        c = self.classification
        return {
            "label": c.label,
            "studded": c.is_studded,
            "stud_count": c.stud_count,
            "stud_density": c.stud_density,
            "tire_area": int(self.area),
            "raw_candidates": len(self.candidates),
            "studs": [
                {"x": round(s.x, 2), "y": round(s.y, 2),
                 "radius": round(s.radius, 2), "confidence": round(s.confidence, 4)}
                for s in self.valid
            ],
            "failure": self.failure.reason if self.failure else None,
        }

def analyse(gray: np.ndarray, thresholds: Thresholds = T) -> StudAnalysis:
    """
    segment -> top-hat -> circles -> containment -> density.
    Segmentation failure is returned (failure set, NON-STUDDED), not raised.
    """
    mask, area = segment(gray, thresholds)
    if area == 0:
        return StudAnalysis(
            mask=mask, area=0, classification=NO_STUDS,
            failure=SegmentationFailure("no tire region survived segmentation"),
        )

    suppressed = suppress(gray, mask, thresholds)
    candidates = detect_circles(
        suppressed,
        thresholds.radius_range,
        sensitivity=thresholds.sensitivity,
        edge_threshold=thresholds.edge_threshold,
        radius_step=thresholds.radius_step,
    )
    valid = inside_roi(candidates, mask)
    result = classify_density(valid, area, thresholds)
    logger.debug("area=%d candidates=%d valid=%d density=%.6f -> %s",
                 area, len(candidates), len(valid), result.stud_density, result.label)
    return StudAnalysis(
        mask=mask, area=area, classification=result,
        suppressed=suppressed, candidates=candidates, valid=valid,
    )
