# circles.py
# Gradient-weighted circular Hough transform for small bright discs (studs).
# Dependencies: numpy, scipy

from __future__ import annotations
from dataclasses import dataclass, replace
import logging
import math
from typing import List, Tuple
import numpy as np
from scipy import ndimage as ndi

logger = logging.getLogger(__name__)

POOL = np.ones((3, 3))
SOBEL_UNIT_STEP = 4.0  # ndi.sobel response to an axis-aligned step of height 1
FACING_MIN_COS = 0.9   # edge gradient must point within ~25 deg of the centre

@dataclass(frozen=True)
class Candidate:
    x: float            # column, sub-pixel
    y: float            # row, sub-pixel
    radius: float
    confidence: float

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x, self.y)

@dataclass
class EdgePixels:
    ys: np.ndarray       # int rows
    xs: np.ndarray       # int cols
    uy: np.ndarray       # unit gradient, row component
    ux: np.ndarray       # unit gradient, col component
    weight: np.ndarray   # gradient magnitude / SOBEL_UNIT_STEP (local contrast)

    def __len__(self) -> int:
        return int(self.ys.size)

# --- edges -------------------------------------------------------------------

def edge_pixels(image: np.ndarray, edge_threshold: float) -> EdgePixels:
    """
    Sobel edges whose normalised magnitude exceeds edge_threshold.
    Magnitudes are divided by SOBEL_UNIT_STEP, so on a [0,1] image the
    weight is the local step contrast and does not depend on the image.
    """
    img = np.asarray(image, dtype=np.float64)
    gx = ndi.sobel(img, axis=1)
    gy = ndi.sobel(img, axis=0)
    norm = np.hypot(gx, gy) / SOBEL_UNIT_STEP
    ys, xs = np.nonzero((norm > edge_threshold) & (norm > 0))
    m = norm[ys, xs] * SOBEL_UNIT_STEP
    return EdgePixels(ys, xs, gy[ys, xs] / m, gx[ys, xs] / m, norm[ys, xs])

def radius_grid(r_min: float, r_max: float, step: float = 0.5) -> np.ndarray:
    """Radii from r_min to r_max inclusive, spaced at most `step` apart."""
    if r_max <= r_min:
        return np.array([float(r_min)])
    n = int(math.ceil((r_max - r_min) / step - 1e-9)) + 1
    return np.linspace(r_min, r_max, n)

# --- voting ------------------------------------------------------------------

def vote(edges: EdgePixels, shape, r: float) -> np.ndarray:
    """
    Each edge pixel votes r pixels along its gradient (bright discs: the
    gradient points into the disc), weighted by its normalised magnitude.
    """
    H, W = shape
    cy = np.rint(edges.ys + r * edges.uy).astype(np.intp)
    cx = np.rint(edges.xs + r * edges.ux).astype(np.intp)
    ok = (cy >= 0) & (cy < H) & (cx >= 0) & (cx < W)
    flat = cy[ok] * W + cx[ok]
    return np.bincount(flat, weights=edges.weight[ok], minlength=H * W).reshape(H, W)

def normalised_score(acc: np.ndarray, r: float) -> np.ndarray:
    """3x3 pooled votes over the vote mass of an ideal unit-contrast, two-pixel-thick circle (4*pi*r)."""
    pooled = ndi.convolve(acc, POOL, mode='constant', cval=0.0)
    return pooled / (4.0 * math.pi * r)

# --- peaks -------------------------------------------------------------------

def local_peaks(score: np.ndarray, threshold: float) -> Tuple[np.ndarray, np.ndarray]:
    """(rows, cols) of 3x3 local maxima strictly above threshold."""
    local = ndi.maximum_filter(score, size=3, mode='constant', cval=0.0)
    return np.nonzero((score == local) & (score > threshold) & (score > 0))

def refine_center(acc: np.ndarray, y: int, x: int) -> Tuple[float, float]:
    """Vote centroid of the 3x3 window around (y, x)."""
    H, W = acc.shape
    y0, y1 = max(y - 1, 0), min(y + 2, H)
    x0, x1 = max(x - 1, 0), min(x + 2, W)
    win = acc[y0:y1, x0:x1]
    total = win.sum()
    if total <= 0:
        return float(x), float(y)
    yy, xx = np.mgrid[y0:y1, x0:x1]
    return float((xx * win).sum() / total), float((yy * win).sum() / total)

def refine_radius(edges: EdgePixels, cx: float, cy: float, radii: np.ndarray, r0: float) -> float:
    """Gradient-weighted mean distance of the edges facing (cx, cy), clipped to the band."""
    r_lo, r_hi = float(radii[0]), float(radii[-1])
    dx = cx - edges.xs
    dy = cy - edges.ys
    d = np.hypot(dx, dy)
    near = (d > 0) & (d >= r_lo - 1.0) & (d <= r_hi + 1.0)
    if not near.any():
        return r0
    d = d[near]
    facing = (dx[near] * edges.ux[near] + dy[near] * edges.uy[near]) / d > FACING_MIN_COS
    w = edges.weight[near][facing]
    if w.sum() <= 0:
        return r0
    r = float(np.dot(d[facing], w) / w.sum())
    return float(min(max(r, r_lo), r_hi))

# --- suppression -------------------------------------------------------------

def suppress_duplicates(cands: List[Candidate]) -> List[Candidate]:
    """
    Greedy NMS over (x, y, r): highest confidence first; drop any candidate
    whose centre is closer than max(r_kept, r) to a kept one.
    """
    order = sorted(cands, key=lambda c: -c.confidence)   # stable on ties
    kept: List[Candidate] = []
    for c in order:
        dup = False
        for k in kept:
            if math.hypot(c.x - k.x, c.y - k.y) < max(c.radius, k.radius):
                dup = True
                break
        if not dup:
            kept.append(c)
    return kept

# --- entry point -------------------------------------------------------------

def detect_circles(
    image: np.ndarray,
    radius_range: Tuple[float, float],
    sensitivity: float = 0.90,
    edge_threshold: float = 0.1,
    radius_step: float = 0.5,
) -> List[Candidate]:
    """
    Bright circular features with radius in radius_range.

    Higher sensitivity lowers the acceptance score (1 - sensitivity); higher
    edge_threshold keeps fewer, stronger edges. Returns candidates sorted by
    descending confidence; empty when nothing qualifies.
    """
    r_min, r_max = radius_range
    edges = edge_pixels(image, edge_threshold)
    if len(edges) == 0:
        logger.debug("no edge pixels above %.3f", edge_threshold)
        return []

    radii = radius_grid(r_min, r_max, radius_step)
    threshold = 1.0 - sensitivity
    raw: List[Candidate] = []
    for r in radii:
        acc = vote(edges, image.shape, r)
        score = normalised_score(acc, r)
        for y, x in zip(*local_peaks(score, threshold)):
            cx, cy = refine_center(acc, int(y), int(x))
            raw.append(Candidate(x=cx, y=cy, radius=float(r), confidence=float(score[y, x])))

    found = [
        replace(c, radius=refine_radius(edges, c.x, c.y, radii, c.radius))
        for c in suppress_duplicates(raw)
    ]
    logger.debug("edges=%d peaks=%d circles=%d (radii %.1f-%.1f, s=%.2f)",
                 len(edges), len(raw), len(found), r_min, r_max, sensitivity)
    return found
