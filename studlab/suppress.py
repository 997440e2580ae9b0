# suppress.py
# flatten uneven lighting; keep small bright features inside the ROI

import numpy as np
from skimage.morphology import disk, white_tophat

from .decide import Thresholds, T

def tophat(gray: np.ndarray, radius: int) -> np.ndarray:
    """gray - opening(gray) with a disk footprint; anything narrower than the disk survives."""
    return white_tophat(np.asarray(gray, dtype=np.float64), footprint=disk(radius))

def suppress(gray: np.ndarray, mask: np.ndarray, thresholds: Thresholds = T) -> np.ndarray:
    return tophat(gray, thresholds.tophat_radius) * mask.astype(np.float64)
