# binarise.py
# global thresholding (tire rubber is dark, background is light)

import numpy as np

N_BINS = 256

def quantise(gray: np.ndarray) -> np.ndarray:
    """[0,1] floats -> 8-bit bin indices."""
    return np.rint(np.clip(gray, 0.0, 1.0) * (N_BINS - 1)).astype(np.intp)

def otsu_level(gray: np.ndarray) -> float:
    """
    Otsu threshold in [0,1] over a 256-bin histogram.
    Ties on the between-class variance are averaged; a one-bin histogram gives 0.
    """
    if gray.size == 0:
        return 0.0
    hist = np.bincount(quantise(gray).ravel(), minlength=N_BINS).astype(np.float64)
    p = hist / hist.sum()
    omega = np.cumsum(p)
    mu = np.cumsum(p * np.arange(1, N_BINS + 1))
    mu_t = mu[-1]
    with np.errstate(divide='ignore', invalid='ignore'):
        var_between = (mu_t * omega - mu) ** 2 / (omega * (1.0 - omega))
    var_between[~np.isfinite(var_between)] = -1.0
    var_max = var_between.max()
    if var_max < 0:
        return 0.0
    idx = np.flatnonzero(var_between == var_max).mean()
    return float(idx / (N_BINS - 1))

def binarise(gray: np.ndarray, level: float|None=None) -> tuple[np.ndarray,float]:
    if level is None:
        level = otsu_level(gray)
    fg = gray < level   # dark = foreground
    return fg, level
