# topology.py
# hole filling, small-component removal, component areas

import numpy as np
from scipy.ndimage import binary_fill_holes
from skimage.measure import label as sklabel

def component_sizes(mask: np.ndarray) -> tuple[np.ndarray,np.ndarray]:
    """8-connected labels and per-label pixel counts (index 0 = background)."""
    labels = sklabel(mask, connectivity=2)
    return labels, np.bincount(labels.ravel())

def fill_holes(mask: np.ndarray) -> np.ndarray:
    """Background regions not reachable from the border become foreground."""
    return binary_fill_holes(mask)

def remove_small_components(mask: np.ndarray, min_area: int) -> np.ndarray:
    if min_area <= 0 or not mask.any():
        return mask.astype(bool, copy=True)
    labels, sizes = component_sizes(mask)
    keep = sizes >= min_area
    keep[0] = False
    return keep[labels]

def largest_component_area(mask: np.ndarray) -> int:
    if not mask.any():
        return 0
    _, sizes = component_sizes(mask)
    return int(sizes[1:].max())

def count_holes(fg_mask: np.ndarray, filled: np.ndarray|None=None) -> int:
    """Number of background components enclosed by foreground."""
    if filled is None:
        filled = fill_holes(fg_mask)
    return int(sklabel(filled & ~fg_mask, connectivity=1).max())
