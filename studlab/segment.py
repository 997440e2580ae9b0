# segment.py
# tire region of interest: Otsu cut, hole filling, noise removal

import logging
import numpy as np

from .binarise import binarise
from .decide import Thresholds, T
from .topology import count_holes, fill_holes, largest_component_area, remove_small_components

logger = logging.getLogger(__name__)

def segment(gray: np.ndarray, thresholds: Thresholds = T) -> tuple[np.ndarray,int]:
    """
    Tire mask and area (largest component). Studs and sipes are brighter than
    the rubber, so they show up as holes in the dark mask and get filled.
    An empty mask comes back with area 0.
    """
    raw, level = binarise(gray)
    filled = fill_holes(raw)
    mask = remove_small_components(filled, thresholds.min_component_area)
    area = largest_component_area(mask)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("otsu level=%.4f holes filled=%d area=%d", level, count_holes(raw, filled), area)
    return mask, area
