# studlab/__init__.py

# I/O
from .io_save_load import load_gray, save_gray_png, save_json, load_thresholds

# Stages
from .binarise import otsu_level, binarise
from .segment import segment
from .suppress import suppress, tophat
from .circles import Candidate, detect_circles

# Decisions
from .decide import (
    inside_roi,
    classify_density,
    validate_thresholds,
    Classification,
    Thresholds,  # tune here if needed
)

# Per-image driver & batch router
from .classify import analyse, StudAnalysis, SegmentationFailure
from .pipeline import route_images
