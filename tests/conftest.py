# tests/conftest.py
# synthetic tire photos: light background, dark rubber disk, bright studs

import math
import numpy as np
import pytest
from skimage.draw import disk

BACKGROUND = 0.85
RUBBER = 0.2
STUD = 0.95


def place_studs(n, tire_radius, stud_radius, rng, margin=15, gap=4):
    """n non-overlapping stud centres (dy, dx) relative to the tire centre."""
    reach = tire_radius - stud_radius - margin
    min_dist = 2 * stud_radius + gap
    centres = []
    tries = 0
    while len(centres) < n:
        tries += 1
        if tries > 100000:
            raise RuntimeError("could not place studs")
        dy, dx = rng.uniform(-reach, reach, size=2)
        if math.hypot(dy, dx) > reach:
            continue
        if any(math.hypot(dy - py, dx - px) < min_dist for py, px in centres):
            continue
        centres.append((dy, dx))
    return [(int(round(dy)), int(round(dx))) for dy, dx in centres]


def synthetic_tire(n_studs, size=500, tire_radius=200, stud_radius=6, seed=0):
    """Returns (gray, stud_centres) with centres as (row, col)."""
    rng = np.random.default_rng(seed)
    gray = np.full((size, size), BACKGROUND)
    c = size // 2
    gray[disk((c, c), tire_radius, shape=gray.shape)] = RUBBER
    centres = []
    for dy, dx in place_studs(n_studs, tire_radius, stud_radius, rng):
        gray[disk((c + dy, c + dx), stud_radius, shape=gray.shape)] = STUD
        centres.append((c + dy, c + dx))
    return gray, centres


@pytest.fixture(scope="session")
def studded_tire():
    return synthetic_tire(51, seed=7)


@pytest.fixture(scope="session")
def sparse_tire():
    return synthetic_tire(2, seed=3)


@pytest.fixture
def single_stud():
    img = np.zeros((64, 64))
    img[disk((32, 30), 6, shape=img.shape)] = 1.0
    return img
