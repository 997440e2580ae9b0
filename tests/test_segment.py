import importlib
import logging
import math
import numpy as np
from skimage.draw import disk

from studlab.binarise import otsu_level, binarise
from studlab.decide import Thresholds
from studlab.segment import segment
from studlab.topology import count_holes, largest_component_area, remove_small_components


def test_otsu_bimodal_ties_are_averaged():
    gray = np.full((40, 40), 0.8)
    gray[:, :20] = 0.2
    level = otsu_level(gray)
    assert abs(level - 0.5) < 0.01
    fg, used = binarise(gray)
    assert used == level
    assert fg[:, :20].all() and not fg[:, 20:].any()


def test_otsu_degenerate_histogram_is_zero():
    assert otsu_level(np.zeros((30, 30))) == 0.0
    assert otsu_level(np.full((30, 30), 0.6)) == 0.0


def test_mask_matches_image_shape(studded_tire):
    gray, _ = studded_tire
    mask, _ = segment(gray)
    assert mask.shape == gray.shape
    assert mask.dtype == bool


def test_area_is_tire_disk(studded_tire):
    gray, _ = studded_tire
    _, area = segment(gray)
    expected = math.pi * 200 ** 2
    assert abs(area - expected) / expected < 0.05


def test_studs_are_filled_into_mask(studded_tire):
    gray, centres = studded_tire
    mask, _ = segment(gray)
    assert all(mask[r, c] for r, c in centres)


def test_small_dark_blobs_are_removed():
    gray = np.full((300, 300), 0.9)
    gray[disk((150, 150), 80, shape=gray.shape)] = 0.1
    gray[10:30, 10:30] = 0.1          # 400 px of noise
    mask, area = segment(gray)
    assert not mask[10:30, 10:30].any()
    assert mask[150, 150]
    assert area == int(mask.sum())

    kept, _ = segment(gray, Thresholds(min_component_area=0))
    assert kept[10:30, 10:30].all()


def test_area_counts_largest_component_only():
    gray = np.full((300, 300), 0.9)
    gray[disk((100, 100), 60, shape=gray.shape)] = 0.1
    gray[disk((240, 240), 40, shape=gray.shape)] = 0.1
    mask, area = segment(gray)
    big = int(disk((100, 100), 60, shape=gray.shape)[0].size)
    assert area == big
    assert area < int(mask.sum())


def test_black_image_has_empty_mask():
    mask, area = segment(np.zeros((120, 160)))
    assert mask.shape == (120, 160)
    assert not mask.any()
    assert area == 0


def test_topology_helpers():
    ring = np.zeros((50, 50), bool)
    ring[disk((25, 25), 20, shape=ring.shape)] = True
    ring[disk((25, 25), 8, shape=ring.shape)] = False
    assert count_holes(ring) == 1
    assert largest_component_area(np.zeros((5, 5), bool)) == 0
    assert not remove_small_components(ring, 10000).any()


def test_hole_count_only_computed_for_debug_logging(studded_tire, monkeypatch, caplog):
    gray, _ = studded_tire
    with caplog.at_level(logging.DEBUG, logger="studlab.segment"):
        segment(gray)
    assert "holes filled=51" in caplog.text

    def boom(*args, **kwargs):
        raise AssertionError("count_holes should not run")
    monkeypatch.setattr(importlib.import_module("studlab.segment"), "count_holes", boom)
    with caplog.at_level(logging.INFO, logger="studlab.segment"):
        _, area = segment(gray)
    assert area > 0
