# pipeline.py
# Orchestration helpers: run every matching image through the stud pipeline.

from __future__ import annotations
import glob, logging, os, pathlib
from typing import Dict, List, Optional

from .io_save_load import load_gray, save_gray_png, save_json
from .classify import analyse
from .decide import Thresholds, T
from .svg import write_overlay_svg

logger = logging.getLogger(__name__)


# ----------------------------
# Batch router
# ----------------------------

def route_images(
    input_glob: str,
    out_json: str = "out/studs.json",
    thresholds: Thresholds = T,
    svg_dir: Optional[str] = None,
    save_tophat: bool = False,
):
    """
    For each file (sorted):
      - load as grayscale, analyse() -> StudAnalysis
      - segmentation failure: warn, record a "skipped" row, carry on
      - unreadable file: log, record an "error" row, carry on
      - optionally write an SVG overlay of the valid studs (and, with
        save_tophat, the background-suppressed image as a PNG beside it)
    Writes a JSON summary and returns list[dict] for notebook use.
    """
    if svg_dir:
        os.makedirs(svg_dir, exist_ok=True)
    rows: List[Dict] = []
    for path in sorted(glob.glob(input_glob)):
        name = os.path.basename(path)
        try:
            gray = load_gray(path)
        except OSError as exc:
            logger.error("Could not read %s: %s", name, exc)
            rows.append({"file": name, "status": "error", "error": str(exc)})
            continue

        analysis = analyse(gray, thresholds)
        if not analysis.ok:
            logger.warning("Tire mask segmentation failed. Skipping image: %s", name)
            status = "skipped"
        else:
            c = analysis.classification
            logger.info("%s -> %s (count=%d, density=%.5f)", name, c.label, c.stud_count, c.stud_density)
            status = "ok"

        if svg_dir:
            h, w = gray.shape
            out_svg = os.path.join(svg_dir, os.path.splitext(name)[0] + "_studs.svg")
            href = pathlib.Path(os.path.relpath(path, svg_dir)).as_posix()
            write_overlay_svg(analysis, (w, h), out_svg, image_href=href)
            if save_tophat and analysis.suppressed is not None:
                save_gray_png(os.path.join(svg_dir, os.path.splitext(name)[0] + "_tophat.png"), analysis.suppressed)

        rows.append({"file": name, "status": status, **analysis.summary()})

    save_json(out_json, {"thresholds": thresholds.as_dict(), "results": rows})
    return rows
