"""
Classify tire photos as studded / non-studded.

    python -m studlab "photos/*.jpg" -o out/studs.json --svg-dir out/overlays
"""
import argparse
import logging
import sys

from .decide import Thresholds, validate_thresholds
from .io_save_load import load_thresholds
from .pipeline import route_images

OVERRIDES = [
    ("--tophat-radius", "tophat_radius", int, "Top-hat disk radius (px); must exceed the largest stud radius"),
    ("--min-area", "min_component_area", int, "Drop mask components smaller than this (px)"),
    ("--rmin", "radius_min", float, "Smallest stud radius (px)"),
    ("--rmax", "radius_max", float, "Largest stud radius (px)"),
    ("--sensitivity", "sensitivity", float, "Circle detection sensitivity in (0, 1)"),
    ("--edge-threshold", "edge_threshold", float, "Minimum normalised gradient for an edge, in (0, 1)"),
    ("--density-threshold", "density_threshold", float, "Studs per ROI pixel above which a tire is STUDDED"),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="studlab",
        description="Detect metal studs on tire photos (top-hat + circular Hough) and classify by stud density.",
    )
    parser.add_argument("input", help="Glob of input images, e.g. 'photos/*.jpg'")
    parser.add_argument("--output", "-o", default="out/studs.json", help="JSON summary path")
    parser.add_argument("--svg-dir", default=None, help="Write one SVG overlay per image here")
    parser.add_argument("--save-tophat", action="store_true", help="Also write the top-hat (background-suppressed) image as PNG into --svg-dir")
    parser.add_argument("--config", "-c", default=None, help="JSON file of threshold overrides")
    for flag, dest, typ, help_text in OVERRIDES:
        parser.add_argument(flag, dest=dest, type=typ, default=None, help=help_text)
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
    )
    logger = logging.getLogger("studlab")

    try:
        thresholds = load_thresholds(args.config) if args.config else Thresholds()
        overrides = {dest: getattr(args, dest) for _, dest, _, _ in OVERRIDES if getattr(args, dest) is not None}
        thresholds = validate_thresholds(thresholds.replace(**overrides))
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 2

    rows = route_images(args.input, args.output, thresholds, svg_dir=args.svg_dir, save_tophat=args.save_tophat)
    if not rows:
        logger.warning("No images matched %s", args.input)
    studded = sum(1 for r in rows if r.get("studded"))
    logger.info("Done: %d image(s), %d studded. Summary: %s", len(rows), studded, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
