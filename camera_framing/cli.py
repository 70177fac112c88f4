from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from camera_framing.config import load_camera, load_config, load_points, save_camera
from camera_framing.frustum import compute_frustum
from camera_framing.scene import collect_points, load_scene
from camera_framing.zoom import frame_points

logger = logging.getLogger(__name__)


def _build_parser(padding: float) -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--log-level",
        default=argparse.SUPPRESS,
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )

    parser = argparse.ArgumentParser(
        prog="camera-framing",
        description="Fit a viewport camera around points or a mesh.",
        parents=[common],
    )
    sub = parser.add_subparsers(dest="command", required=True)

    fit = sub.add_parser("fit", parents=[common], help="Move the camera so all content is visible.")
    fit.add_argument("--camera", required=True, help="Camera JSON file.")
    src = fit.add_mutually_exclusive_group(required=True)
    src.add_argument("--points", help="JSON list of [x, y, z] points.")
    src.add_argument("--mesh", help="Mesh or scene file readable by trimesh.")
    fit.add_argument("--padding", type=float, default=padding, help="Percent left blank on each side.")
    fit.add_argument("--full", action="store_true", default=None, help="Fit to the full viewport, letterbox bars included.")
    fit.add_argument("--adapt-aspect-ratio", action="store_true", help="Set the explicit aspect ratio to the fitted content.")
    fit.add_argument("--out", default=None, help="Write the updated camera JSON here.")

    frustum = sub.add_parser("frustum", parents=[common], help="Print the frustum side planes.")
    frustum.add_argument("--camera", required=True, help="Camera JSON file.")
    frustum.add_argument("--padding", type=float, default=0.0)
    frustum.add_argument("--full", action="store_true", default=None)
    return parser


def _run_fit(args: argparse.Namespace, full: bool, min_extent: float) -> dict:
    cam = load_camera(args.camera)
    if args.points:
        points = load_points(args.points)
    else:
        points = collect_points(load_scene(args.mesh))

    result = frame_points(
        cam,
        points,
        padding=args.padding,
        include_letterbox_bars=full,
        adapt_aspect_ratio=args.adapt_aspect_ratio,
        min_extent=min_extent,
    )
    if args.out:
        out_path = save_camera(cam, args.out)
        logger.info("wrote camera to %s", out_path)
    return result.as_dict()


def _run_frustum(args: argparse.Namespace, full: bool) -> dict:
    cam = load_camera(args.camera)
    planes = compute_frustum(cam, args.padding, full)
    return {
        name: {"point": plane.point.tolist(), "normal": plane.normal.tolist()}
        for name, plane in zip(planes._fields, planes)
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    cfg = load_config()
    args = _build_parser(cfg.padding).parse_args(argv)
    level = str(getattr(args, "log_level", None) or cfg.log_level).upper()
    if not isinstance(logging.getLevelName(level), int):
        print(f"error: unknown log level {level!r}", file=sys.stderr)
        return 2
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    full = cfg.include_letterbox_bars if args.full is None else bool(args.full)

    try:
        if args.command == "fit":
            out = _run_fit(args, full, cfg.min_extent)
        else:
            out = _run_frustum(args, full)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    print(json.dumps(out, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
