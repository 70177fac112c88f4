"""
Position the camera to include points or scene nodes.

The camera is never rotated, so content can appear asymmetrically placed in
perspective views, especially when it reaches deep into the view. Everything
is kept within the padding, including the far side of the content.
"""
from __future__ import annotations

import logging
from typing import List

import numpy as np

from camera_framing import view
from camera_framing.errors import DegenerateGeometryError
from camera_framing.frustum import compute_frustum
from camera_framing.geometry import as_points, as_vec3, intersect_plane_plane, invert_rigid, transform_points
from camera_framing.scene import collect_points
from camera_framing.types import CameraSnapshot, FittingOptions, FittingResult, Plane

logger = logging.getLogger(__name__)

DEFAULT_MIN_EXTENT = 1e-6


def fit_camera_to_points(
    camera: CameraSnapshot,
    points,
    padding: float = 2.5,
    include_letterbox_bars: bool = False,
    min_extent: float = DEFAULT_MIN_EXTENT,
) -> FittingResult:
    """
    Move the camera eye, and for parallel projection the extent, so all
    points are visible.

    Args:
        camera: Snapshot to update in place. Orientation is kept.
        points: (N, 3) world-space points.
        padding: Percentage of the view left blank on each side, in [0, 50).
        include_letterbox_bars: Fit to the full viewport rather than to the
            region within the letterbox bars.
        min_extent: Smallest parallel width/height, used when the points
            collapse to a line or a single point.

    Returns:
        FittingResult with the new eye and the aspect ratio of the framed
        content. An empty point set leaves the camera untouched and returns
        ``FittingResult.noop``.

    Raises:
        InvalidArgument: padding is not in [0, 50).
        DegenerateGeometryError: perspective frustum planes are parallel.
    """
    opts = FittingOptions(padding=padding, include_letterbox_bars=include_letterbox_bars)
    pts = as_points(points)
    if pts.shape[0] == 0:
        logger.debug("no points to fit, camera left unchanged")
        return FittingResult.noop(camera)

    if camera.is_perspective:
        return _fit_perspective(camera, pts, opts)
    return _fit_parallel(camera, pts, opts, float(min_extent))


def zoom_entities(
    nodes,
    camera: CameraSnapshot,
    padding: float = 2.5,
    include_letterbox_bars: bool = False,
    min_extent: float = DEFAULT_MIN_EXTENT,
) -> FittingResult:
    """Fit the camera to every vertex under one scene node or a sequence of nodes."""
    return fit_camera_to_points(
        camera,
        collect_points(nodes),
        padding=padding,
        include_letterbox_bars=include_letterbox_bars,
        min_extent=min_extent,
    )


def extreme_planes(
    points,
    camera: CameraSnapshot,
    padding: float,
    include_letterbox_bars: bool,
) -> List[Plane]:
    """
    For each frustum plane, the plane through the most extreme point in its
    outward direction, keeping the frustum normal. Order is left, right,
    bottom, top.
    """
    pts = as_points(points)
    out: List[Plane] = []
    for plane in compute_frustum(camera, padding, include_letterbox_bars):
        idx = int(np.argmax(plane.signed_distance(pts)))
        out.append(Plane(pts[idx], plane.normal))
    return out


def _camera_space_extremes(camera: CameraSnapshot, pts: np.ndarray, opts: FittingOptions) -> tuple[np.ndarray, List[Plane]]:
    to_world = view.camera_space(camera)
    to_camera = invert_rigid(to_world)
    extremes = [
        pl.transformed(to_camera)
        for pl in extreme_planes(pts, camera, opts.padding, opts.include_letterbox_bars)
    ]
    logger.debug("extreme points (camera space): %s", [pl.point.tolist() for pl in extremes])
    return to_world, extremes


def _fit_parallel(camera: CameraSnapshot, pts: np.ndarray, opts: FittingOptions, min_extent: float) -> FittingResult:
    to_world, (left, right, bottom, top) = _camera_space_extremes(camera, pts, opts)

    # Padding used for the frustum is lost once the extreme points are found.
    k = opts.padding_factor
    width = (float(right.point[0]) - float(left.point[0])) / k
    height = (float(top.point[1]) - float(bottom.point[1])) / k
    if width < min_extent or height < min_extent:
        logger.warning("degenerate parallel extent %.3g x %.3g, flooring at %.3g", width, height, min_extent)
        width = max(width, min_extent)
        height = max(height, min_extent)

    eye_c = np.array(
        [
            (float(left.point[0]) + float(right.point[0])) / 2.0,
            (float(bottom.point[1]) + float(top.point[1])) / 2.0,
            0.0,
        ],
        dtype=np.float64,
    )
    camera.eye = transform_points(to_world, eye_c)[0]
    _set_zoom(camera, width, height, opts.include_letterbox_bars)
    logger.debug("parallel fit: eye=%s width=%.6g height=%.6g", camera.eye.tolist(), width, height)

    return FittingResult(
        eye=as_vec3(camera.eye),
        aspect_ratio=width / height,
        projection=camera.projection,
        width=width,
        height=height,
    )


def _set_zoom(camera: CameraSnapshot, width: float, height: float, full: bool) -> None:
    # full only selects the ratio compared against; extents are always bounded.
    ratio = view.viewport_aspect_ratio(camera) if full else view.aspect_ratio(camera)
    if ratio > width / height:
        view.set_height(camera, height)
    else:
        view.set_width(camera, width)


def _fit_perspective(camera: CameraSnapshot, pts: np.ndarray, opts: FittingOptions) -> FittingResult:
    to_world, (left, right, bottom, top) = _camera_space_extremes(camera, pts, opts)

    line_y = intersect_plane_plane(left.point, left.normal, right.point, right.normal)
    line_x = intersect_plane_plane(bottom.point, bottom.normal, top.point, top.normal)
    if line_y is None or line_x is None:
        raise DegenerateGeometryError("frustum side planes are parallel; no unique eye position")

    # Camera space z points backwards; the larger z is the position furthest
    # back, where neither pair of planes clips its extreme points.
    eye_c = np.array(
        [float(line_y[0][0]), float(line_x[0][1]), max(float(line_y[0][2]), float(line_x[0][2]))],
        dtype=np.float64,
    )
    camera.eye = transform_points(to_world, eye_c)[0]
    logger.debug("perspective fit: eye=%s", camera.eye.tolist())

    return FittingResult(
        eye=as_vec3(camera.eye),
        aspect_ratio=_screen_aspect_ratio(camera, pts),
        projection=camera.projection,
        fov_angle=float(camera.fov_angle),
    )


def _screen_aspect_ratio(camera: CameraSnapshot, pts: np.ndarray) -> float:
    uv = view.screen_coords(camera, pts)
    uv = uv[np.all(np.isfinite(uv), axis=1)]
    fallback = view.aspect_ratio(camera)
    if uv.shape[0] == 0:
        logger.warning("no point projects in front of the eye, using current aspect ratio")
        return fallback

    center = view.screen_center(camera)
    w = max(abs(float(uv[:, 0].max()) - center[0]), abs(float(uv[:, 0].min()) - center[0]))
    h = max(abs(float(uv[:, 1].max()) - center[1]), abs(float(uv[:, 1].min()) - center[1]))
    if h <= 0.0:
        logger.warning("zero screen height, using current aspect ratio")
        return fallback
    return w / h


def frame_points(
    camera: CameraSnapshot,
    points,
    padding: float = 2.5,
    include_letterbox_bars: bool = False,
    adapt_aspect_ratio: bool = False,
    min_extent: float = DEFAULT_MIN_EXTENT,
) -> FittingResult:
    """
    Fit the camera and optionally pin the explicit aspect ratio to the
    framed content, so the letterbox bars hug it.
    """
    result = fit_camera_to_points(
        camera,
        points,
        padding=padding,
        include_letterbox_bars=include_letterbox_bars,
        min_extent=min_extent,
    )
    if adapt_aspect_ratio and not result.is_noop and result.aspect_ratio:
        view.set_aspect_ratio(camera, result.aspect_ratio)
    return result
