"""
View and camera conversions.

Hosts store the field of view either vertically or horizontally, and the
aspect ratio either explicitly (letterbox bars cover the rest of the
viewport) or implicitly from the viewport pixels. The functions here hide
that bookkeeping.

"Bounded" values are measured within the letterbox bars, "full" values
include them. All angles are in degrees.
"""
from __future__ import annotations

import math

import numpy as np

from camera_framing.geometry import as_points, frame_matrix, invert_rigid, transform_points
from camera_framing.types import CameraSnapshot


def viewport_aspect_ratio(cam: CameraSnapshot) -> float:
    return cam.viewport_width_px / float(cam.viewport_height_px)


def aspect_ratio(cam: CameraSnapshot) -> float:
    """Explicit aspect ratio if one is set, otherwise the viewport aspect ratio."""
    if cam.explicit_aspect_ratio != 0:
        return float(cam.explicit_aspect_ratio)
    return viewport_aspect_ratio(cam)


def aspect_ratio_ratio(cam: CameraSnapshot) -> float:
    """
    Ratio between the aspect ratio and the viewport aspect ratio.

    Larger than 1 when the letterbox bars are horizontal (top and bottom),
    smaller than 1 when they are vertical (left and right).
    """
    return aspect_ratio(cam) / viewport_aspect_ratio(cam)


def is_explicit_aspect_ratio(cam: CameraSnapshot) -> bool:
    return cam.explicit_aspect_ratio != 0


def convert_fov(angle: float, ratio: float) -> float:
    """Find one frustum angle from another and the ratio between their extents."""
    return math.degrees(math.atan(math.tan(math.radians(angle) / 2.0) * ratio)) * 2.0


def fov_v(cam: CameraSnapshot) -> float:
    if cam.fov_is_height:
        return float(cam.fov_angle)
    return convert_fov(cam.fov_angle, 1.0 / aspect_ratio(cam))


def fov_h(cam: CameraSnapshot) -> float:
    if not cam.fov_is_height:
        return float(cam.fov_angle)
    return convert_fov(cam.fov_angle, aspect_ratio(cam))


def full_fov_v(cam: CameraSnapshot) -> float:
    # Bars never remove angle, hence the cap at 1.
    return convert_fov(fov_v(cam), max(aspect_ratio_ratio(cam), 1.0))


def full_fov_h(cam: CameraSnapshot) -> float:
    return convert_fov(fov_h(cam), max(1.0 / aspect_ratio_ratio(cam), 1.0))


def full_height(cam: CameraSnapshot) -> float:
    return float(cam.height)


def full_width(cam: CameraSnapshot) -> float:
    return full_height(cam) * viewport_aspect_ratio(cam)


def height(cam: CameraSnapshot) -> float:
    return full_height(cam) / max(1.0, aspect_ratio_ratio(cam))


def width(cam: CameraSnapshot) -> float:
    return full_width(cam) / max(1.0, 1.0 / aspect_ratio_ratio(cam))


def set_fov_v(cam: CameraSnapshot, fov: float) -> None:
    if cam.fov_is_height:
        cam.fov_angle = float(fov)
    else:
        cam.fov_angle = convert_fov(fov, aspect_ratio(cam))


def set_fov_h(cam: CameraSnapshot, fov: float) -> None:
    if cam.fov_is_height:
        cam.fov_angle = convert_fov(fov, 1.0 / aspect_ratio(cam))
    else:
        cam.fov_angle = float(fov)


def set_full_fov_v(cam: CameraSnapshot, fov: float) -> None:
    set_fov_v(cam, convert_fov(fov, min(1.0 / aspect_ratio_ratio(cam), 1.0)))


def set_full_fov_h(cam: CameraSnapshot, fov: float) -> None:
    set_fov_h(cam, convert_fov(fov, min(aspect_ratio_ratio(cam), 1.0)))


def set_full_height(cam: CameraSnapshot, value: float) -> None:
    cam.height = float(value)


def set_full_width(cam: CameraSnapshot, value: float) -> None:
    set_full_height(cam, value / viewport_aspect_ratio(cam))


def set_height(cam: CameraSnapshot, value: float) -> None:
    set_full_height(cam, value * max(aspect_ratio_ratio(cam), 1.0))


def set_width(cam: CameraSnapshot, value: float) -> None:
    set_full_width(cam, value * max(1.0 / aspect_ratio_ratio(cam), 1.0))


def set_aspect_ratio(cam: CameraSnapshot, ratio: float) -> None:
    """Set the explicit aspect ratio without changing the projection on screen."""
    fov = full_fov_v(cam) if cam.is_perspective else None
    cam.explicit_aspect_ratio = float(ratio)
    if fov is not None:
        set_full_fov_v(cam, fov)


def reset_aspect_ratio(cam: CameraSnapshot) -> None:
    set_aspect_ratio(cam, 0.0)


def camera_space(cam: CameraSnapshot) -> np.ndarray:
    """Camera-to-world transform; camera space looks down its local -z."""
    return frame_matrix(cam.eye, cam.x_axis, cam.up_axis, -cam.forward_axis)


def screen_center(cam: CameraSnapshot) -> np.ndarray:
    return np.array([cam.viewport_width_px * 0.5, cam.viewport_height_px * 0.5], dtype=np.float64)


def screen_coords(cam: CameraSnapshot, points) -> np.ndarray:
    """
    Project world points to viewport pixels, origin top-left and y down.

    In perspective projection points at or behind the eye have no screen
    position and come back as NaN rows.
    """
    pc = transform_points(invert_rigid(camera_space(cam)), as_points(points))
    center = screen_center(cam)
    if cam.is_perspective:
        f = cam.viewport_height_px * 0.5 / math.tan(math.radians(full_fov_v(cam)) / 2.0)
        depth = -pc[:, 2]
        out = np.full((pc.shape[0], 2), np.nan, dtype=np.float64)
        ok = depth > 0.0
        out[ok, 0] = center[0] + f * pc[ok, 0] / depth[ok]
        out[ok, 1] = center[1] - f * pc[ok, 1] / depth[ok]
        return out
    f = cam.viewport_height_px / full_height(cam)
    return np.stack([center[0] + f * pc[:, 0], center[1] - f * pc[:, 1]], axis=1)
