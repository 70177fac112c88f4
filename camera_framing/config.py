from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

from camera_framing.errors import InvalidArgument
from camera_framing.geometry import as_points
from camera_framing.types import CameraSnapshot, FittingOptions, Projection

_AXIS_TOL = 1e-6


def _f(name: str, default: float) -> float:
    v = os.environ.get(name, "")
    if not v:
        return float(default)
    try:
        return float(v)
    except ValueError:
        return float(default)


def _s(name: str, default: str) -> str:
    v = os.environ.get(name, "")
    return v if v else default


def _b(name: str, default: bool) -> bool:
    v = os.environ.get(name, "")
    if not v:
        return bool(default)
    vv = v.strip().lower()
    if vv in ("1", "true", "yes", "y", "on"):
        return True
    if vv in ("0", "false", "no", "n", "off"):
        return False
    return bool(default)


@dataclass(frozen=True)
class FitConfig:
    padding: float
    include_letterbox_bars: bool
    min_extent: float
    log_level: str

    def options(self) -> FittingOptions:
        return FittingOptions(padding=self.padding, include_letterbox_bars=self.include_letterbox_bars)


def load_config() -> FitConfig:
    return FitConfig(
        padding=_f("FRAMING_PADDING", 2.5),
        include_letterbox_bars=_b("FRAMING_FULL", False),
        min_extent=_f("FRAMING_MIN_EXTENT", 1e-6),
        log_level=_s("FRAMING_LOG_LEVEL", "WARNING").upper(),
    )


def _vec(raw: dict[str, Any], key: str) -> np.ndarray:
    v = raw.get(key)
    if not isinstance(v, (list, tuple)) or len(v) != 3:
        raise InvalidArgument(f"camera {key} must be a list of 3 numbers")
    return np.asarray([float(x) for x in v], dtype=np.float64)


def camera_from_raw(raw: Any) -> CameraSnapshot:
    if not isinstance(raw, dict):
        raise InvalidArgument("camera config must be an object")

    viewport = raw.get("viewport", {})
    if not isinstance(viewport, dict):
        raise InvalidArgument("camera viewport must be an object")
    vp_w = int(viewport.get("width", 1280))
    vp_h = int(viewport.get("height", 720))
    if vp_w <= 0 or vp_h <= 0:
        raise InvalidArgument("camera viewport width and height must be positive")

    projection_raw = str(raw.get("projection", "perspective")).strip().lower()
    try:
        projection = Projection(projection_raw)
    except ValueError:
        raise InvalidArgument(f"camera projection must be parallel or perspective, got {projection_raw!r}") from None

    kwargs = dict(
        projection=projection,
        fov_angle=float(raw.get("fov_deg", 35.0)),
        fov_is_height=bool(raw.get("fov_is_height", True)),
        height=float(raw.get("height", 1.0)),
        explicit_aspect_ratio=float(raw.get("aspect_ratio", 0.0)),
        viewport_width_px=vp_w,
        viewport_height_px=vp_h,
    )
    if projection is Projection.PARALLEL and kwargs["height"] <= 0.0:
        raise InvalidArgument("camera height must be positive for parallel projection")

    eye = _vec(raw, "eye")
    if "target" in raw:
        up = _vec(raw, "up") if "up" in raw else np.array([0.0, 0.0, 1.0])
        return CameraSnapshot.from_look_at(eye, _vec(raw, "target"), up, **kwargs)

    axes = [_vec(raw, k) for k in ("x_axis", "up_axis", "forward_axis")]
    for name, a in zip(("x_axis", "up_axis", "forward_axis"), axes):
        if float(np.linalg.norm(a)) < 1e-12:
            raise InvalidArgument(f"camera {name} must not be zero")
        if abs(float(np.linalg.norm(a)) - 1.0) > _AXIS_TOL:
            raise InvalidArgument(f"camera {name} must be unit length")
    x, up, fwd = axes
    if max(abs(float(x @ up)), abs(float(x @ fwd)), abs(float(up @ fwd))) > _AXIS_TOL:
        raise InvalidArgument("camera axes must be mutually orthogonal")
    if not np.allclose(np.cross(x, up), -fwd, atol=_AXIS_TOL):
        raise InvalidArgument("camera axes must satisfy x_axis x up_axis == -forward_axis")
    return CameraSnapshot(eye=eye, x_axis=axes[0], up_axis=axes[1], forward_axis=axes[2], **kwargs)


def camera_to_raw(cam: CameraSnapshot) -> dict[str, Any]:
    return {
        "eye": [float(v) for v in cam.eye],
        "x_axis": [float(v) for v in cam.x_axis],
        "up_axis": [float(v) for v in cam.up_axis],
        "forward_axis": [float(v) for v in cam.forward_axis],
        "projection": cam.projection.value,
        "fov_deg": float(cam.fov_angle),
        "fov_is_height": bool(cam.fov_is_height),
        "height": float(cam.height),
        "aspect_ratio": float(cam.explicit_aspect_ratio),
        "viewport": {"width": int(cam.viewport_width_px), "height": int(cam.viewport_height_px)},
    }


def load_camera_raw(path: str | Path) -> dict[str, Any]:
    p = Path(path).resolve()
    raw = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise InvalidArgument(f"camera config at {p} must be an object")
    return raw


def load_camera(path: str | Path) -> CameraSnapshot:
    return camera_from_raw(load_camera_raw(path))


def save_camera(cam: CameraSnapshot, path: str | Path) -> Path:
    p = Path(path).resolve()
    p.write_text(json.dumps(camera_to_raw(cam), indent=2) + "\n", encoding="utf-8")
    return p


def load_points(path: str | Path) -> np.ndarray:
    p = Path(path).resolve()
    raw = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise InvalidArgument(f"points at {p} must be a list of [x, y, z]")
    for i, pt in enumerate(raw):
        if not isinstance(pt, (list, tuple)) or len(pt) != 3:
            raise InvalidArgument(f"point {i} at {p} must be [x, y, z]")
    return as_points(raw)
