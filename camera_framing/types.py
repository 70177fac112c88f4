from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field, replace
from typing import NamedTuple, Optional

import numpy as np

from camera_framing.errors import InvalidArgument
from camera_framing.geometry import as_points, as_vec3, normalize, transform_points, transform_vectors

MAX_PADDING = 50.0


class Projection(enum.Enum):
    PARALLEL = "parallel"
    PERSPECTIVE = "perspective"


def check_padding(padding: float) -> float:
    p = float(padding)
    if not math.isfinite(p):
        raise InvalidArgument(f"Padding must be a finite number, got {padding!r}")
    if p >= MAX_PADDING:
        raise InvalidArgument("Padding must be smaller than 50%")
    if p < 0.0:
        raise InvalidArgument("Padding must not be negative")
    return p


@dataclass(frozen=False)
class CameraSnapshot:
    """
    Viewing state read from a host viewport.

    Axes are orthonormal and right-handed with ``x_axis x up_axis == -forward_axis``.
    ``height`` is the full orthographic height (letterbox bars included) and is
    only meaningful for parallel projection. ``explicit_aspect_ratio == 0`` means
    the aspect ratio follows the viewport.
    """

    eye: np.ndarray
    x_axis: np.ndarray
    up_axis: np.ndarray
    forward_axis: np.ndarray
    projection: Projection = Projection.PERSPECTIVE
    fov_angle: float = 35.0
    fov_is_height: bool = True
    height: float = 1.0
    explicit_aspect_ratio: float = 0.0
    viewport_width_px: int = 1280
    viewport_height_px: int = 720

    def __post_init__(self):
        self.eye = as_vec3(self.eye)
        self.x_axis = as_vec3(self.x_axis)
        self.up_axis = as_vec3(self.up_axis)
        self.forward_axis = as_vec3(self.forward_axis)
        self.projection = Projection(self.projection)

    @property
    def is_perspective(self) -> bool:
        return self.projection is Projection.PERSPECTIVE

    def copy(self) -> CameraSnapshot:
        return replace(self)

    @classmethod
    def from_look_at(
        cls,
        eye,
        target,
        up=(0.0, 0.0, 1.0),
        **kwargs,
    ) -> CameraSnapshot:
        eye = as_vec3(eye)
        forward = as_vec3(target) - eye
        if float(np.linalg.norm(forward)) < 1e-12:
            raise InvalidArgument("Eye and target positions are too close (degenerate camera)")
        forward = normalize(forward)

        right = np.cross(forward, as_vec3(up))
        if float(np.linalg.norm(right)) < 1e-6:
            alt_up = np.array([0.0, 1.0, 0.0]) if abs(float(forward[1])) < 0.999 else np.array([1.0, 0.0, 0.0])
            right = np.cross(forward, alt_up)
        right = normalize(right)
        cam_up = np.cross(right, forward)
        return cls(eye=eye, x_axis=right, up_axis=cam_up, forward_axis=forward, **kwargs)


@dataclass(frozen=True)
class Plane:
    point: np.ndarray
    normal: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "point", as_vec3(self.point))
        object.__setattr__(self, "normal", as_vec3(self.normal))

    def signed_distance(self, points) -> np.ndarray:
        """Distance of each point along the plane normal (positive on the normal side)."""
        return (as_points(points) - self.point) @ self.normal

    def transformed(self, m: np.ndarray) -> Plane:
        return Plane(
            point=transform_points(m, self.point)[0],
            normal=transform_vectors(m, self.normal)[0],
        )


class Frustum(NamedTuple):
    left: Plane
    right: Plane
    bottom: Plane
    top: Plane


@dataclass(frozen=True)
class FittingOptions:
    padding: float = 2.5
    include_letterbox_bars: bool = False

    def __post_init__(self):
        object.__setattr__(self, "padding", check_padding(self.padding))
        object.__setattr__(self, "include_letterbox_bars", bool(self.include_letterbox_bars))

    @property
    def padding_factor(self) -> float:
        return 1.0 - self.padding / MAX_PADDING


@dataclass(frozen=True)
class FittingResult:
    eye: np.ndarray
    aspect_ratio: Optional[float]
    projection: Projection
    width: Optional[float] = None
    height: Optional[float] = None
    fov_angle: Optional[float] = None
    is_noop: bool = field(default=False)

    @classmethod
    def noop(cls, camera: CameraSnapshot) -> FittingResult:
        return cls(
            eye=as_vec3(camera.eye),
            aspect_ratio=None,
            projection=camera.projection,
            is_noop=True,
        )

    def as_dict(self) -> dict:
        return {
            "eye": [float(v) for v in self.eye],
            "projection": self.projection.value,
            "width": self.width,
            "height": self.height,
            "fov_deg": self.fov_angle,
            "aspect_ratio": self.aspect_ratio,
            "noop": self.is_noop,
        }
