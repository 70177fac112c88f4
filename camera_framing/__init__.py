"""Camera framing: frustum geometry and zoom-to-fit for 3D viewports."""

from camera_framing.errors import DegenerateGeometryError, InvalidArgument
from camera_framing.frustum import compute_frustum
from camera_framing.scene import Container, Leaf, collect_points
from camera_framing.types import CameraSnapshot, FittingOptions, FittingResult, Frustum, Plane, Projection
from camera_framing.zoom import fit_camera_to_points, frame_points, zoom_entities

__all__ = [
    "CameraSnapshot",
    "Container",
    "DegenerateGeometryError",
    "FittingOptions",
    "FittingResult",
    "Frustum",
    "InvalidArgument",
    "Leaf",
    "Plane",
    "Projection",
    "collect_points",
    "compute_frustum",
    "fit_camera_to_points",
    "frame_points",
    "zoom_entities",
]
