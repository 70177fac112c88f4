from __future__ import annotations

from camera_framing import view
from camera_framing.geometry import rotate_vector
from camera_framing.types import CameraSnapshot, FittingOptions, Frustum, Plane


def compute_frustum(
    camera: CameraSnapshot,
    padding: float = 0.0,
    include_letterbox_bars: bool = False,
) -> Frustum:
    """
    Side planes of the camera frustum, ordered left, right, bottom, top.

    Normals point out of the frustum. With ``include_letterbox_bars`` the
    planes follow the full viewport, otherwise the region within the bars.
    ``padding`` is the percentage of the view to leave blank on each side.
    """
    opts = FittingOptions(padding=padding, include_letterbox_bars=include_letterbox_bars)
    k = opts.padding_factor

    if camera.is_perspective:
        if opts.include_letterbox_bars:
            half_h, half_v = view.full_fov_h(camera) / 2.0, view.full_fov_v(camera) / 2.0
        else:
            half_h, half_v = view.fov_h(camera) / 2.0, view.fov_v(camera) / 2.0
        return perspective_planes(camera, half_h * k, half_v * k)

    if opts.include_letterbox_bars:
        half_w, half_ht = view.full_width(camera) / 2.0, view.full_height(camera) / 2.0
    else:
        half_w, half_ht = view.width(camera) / 2.0, view.height(camera) / 2.0
    return parallel_planes(camera, half_w / k, half_ht / k)


def perspective_planes(cam: CameraSnapshot, half_fov_h: float, half_fov_v: float) -> Frustum:
    # x_axis = right; all planes share the eye as apex.
    return Frustum(
        left=Plane(cam.eye, rotate_vector(-cam.x_axis, cam.up_axis, half_fov_h)),
        right=Plane(cam.eye, rotate_vector(cam.x_axis, cam.up_axis, -half_fov_h)),
        bottom=Plane(cam.eye, rotate_vector(-cam.up_axis, cam.x_axis, -half_fov_v)),
        top=Plane(cam.eye, rotate_vector(cam.up_axis, cam.x_axis, half_fov_v)),
    )


def parallel_planes(cam: CameraSnapshot, half_width: float, half_height: float) -> Frustum:
    return Frustum(
        left=Plane(cam.eye - half_width * cam.x_axis, -cam.x_axis),
        right=Plane(cam.eye + half_width * cam.x_axis, cam.x_axis),
        bottom=Plane(cam.eye - half_height * cam.up_axis, -cam.up_axis),
        top=Plane(cam.eye + half_height * cam.up_axis, cam.up_axis),
    )
