from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from camera_framing.errors import InvalidArgument


def as_vec3(v) -> np.ndarray:
    return np.asarray(v, dtype=np.float64).reshape(3).copy()


def as_points(points) -> np.ndarray:
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, 3), dtype=np.float64)
    if arr.shape == (3,):
        return arr.reshape(1, 3)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidArgument(f"expected points of shape (N, 3), got {arr.shape}")
    return arr


def normalize(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    v = as_vec3(v)
    n = float(np.linalg.norm(v))
    if n < float(eps):
        raise ValueError("cannot normalize a zero-length vector")
    return v / n


def rotation_about(axis: np.ndarray, angle_deg: float) -> np.ndarray:
    """
    Right-handed rotation matrix about an arbitrary axis (Rodrigues).

    Positive angles turn counter-clockwise when looking down the axis
    towards the origin.
    """
    k = normalize(axis)
    a = np.deg2rad(float(angle_deg))
    c, s = np.cos(a), np.sin(a)
    K = np.array(
        [[0.0, -k[2], k[1]], [k[2], 0.0, -k[0]], [-k[1], k[0], 0.0]],
        dtype=np.float64,
    )
    return c * np.eye(3, dtype=np.float64) + s * K + (1.0 - c) * np.outer(k, k)


def rotate_vector(vector: np.ndarray, axis: np.ndarray, angle_deg: float) -> np.ndarray:
    return rotation_about(axis, angle_deg) @ as_vec3(vector)


def frame_matrix(origin: np.ndarray, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
    """4x4 local-to-world transform whose columns are the frame axes and origin."""
    m = np.eye(4, dtype=np.float64)
    m[:3, 0] = as_vec3(x)
    m[:3, 1] = as_vec3(y)
    m[:3, 2] = as_vec3(z)
    m[:3, 3] = as_vec3(origin)
    return m


def invert_rigid(m: np.ndarray) -> np.ndarray:
    m = np.asarray(m, dtype=np.float64).reshape(4, 4)
    R = m[:3, :3]
    t = m[:3, 3]
    out = np.eye(4, dtype=np.float64)
    out[:3, :3] = R.T
    out[:3, 3] = -(R.T @ t)
    return out


def transform_points(m: np.ndarray, points) -> np.ndarray:
    m = np.asarray(m, dtype=np.float64).reshape(4, 4)
    pts = as_points(points)
    return pts @ m[:3, :3].T + m[:3, 3]


def transform_vectors(m: np.ndarray, vectors) -> np.ndarray:
    m = np.asarray(m, dtype=np.float64).reshape(4, 4)
    return as_points(vectors) @ m[:3, :3].T


def intersect_plane_plane(
    p1: np.ndarray,
    n1: np.ndarray,
    p2: np.ndarray,
    n2: np.ndarray,
    eps: float = 1e-12,
) -> Optional[Tuple[np.ndarray, np.ndarray]]:
    """
    Intersection line of two planes given as (point, normal).

    Returns (point on line closest to the origin, unit direction), or None
    when the planes are parallel.
    """
    n1 = as_vec3(n1)
    n2 = as_vec3(n2)
    d = np.cross(n1, n2)
    denom = float(d @ d)
    if denom < float(eps):
        return None
    h1 = float(n1 @ as_vec3(p1))
    h2 = float(n2 @ as_vec3(p2))
    n12 = float(n1 @ n2)
    c1 = (h1 * float(n2 @ n2) - h2 * n12) / denom
    c2 = (h2 * float(n1 @ n1) - h1 * n12) / denom
    point = c1 * n1 + c2 * n2
    return point, d / np.sqrt(denom)
