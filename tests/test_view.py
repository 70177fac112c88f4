from __future__ import annotations

import unittest

import numpy as np

from camera_framing import view
from camera_framing.types import CameraSnapshot, Projection


def _rng(seed: int) -> np.random.Generator:
    return np.random.default_rng(seed)


def _camera(**kwargs) -> CameraSnapshot:
    base = dict(
        eye=[0.0, 0.0, 0.0],
        x_axis=[1.0, 0.0, 0.0],
        up_axis=[0.0, 1.0, 0.0],
        forward_axis=[0.0, 0.0, -1.0],
        projection=Projection.PERSPECTIVE,
        fov_angle=60.0,
        fov_is_height=True,
        height=10.0,
        explicit_aspect_ratio=0.0,
        viewport_width_px=1600,
        viewport_height_px=900,
    )
    base.update(kwargs)
    return CameraSnapshot(**base)


def _random_camera(rng: np.random.Generator) -> CameraSnapshot:
    explicit = 0.0 if rng.uniform() < 0.3 else float(rng.uniform(0.3, 3.0))
    return _camera(
        fov_angle=float(rng.uniform(5.0, 120.0)),
        fov_is_height=bool(rng.uniform() < 0.5),
        height=float(rng.uniform(0.5, 50.0)),
        explicit_aspect_ratio=explicit,
        viewport_width_px=int(rng.integers(100, 3000)),
        viewport_height_px=int(rng.integers(100, 3000)),
    )


class TestAspectRatio(unittest.TestCase):
    def test_implicit_aspect_ratio_follows_viewport(self):
        cam = _camera()
        self.assertAlmostEqual(view.viewport_aspect_ratio(cam), 16.0 / 9.0, places=12)
        self.assertAlmostEqual(view.aspect_ratio(cam), 16.0 / 9.0, places=12)
        self.assertAlmostEqual(view.aspect_ratio_ratio(cam), 1.0, places=12)
        self.assertFalse(view.is_explicit_aspect_ratio(cam))

    def test_explicit_aspect_ratio_bars(self):
        wide = _camera(explicit_aspect_ratio=2.35)
        self.assertTrue(view.is_explicit_aspect_ratio(wide))
        self.assertAlmostEqual(view.aspect_ratio(wide), 2.35, places=12)
        self.assertGreater(view.aspect_ratio_ratio(wide), 1.0)

        tall = _camera(explicit_aspect_ratio=1.0)
        self.assertLess(view.aspect_ratio_ratio(tall), 1.0)


class TestConvertFov(unittest.TestCase):
    def test_ratio_one_is_identity(self):
        for angle in (0.0, 1.0, 35.0, 60.0, 90.0, 150.0):
            self.assertAlmostEqual(view.convert_fov(angle, 1.0), angle, places=10)

    def test_round_trip(self):
        rng = _rng(1)
        for _ in range(2000):
            angle = float(rng.uniform(0.5, 170.0))
            ratio = float(rng.uniform(0.1, 10.0))
            back = view.convert_fov(view.convert_fov(angle, ratio), 1.0 / ratio)
            self.assertAlmostEqual(back, angle, places=8)

    def test_matches_pinhole_relation(self):
        h = view.convert_fov(60.0, 16.0 / 9.0)
        self.assertAlmostEqual(
            np.tan(np.deg2rad(h) / 2.0),
            np.tan(np.deg2rad(60.0) / 2.0) * 16.0 / 9.0,
            places=12,
        )


class TestFieldOfView(unittest.TestCase):
    def test_height_measured_fov(self):
        cam = _camera(fov_angle=60.0, fov_is_height=True)
        self.assertAlmostEqual(view.fov_v(cam), 60.0, places=12)
        self.assertAlmostEqual(view.fov_h(cam), view.convert_fov(60.0, 16.0 / 9.0), places=12)

    def test_width_measured_fov(self):
        cam = _camera(fov_angle=90.0, fov_is_height=False)
        self.assertAlmostEqual(view.fov_h(cam), 90.0, places=12)
        self.assertAlmostEqual(view.fov_v(cam), view.convert_fov(90.0, 9.0 / 16.0), places=12)

    def test_full_fov_never_smaller_than_bounded(self):
        rng = _rng(2)
        for _ in range(2000):
            cam = _random_camera(rng)
            self.assertGreaterEqual(view.full_fov_v(cam) + 1e-9, view.fov_v(cam))
            self.assertGreaterEqual(view.full_fov_h(cam) + 1e-9, view.fov_h(cam))

    def test_full_fov_without_bars_equals_bounded(self):
        cam = _camera()
        self.assertAlmostEqual(view.full_fov_v(cam), view.fov_v(cam), places=12)
        self.assertAlmostEqual(view.full_fov_h(cam), view.fov_h(cam), places=12)

    def test_full_fov_spans_viewport(self):
        rng = _rng(3)
        for _ in range(500):
            cam = _random_camera(rng)
            tv = np.tan(np.deg2rad(view.full_fov_v(cam)) / 2.0)
            th = np.tan(np.deg2rad(view.full_fov_h(cam)) / 2.0)
            self.assertAlmostEqual(th / tv, view.viewport_aspect_ratio(cam), places=8)

    def test_setters_round_trip(self):
        rng = _rng(4)
        for _ in range(500):
            cam = _random_camera(rng)
            fov = float(rng.uniform(10.0, 100.0))
            view.set_fov_v(cam, fov)
            self.assertAlmostEqual(view.fov_v(cam), fov, places=8)
            view.set_fov_h(cam, fov)
            self.assertAlmostEqual(view.fov_h(cam), fov, places=8)
            view.set_full_fov_v(cam, fov)
            self.assertAlmostEqual(view.full_fov_v(cam), fov, places=8)
            view.set_full_fov_h(cam, fov)
            self.assertAlmostEqual(view.full_fov_h(cam), fov, places=8)

    def test_set_aspect_ratio_keeps_projection_on_screen(self):
        rng = _rng(5)
        for _ in range(500):
            cam = _random_camera(rng)
            before = view.full_fov_v(cam)
            view.set_aspect_ratio(cam, float(rng.uniform(0.3, 3.0)))
            self.assertAlmostEqual(view.full_fov_v(cam), before, places=8)

    def test_reset_aspect_ratio(self):
        cam = _camera(explicit_aspect_ratio=2.0)
        before = view.full_fov_v(cam)
        view.reset_aspect_ratio(cam)
        self.assertFalse(view.is_explicit_aspect_ratio(cam))
        self.assertAlmostEqual(view.full_fov_v(cam), before, places=8)


class TestParallelExtent(unittest.TestCase):
    def test_no_bars(self):
        cam = _camera(projection=Projection.PARALLEL, height=9.0)
        self.assertAlmostEqual(view.full_height(cam), 9.0, places=12)
        self.assertAlmostEqual(view.full_width(cam), 16.0, places=12)
        self.assertAlmostEqual(view.height(cam), 9.0, places=12)
        self.assertAlmostEqual(view.width(cam), 16.0, places=12)

    def test_horizontal_bars_shrink_height(self):
        cam = _camera(projection=Projection.PARALLEL, height=9.0, explicit_aspect_ratio=32.0 / 9.0)
        self.assertAlmostEqual(view.height(cam), 4.5, places=12)
        self.assertAlmostEqual(view.width(cam), 16.0, places=12)

    def test_vertical_bars_shrink_width(self):
        cam = _camera(projection=Projection.PARALLEL, height=9.0, explicit_aspect_ratio=1.0)
        self.assertAlmostEqual(view.height(cam), 9.0, places=12)
        self.assertAlmostEqual(view.width(cam), 9.0, places=12)

    def test_setters(self):
        cam = _camera(projection=Projection.PARALLEL, height=9.0, explicit_aspect_ratio=1.0)
        view.set_width(cam, 4.0)
        self.assertAlmostEqual(view.width(cam), 4.0, places=12)
        view.set_height(cam, 3.0)
        self.assertAlmostEqual(view.height(cam), 3.0, places=12)
        view.set_full_width(cam, 32.0)
        self.assertAlmostEqual(view.full_height(cam), 18.0, places=12)
        view.set_full_height(cam, 2.0)
        self.assertAlmostEqual(cam.height, 2.0, places=12)


class TestScreenCoords(unittest.TestCase):
    def test_axis_point_maps_to_center(self):
        for projection in Projection:
            cam = _camera(projection=projection)
            uv = view.screen_coords(cam, [[0.0, 0.0, -5.0]])
            self.assertTrue(np.allclose(uv[0], view.screen_center(cam), atol=1e-9))

    def test_perspective_edge_maps_to_viewport_edge(self):
        cam = _camera(fov_angle=60.0)
        y = 10.0 * np.tan(np.deg2rad(30.0))
        uv = view.screen_coords(cam, [[0.0, y, -10.0], [0.0, -y, -10.0]])
        self.assertAlmostEqual(float(uv[0, 1]), 0.0, places=6)
        self.assertAlmostEqual(float(uv[1, 1]), 900.0, places=6)

    def test_parallel_edge_maps_to_viewport_edge(self):
        cam = _camera(projection=Projection.PARALLEL, height=9.0)
        uv = view.screen_coords(cam, [[8.0, 4.5, -3.0]])
        self.assertTrue(np.allclose(uv[0], [1600.0, 0.0], atol=1e-9))

    def test_points_behind_eye_are_nan(self):
        cam = _camera()
        uv = view.screen_coords(cam, [[0.0, 0.0, 1.0], [0.0, 0.0, 0.0], [1.0, 0.0, -1.0]])
        self.assertTrue(np.all(np.isnan(uv[0])))
        self.assertTrue(np.all(np.isnan(uv[1])))
        self.assertTrue(np.all(np.isfinite(uv[2])))


if __name__ == "__main__":
    unittest.main()
