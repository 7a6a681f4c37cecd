"""Tests for the parallel tracer.

Tests cover:
- Work item enumeration order
- Running-average folding of samples
- Completion tracking
- Per-pass ordering of same-pixel updates
- Seeded reproducibility independent of the worker count
- Worker error propagation
- End-to-end render of a normal-shaded sphere
"""

import threading

import numpy as np
import pytest


def _pinhole(aspect_ratio=1.0, vfov=90.0):
    from src.pathtracer.camera.thin_lens import CameraConfig, build_camera

    return build_camera(CameraConfig(
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=vfov,
        aspect_ratio=aspect_ratio,
    ))


def _blank(width, height):
    from src.pathtracer.core.accumulator import ImageAccumulator
    from src.pathtracer.core.ray import ZERO

    return ImageAccumulator.new_blank(width, height, ZERO)


class TestWorkItems:
    """Tests for build_work_items."""

    def test_samples_outer_rows_top_to_bottom(self):
        from src.pathtracer.core.tracer import WorkItem, build_work_items

        items = build_work_items(samples=2, height=3)

        assert items == [
            WorkItem(0, 2),
            WorkItem(0, 1),
            WorkItem(0, 0),
            WorkItem(1, 2),
            WorkItem(1, 1),
            WorkItem(1, 0),
        ]

    def test_item_count(self):
        from src.pathtracer.core.tracer import build_work_items

        assert len(build_work_items(samples=5, height=7)) == 35

    def test_first_sample_offsets_indices(self):
        from src.pathtracer.core.tracer import build_work_items

        items = build_work_items(samples=2, height=1, first_sample=3)

        assert [item.sample for item in items] == [3, 4]


class TestFoldSample:
    """Tests for the running average."""

    def test_first_sample_overwrites(self):
        from src.pathtracer.core.ray import Vec3
        from src.pathtracer.core.tracer import fold_sample

        assert fold_sample(Vec3(9.0, 9.0, 9.0), Vec3(1.0, 2.0, 3.0), 0) == Vec3(1.0, 2.0, 3.0)

    def test_three_samples_average(self):
        from src.pathtracer.core.ray import ZERO, Vec3
        from src.pathtracer.core.tracer import fold_sample

        v0 = Vec3(1.0, 0.0, 3.0)
        v1 = Vec3(2.0, 6.0, 0.0)
        v2 = Vec3(0.0, 3.0, 3.0)

        avg = ZERO
        for k, v in enumerate([v0, v1, v2]):
            avg = fold_sample(avg, v, k)

        expected = (v0 + v1 + v2) / 3.0
        assert tuple(avg) == pytest.approx(tuple(expected))

    def test_many_samples_average(self, rng):
        from src.pathtracer.core.ray import ZERO, Vec3
        from src.pathtracer.core.tracer import fold_sample

        values = [Vec3.from_iterable(rng.random(3)) for _ in range(50)]

        avg = ZERO
        for k, v in enumerate(values):
            avg = fold_sample(avg, v, k)

        expected = np.mean([tuple(v) for v in values], axis=0)
        assert tuple(avg) == pytest.approx(tuple(expected))


class TestJitter:
    """Tests for pixel jitter."""

    def test_jitter_stays_inside_pixel(self, fake_random):
        from src.pathtracer.core.tracer import jittered

        assert jittered(3, 10, fake_random(randoms=[0.0])) == pytest.approx(0.3)
        assert jittered(3, 10, fake_random(randoms=[0.999])) == pytest.approx(0.3999)


class TestRender:
    """Tests for render()."""

    def test_completion_reaches_one(self):
        from src.pathtracer.core.tracer import render
        from src.pathtracer.scene.world import World

        image = _blank(5, 7)

        render(_pinhole(5 / 7), World(), image, samples=3, workers=3, seed=1)

        assert image.get_completion() == pytest.approx(1.0)

    def test_completion_stays_in_unit_range_when_continued(self):
        from src.pathtracer.core.tracer import render
        from src.pathtracer.scene.world import World

        image = _blank(4, 3)

        render(_pinhole(4 / 3), World(), image, samples=3, workers=2, seed=1)
        assert 0.0 <= image.get_completion() <= 1.0

        render(_pinhole(4 / 3), World(), image, samples=1, workers=2, seed=1, first_sample=3)

        assert 0.0 <= image.get_completion() <= 1.0
        assert image.get_completion() == pytest.approx(1.0)

    def test_completion_is_reset_at_start(self):
        from src.pathtracer.core.tracer import render
        from src.pathtracer.scene.world import World

        image = _blank(3, 3)
        image.update_completion(lambda _: 0.75)
        seen = []

        render(
            _pinhole(),
            World(),
            image,
            samples=2,
            workers=1,
            seed=0,
            on_pass_complete=lambda _: seen.append(image.get_completion()),
        )

        assert seen == [pytest.approx(0.5), pytest.approx(1.0)]

    def test_sky_only_render_fills_every_pixel(self):
        from src.pathtracer.core.tracer import render
        from src.pathtracer.scene.world import World

        image = _blank(6, 4)

        render(_pinhole(1.5), World(), image, samples=2, workers=2, seed=3)

        array = image.to_numpy()
        # Sky is between light blue and white; bottom rows are bluer
        np.testing.assert_allclose(array[..., 2], 1.0)
        assert np.all(array[..., 0] >= 0.5)
        assert array[0, :, 0].mean() < array[-1, :, 0].mean()

    @pytest.mark.parametrize("samples", [0, -2])
    def test_non_positive_samples_rejected(self, samples):
        from src.pathtracer.core.tracer import render
        from src.pathtracer.scene.world import World

        with pytest.raises(ValueError, match="Samples"):
            render(_pinhole(), World(), _blank(2, 2), samples=samples)

    def test_non_positive_depth_rejected(self):
        from src.pathtracer.core.tracer import render
        from src.pathtracer.scene.world import World

        with pytest.raises(ValueError, match="Max depth"):
            render(_pinhole(), World(), _blank(2, 2), samples=1, max_depth=0)

    def test_pass_callback_reports_each_sample_in_order(self):
        from src.pathtracer.core.tracer import render
        from src.pathtracer.scene.world import World

        passes = []

        render(
            _pinhole(),
            World(),
            _blank(3, 3),
            samples=4,
            workers=2,
            seed=0,
            on_pass_complete=passes.append,
        )

        assert passes == [0, 1, 2, 3]

    def test_same_pixel_updates_arrive_in_sample_order(self):
        """Test that pass k + 1 never starts before pass k has finished."""
        from src.pathtracer.core.accumulator import ImageAccumulator
        from src.pathtracer.core.ray import ZERO
        from src.pathtracer.core.tracer import render
        from src.pathtracer.scene.world import World

        class RecordingAccumulator(ImageAccumulator):
            def __init__(self, *args):
                super().__init__(*args)
                self.order = []
                self.per_pixel = {}
                self._record_lock = threading.Lock()

            def update_pixel(self, x, y, update):
                sample = update.keywords["sample"]
                with self._record_lock:
                    self.order.append(sample)
                    self.per_pixel.setdefault((x, y), []).append(sample)
                return super().update_pixel(x, y, update)

        image = RecordingAccumulator(4, 6, ZERO)

        render(_pinhole(4 / 6), World(), image, samples=5, workers=4, seed=2)

        assert image.order == sorted(image.order)
        assert len(image.per_pixel) == 24
        for samples in image.per_pixel.values():
            assert samples == [0, 1, 2, 3, 4]

    def test_seeded_render_is_independent_of_worker_count(self):
        from src.pathtracer.core.tracer import render
        from src.pathtracer.scene.presets import create_showcase_scene

        world, camera = create_showcase_scene(8 / 6)
        single = _blank(8, 6)
        pooled = _blank(8, 6)

        render(camera, world, single, samples=2, max_depth=5, workers=1, seed=42)
        render(camera, world, pooled, samples=2, max_depth=5, workers=4, seed=42)

        assert single.snapshot() == pooled.snapshot()

    def test_different_seeds_give_different_images(self):
        from src.pathtracer.core.tracer import render
        from src.pathtracer.scene.presets import create_showcase_scene

        world, camera = create_showcase_scene(8 / 6)
        first = _blank(8, 6)
        second = _blank(8, 6)

        render(camera, world, first, samples=1, max_depth=5, workers=2, seed=1)
        render(camera, world, second, samples=1, max_depth=5, workers=2, seed=2)

        assert first.snapshot() != second.snapshot()

    def test_continued_render_matches_single_call(self):
        from src.pathtracer.core.tracer import render
        from src.pathtracer.scene.presets import create_showcase_scene

        world, camera = create_showcase_scene(1.0)
        once = _blank(5, 5)
        twice = _blank(5, 5)

        render(camera, world, once, samples=3, max_depth=4, workers=2, seed=9)
        render(camera, world, twice, samples=1, max_depth=4, workers=2, seed=9)
        render(camera, world, twice, samples=2, max_depth=4, workers=2, seed=9, first_sample=1)

        np.testing.assert_allclose(once.to_numpy(), twice.to_numpy())

    def test_worker_errors_propagate(self):
        from src.pathtracer.core.tracer import render
        from src.pathtracer.geometry.hittable import Hittable

        class BrokenWorld(Hittable):
            def hit(self, ray, t_min, t_max):
                raise RuntimeError("broken geometry")

        with pytest.raises(RuntimeError, match="broken geometry"):
            render(_pinhole(), BrokenWorld(), _blank(3, 3), samples=2, workers=2)


class TestEndToEnd:
    """Render a single sphere with the normal-visualization material."""

    def test_center_pixel_shows_normal_facing_camera(self):
        from src.pathtracer.core.ray import Vec3
        from src.pathtracer.core.tracer import render
        from src.pathtracer.geometry.sphere import Sphere
        from src.pathtracer.materials.normal import Normal
        from src.pathtracer.preview.display import tone_map_max_intensity
        from src.pathtracer.scene.world import World

        size = 41
        world = World.from_objects([Sphere(Vec3(0.0, 0.0, -1.0), 0.5, Normal())])
        image = _blank(size, size)

        render(_pinhole(), world, image, samples=1, workers=4, seed=5)

        center = size // 2
        # Normal at the hit closest to (0, 0, -0.5) is (0, 0, 1)
        raw = image.get_pixel(center, center)
        assert tuple(raw) == pytest.approx((1.0, 1.0, 2.0), abs=0.05)

        normalized = tone_map_max_intensity(image.to_numpy())
        assert tuple(normalized[center, center]) == pytest.approx((0.5, 0.5, 1.0), abs=0.05)

    def test_corner_pixel_shows_sky(self):
        from src.pathtracer.core.integrator import SKY_BLUE
        from src.pathtracer.core.ray import Vec3
        from src.pathtracer.core.tracer import render
        from src.pathtracer.geometry.sphere import Sphere
        from src.pathtracer.materials.normal import Normal
        from src.pathtracer.scene.world import World

        world = World.from_objects([Sphere(Vec3(0.0, 0.0, -1.0), 0.5, Normal())])
        image = _blank(21, 21)

        render(_pinhole(), world, image, samples=1, workers=2, seed=5)

        corner = image.get_pixel(0, 0)
        # Bottom-left looks down and left: between horizon and sky blue
        assert corner.z == pytest.approx(1.0)
        assert SKY_BLUE.x <= corner.x < 0.75
