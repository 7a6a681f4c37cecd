"""Unit tests for the ray module.

Tests cover:
- Vec3 algebra (addition, products, length, normalization)
- Ray evaluation
- Reflection, refraction and Schlick reflectance
- Random sampling functions for Monte Carlo
"""

import math

import pytest


class TestVec3Algebra:
    """Tests for Vec3 arithmetic."""

    def test_addition_is_commutative(self):
        """Test a + b == b + a."""
        from src.pathtracer.core.ray import Vec3

        a = Vec3(1.0, -2.0, 3.5)
        b = Vec3(0.25, 4.0, -1.0)

        assert a + b == b + a

    def test_addition_is_associative(self):
        """Test (a + b) + c == a + (b + c)."""
        from src.pathtracer.core.ray import Vec3

        a = Vec3(1.0, 2.0, 3.0)
        b = Vec3(-4.0, 0.5, 2.0)
        c = Vec3(0.25, -1.0, 8.0)

        left = (a + b) + c
        right = a + (b + c)
        assert tuple(left) == pytest.approx(tuple(right))

    def test_subtraction_and_negation(self):
        """Test a - b == a + (-b)."""
        from src.pathtracer.core.ray import Vec3

        a = Vec3(3.0, 2.0, 1.0)
        b = Vec3(1.0, 5.0, -2.0)

        assert a - b == a + (-b)
        assert a - b == Vec3(2.0, -3.0, 3.0)

    def test_componentwise_and_scalar_products(self):
        """Test Vec3 * Vec3 is component-wise and scalars work on both sides."""
        from src.pathtracer.core.ray import Vec3

        a = Vec3(1.0, 2.0, 3.0)

        assert a * Vec3(2.0, 3.0, 4.0) == Vec3(2.0, 6.0, 12.0)
        assert a * 2.0 == Vec3(2.0, 4.0, 6.0)
        assert 2.0 * a == a * 2.0
        assert a / 2.0 == Vec3(0.5, 1.0, 1.5)
        assert a / Vec3(1.0, 4.0, 3.0) == Vec3(1.0, 0.5, 1.0)

    def test_dot_is_symmetric(self):
        """Test a . b == b . a."""
        from src.pathtracer.core.ray import Vec3

        a = Vec3(1.0, 2.0, 3.0)
        b = Vec3(4.0, -5.0, 6.0)

        assert a.dot(b) == b.dot(a)
        assert a.dot(b) == pytest.approx(12.0)

    def test_cross_is_antisymmetric(self):
        """Test a x b == -(b x a)."""
        from src.pathtracer.core.ray import Vec3

        a = Vec3(1.0, 2.0, 3.0)
        b = Vec3(-2.0, 0.5, 4.0)

        assert tuple(a.cross(b)) == pytest.approx(tuple(-(b.cross(a))))

    def test_cross_of_basis_vectors(self):
        """Test x x y == z."""
        from src.pathtracer.core.ray import Vec3

        x = Vec3(1.0, 0.0, 0.0)
        y = Vec3(0.0, 1.0, 0.0)

        assert x.cross(y) == Vec3(0.0, 0.0, 1.0)

    @pytest.mark.parametrize("scale", [-3.0, -0.5, 0.0, 2.0, 10.0])
    def test_length_scales_with_absolute_factor(self, scale):
        """Test |s * a| == |s| * |a|."""
        from src.pathtracer.core.ray import Vec3

        a = Vec3(1.0, -2.0, 2.0)

        assert (a * scale).length() == pytest.approx(abs(scale) * a.length())

    def test_length_and_squared_length(self):
        """Test a 3-4-0 triangle."""
        from src.pathtracer.core.ray import Vec3

        v = Vec3(3.0, 4.0, 0.0)

        assert v.squared_length() == 25.0
        assert v.length() == 5.0

    def test_unit_has_length_one(self):
        """Test unit() returns a vector of length 1 in the same direction."""
        from src.pathtracer.core.ray import Vec3

        v = Vec3(2.0, -7.0, 0.5)
        u = v.unit()

        assert u.length() == pytest.approx(1.0)
        assert u.dot(v) == pytest.approx(v.length())

    def test_unit_of_zero_vector_raises(self):
        """Test that normalizing a zero vector is an error."""
        from src.pathtracer.core.ray import ZERO

        with pytest.raises(ZeroDivisionError):
            ZERO.unit()


class TestVec3Helpers:
    """Tests for Vec3 construction and conversion helpers."""

    def test_iteration_and_color_accessors(self):
        from src.pathtracer.core.ray import Vec3

        v = Vec3(0.1, 0.2, 0.3)

        assert tuple(v) == (0.1, 0.2, 0.3)
        assert (v.r, v.g, v.b) == (0.1, 0.2, 0.3)

    def test_from_iterable(self):
        import numpy as np

        from src.pathtracer.core.ray import Vec3

        assert Vec3.from_iterable([1, 2, 3]) == Vec3(1.0, 2.0, 3.0)
        v = Vec3.from_iterable(np.array([0.5, 0.25, 0.125]))
        assert v == Vec3(0.5, 0.25, 0.125)
        assert isinstance(v.x, float)

    def test_from_iterable_rejects_wrong_length(self):
        from src.pathtracer.core.ray import Vec3

        with pytest.raises(ValueError):
            Vec3.from_iterable([1.0, 2.0])

    def test_map(self):
        from src.pathtracer.core.ray import Vec3

        assert Vec3(1.0, 4.0, 9.0).map(math.sqrt) == Vec3(1.0, 2.0, 3.0)

    def test_vectors_are_immutable(self):
        from dataclasses import FrozenInstanceError

        from src.pathtracer.core.ray import Vec3

        v = Vec3(1.0, 2.0, 3.0)
        with pytest.raises(FrozenInstanceError):
            v.x = 5.0


class TestRay:
    """Tests for the Ray value type."""

    def test_point_at_parameter_zero_is_origin(self):
        from src.pathtracer.core.ray import Ray, Vec3

        ray = Ray(Vec3(1.0, 2.0, 3.0), Vec3(0.0, 0.0, -1.0))

        assert ray.point_at_parameter(0.0) == Vec3(1.0, 2.0, 3.0)

    def test_point_at_parameter_scales_direction(self):
        """Test that unnormalized directions scale the parameter."""
        from src.pathtracer.core.ray import Ray, Vec3

        ray = Ray(Vec3(0.0, 0.0, 0.0), Vec3(2.0, 0.0, 0.0))

        assert ray.point_at_parameter(2.5) == Vec3(5.0, 0.0, 0.0)
        assert ray.point_at_parameter(-1.0) == Vec3(-2.0, 0.0, 0.0)


class TestReflectRefract:
    """Tests for reflection, refraction and Schlick's approximation."""

    def test_reflect_about_up_normal(self):
        """Test reflect(d, n) = d - 2(d.n)n."""
        from src.pathtracer.core.ray import Vec3, reflect

        result = reflect(Vec3(1.0, -1.0, 0.0), Vec3(0.0, 1.0, 0.0))

        assert result == Vec3(1.0, 1.0, 0.0)

    def test_reflect_preserves_length(self):
        from src.pathtracer.core.ray import Vec3, reflect

        inbound = Vec3(0.3, -2.0, 1.1)
        normal = Vec3(1.0, 1.0, 0.0).unit()

        assert reflect(inbound, normal).length() == pytest.approx(inbound.length())

    def test_refract_with_equal_indices_passes_straight_through(self):
        from src.pathtracer.core.ray import Vec3, refract

        inbound = Vec3(1.0, -1.0, 0.0)
        result = refract(inbound, Vec3(0.0, 1.0, 0.0), 1.0)

        assert result is not None
        assert tuple(result) == pytest.approx(tuple(inbound.unit()))

    def test_refract_at_normal_incidence(self):
        from src.pathtracer.core.ray import Vec3, refract

        result = refract(Vec3(0.0, -3.0, 0.0), Vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        assert result is not None
        assert tuple(result) == pytest.approx((0.0, -1.0, 0.0))

    def test_refract_bends_toward_normal_entering_denser_medium(self):
        from src.pathtracer.core.ray import Vec3, refract

        inbound = Vec3(1.0, -1.0, 0.0)
        result = refract(inbound, Vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        assert result is not None
        # sin(theta_t) = sin(theta_i) / 1.5
        sin_t = abs(result.x) / result.length()
        assert sin_t == pytest.approx(math.sqrt(0.5) / 1.5)

    def test_refract_total_internal_reflection_returns_none(self):
        """Test a grazing ray leaving glass cannot refract."""
        from src.pathtracer.core.ray import Vec3, refract

        result = refract(Vec3(1.0, -0.1, 0.0), Vec3(0.0, 1.0, 0.0), 1.5)

        assert result is None

    def test_schlick_at_normal_incidence_is_r0(self):
        from src.pathtracer.core.ray import schlick

        # R0 = ((1 - 1.5) / (1 + 1.5))^2 = 0.04
        assert schlick(1.0, 1.5) == pytest.approx(0.04)

    def test_schlick_at_grazing_incidence_is_one(self):
        from src.pathtracer.core.ray import schlick

        assert schlick(0.0, 1.5) == pytest.approx(1.0)

    def test_schlick_with_matched_index_is_zero_head_on(self):
        from src.pathtracer.core.ray import schlick

        assert schlick(1.0, 1.0) == 0.0


class TestRandomSampling:
    """Tests for the rejection samplers."""

    def test_random_in_unit_sphere_is_inside(self, rng):
        from src.pathtracer.core.ray import random_in_unit_sphere

        for _ in range(200):
            assert random_in_unit_sphere(rng).squared_length() < 1.0

    def test_random_in_unit_sphere_rejects_outside_points(self, fake_random):
        from src.pathtracer.core.ray import Vec3, random_in_unit_sphere

        source = fake_random(uniforms=[0.9, 0.9, 0.9, 0.1, 0.2, 0.3])

        assert random_in_unit_sphere(source) == Vec3(0.1, 0.2, 0.3)

    def test_random_in_unit_disk_is_flat_and_inside(self, rng):
        from src.pathtracer.core.ray import random_in_unit_disk

        for _ in range(200):
            p = random_in_unit_disk(rng)
            assert p.z == 0.0
            assert p.squared_length() < 1.0

    def test_random_in_unit_disk_rejects_outside_points(self, fake_random):
        from src.pathtracer.core.ray import Vec3, random_in_unit_disk

        source = fake_random(uniforms=[-0.8, 0.8, 0.5, -0.25])

        assert random_in_unit_disk(source) == Vec3(0.5, -0.25, 0.0)

    def test_random_in_unit_sphere_is_seed_deterministic(self):
        import numpy as np

        from src.pathtracer.core.ray import random_in_unit_sphere

        a = random_in_unit_sphere(np.random.default_rng(7))
        b = random_in_unit_sphere(np.random.default_rng(7))

        assert a == b
