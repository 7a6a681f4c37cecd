"""Vector and ray value types plus the sampling utilities built on them.

This module provides the immutable Vec3 and Ray types used throughout the
renderer, together with the reflection/refraction helpers and the random
sampling routines used by materials and the camera.

All random sampling draws from an explicitly passed ``numpy.random.Generator``
so that each worker owns its random stream and seeded renders are
reproducible.

Example:
    >>> from src.pathtracer.core.ray import Ray, Vec3
    >>> ray = Ray(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 0.0, -1.0))
    >>> ray.point_at_parameter(5.0)
    Vec3(x=0.0, y=0.0, z=-5.0)
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, slots=True)
class Vec3:
    """An immutable three-component vector.

    Used for points, directions and RGB colors alike. Arithmetic is
    component-wise except for ``dot`` and ``cross``; every operation
    returns a new vector.

    Attributes:
        x: First component (red when used as a color).
        y: Second component (green when used as a color).
        z: Third component (blue when used as a color).
    """

    x: float
    y: float
    z: float

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> Vec3:
        """Build a vector from any iterable of exactly three numbers."""
        x, y, z = values
        return cls(float(x), float(y), float(z))

    @property
    def r(self) -> float:
        return self.x

    @property
    def g(self) -> float:
        return self.y

    @property
    def b(self) -> float:
        return self.z

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, other: Vec3 | float) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3(self.x * other.x, self.y * other.y, self.z * other.z)
        return Vec3(self.x * other, self.y * other, self.z * other)

    def __rmul__(self, other: float) -> Vec3:
        return Vec3(self.x * other, self.y * other, self.z * other)

    def __truediv__(self, other: Vec3 | float) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3(self.x / other.x, self.y / other.y, self.z / other.z)
        return Vec3(self.x / other, self.y / other, self.z / other)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def dot(self, other: Vec3) -> float:
        """Compute the dot product ``self . other``."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        """Compute the cross product ``self x other``."""
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def squared_length(self) -> float:
        """Squared Euclidean length; avoids the square root for comparisons."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        """Euclidean length of the vector."""
        return math.sqrt(self.squared_length())

    def unit(self) -> Vec3:
        """Return the vector scaled to unit length.

        The vector must have non-zero length; a zero vector raises
        ZeroDivisionError.
        """
        return self / self.length()

    def map(self, f: Callable[[float], float]) -> Vec3:
        """Apply a scalar function to each component."""
        return Vec3(f(self.x), f(self.y), f(self.z))


ZERO = Vec3(0.0, 0.0, 0.0)
ONE = Vec3(1.0, 1.0, 1.0)


@dataclass(frozen=True, slots=True)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Not required to be normalized.
    """

    origin: Vec3
    direction: Vec3

    def point_at_parameter(self, t: float) -> Vec3:
        """Compute the point ``origin + direction * t``."""
        return self.origin + self.direction * t


# =============================================================================
# Reflection and Refraction
# =============================================================================


def reflect(inbound: Vec3, normal: Vec3) -> Vec3:
    """Reflect a direction about a normal: ``d - 2(d . n)n``.

    Args:
        inbound: The incoming direction (pointing toward the surface).
        normal: The surface normal (unit length).

    Returns:
        The mirrored direction, with the same length as ``inbound``.
    """
    return inbound - normal * (2.0 * inbound.dot(normal))


def refract(inbound: Vec3, normal: Vec3, ni_over_nt: float) -> Vec3 | None:
    """Refract a direction through a surface using Snell's law.

    Args:
        inbound: The incoming direction (any non-zero length).
        normal: The unit normal on the side the ray arrives from.
        ni_over_nt: Ratio of refractive indices, incident over transmitted.

    Returns:
        The refracted direction, or None when refraction is impossible
        (total internal reflection).
    """
    inbound_unit = inbound.unit()
    dt = inbound_unit.dot(normal)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)
    if discriminant > 0.0:
        return (inbound_unit - normal * dt) * ni_over_nt - normal * math.sqrt(discriminant)
    return None


def schlick(cosine: float, refractive_index: float) -> float:
    """Fresnel reflectance using Schlick's approximation.

    ``R(theta) = R0 + (1 - R0)(1 - cos theta)^5`` with
    ``R0 = ((1 - n) / (1 + n))^2``.
    """
    r0 = (1.0 - refractive_index) / (1.0 + refractive_index)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def random_in_unit_sphere(rng: np.random.Generator) -> Vec3:
    """Generate a uniformly distributed point strictly inside the unit sphere.

    Uses rejection sampling: three independent uniform draws in [-1, 1) are
    repeated until the point falls inside the sphere.

    Args:
        rng: The random source to draw from.

    Returns:
        A random point with squared length < 1.
    """
    while True:
        x, y, z = rng.uniform(-1.0, 1.0, 3)
        if x * x + y * y + z * z < 1.0:
            return Vec3(float(x), float(y), float(z))


def random_in_unit_disk(rng: np.random.Generator) -> Vec3:
    """Generate a uniformly distributed point inside the unit disk (z = 0).

    Used for lens sampling in depth-of-field cameras.
    """
    while True:
        x, y = rng.uniform(-1.0, 1.0, 2)
        if x * x + y * y < 1.0:
            return Vec3(float(x), float(y), 0.0)
