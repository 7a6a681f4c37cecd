"""Sphere primitive with ray-sphere intersection.

The intersection solves ``|O + tD - C|^2 = r^2`` for the ray against the
sphere:

    a = D . D
    b = 2 (O - C) . D
    c = (O - C) . (O - C) - r^2
    discriminant = b^2 - 4ac

Only the smaller root ``(-b - sqrt(discriminant)) / 2a`` is considered, and
it counts as a hit only when it lies strictly inside ``(t_min, t_max)``. A
tangent ray (discriminant exactly zero) hits at the tangent point.

Example:
    >>> from src.pathtracer.core.ray import Ray, Vec3
    >>> from src.pathtracer.geometry.sphere import Sphere
    >>> from src.pathtracer.materials.normal import Normal
    >>> sphere = Sphere(Vec3(0.0, 0.0, -1.0), 0.5, Normal())
    >>> hit = sphere.hit(Ray(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 0.0, -1.0)), 0.001, 100.0)
    >>> hit.t
    0.5
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.pathtracer.core.ray import Ray, Vec3
from src.pathtracer.geometry.hittable import Hit, Hittable

if TYPE_CHECKING:
    from src.pathtracer.materials.material import Material


@dataclass(frozen=True, slots=True)
class Sphere(Hittable):
    """A sphere defined by center point, radius and surface material.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
        material: The surface material reported in hit records.

    Raises:
        ValueError: If the radius is not positive.
    """

    center: Vec3
    radius: float
    material: Material

    def __post_init__(self) -> None:
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius = {self.radius} must be positive.")

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Hit | None:
        """Test for ray-sphere intersection.

        Args:
            ray: The ray to test (direction need not be normalized).
            t_min: Exclusive lower bound; guards against self-intersection.
            t_max: Exclusive upper bound.

        Returns:
            A Hit at the smaller root with the outward unit normal, or None.
        """
        oc = ray.origin - self.center
        a = ray.direction.dot(ray.direction)
        b = 2.0 * oc.dot(ray.direction)
        c = oc.dot(oc) - self.radius * self.radius
        discriminant = b * b - 4.0 * a * c
        if discriminant < 0.0:
            return None

        t = (-b - math.sqrt(discriminant)) / (2.0 * a)
        if not (t_min < t < t_max):
            return None

        hit_point = ray.point_at_parameter(t)
        # Outward normal: points from center to hit point
        normal = (hit_point - self.center).unit()
        return Hit(t, Ray(hit_point, normal), self.material)
