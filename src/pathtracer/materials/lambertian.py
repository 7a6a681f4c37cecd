"""Lambertian (ideal diffuse) material implementation.

A diffuse surface scatters toward a random target point inside the unit
sphere tangent to the hit point:

    target = p + n + random_in_unit_sphere()

which produces a cosine-like distribution around the normal. The scattered
ray is attenuated by the albedo and the surface emits nothing.

Example:
    >>> import numpy as np
    >>> from src.pathtracer.core.ray import Ray, Vec3
    >>> from src.pathtracer.materials.lambertian import Lambertian, scatter_lambertian
    >>> red = Lambertian(Vec3(0.8, 0.3, 0.3))
    >>> hit_normal = Ray(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0))
    >>> interaction = scatter_lambertian(red, hit_normal, np.random.default_rng(0))
    >>> interaction.scattered_rays[0].attenuation
    Vec3(x=0.8, y=0.3, z=0.3)
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from src.pathtracer.core.ray import ZERO, Ray, Vec3, random_in_unit_sphere
from src.pathtracer.materials.interaction import (
    LightInteraction,
    ScatteredRay,
    validate_albedo,
)


@dataclass(frozen=True, slots=True)
class Lambertian:
    """Lambertian (ideal diffuse) material properties.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).

    Raises:
        ValueError: If any albedo component is outside [0, 1].
    """

    albedo: Vec3

    def __post_init__(self) -> None:
        validate_albedo(self.albedo)


def scatter_lambertian(
    material: Lambertian,
    hit_normal: Ray,
    rng: np.random.Generator,
) -> LightInteraction:
    """Scatter a ray diffusely off a Lambertian surface.

    Args:
        material: The Lambertian material.
        hit_normal: Ray with origin at the hit point and the unit normal as
            direction.
        rng: Random source for the scatter target.

    Returns:
        A LightInteraction with one scattered ray (attenuation = albedo)
        and zero direct emission.
    """
    point = hit_normal.origin
    target = point + hit_normal.direction + random_in_unit_sphere(rng)
    scattered = ScatteredRay(Ray(point, target - point), material.albedo)
    return LightInteraction(ZERO, (scattered,))
