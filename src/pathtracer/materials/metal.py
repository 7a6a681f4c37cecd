"""Metal (specular reflective) material implementation.

The incoming direction is mirrored about the normal,

    R = I - 2(I . N)N

and then perturbed by ``fuzz * random_in_unit_sphere()``. A fuzz of zero is
a perfect mirror. If the perturbed direction ends up below the surface the
ray is absorbed, which is reported as an interaction with no scattered rays.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from src.pathtracer.core.ray import ZERO, Ray, Vec3, random_in_unit_sphere, reflect
from src.pathtracer.materials.interaction import (
    LightInteraction,
    ScatteredRay,
    validate_albedo,
)


@dataclass(frozen=True, slots=True)
class Metal:
    """Metal material properties.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Radius of the random perturbation of the mirror direction,
            in [0, 1]. 0 = perfect mirror.

    Raises:
        ValueError: If an albedo component or the fuzz is outside [0, 1].
    """

    albedo: Vec3
    fuzz: float = 0.0

    def __post_init__(self) -> None:
        validate_albedo(self.albedo)
        if self.fuzz < 0.0 or self.fuzz > 1.0:
            raise ValueError(
                f"Fuzz = {self.fuzz} is outside [0, 1]. "
                "Fuzz must be between 0 (perfect mirror) and 1 (maximum fuzz)."
            )


def scatter_metal(
    material: Metal,
    ray: Ray,
    hit_normal: Ray,
    rng: np.random.Generator,
) -> LightInteraction:
    """Reflect a ray off a metal surface.

    Args:
        material: The metal material.
        ray: The incoming ray.
        hit_normal: Ray with origin at the hit point and the unit normal as
            direction.
        rng: Random source for the fuzz perturbation.

    Returns:
        A LightInteraction with one scattered ray if the reflection leaves
        the surface, otherwise with none. Direct emission is zero.
    """
    normal = hit_normal.direction
    reflected = reflect(ray.direction, normal)
    direction = reflected + random_in_unit_sphere(rng) * material.fuzz

    if direction.dot(normal) <= 0.0:
        return LightInteraction(ZERO, ())

    scattered = ScatteredRay(Ray(hit_normal.origin, direction), material.albedo)
    return LightInteraction(ZERO, (scattered,))
