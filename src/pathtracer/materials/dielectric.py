"""Dielectric (glass/water) material implementation.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when no refracted direction exists

Hit normals always point out of the sphere, so the side the ray arrives from
is decided here from the sign of ``direction . normal``. When refraction is
possible the material picks reflection with the Schlick probability, using
one fresh uniform draw per hit. Clear dielectrics never absorb: attenuation
is white and exactly one ray is scattered.

Example:
    >>> import numpy as np
    >>> from src.pathtracer.core.ray import Ray, Vec3
    >>> from src.pathtracer.materials.dielectric import Dielectric, scatter_dielectric
    >>> glass = Dielectric(1.5)
    >>> ray = Ray(Vec3(0.0, 1.0, 0.0), Vec3(0.0, -1.0, 0.0))
    >>> hit_normal = Ray(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0))
    >>> interaction = scatter_dielectric(glass, ray, hit_normal, np.random.default_rng(1))
    >>> len(interaction.scattered_rays)
    1
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from src.pathtracer.core.ray import ONE, ZERO, Ray, reflect, refract, schlick
from src.pathtracer.materials.interaction import LightInteraction, ScatteredRay


@dataclass(frozen=True, slots=True)
class Dielectric:
    """Dielectric material properties.

    Attributes:
        refractive_index: Index of refraction. Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4

    Raises:
        ValueError: If the refractive index is not positive.
    """

    refractive_index: float

    def __post_init__(self) -> None:
        if self.refractive_index <= 0.0:
            raise ValueError(
                f"Refractive index = {self.refractive_index} must be positive."
            )


def scatter_dielectric(
    material: Dielectric,
    ray: Ray,
    hit_normal: Ray,
    rng: np.random.Generator,
) -> LightInteraction:
    """Reflect or refract a ray at a dielectric boundary.

    Args:
        material: The dielectric material.
        ray: The incoming ray.
        hit_normal: Ray with origin at the hit point and the outward unit
            normal as direction.
        rng: Random source for the reflect-or-refract decision.

    Returns:
        A LightInteraction with exactly one scattered ray (attenuation
        (1, 1, 1)) and zero direct emission.
    """
    ri = material.refractive_index
    direction = ray.direction
    normal = hit_normal.direction.unit()
    reflected = reflect(direction, hit_normal.direction)

    if direction.unit().dot(normal) > 0.0:
        # Exiting the material: glass to air
        outward_normal = -normal
        ni_over_nt = ri
        cosine = ri * direction.dot(normal) / direction.length()
    else:
        # Entering the material: air to glass
        outward_normal = normal
        ni_over_nt = 1.0 / ri
        cosine = -direction.dot(normal) / direction.length()

    scattered_direction = reflected
    refracted = refract(direction, outward_normal, ni_over_nt)
    if refracted is not None and schlick(cosine, ri) < float(rng.random()):
        scattered_direction = refracted

    scattered = ScatteredRay(Ray(hit_normal.origin, scattered_direction), ONE)
    return LightInteraction(ZERO, (scattered,))
