"""Material union type and scattering dispatch.

The set of materials is closed: Normal, Lambertian, Metal and Dielectric.
``interact`` dispatches on the material's type and returns the resulting
LightInteraction.
"""

from __future__ import annotations

from typing import Union

import numpy as np

from src.pathtracer.core.ray import Ray
from src.pathtracer.materials.dielectric import Dielectric, scatter_dielectric
from src.pathtracer.materials.interaction import LightInteraction
from src.pathtracer.materials.lambertian import Lambertian, scatter_lambertian
from src.pathtracer.materials.metal import Metal, scatter_metal
from src.pathtracer.materials.normal import Normal, scatter_normal

Material = Union[Normal, Lambertian, Metal, Dielectric]


def interact(
    material: Material,
    ray: Ray,
    hit_normal: Ray,
    rng: np.random.Generator,
) -> LightInteraction:
    """Dispatch to the appropriate material scattering function.

    Args:
        material: The material of the hit surface.
        ray: The incoming ray.
        hit_normal: Ray with origin at the hit point and the outward unit
            normal as direction.
        rng: Random source for stochastic materials.

    Returns:
        The material's LightInteraction.

    Raises:
        TypeError: If ``material`` is not one of the supported materials.
    """
    if isinstance(material, Lambertian):
        return scatter_lambertian(material, hit_normal, rng)
    elif isinstance(material, Metal):
        return scatter_metal(material, ray, hit_normal, rng)
    elif isinstance(material, Dielectric):
        return scatter_dielectric(material, ray, hit_normal, rng)
    elif isinstance(material, Normal):
        return scatter_normal(hit_normal)
    raise TypeError(f"Unknown material type: {type(material).__name__}")
