"""Recursive radiance estimator.

``color`` follows one camera ray through the scene. At each hit the surface
material decides what is emitted and which rays are scattered; every
scattered ray is followed recursively with one less unit of depth, and its
radiance is multiplied by the ray's attenuation:

    L = directly_emitted + sum(attenuation_i * color(scattered_i))

Rays that escape the scene pick up the sky gradient. A hit with no depth left
contributes nothing, which bounds the recursion.

Example:
    >>> import numpy as np
    >>> from src.pathtracer.core.integrator import MAX_DEPTH, T_MAX, T_MIN, color
    >>> from src.pathtracer.core.ray import Ray, Vec3
    >>> from src.pathtracer.scene.world import World
    >>> ray = Ray(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0))
    >>> color(ray, World(), T_MIN, T_MAX, MAX_DEPTH, np.random.default_rng())
    Vec3(x=1.0, y=1.0, z=1.0)
"""

from __future__ import annotations

import sys

import numpy as np

from src.pathtracer.core.ray import ZERO, Ray, Vec3
from src.pathtracer.geometry.hittable import Hittable
from src.pathtracer.materials.material import interact

# =============================================================================
# Rendering Constants
# =============================================================================

# Default maximum recursion depth (ray bounces)
MAX_DEPTH = 50

# t_min for secondary rays; excludes the surface the ray starts on
T_MIN = 1e-4
T_MAX = sys.float_info.max

# Sky gradient endpoints
WHITE = Vec3(1.0, 1.0, 1.0)
SKY_BLUE = Vec3(0.5, 0.7, 1.0)


def interpolate(first: Vec3, second: Vec3, factor: float) -> Vec3:
    """Blend ``first * factor + second * (1 - factor)``."""
    return first * factor + second * (1.0 - factor)


def sky_color(ray: Ray) -> Vec3:
    """Background radiance for a ray that escapes the scene.

    Keyed on the height of the unit direction, ``t = 0.5 * (y + 1)``.
    """
    unit_direction = ray.direction.unit()
    t = 0.5 * (unit_direction.y + 1.0)
    return interpolate(WHITE, SKY_BLUE, t)


def color(
    ray: Ray,
    world: Hittable,
    t_min: float,
    t_max: float,
    depth: int,
    rng: np.random.Generator,
) -> Vec3:
    """Estimate the radiance arriving along a ray.

    Args:
        ray: The ray to trace.
        world: The scene to intersect.
        t_min: Exclusive lower bound for the first intersection.
        t_max: Exclusive upper bound for the first intersection.
        depth: Remaining recursion depth. A hit with ``depth <= 0`` returns
            zero without consulting the material.
        rng: Random source for stochastic materials.

    Returns:
        The unclamped linear RGB radiance.
    """
    hit = world.hit(ray, t_min, t_max)
    if hit is None:
        return sky_color(ray)
    if depth <= 0:
        return ZERO

    interaction = interact(hit.material, ray, hit.normal, rng)
    radiance = interaction.directly_emitted
    for scattered in interaction.scattered_rays:
        radiance = radiance + scattered.attenuation * color(
            scattered.ray, world, T_MIN, T_MAX, depth - 1, rng
        )
    return radiance
