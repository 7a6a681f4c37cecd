"""Core rendering module.

This module contains the fundamental building blocks for path tracing:

Components:
    ray: Vec3, Ray and the sampling/optics helpers
    integrator: Recursive radiance estimate and sky background
    accumulator: Thread-safe per-pixel running averages
    settings: Render settings dataclass
    tracer: Work items and the parallel per-pass render loop
    progressive: Render session with callbacks and background rendering

Randomness is always passed in as a ``numpy.random.Generator``; nothing in
this package touches global random state.
"""

from .ray import (
    ONE,
    ZERO,
    Ray,
    Vec3,
    random_in_unit_disk,
    random_in_unit_sphere,
    reflect,
    refract,
    schlick,
)

# Note: integrator, tracer and progressive are NOT imported here to avoid
# circular imports. Import them directly, for example:
#   from src.pathtracer.core.progressive import ProgressiveRenderer

__all__ = [
    "Vec3",
    "Ray",
    "ZERO",
    "ONE",
    "reflect",
    "refract",
    "schlick",
    "random_in_unit_sphere",
    "random_in_unit_disk",
]
