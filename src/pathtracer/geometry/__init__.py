"""Geometry module for shape primitives.

Components:
    hittable: Hit record and the abstract Hittable interface
    sphere: Sphere primitive with ray-sphere intersection

Ray-object intersection follows the pattern:
    hit = shape.hit(ray, t_min, t_max)  # Hit or None
"""

from .hittable import Hit, Hittable
from .sphere import Sphere

__all__ = [
    "Hit",
    "Hittable",
    "Sphere",
]
